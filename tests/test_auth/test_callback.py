# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php

import pytest

from wsgiauth.auth.callback import CallbackAdapter
from wsgiauth.exceptions import InvalidArgumentError, SetupError
from wsgiauth.result import Result

def authfunc(username, password):
    if password == 'explode':
        raise LookupError("directory unavailable")
    return username == password[::-1] and {'username': username} or None

def test_success():
    result = CallbackAdapter(authfunc, 'bing', 'gnib').authenticate()
    assert result.code == Result.SUCCESS
    assert result.identity == {'username': 'bing'}
    assert result.messages == ["Authentication success"]

def test_failure():
    result = CallbackAdapter(authfunc, 'bing', 'bing').authenticate()
    assert result.code == Result.FAILURE
    assert result.identity is None
    assert result.messages == ["Authentication failure"]

def test_callback_raises():
    result = CallbackAdapter(authfunc, 'bing', 'explode').authenticate()
    assert result.code == Result.FAILURE_UNCATEGORIZED
    assert result.messages == ["directory unavailable"]

def test_callback_setup():
    adapter = CallbackAdapter(identity='bing', credential='gnib')
    with pytest.raises(SetupError):
        adapter.authenticate()
    with pytest.raises(InvalidArgumentError):
        adapter.callback = 'authfunc'
    with pytest.raises(InvalidArgumentError):
        CallbackAdapter(42)
    adapter.callback = authfunc
    assert adapter.callback is authfunc
    assert adapter.authenticate().is_valid()
