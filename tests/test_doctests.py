import doctest
import importlib

import pytest

modules = [
    'wsgiauth.auth.callback',
    ]

options = doctest.ELLIPSIS|doctest.REPORT_ONLY_FIRST_FAILURE

@pytest.mark.parametrize('module', modules)
def test_doctest_mods(module):
    module = importlib.import_module(module)
    failure, total = doctest.testmod(
        module, optionflags=options)
    assert not failure, "Failure in %r" % module
