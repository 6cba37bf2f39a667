# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Callback Authentication

The simplest adapter: a user supplied function decides.

>>> def authfunc(username, password):
...     return username == password and username or None
>>> CallbackAdapter(authfunc, 'bing', 'bing').authenticate().is_valid()
True
"""
import logging

from wsgiauth.auth.adapter import ValidatableAdapter
from wsgiauth.exceptions import InvalidArgumentError, SetupError
from wsgiauth.result import Result

log = logging.getLogger(__name__)

class CallbackAdapter(ValidatableAdapter):
    """
    Authenticates using ``callback(identity, credential)``

    The callback returns the identity to record on success and
    anything false on failure.  An exception raised by the callback is
    reported as an uncategorized failure rather than propagated.
    """

    def __init__(self, callback=None, identity=None, credential=None):
        ValidatableAdapter.__init__(self, identity, credential)
        self._callback = None
        if callback is not None:
            self.callback = callback

    def _get_callback(self):
        return self._callback

    def _set_callback(self, callback):
        if not callable(callback):
            raise InvalidArgumentError("Invalid callback provided")
        self._callback = callback

    callback = property(_get_callback, _set_callback)

    def authenticate(self):
        if self._callback is None:
            raise SetupError("No callback provided")
        try:
            identity = self._callback(self.identity, self.credential)
        except Exception as e:
            log.debug("authentication callback failed: %s", e)
            return Result(Result.FAILURE_UNCATEGORIZED, None, [str(e)])
        if not identity:
            return Result(Result.FAILURE, None, ["Authentication failure"])
        return Result(Result.SUCCESS, identity, ["Authentication success"])

__all__ = ['CallbackAdapter']
