# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Exceptions raised by the authentication components

Failing to authenticate is not an exception: adapters report it with a
``wsgiauth.result.Result``.  The exceptions here are for the cases where
no result can be produced at all::

  AuthenticationError
    InvalidArgumentError    bad configuration or malformed input
    SetupError              a collaborator was not provided
    BackendError            the backend could not be consulted
      UnsupportedQopError   the client asked for an unsupported qop

``InvalidArgumentError`` is also a ``ValueError``; ``SetupError`` and
``BackendError`` are also ``RuntimeError``.
"""

class AuthenticationError(Exception):
    """
    Base class for all authentication exceptions

    ``cause`` holds the lower-level exception (for example the
    ``OSError`` from opening a credentials file) when there is one.
    """

    def __init__(self, message, cause=None):
        Exception.__init__(self, message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

class InvalidArgumentError(AuthenticationError, ValueError):
    pass

class SetupError(AuthenticationError, RuntimeError):
    pass

class BackendError(AuthenticationError, RuntimeError):
    pass

class UnsupportedQopError(BackendError):
    """ the client selected a quality of protection we cannot compute """

    def __init__(self, qop, cause=None):
        BackendError.__init__(
            self, "Client requested an unsupported qop option: %s" % qop,
            cause)
        self.qop = qop

__all__ = ['AuthenticationError', 'InvalidArgumentError', 'SetupError',
           'BackendError', 'UnsupportedQopError']
