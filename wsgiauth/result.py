# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Authentication Result

Every ``authenticate()`` call in this package produces exactly one
``Result``.  Negative codes say why the attempt failed; ``FAILURE`` is
the generic failure and ``SUCCESS`` is the only code that is valid.
"""

class Result(object):
    """
    Immutable outcome of one authentication attempt

    Attributes:

       ``code``
           one of the integer constants defined on this class

       ``identity``
           whatever the adapter resolved (a username, a dictionary with
           ``username`` and ``realm``, ...); only meaningful on success

       ``messages``
           list of diagnostic strings explaining the outcome
    """

    FAILURE = 0
    FAILURE_IDENTITY_NOT_FOUND = -1
    FAILURE_IDENTITY_AMBIGUOUS = -2
    FAILURE_CREDENTIAL_INVALID = -3
    FAILURE_UNCATEGORIZED = -4
    SUCCESS = 1

    __slots__ = ('_code', '_identity', '_messages')

    def __init__(self, code, identity, messages=None):
        object.__setattr__(self, '_code', int(code))
        object.__setattr__(self, '_identity', identity)
        object.__setattr__(self, '_messages', tuple(messages or ()))

    def __setattr__(self, name, value):
        raise AttributeError("Result objects are immutable")

    @property
    def code(self):
        return self._code

    @property
    def identity(self):
        return self._identity

    @property
    def messages(self):
        return list(self._messages)

    def is_valid(self):
        return self._code > 0

    __bool__ = is_valid

    def __repr__(self):
        return '<%s code=%s identity=%r>' % (
            self.__class__.__name__, self._code, self._identity)

__all__ = ['Result']
