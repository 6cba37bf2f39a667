# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Base class for adapters that are handed an identity and a credential
(a username and a password, usually) before ``authenticate()`` is
called.  ``wsgiauth.validator`` only works with these.
"""

class ValidatableAdapter(object):

    def __init__(self, identity=None, credential=None):
        self.identity = identity
        self.credential = credential

    def authenticate(self):
        raise NotImplementedError()

__all__ = ['ValidatableAdapter']
