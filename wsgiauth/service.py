# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Authentication Service

Ties one adapter to one storage: the adapter decides whether the
credentials are good, the storage remembers who was authenticated.
"""

import logging

from wsgiauth.exceptions import SetupError
from wsgiauth.storage import NonPersistent

log = logging.getLogger(__name__)

class AuthenticationService(object):
    """
    Runs adapters and records the identity they produce

    ``storage`` defaults to a ``NonPersistent`` storage.  ``adapter``
    is any object with an ``authenticate()`` method returning a
    ``wsgiauth.result.Result``; it may also be given to each
    ``authenticate`` call instead.
    """

    def __init__(self, storage=None, adapter=None):
        self.storage = storage if storage is not None else NonPersistent()
        self.adapter = adapter

    def authenticate(self, adapter=None):
        """
        Authenticates with ``adapter`` (or the configured one) and
        returns its result unchanged.  Whatever identity was stored
        before is cleared first, so a failed attempt never leaves a
        previous identity behind.
        """
        if adapter is None:
            adapter = self.adapter
        if adapter is None:
            raise SetupError(
                "An adapter must be set or passed prior to calling "
                "authenticate()")
        result = adapter.authenticate()
        if self.has_identity():
            self.clear_identity()
        if result.is_valid():
            self.storage.write(result.identity)
        else:
            log.debug("authentication failed (code %s): %s",
                      result.code, '; '.join(result.messages))
        return result

    def has_identity(self):
        return not self.storage.is_empty()

    def get_identity(self):
        if self.storage.is_empty():
            return None
        return self.storage.read()

    def clear_identity(self):
        self.storage.clear()

__all__ = ['AuthenticationService']
