# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Identity Storage

A storage keeps the identity of the last successful authentication so
that later requests need not authenticate again.  Any object offering
these four methods can be used as a storage:

  ``is_empty()``          True if no identity is held
  ``read()``              the identity held
  ``write(contents)``     replace the identity
  ``clear()``             forget the identity

Three backends are provided: ``NonPersistent`` (lives as long as the
object), ``Session`` (lives in the ``wsgiauth.session`` dictionary of
the current request) and ``Chain`` (a priority ordered list of other
storages).
"""

import itertools

from wsgiauth.exceptions import SetupError

class StorageInterface(object):
    """ documents the storage methods; subclassing it is optional """

    def is_empty(self):
        raise NotImplementedError()

    def read(self):
        raise NotImplementedError()

    def write(self, contents):
        raise NotImplementedError()

    def clear(self):
        raise NotImplementedError()

class NonPersistent(StorageInterface):
    """
    Keeps the identity in memory; useful when authentication happens
    on every request (HTTP authentication, for instance).
    """

    def __init__(self):
        self.data = None

    def is_empty(self):
        return self.data is None

    def read(self):
        return self.data

    def write(self, contents):
        self.data = contents

    def clear(self):
        self.data = None

class Session(StorageInterface):
    """
    Keeps the identity in the request's session

    The request must have passed through
    ``wsgiauth.session.SessionMiddleware``; the identity is stored as
    ``session[namespace][member]``.
    """

    NAMESPACE_DEFAULT = 'wsgiauth'
    MEMBER_DEFAULT = 'storage'

    def __init__(self, environ, namespace=None, member=None):
        factory = environ.get('wsgiauth.session.factory')
        if factory is None:
            raise SetupError(
                "Session storage requires the wsgiauth.session "
                "middleware to be in place")
        self.factory = factory
        self.namespace = namespace or self.NAMESPACE_DEFAULT
        self.member = member or self.MEMBER_DEFAULT

    def _container(self, create=False):
        session = self.factory()
        if create:
            return session.setdefault(self.namespace, {})
        return session.get(self.namespace, {})

    def is_empty(self):
        return self.member not in self._container()

    def read(self):
        return self._container().get(self.member)

    def write(self, contents):
        self._container(create=True)[self.member] = contents

    def clear(self):
        session = self.factory()
        container = session.get(self.namespace)
        if container is None:
            return
        container.pop(self.member, None)
        if not container:
            del session[self.namespace]

class Chain(StorageInterface):
    """
    Priority ordered chain of storages

    Members are visited from the highest priority down; members added
    with the same priority are visited in the order they were added.

    Note that ``is_empty()`` is not a pure query: when it finds the
    identity in some member, it copies it into every higher priority
    member that turned out to be empty.  That way a value found in a
    slow storage is promoted into the faster ones in front of it.
    """

    def __init__(self):
        self._chain = []
        self._counter = itertools.count()

    def add(self, storage, priority=1):
        self._chain.append((-priority, next(self._counter), storage))
        self._chain.sort(key=lambda item: item[:2])

    def __iter__(self):
        return iter([storage for (_, _, storage) in self._chain])

    def __len__(self):
        return len(self._chain)

    def is_empty(self):
        skipped = []
        for storage in self:
            if storage.is_empty():
                skipped.append(storage)
                continue
            value = storage.read()
            for higher in skipped:
                higher.write(value)
            return False
        return True

    def read(self):
        if not self._chain:
            return None
        return self._chain[0][2].read()

    def write(self, contents):
        for storage in self:
            storage.write(contents)

    def clear(self):
        for storage in self:
            storage.clear()

__all__ = ['StorageInterface', 'NonPersistent', 'Session', 'Chain']
