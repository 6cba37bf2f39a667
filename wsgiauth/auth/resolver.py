# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Credential Resolvers

A resolver is what ``wsgiauth.auth.http`` consults to find out about a
user.  Every resolver offers a single method::

    resolve(username, realm, password=None)

which returns one of:

  - the shared secret as a string (the password for ``Basic``, or
    ``md5("username:realm:password")`` for ``Digest``),

  - an identity that has already been checked, either a
    ``wsgiauth.result.Result`` or a dictionary,

  - ``None`` when the user is not known.

A malformed ``username`` or ``realm`` raises ``InvalidArgumentError``
before the backing store is looked at; a store that cannot be read
raises ``BackendError``.  Files are scanned again on every call, so
edits to them are seen by the next request.
"""
import csv
import hmac
import logging
import os

from passlib.context import CryptContext
from passlib.exc import MissingBackendError
from passlib.hash import htdigest

from wsgiauth.exceptions import BackendError, InvalidArgumentError
from wsgiauth.result import Result

log = logging.getLogger(__name__)

#: hash formats accepted in realm-less ``.htpasswd`` lines
htpasswd_context = CryptContext(schemes=[
    'bcrypt', 'apr_md5_crypt', 'md5_crypt', 'sha256_crypt',
    'sha512_crypt', 'ldap_salted_sha1', 'ldap_sha1', 'des_crypt'])

def is_printable(value):
    """ true for a non-empty string of printable ASCII characters """
    return bool(value) and all(' ' <= ch <= '~' for ch in value)

def compare(a, b):
    """ constant time comparison of two strings """
    return hmac.compare_digest(a.encode('utf8'), b.encode('utf8'))

def is_htdigest_hash(value):
    return len(value) == 32 and all(ch in '0123456789abcdef'
                                    for ch in value.lower())

def check_username(username):
    if not username:
        raise InvalidArgumentError("Username is required")
    if not is_printable(username) or ':' in username:
        raise InvalidArgumentError(
            "Username must consist only of printable characters, "
            "excluding the colon")

def check_realm(realm):
    if not realm:
        raise InvalidArgumentError("Realm is required")
    if not is_printable(realm) or ':' in realm:
        raise InvalidArgumentError(
            "Realm must consist only of printable characters, "
            "excluding the colon")

def check_readable(path):
    if not path or not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise InvalidArgumentError("Path not readable: %s" % path)
    return path

def open_credentials(path):
    """ opens a credentials file, wrapping failures as BackendError """
    try:
        return open(path, 'r', newline='', encoding='utf-8')
    except OSError as e:
        raise BackendError("Unable to open password file: %s" % path,
                           e) from e

class FileResolver(object):
    """
    Resolves against a file of ``username:realm:secret`` lines

    Fields containing a colon may be double-quoted.  The first line
    matching both username and realm wins; its third field is returned
    as is, so it may hold a plain password (for ``Basic``) or an
    htdigest style hash (for ``Digest``).
    """

    def __init__(self, path):
        self.path = check_readable(path)

    def resolve(self, username, realm, password=None):
        check_username(username)
        check_realm(realm)
        with open_credentials(self.path) as fp:
            for line in csv.reader(fp, delimiter=':', quotechar='"'):
                if len(line) < 3:
                    continue
                if line[0] == username and line[1] == realm:
                    return line[2]
        return None

class ApacheResolver(object):
    """
    Resolves against an Apache ``.htpasswd`` or ``.htdigest`` file

    Lines are either ``username:hash`` or ``username:realm:hash``; a
    three field line only applies to its own realm.  Unlike the other
    resolvers this one checks the password itself and always returns a
    ``Result``: the stored value may be the plain password, one of the
    hashes ``htpasswd`` produces (apr1, bcrypt, ``{SHA}``, crypt...) or,
    for lines with a realm, an htdigest hash.
    """

    def __init__(self, path):
        self.path = check_readable(path)

    def resolve(self, username, realm, password=None):
        check_username(username)
        if realm and (not is_printable(realm) or ':' in realm):
            raise InvalidArgumentError(
                "Realm must consist only of printable characters, "
                "excluding the colon")
        if not password:
            raise InvalidArgumentError("Password is required")
        matched = None
        with open_credentials(self.path) as fp:
            for line in csv.reader(fp, delimiter=':', quoting=csv.QUOTE_NONE):
                if len(line) < 2 or line[0] != username:
                    continue
                if len(line) > 2:
                    if line[1] == realm:
                        matched = (line[2], realm)
                        break
                    continue
                matched = (line[1], None)
                break
        if matched is None:
            return Result(Result.FAILURE_IDENTITY_NOT_FOUND, None,
                          ["Username not found in provided htpasswd file"])
        stored, line_realm = matched
        if (compare(stored, password)
                or self.verify(username, line_realm, password, stored)):
            return Result(Result.SUCCESS, username)
        return Result(Result.FAILURE_CREDENTIAL_INVALID, None,
                      ["Passwords did not match."])

    def verify(self, username, realm, password, stored):
        """
        Checks ``password`` against a stored hash.  A value that is not
        a recognized hash is a plain password that did not match; a
        hashing backend that fails raises ``BackendError``.
        """
        if realm is not None:
            if not is_htdigest_hash(stored):
                return False
            return htdigest.verify(password, stored,
                                   user=username, realm=realm)
        if htpasswd_context.identify(stored) is None:
            return False
        try:
            return htpasswd_context.verify(password, stored)
        except (MissingBackendError, ValueError, TypeError) as e:
            log.warning("unable to check the %s hash of %r in %s: %s",
                        htpasswd_context.identify(stored), username,
                        self.path, e)
            raise BackendError(
                "Unable to verify password hash for %s" % username,
                e) from e

class CallbackResolver(object):
    """
    Resolves through a function ``userfunc(realm, username)``

    The function returns the secret (usually the result of
    ``wsgiauth.auth.digest.digest_password``) or ``None``.  This is the
    quickest way to keep hashes in a database instead of a file.
    """

    def __init__(self, userfunc):
        if not callable(userfunc):
            raise InvalidArgumentError("userfunc must be callable")
        self.userfunc = userfunc

    def resolve(self, username, realm, password=None):
        check_username(username)
        check_realm(realm)
        return self.userfunc(realm, username) or None

__all__ = ['FileResolver', 'ApacheResolver', 'CallbackResolver']
