# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
# This code was written with funding by http://prometheusresearch.com
"""
HTTP Digest helpers and the htdigest file adapter

``digest_password`` builds the hash that digest resolvers hand out, and
``response`` plays the client side of a challenge (handy in tests).
``DigestFileAdapter`` checks a username and password directly against
an Apache ``htdigest`` file, without any HTTP exchange.

NOTE: Digest authentication relies on MD5; prefer ``Basic`` over TLS
      with ``ApacheResolver`` and a strong hash where you can.
"""
import hashlib
import hmac
import logging
from urllib.parse import urlsplit
from urllib.request import (AbstractDigestAuthHandler, parse_http_list,
                            parse_keqv_list)

from wsgiauth.auth.adapter import ValidatableAdapter
from wsgiauth.auth.resolver import open_credentials
from wsgiauth.exceptions import SetupError
from wsgiauth.result import Result

log = logging.getLogger(__name__)

def digest_password(username, realm, password):
    """ Constructs the appropriate hashcode needed for HTTP Digest """
    return hashlib.md5(("%s:%s:%s" % (username, realm, password))
                       .encode('utf8')).hexdigest()

def response(challenge, realm, uri, username, password, method='GET'):
    """
    Build an authorization response for a given challenge.  This
    implementation uses urllib's digest handler to do the dirty work;
    ``uri`` should be a full URL (``http://localhost/path``).
    """
    auth = AbstractDigestAuthHandler()
    auth.add_password(realm, uri, username, password)
    (token, challenge) = challenge.split(' ', 1)
    chal = parse_keqv_list(parse_http_list(challenge))
    parts = urlsplit(uri)
    selector = parts.path or '/'
    if parts.query:
        selector += '?' + parts.query
    class FakeRequest(object):
        full_url = uri
        data = None
        def get_full_url(self):
            return self.full_url
        def get_method(self):
            return method
    FakeRequest.selector = selector
    return "Digest %s" % auth.get_authorization(FakeRequest(), chal)

class DigestFileAdapter(ValidatableAdapter):
    """
    Authenticates ``identity``/``credential`` against an htdigest file

    Each line of the file is ``username:realm:md5hex``; scanning stops
    at the first blank line.  On success the identity is a dictionary
    with ``username`` and ``realm``; failures carry no identity.
    """

    def __init__(self, filename=None, realm=None, identity=None,
                 credential=None):
        ValidatableAdapter.__init__(self, identity, credential)
        self.filename = filename
        self.realm = realm

    def authenticate(self):
        for option in ('filename', 'realm', 'identity', 'credential'):
            if getattr(self, option) is None:
                raise SetupError(
                    "Option '%s' must be set before authentication"
                    % option)
        prefix = '%s:%s:' % (self.identity, self.realm)
        identity = {'realm': self.realm, 'username': self.identity}
        with open_credentials(self.filename) as fp:
            for line in fp:
                line = line.strip()
                if not line:
                    break
                if not line.startswith(prefix):
                    continue
                expected = digest_password(self.identity, self.realm,
                                           self.credential)
                if hmac.compare_digest(line[-32:].encode('utf8'),
                                       expected.encode('utf8')):
                    return Result(Result.SUCCESS, identity)
                log.debug("password mismatch for %r", self.identity)
                return Result(Result.FAILURE_CREDENTIAL_INVALID, None,
                              ["Password incorrect"])
        return Result(Result.FAILURE_IDENTITY_NOT_FOUND, None,
                      ["Username '%s' and realm '%s' combination not found"
                       % (self.identity, self.realm)])

__all__ = ['digest_password', 'response', 'DigestFileAdapter']
