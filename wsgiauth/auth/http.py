# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
# This code was written with funding by http://prometheusresearch.com
"""
HTTP Basic and Digest Authentication (RFC 2617)

This module implements the ``Basic`` and ``Digest`` challenge-response
schemes.  ``HTTPAdapter`` holds the configuration and does the work for
one request at a time; ``AuthHTTPHandler`` is the middleware that puts
it in front of an application.

Basically, you just put the middleware before your application::

    from wsgiauth.auth.resolver import CallbackResolver
    config = {'accept_schemes': 'basic', 'realm': 'Test Realm'}
    resolver = CallbackResolver(lambda realm, username: username[::-1])
    app = AuthHTTPHandler(application, config, basic_resolver=resolver)

Nonces are not remembered by the server.  A nonce is an MD5 hash of the
current time window (``nonce_timeout`` seconds wide), the client's
``User-Agent`` and the adapter's class name, so it is recomputed rather
than looked up, and it expires at the end of its window.  Replayed
nonce counts within a window are not detected.

NOTE: This has not been audited by a security expert, please use
      with caution (or better yet, report security holes).  Only
      ``qop=auth`` is supported; ``auth-int`` is refused with an
      ``UnsupportedQopError``.
"""
import base64
import binascii
import hashlib
import logging
import math
import re
import time
from urllib.parse import unquote, urlsplit

from paste.deploy.converters import asbool

from wsgiauth.auth.resolver import (ApacheResolver, FileResolver,
                                    compare, is_printable)
from wsgiauth.exceptions import (InvalidArgumentError, SetupError,
                                 UnsupportedQopError)
from wsgiauth.httpexceptions import get_exception
from wsgiauth.httpheaders import (Authorization, ProxyAuthenticate,
                                  ProxyAuthorization, UserAgent,
                                  WWWAuthenticate)
from wsgiauth.request import request_path
from wsgiauth.response import Response
from wsgiauth.result import Result
from wsgiauth.service import AuthenticationService
from wsgiauth.storage import NonPersistent

log = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ('basic', 'digest')
SUPPORTED_ALGORITHMS = ('MD5',)
SUPPORTED_QOPS = ('auth',)

#: marks a digest header whose username could not be used
INVALID_USERNAME = '::invalid::'

def md5_hex(value):
    return hashlib.md5(value.encode('utf8')).hexdigest()

def is_hex(value):
    return bool(value) and all(ch in '0123456789abcdefABCDEF'
                               for ch in value)

def is_md5_hash(value):
    return len(value) == 32 and is_hex(value)

def _field(name):
    return re.compile(r'(?:^|[\s,])%s="([^"]+)"' % name)

_username = _field('username')
_realm = _field('realm')
_nonce = _field('nonce')
_uri = _field('uri')
_response = _field('response')
_cnonce = _field('cnonce')
_opaque = _field('opaque')
_qop = re.compile(r'(?:^|[\s,])qop="?(auth-int|auth)"?(?:[\s,]|$)')
_nc = re.compile(r'(?:^|[\s,])nc="?([0-9A-Fa-f]{8})"?(?:[\s,]|$)')

def split_scheme(header):
    """ ``(scheme, credentials)`` of an authorization header value """
    parts = header.strip().split(None, 1)
    if not parts:
        return '', ''
    if len(parts) == 1:
        return parts[0].lower(), ''
    return parts[0].lower(), parts[1].strip()

def _search(regex, header):
    match = regex.search(header)
    if match:
        return match.group(1)
    return None

class HTTPAdapter(object):
    """
    HTTP authentication adapter

    ``config`` is a dictionary; it is checked here once and never
    changed afterwards:

        ``accept_schemes``

            Required.  Space separated list of the schemes to accept,
            among ``basic`` and ``digest``.

        ``realm``

            Required.  Shown to the user; printable characters only,
            no colon or double quote.

        ``digest_domains``

            Required when digest is accepted.  Space separated URIs of
            the protection space (no double quote).

        ``nonce_timeout``

            Required when digest is accepted.  Lifetime of a nonce, in
            seconds.

        ``use_opaque``

            Send (and expect back) an opaque value; default true.

        ``algorithm``

            Only ``MD5`` is supported.

        ``proxy_auth``

            Act as a proxy: read ``Proxy-Authorization``, answer with
            ``407`` and ``Proxy-Authenticate``.  Default false.

    ``basic_resolver`` and ``digest_resolver`` are resolvers (see
    ``wsgiauth.auth.resolver``) for the respective schemes.  The basic
    resolver is given the password, the digest resolver must return
    ``md5("username:realm:password")``.

    The adapter keeps no state between requests; it may be shared by
    any number of threads.
    """

    def __init__(self, config, basic_resolver=None, digest_resolver=None):
        schemes = (config.get('accept_schemes') or '').split()
        if not schemes:
            raise InvalidArgumentError(
                "Config key 'accept_schemes' is required")
        self.accept_schemes = tuple(scheme for scheme in SUPPORTED_SCHEMES
                                    if scheme in schemes)
        if not self.accept_schemes:
            raise InvalidArgumentError(
                "No supported schemes given in 'accept_schemes'. "
                "Valid values: %s" % ', '.join(SUPPORTED_SCHEMES))

        realm = config.get('realm')
        if (not realm or not is_printable(realm)
                or ':' in realm or '"' in realm):
            raise InvalidArgumentError(
                "Config key 'realm' is required, and must contain only "
                "printable characters, excluding quotation marks and "
                "colons")
        self.realm = realm

        self.domains = None
        self.nonce_timeout = None
        self.use_opaque = False
        self.algorithm = None
        if 'digest' in self.accept_schemes:
            domains = config.get('digest_domains')
            if (not domains or not is_printable(domains)
                    or '"' in domains):
                raise InvalidArgumentError(
                    "Config key 'digest_domains' is required, and must "
                    "contain only printable characters, excluding "
                    "quotation marks")
            self.domains = domains
            try:
                nonce_timeout = int(config.get('nonce_timeout') or 0)
            except (TypeError, ValueError):
                nonce_timeout = 0
            if nonce_timeout <= 0:
                raise InvalidArgumentError(
                    "Config key 'nonce_timeout' is required, and must be "
                    "a positive integer")
            self.nonce_timeout = nonce_timeout
            self.use_opaque = asbool(config.get('use_opaque', True))
            algorithm = config.get('algorithm', 'MD5')
            if algorithm not in SUPPORTED_ALGORITHMS:
                raise InvalidArgumentError(
                    "Unsupported algorithm %r; valid values: %s"
                    % (algorithm, ', '.join(SUPPORTED_ALGORITHMS)))
            self.algorithm = algorithm

        self.proxy = asbool(config.get('proxy_auth', False))
        self.basic_resolver = basic_resolver
        self.digest_resolver = digest_resolver
        self.tag = '%s.%s' % (self.__class__.__module__,
                              self.__class__.__name__)

    def bind(self, environ, response):
        """
        Returns an object whose ``authenticate()`` runs this adapter on
        the given request, as ``AuthenticationService`` expects.
        """
        return BoundHTTPAdapter(self, environ, response)

    def authenticate(self, environ, response):
        """
        Checks the credentials of the request in ``environ``.

        Returns a ``Result``; whenever the client has to try again
        ``response`` receives the status code and challenge headers
        to send.
        """
        if self.proxy:
            header = ProxyAuthorization(environ)
        else:
            header = Authorization(environ)
        if not header or not header.strip():
            return self.challenge_client(environ, response)

        scheme, credentials = split_scheme(header)
        if scheme not in SUPPORTED_SCHEMES:
            log.warning("unsupported authentication scheme %r", scheme)
            response.set_status(400)
            return Result(Result.FAILURE_UNCATEGORIZED, {},
                          ["Client requested an incorrect or unsupported "
                           "authentication scheme"])
        if scheme not in self.accept_schemes:
            return self.challenge_client(environ, response)
        if 'basic' == scheme:
            return self._basic_auth(environ, response, credentials)
        return self._digest_auth(environ, response, header)

    def challenge_client(self, environ, response):
        """
        Sets a ``401`` (``407`` for a proxy) status with one challenge
        per accepted scheme, and returns the corresponding failure.
        """
        if self.proxy:
            response.set_status(407)
            header = ProxyAuthenticate
        else:
            response.set_status(401)
            header = WWWAuthenticate
        if 'basic' in self.accept_schemes:
            response.add_header(header.name, self.basic_header())
        if 'digest' in self.accept_schemes:
            response.add_header(header.name, self.digest_header(environ))
        return Result(Result.FAILURE_CREDENTIAL_INVALID, {},
                      ["Invalid or absent credentials; challenging client"])

    def basic_header(self):
        return 'Basic realm="%s"' % self.realm

    def digest_header(self, environ):
        return ''.join([
            'Digest realm="%s", ' % self.realm,
            'domain="%s", ' % self.domains,
            'nonce="%s", ' % self.calc_nonce(environ),
            self.use_opaque and 'opaque="%s", ' % self.calc_opaque() or '',
            'algorithm="%s", ' % self.algorithm,
            'qop="%s"' % ','.join(SUPPORTED_QOPS)])

    def calc_nonce(self, environ):
        """
        The nonce for this client in the current time window; windows
        end on multiples of ``nonce_timeout``.
        """
        window = int(math.ceil(time.time() / self.nonce_timeout)
                     * self.nonce_timeout)
        user_agent = UserAgent(environ) or 'wsgiauth'
        return md5_hex('%d:%s:%s' % (window, user_agent, self.tag))

    def calc_opaque(self):
        return md5_hex('Opaque Data:%s' % self.tag)

    def _basic_auth(self, environ, response, auth):
        if self.basic_resolver is None:
            raise SetupError(
                "A basic_resolver must be set before performing Basic "
                "authentication")
        try:
            auth = base64.b64decode(auth.encode('ascii'), validate=True)
            auth = auth.decode('ascii')
        except (binascii.Error, UnicodeError):
            log.debug("undecodable basic credentials")
            return self.challenge_client(environ, response)
        if not is_printable(auth) or ':' not in auth:
            return self.challenge_client(environ, response)
        username, password = auth.split(':', 1)
        if not username or not password:
            return self.challenge_client(environ, response)

        result = self.basic_resolver.resolve(username, self.realm, password)
        if isinstance(result, Result):
            if result.is_valid():
                return result
        elif isinstance(result, dict):
            return Result(Result.SUCCESS, result)
        elif isinstance(result, str) and compare(result, password):
            return Result(Result.SUCCESS,
                          {'username': username, 'realm': self.realm})
        log.debug("basic authentication failed for %r", username)
        return self.challenge_client(environ, response)

    def _digest_auth(self, environ, response, header):
        if self.digest_resolver is None:
            raise SetupError(
                "A digest_resolver must be set before performing Digest "
                "authentication")
        data = self.parse_digest(environ, header)
        if data is None:
            log.warning("malformed digest authorization header")
            response.set_status(400)
            return Result(Result.FAILURE_UNCATEGORIZED, {},
                          ["Invalid Authorization header format"])
        if INVALID_USERNAME == data['username']:
            return self.challenge_client(environ, response)
        if not compare(self.calc_nonce(environ), data['nonce']):
            log.debug("stale or foreign nonce from %r", data['username'])
            return self.challenge_client(environ, response)
        if (self.use_opaque and not data['ie_no_opaque']
                and not compare(self.calc_opaque(), data['opaque'])):
            return self.challenge_client(environ, response)

        ha1 = self.digest_resolver.resolve(data['username'], data['realm'])
        if not isinstance(ha1, str) or not ha1:
            return self.challenge_client(environ, response)
        if data['qop'] not in SUPPORTED_QOPS:
            raise UnsupportedQopError(data['qop'])
        ha2 = md5_hex('%s:%s' % (environ['REQUEST_METHOD'], data['uri']))
        expected = md5_hex(':'.join([ha1, data['nonce'], data['nc'],
                                     data['cnonce'], data['qop'], ha2]))
        if compare(expected, data['response']):
            return Result(Result.SUCCESS, {'username': data['username'],
                                           'realm': data['realm']})
        log.debug("digest response mismatch for %r", data['username'])
        return self.challenge_client(environ, response)

    def parse_digest(self, environ, header):
        """
        Pulls the fields out of a digest ``Authorization`` header.

        Returns ``None`` when the header is unusable.  A bad username
        alone does not make it unusable; it is replaced by
        ``INVALID_USERNAME`` so the client can be challenged again.
        """
        data = {'ie_no_opaque': False}
        username = _search(_username, header)
        if not is_printable(username) or ':' in username:
            username = INVALID_USERNAME
        data['username'] = username

        realm = _search(_realm, header)
        if not is_printable(realm) or ':' in realm:
            return None
        data['realm'] = realm

        nonce = _search(_nonce, header)
        if not is_hex(nonce):
            return None
        data['nonce'] = nonce

        uri = _search(_uri, header)
        if not uri:
            return None
        # only the path has to agree; clients differ on scheme and host
        try:
            path = unquote(urlsplit(uri).path, 'latin-1')
        except ValueError:
            return None
        if path != request_path(environ):
            return None
        data['uri'] = uri

        response = _search(_response, header)
        if not response or not is_md5_hash(response):
            return None
        data['response'] = response

        data['algorithm'] = self.algorithm

        cnonce = _search(_cnonce, header)
        if not is_printable(cnonce):
            return None
        data['cnonce'] = cnonce

        data['opaque'] = None
        if self.use_opaque:
            opaque = _search(_opaque, header)
            if not opaque:
                # MSIE leaves the opaque value out; let it through
                if 'MSIE' not in (UserAgent(environ) or ''):
                    return None
                data['ie_no_opaque'] = True
                opaque = ''
            elif not is_md5_hash(opaque):
                return None
            data['opaque'] = opaque

        qop = _search(_qop, header)
        if not qop:
            return None
        data['qop'] = qop

        nc = _search(_nc, header)
        if not nc:
            return None
        data['nc'] = nc
        return data

class BoundHTTPAdapter(object):
    """ an ``HTTPAdapter`` tied to one request and its response """

    def __init__(self, adapter, environ, response):
        self.adapter = adapter
        self.environ = environ
        self.response = response

    def authenticate(self):
        return self.adapter.authenticate(self.environ, self.response)

class AuthHTTPHandler(object):
    """
    HTTP Basic/Digest authentication middleware

    There are several possible outcomes:

    0. If ``REMOTE_USER`` is already set, or the storage already holds
       an identity, the request is passed along to the application.

    1. If the credentials pass, ``REMOTE_USER`` and ``AUTH_TYPE`` are
       filled in, ``wsgiauth.result`` holds the ``Result`` and the
       application is called.

    2. Otherwise a ``401`` (``407`` in proxy mode) with the challenge,
       or a ``400`` for a malformed header, is sent back.

    Parameters:

        ``application``

            The application object is called only upon successful
            authentication.

        ``config``, ``basic_resolver``, ``digest_resolver``

            Passed to ``HTTPAdapter``.

        ``storage_factory``

            Optional callable ``storage_factory(environ)`` returning the
            storage for the request (``wsgiauth.storage.Session`` keeps
            the user logged in across requests).  By default nothing is
            kept, and every request is authenticated.
    """

    def __init__(self, application, config, basic_resolver=None,
                 digest_resolver=None, storage_factory=None):
        self.application = application
        self.adapter = HTTPAdapter(config, basic_resolver, digest_resolver)
        self.storage_factory = storage_factory or (lambda environ:
                                                   NonPersistent())

    def __call__(self, environ, start_response):
        if environ.get('REMOTE_USER'):
            return self.application(environ, start_response)
        service = AuthenticationService(self.storage_factory(environ))
        if service.has_identity():
            self.set_user(environ, service.get_identity())
            return self.application(environ, start_response)
        response = Response()
        result = service.authenticate(self.adapter.bind(environ, response))
        if result.is_valid():
            environ['wsgiauth.result'] = result
            self.set_user(environ, result.identity)
            return self.application(environ, start_response)
        exc = get_exception(response.status)(
            detail=' '.join(result.messages), headers=response.headers)
        return exc.wsgi_application(environ, start_response)

    def set_user(self, environ, identity):
        if isinstance(identity, dict):
            username = identity.get('username')
        else:
            username = identity
        environ['REMOTE_USER'] = str(username)
        header = self.adapter.proxy and ProxyAuthorization or Authorization
        scheme = split_scheme(header(environ) or '')[0]
        environ['AUTH_TYPE'] = scheme or self.adapter.accept_schemes[0]

middleware = AuthHTTPHandler

def make_http_auth(app, global_conf, realm, accept_schemes='basic',
                   digest_domains=None, nonce_timeout=None,
                   use_opaque='true', algorithm='MD5', proxy_auth='false',
                   basic_file=None, htpasswd_file=None, digest_file=None):
    """
    Paste Deploy ``filter_app_factory`` for ``AuthHTTPHandler``

    Basic credentials come from ``htpasswd_file`` (an Apache password
    file) or ``basic_file`` (``username:realm:password`` lines); digest
    hashes from ``digest_file`` (an htdigest file)::

        [filter:auth]
        use = egg:WSGIAuth#http_auth
        realm = Intranet
        accept_schemes = basic digest
        digest_domains = /
        nonce_timeout = 300
        htpasswd_file = %(here)s/users.htpasswd
        digest_file = %(here)s/users.htdigest
    """
    config = {'accept_schemes': accept_schemes,
              'realm': realm,
              'digest_domains': digest_domains,
              'nonce_timeout': nonce_timeout,
              'use_opaque': asbool(use_opaque),
              'algorithm': algorithm,
              'proxy_auth': asbool(proxy_auth)}
    basic_resolver = digest_resolver = None
    if htpasswd_file:
        basic_resolver = ApacheResolver(htpasswd_file)
    elif basic_file:
        basic_resolver = FileResolver(basic_file)
    if digest_file:
        digest_resolver = FileResolver(digest_file)
    return AuthHTTPHandler(app, config, basic_resolver=basic_resolver,
                           digest_resolver=digest_resolver)

__all__ = ['HTTPAdapter', 'AuthHTTPHandler', 'make_http_auth']
