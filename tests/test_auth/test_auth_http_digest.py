# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php

import hashlib

import pytest

from wsgiauth.auth import http
from wsgiauth.auth.digest import digest_password, response
from wsgiauth.auth.http import AuthHTTPHandler, HTTPAdapter
from wsgiauth.auth.resolver import CallbackResolver
from wsgiauth.exceptions import UnsupportedQopError
from wsgiauth.response import Response, header_value
from wsgiauth.result import Result
from wsgiauth.wsgilib import raw_interactive

realm = "Test Realm"
config = {'accept_schemes': 'digest',
          'realm': realm,
          'digest_domains': '/protected',
          'nonce_timeout': 300}
msie = 'Mozilla/4.0 (compatible; MSIE 6.0; Windows NT 5.1)'

def application(environ, start_response):
    content = environ.get('REMOTE_USER', '').encode('utf8')
    start_response("200 OK", [('Content-Type', 'text/plain'),
                              ('Content-Length', str(len(content)))])
    return [content]

def backwords(realm, username):
    """ dummy password hash, where user password is just reverse """
    return digest_password(username, realm, username[::-1])

resolver = CallbackResolver(backwords)

class FakeTime(object):

    def __init__(self, now):
        self.now = now

    def time(self):
        return self.now

@pytest.fixture
def clock(monkeypatch):
    fake = FakeTime(1000.0)
    monkeypatch.setattr(http, 'time', fake)
    return fake

def md5(value):
    return hashlib.md5(value.encode('utf8')).hexdigest()

def authorization(adapter, environ, username='bing', password='gnib',
                  uri='/protected', nc='00000001', cnonce='0a4f113b',
                  qop='auth', **override):
    """
    Computes a digest response the way a client would, then lets
    ``override`` replace header fields after the fact.
    """
    fields = {'username': username,
              'realm': realm,
              'nonce': adapter.calc_nonce(environ),
              'uri': uri,
              'opaque': adapter.calc_opaque(),
              'cnonce': cnonce}
    ha1 = digest_password(username, realm, password)
    ha2 = md5('%s:%s' % (environ.get('REQUEST_METHOD', 'GET'), uri))
    fields['response'] = md5(':'.join([ha1, fields['nonce'], nc, cnonce,
                                       qop, ha2]))
    fields.update(override)
    parts = ['%s="%s"' % (name, fields[name])
             for name in ('username', 'realm', 'nonce', 'uri', 'response',
                          'opaque', 'cnonce')
             if fields[name] is not None]
    parts.append('algorithm=MD5')
    parts.append('qop=%s' % qop)
    parts.append('nc=%s' % nc)
    return 'Digest ' + ', '.join(parts)

def make_environ(**kw):
    environ = {'REQUEST_METHOD': 'GET',
               'SCRIPT_NAME': '',
               'PATH_INFO': '/protected'}
    environ.update(kw)
    return environ

def run(adapter, environ, header):
    environ['HTTP_AUTHORIZATION'] = header
    response = Response()
    return adapter.authenticate(environ, response), response

def test_nonce_window(clock):
    adapter = HTTPAdapter(config)
    environ = make_environ(HTTP_USER_AGENT='test agent')
    nonce = adapter.calc_nonce(environ)
    assert len(nonce) == 32
    clock.now = 1199.0
    assert adapter.calc_nonce(environ) == nonce
    clock.now = 1200.5
    assert adapter.calc_nonce(environ) != nonce
    # the nonce is bound to the user agent too
    clock.now = 1000.0
    assert adapter.calc_nonce(make_environ(HTTP_USER_AGENT='other')) != nonce

def test_opaque_is_constant():
    assert HTTPAdapter(config).calc_opaque() == \
        HTTPAdapter(config).calc_opaque()
    assert HTTPAdapter(config).calc_opaque() == \
        md5('Opaque Data:wsgiauth.auth.http.HTTPAdapter')

def test_challenge_header(clock):
    adapter = HTTPAdapter(config)
    environ = make_environ()
    result, response = run(adapter, environ, '')
    assert result.code == Result.FAILURE_CREDENTIAL_INVALID
    assert response.status == 401
    assert response.header_value('WWW-Authenticate') == (
        'Digest realm="Test Realm", domain="/protected", nonce="%s", '
        'opaque="%s", algorithm="MD5", qop="auth"'
        % (adapter.calc_nonce(environ), adapter.calc_opaque()))
    adapter = HTTPAdapter(dict(config, use_opaque=False))
    result, response = run(adapter, environ, '')
    assert 'opaque' not in response.header_value('WWW-Authenticate')

def test_digest_success(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    result, response = run(adapter, environ,
                           authorization(adapter, environ))
    assert result.code == Result.SUCCESS
    assert result.identity == {'username': 'bing', 'realm': realm}
    assert response.status == 200

def test_digest_post(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ(REQUEST_METHOD='POST')
    result, response = run(adapter, environ,
                           authorization(adapter, environ))
    assert result.is_valid()
    # the method is part of the hash
    header = authorization(adapter, make_environ())
    result, response = run(adapter, environ, header)
    assert response.status == 401

def test_digest_tampering(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    for header in [authorization(adapter, environ, password='bad'),
                   authorization(adapter, environ, response='0' * 32),
                   authorization(adapter, environ, nonce='abcdef0123'),
                   authorization(adapter, environ, opaque='f' * 32),
                   authorization(adapter, environ, cnonce='deadbeef')]:
        result, response = run(adapter, make_environ(), header)
        assert result.code == Result.FAILURE_CREDENTIAL_INVALID, header
        assert response.status == 401, header
    # the nonce count is covered by the response hash as well
    header = authorization(adapter, environ).replace('nc=00000001',
                                                     'nc=00000002')
    result, response = run(adapter, make_environ(), header)
    assert response.status == 401

def test_stale_nonce(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    header = authorization(adapter, make_environ())
    clock.now = 1500.0
    result, response = run(adapter, make_environ(), header)
    assert response.status == 401
    assert adapter.calc_nonce(make_environ()) in \
        response.header_value('WWW-Authenticate')

def test_unknown_user(clock):
    adapter = HTTPAdapter(config, digest_resolver=CallbackResolver(
        lambda realm, username: None))
    result, response = run(adapter, make_environ(),
                           authorization(adapter, make_environ()))
    assert response.status == 401

def test_invalid_username(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    header = authorization(adapter, make_environ(), username='bi:ng')
    result, response = run(adapter, make_environ(), header)
    assert result.code == Result.FAILURE_CREDENTIAL_INVALID
    assert response.status == 401

def test_malformed_header(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    for header in ['Digest garbage',
                   authorization(adapter, environ, realm=None),
                   authorization(adapter, environ, nonce='not-hex'),
                   authorization(adapter, environ, uri='/elsewhere'),
                   authorization(adapter, environ, uri='http://[::1/p'),
                   authorization(adapter, environ, response='short'),
                   authorization(adapter, environ, opaque=None),
                   authorization(adapter, environ, cnonce=None),
                   authorization(adapter, environ, qop='auth-conf'),
                   authorization(adapter, environ, nc='1')]:
        result, response = run(adapter, make_environ(), header)
        assert result.code == Result.FAILURE_UNCATEGORIZED, header
        assert result.messages == ["Invalid Authorization header format"]
        assert response.status == 400, header

def test_cnonce_field_not_taken_for_nonce(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    header = authorization(adapter, environ, nonce=None)
    result, response = run(adapter, make_environ(), header)
    assert response.status == 400

def test_full_uri(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    uri = 'http://localhost/protected'
    result, response = run(adapter, environ,
                           authorization(adapter, environ, uri=uri))
    assert result.is_valid()

def test_auth_int(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ()
    with pytest.raises(UnsupportedQopError) as info:
        run(adapter, environ, authorization(adapter, environ,
                                            qop='auth-int'))
    assert info.value.qop == 'auth-int'

def test_msie_without_opaque(clock):
    adapter = HTTPAdapter(config, digest_resolver=resolver)
    environ = make_environ(HTTP_USER_AGENT=msie)
    header = authorization(adapter, environ, opaque=None)
    data = adapter.parse_digest(environ, header)
    assert data['ie_no_opaque']
    result, response = run(adapter, environ, header)
    assert result.is_valid()
    # other clients must send it back
    environ = make_environ(HTTP_USER_AGENT='Mozilla/5.0')
    header = authorization(adapter, environ, opaque=None)
    result, response = run(adapter, environ, header)
    assert response.status == 400

def test_without_opaque(clock):
    adapter = HTTPAdapter(dict(config, use_opaque=False),
                          digest_resolver=resolver)
    environ = make_environ()
    result, response = run(adapter, environ,
                           authorization(adapter, environ, opaque=None))
    assert result.is_valid()

def check(application, username, password, path='/protected'):
    """ perform two-stage authentication to verify login """
    (status, headers, content, errors) = \
        raw_interactive(application, path, accept='text/html')
    assert status.startswith("401")
    challenge = header_value(headers, 'WWW-Authenticate')
    auth = response(challenge, realm, 'http://localhost' + path,
                    username, password)
    assert auth.startswith("Digest ")
    (status, headers, content, errors) = \
        raw_interactive(application, path, HTTP_AUTHORIZATION=auth)
    if status.startswith("200"):
        return content
    if status.startswith("401"):
        return None
    assert False, "Unexpected Status: %s" % status

def test_digest_middleware(clock):
    app = AuthHTTPHandler(application, config, digest_resolver=resolver)
    assert b'bing' == check(app, "bing", "gnib")
    assert check(app, "bing", "bad") is None
