from wsgiauth.session import FileSession, SessionMiddleware, \
     make_session_middleware
from wsgiauth.wsgilib import raw_interactive
import os
import pytest

def counter(environ, start_response):
    session = environ['wsgiauth.session.factory']()
    session['count'] = session.get('count', 0) + 1
    body = str(session['count']).encode('ascii')
    start_response('200 OK', [('Content-Type', 'text/plain')])
    return [body]

def no_session(environ, start_response):
    start_response('200 OK', [('Content-Type', 'text/plain')])
    return [b'untouched']

def get_cookie(headers):
    for name, value in headers:
        if name == 'Set-Cookie':
            return value.split(';')[0]
    return None

def test_session(tmp_path):
    app = SessionMiddleware(counter, session_file_path=str(tmp_path))
    status, headers, body, errors = raw_interactive(app)
    assert body == b'1'
    cookie = get_cookie(headers)
    assert cookie.startswith('_SID_=')
    sid = cookie.split('=', 1)[1]
    assert os.path.exists(os.path.join(str(tmp_path), sid))
    status, headers, body, errors = raw_interactive(app, HTTP_COOKIE=cookie)
    assert body == b'2'
    # an existing session does not set the cookie again
    assert get_cookie(headers) is None

def test_unused_session(tmp_path):
    app = SessionMiddleware(no_session, session_file_path=str(tmp_path))
    status, headers, body, errors = raw_interactive(app)
    assert get_cookie(headers) is None
    assert os.listdir(str(tmp_path)) == []

def test_bad_sid(tmp_path):
    app = SessionMiddleware(counter, session_file_path=str(tmp_path))
    status, headers, body, errors = raw_interactive(
        app, HTTP_COOKIE='_SID_=../../etc/passwd')
    assert body == b'1'
    assert get_cookie(headers) != '_SID_=../../etc/passwd'
    with pytest.raises(KeyError):
        FileSession('../../etc/passwd', str(tmp_path), create=True)

def test_factory(tmp_path):
    app = make_session_middleware(counter, {}, cookie_name='auth_sid',
                                  session_file_path=str(tmp_path))
    status, headers, body, errors = raw_interactive(app)
    assert get_cookie(headers).startswith('auth_sid=')
