# (c) 2005 Ian Bicking and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Cookie Sessions

Remembers a small dictionary per browser between requests; this is
where ``wsgiauth.storage.Session`` keeps the authenticated identity.
Below the middleware::

    environ['wsgiauth.session.factory']()

returns the dictionary of the current request.  It is loaded on first
use, pickled back to ``session_file_path`` (one file per session) when
the response is closed, and its file is removed once it is empty.  A
newly created session sends its id in a cookie.

@@: This doesn't do any locking, and may cause problems when a single
session is accessed concurrently.  Also, sessions aren't expired.
"""

from http.cookies import SimpleCookie
import logging
import os
import pickle
import re
import tempfile
import time

from wsgiauth import wsgilib
from wsgiauth.request import get_cookies

log = logging.getLogger(__name__)

_valid_sid = re.compile(r'^[0-9]{14}-[0-9a-f]{32}$')

class SessionMiddleware(object):

    def __init__(self, application, global_conf=None, cookie_name='_SID_',
                 session_file_path=None):
        self.application = application
        self.cookie_name = cookie_name
        self.session_file_path = session_file_path or tempfile.gettempdir()

    def __call__(self, environ, start_response):
        factory = SessionFactory(environ, self.cookie_name,
                                 self.session_file_path)
        environ['wsgiauth.session.factory'] = factory

        def session_start_response(status, headers, exc_info=None):
            if factory.created:
                headers = list(headers)
                headers.append(factory.cookie_header())
            return start_response(status, headers, exc_info)

        app_iter = self.application(environ, session_start_response)
        return wsgilib.add_close(app_iter, factory.close)

def make_session_middleware(app, global_conf, cookie_name='_SID_',
                            session_file_path=None):
    """
    Paste Deploy ``filter_app_factory`` for ``SessionMiddleware``;
    ``session_file_path`` defaults to the system temporary directory.
    """
    return SessionMiddleware(app, global_conf, cookie_name=cookie_name,
                             session_file_path=session_file_path)

def make_sid():
    """ a timestamp followed by 32 random hex digits """
    return time.strftime('%Y%m%d%H%M%S') + '-' + os.urandom(16).hex()

class SessionFactory(object):
    """ finds, or else creates, the session of one request """

    def __init__(self, environ, cookie_name, session_file_path):
        self.environ = environ
        self.cookie_name = cookie_name
        self.session_file_path = session_file_path
        self.created = False
        self.session = None

    def __call__(self):
        if self.session is None:
            self.session = self.load()
        if self.session is None:
            self.created = True
            self.session = FileSession(make_sid(), self.session_file_path,
                                       create=True)
        return self.session.data()

    def load(self):
        cookies = get_cookies(self.environ)
        if self.cookie_name not in cookies:
            return None
        sid = cookies[self.cookie_name].value
        try:
            return FileSession(sid, self.session_file_path)
        except KeyError:
            log.debug("discarding unknown session id %r", sid)
            return None

    def cookie_header(self):
        cookie = SimpleCookie()
        cookie[self.cookie_name] = self.session.sid
        cookie[self.cookie_name]['path'] = '/'
        cookie[self.cookie_name]['httponly'] = True
        return ('Set-Cookie', cookie[self.cookie_name].OutputString())

    def close(self):
        if self.session is not None:
            self.session.close()

class FileSession(object):
    """ the pickled dictionary stored in ``session_file_path/sid`` """

    def __init__(self, sid, session_file_path, create=False):
        # sids come from cookies; never let them name other files
        if not _valid_sid.match(sid):
            raise KeyError(sid)
        self.sid = sid
        self.filename = os.path.join(session_file_path, sid)
        if not create and not os.path.exists(self.filename):
            raise KeyError(sid)
        self._data = None

    def data(self):
        if self._data is None:
            self._data = {}
            if os.path.exists(self.filename):
                with open(self.filename, 'rb') as f:
                    self._data = pickle.load(f)
        return self._data

    def close(self):
        if self._data is None:
            return
        if self._data:
            with open(self.filename, 'wb') as f:
                pickle.dump(self._data, f)
        elif os.path.exists(self.filename):
            os.unlink(self.filename)

__all__ = ['SessionMiddleware', 'make_session_middleware']
