# (c) 2005 Ian Bicking and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
This module provides helper routines with work directly on a WSGI
environment to solve common requirements.

   * get_cookies(environ)
   * request_path(environ)

"""
from http.cookies import SimpleCookie

__all__ = ['get_cookies', 'request_path']

def get_cookies(environ):
    """
    Gets a cookie object (which is a dictionary-like object) from the
    request environment; caches this value in case get_cookies is
    called again for the same request.

    """
    header = environ.get('HTTP_COOKIE', '')
    if 'wsgiauth.cookies' in environ:
        cookies, check_header = environ['wsgiauth.cookies']
        if check_header == header:
            return cookies
    cookies = SimpleCookie()
    cookies.load(header)
    environ['wsgiauth.cookies'] = (cookies, header)
    return cookies

def request_path(environ):
    """
    The path of the request (``SCRIPT_NAME`` plus ``PATH_INFO``), as
    the WSGI server decoded it; an empty path is reported as ``/``.
    """
    path = environ.get('SCRIPT_NAME', '') + environ.get('PATH_INFO', '')
    return path or '/'
