# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
HTTP Exceptions

The error responses the authentication middleware answers with.  Each
one is an exception that can also be used as a WSGI application; the
body is text/html when the client accepts it, text/plain otherwise::

  HTTPException
    400 - HTTPBadRequest
    401 - HTTPUnauthorized
    407 - HTTPProxyAuthenticationRequired

``get_exception(code)`` returns the class for a status code, which is
how the middleware turns the status an adapter chose into a response.
"""

import html

from wsgiauth.response import has_header

class HTTPException(Exception):
    """
    Base class of the authentication error responses

    ``detail`` says what went wrong with this particular request;
    ``headers`` are sent along, and must include each of the class's
    ``required_headers`` (the challenge, for 401 and 407).
    """

    code = None
    title = None
    explanation = ''
    required_headers = ()

    def __init__(self, detail=None, headers=None):
        assert self.code, "Do not directly instantiate abstract exceptions."
        self.headers = list(headers or [])
        for req in self.required_headers:
            assert has_header(self.headers, req), \
                "%s requires a %s header" % (self.__class__.__name__, req)
        self.detail = detail or ''
        Exception.__init__(self, "%s %s: %s" % (self.code, self.title,
                                                self.detail))

    def plain(self):
        return '%s %s\n%s\n%s\n' % (self.code, self.title,
                                    self.explanation, self.detail)

    def html(self):
        return ('<html><head><title>%(code)s %(title)s</title></head>\n'
                '<body>\n'
                '<h1>%(title)s</h1>\n'
                '<p>%(explanation)s</p>\n'
                '<p>%(detail)s</p>\n'
                '</body></html>\n'
                % {'code': self.code,
                   'title': self.title,
                   'explanation': html.escape(self.explanation),
                   'detail': html.escape(self.detail)})

    def wsgi_application(self, environ, start_response, exc_info=None):
        """
        This exception as a WSGI application
        """
        if 'html' in environ.get('HTTP_ACCEPT', ''):
            content_type = 'text/html; charset=utf8'
            content = self.html()
        else:
            content_type = 'text/plain; charset=utf8'
            content = self.plain()
        content = content.encode('utf8')
        headers = [('Content-Type', content_type),
                   ('Content-Length', str(len(content)))]
        headers.extend(self.headers)
        start_response('%s %s' % (self.code, self.title),
                       headers, exc_info)
        return [content]

    __call__ = wsgi_application

    def __repr__(self):
        return '<%s %s; code=%s>' % (self.__class__.__name__,
                                     self.title, self.code)

class HTTPBadRequest(HTTPException):
    code = 400
    title = 'Bad Request'
    explanation = 'The authorization sent could not be understood.'

class HTTPUnauthorized(HTTPException):
    required_headers = ('WWW-Authenticate',)
    code = 401
    title = 'Unauthorized'
    explanation = (
        'This server could not verify that you are authorized to\n'
        'access the document you requested.  Either you supplied the\n'
        'wrong credentials (e.g., bad password), or your browser\n'
        'does not understand how to supply the credentials required.')

class HTTPProxyAuthenticationRequired(HTTPException):
    required_headers = ('Proxy-Authenticate',)
    code = 407
    title = 'Proxy Authentication Required'
    explanation = (
        'The proxy could not verify that you are authorized to use it.\n'
        'Either you supplied the wrong credentials, or your client\n'
        'does not understand how to supply the credentials required.')

_exceptions = dict((exc.code, exc) for exc in (
    HTTPBadRequest, HTTPUnauthorized, HTTPProxyAuthenticationRequired))

def get_exception(code):
    return _exceptions[code]

__all__ = ['HTTPException', 'HTTPBadRequest', 'HTTPUnauthorized',
           'HTTPProxyAuthenticationRequired', 'get_exception']
