# (c) 2005 Ian Bicking and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
WSGI plumbing shared by the middleware, and the harness the test suite
drives applications with.
"""

from io import BytesIO, StringIO

__all__ = ['add_close', 'raw_interactive']

class add_close(object):
    """
    Iterates over ``app_iterable``; ``close()`` closes it and then
    calls ``close_func`` (the session middleware saves the session
    there).
    """

    def __init__(self, app_iterable, close_func):
        self.app_iterable = app_iterable
        self.app_iter = iter(app_iterable)
        self.close_func = close_func
        self._closed = False

    def __iter__(self):
        return self

    def __next__(self):
        return next(self.app_iter)

    def close(self):
        self._closed = True
        if hasattr(self.app_iterable, 'close'):
            self.app_iterable.close()
        self.close_func()

def raw_interactive(application, path='', **environ):
    """
    Runs ``application`` on one fabricated GET request to ``path``.

    Keyword arguments become ``environ`` entries, with ``__`` standing
    for ``.`` (``wsgi__input=b'...'`` sets the request body).  Returns
    ``(status, headers, body, errors)``: the body as bytes, ``errors``
    as whatever was written to ``wsgi.errors``.
    """
    errors = StringIO()
    path_info, _, query = str(path).partition('?')
    request = {
        'REQUEST_METHOD': 'GET',
        'SCRIPT_NAME': '',
        'PATH_INFO': path_info,
        'QUERY_STRING': query,
        'SERVER_NAME': 'localhost',
        'SERVER_PORT': '80',
        'SERVER_PROTOCOL': 'HTTP/1.0',
        'wsgi.version': (1, 0),
        'wsgi.url_scheme': 'http',
        'wsgi.input': BytesIO(b''),
        'wsgi.errors': errors,
        'wsgi.multithread': False,
        'wsgi.multiprocess': False,
        'wsgi.run_once': False,
        }
    for name, value in environ.items():
        request[name.replace('__', '.')] = value
    if isinstance(request['wsgi.input'], bytes):
        request['CONTENT_LENGTH'] = str(len(request['wsgi.input']))
        request['wsgi.input'] = BytesIO(request['wsgi.input'])

    started = {}
    output = BytesIO()
    def start_response(status, headers, exc_info=None):
        if exc_info and started.get('sent'):
            raise exc_info[1].with_traceback(exc_info[2])
        assert exc_info or 'status' not in started, \
            "Headers already set and no exc_info!"
        started['status'] = status
        started['headers'] = headers
        return output.write

    app_iter = application(request, start_response)
    try:
        for chunk in app_iter:
            assert 'status' in started, "Content sent w/o headers!"
            started['sent'] = True
            output.write(chunk)
    finally:
        if hasattr(app_iter, 'close'):
            app_iter.close()
    return (started['status'], started['headers'], output.getvalue(),
            errors.getvalue())
