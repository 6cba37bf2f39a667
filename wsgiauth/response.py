# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Routines to work with WSGI ``response_headers`` lists, and the
``Response`` object adapters use to describe what should be sent back
to the client.
"""

def has_header(headers, name):
    """
    Is header named ``name`` present in headers?
    """
    name = name.lower()
    for header, value in headers:
        if header.lower() == name:
            return True
    return False

def header_value(headers, name):
    """
    Returns the header's value, or None if no such header.  If a
    header appears more than once, all the values of the headers
    are joined with ','
    """
    name = name.lower()
    result = [value for header, value in headers
              if header.lower() == name]
    if result:
        return ','.join(result)
    else:
        return None

class Response(object):
    """
    Outbound status and header lines produced while authenticating

    An adapter never starts the WSGI response itself; it records the
    status code it wants (``set_status``) and the header lines to send
    (``add_header``), and the middleware turns that into an actual
    response.  ``headers`` is a plain ``response_headers`` list, so the
    helpers above work on it directly.
    """

    def __init__(self, status=200, headers=None):
        self.status = status
        self.headers = headers if headers is not None else []

    def set_status(self, code):
        self.status = int(code)

    def add_header(self, name, value):
        """ appends a header line; existing lines are kept """
        self.headers.append((name, value))

    def header_value(self, name):
        return header_value(self.headers, name)

    def all_headers(self, name):
        name = name.lower()
        return [value for header, value in self.headers
                if header.lower() == name]

    def __repr__(self):
        return '<%s %s %r>' % (self.__class__.__name__, self.status,
                               self.headers)

__all__ = ['has_header', 'header_value', 'Response']
