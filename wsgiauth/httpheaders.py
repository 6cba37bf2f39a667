# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Authentication Headers

The headers of an HTTP authentication exchange, as objects that read
their field-value out of a WSGI ``environ`` or a ``response_headers``
list::

    Authorization(environ)      # 'Basic Ymluzzpnbmli' or None
    WWWAuthenticate(headers)    # ['Basic realm="x"', ...] or None

A response may carry several challenges.  They are kept one per line
and never folded into a comma separated value, since user-agents
misread a combined ``WWW-Authenticate`` line.
"""

class AuthHeader(object):
    """
    One header field-name

    ``challenge`` marks the response headers that may be repeated; for
    those a list of values is returned.
    """

    def __init__(self, name, challenge=False):
        self.name = name
        self.challenge = challenge
        self._environ_name = 'HTTP_' + name.upper().replace('-', '_')

    def __str__(self):
        return self.name

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)

    def __call__(self, collection):
        if isinstance(collection, dict):
            return collection.get(self._environ_name)
        name = self.name.lower()
        values = [value for header, value in collection
                  if header.lower() == name]
        if not values:
            return None
        if self.challenge:
            return values
        assert len(values) == 1, "found more than one %s header" % self.name
        return values[0]

Authorization = AuthHeader('Authorization')
ProxyAuthorization = AuthHeader('Proxy-Authorization')
UserAgent = AuthHeader('User-Agent')
WWWAuthenticate = AuthHeader('WWW-Authenticate', challenge=True)
ProxyAuthenticate = AuthHeader('Proxy-Authenticate', challenge=True)

__all__ = ['AuthHeader', 'Authorization', 'ProxyAuthorization', 'UserAgent',
           'WWWAuthenticate', 'ProxyAuthenticate']
