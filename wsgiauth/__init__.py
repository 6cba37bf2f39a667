# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Pluggable authentication for WSGI applications.

Adapters validate an identity/credential pair against some backend and
report the outcome as a ``wsgiauth.result.Result``; the
``wsgiauth.service.AuthenticationService`` keeps the identity of the
last successful attempt in a ``wsgiauth.storage`` backend.
"""
