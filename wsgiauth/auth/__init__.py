# (c) 2005 Clark C. Evans
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Package for authentication/identification of requests.

Each module provides a single-focused adapter (or the resolvers an
adapter consults) that implements one way of checking credentials.
Integration of the components into a usable system is up to the
``wsgiauth.service`` module or a higher-level framework.
"""
