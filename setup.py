__version__ = "0.1"

from setuptools import setup, find_packages

setup(name="WSGIAuth",
      version=__version__,
      description="Pluggable HTTP Basic/Digest authentication for WSGI",
      long_description="""\
These provide adapters, resolvers and storages that can be combined to
authenticate the requests of a WSGI application.  Each adapter reports
its outcome as a ``Result``, and the authentication service keeps the
identity of the last successful attempt in a storage.

Includes these features...

HTTP Authentication
-------------------

* ``Basic`` and ``Digest`` (RFC 2617, ``qop=auth``) challenge-response,
  also as a proxy (``407``), in ``wsgiauth.auth.http``

* Resolvers reading ``username:realm:secret`` files, Apache
  ``.htpasswd``/``.htdigest`` files, or calling a user function, in
  ``wsgiauth.auth.resolver``

Other Adapters
--------------

* A user supplied callback, in ``wsgiauth.auth.callback``

* An htdigest file checked directly, in ``wsgiauth.auth.digest``

Storage
-------

* In-memory, session-backed and chained storages in
  ``wsgiauth.storage``, with a small cookie session middleware in
  ``wsgiauth.session``
""",
      classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
        "Topic :: Software Development :: Libraries :: Python Modules",
        ],
      keywords='web wsgi authentication digest basic htpasswd',
      license="MIT",
      packages=find_packages(exclude=['tests', 'tests.*']),
      zip_safe=False,
      python_requires=">=3.8",
      install_requires=[
        'passlib>=1.7.4',
        'PasteDeploy',
        ],
      extras_require={
        # passlib 1.7 cannot drive the bcrypt 4.1+ and 5.x backends
        'bcrypt': ['bcrypt>=3.1,<4.1'],
        'test': ['pytest', 'bcrypt>=3.1,<4.1'],
        },
      entry_points="""
      [paste.filter_app_factory]
      http_auth = wsgiauth.auth.http:make_http_auth
      session = wsgiauth.session:make_session_middleware
      """,
      )
