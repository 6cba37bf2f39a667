# (c) 2005 Ian Bicking, Clark C. Evans and contributors
# This module is part of the WSGIAuth Project and is released under
# the MIT License: http://www.opensource.org/licenses/mit-license.php
"""
Authentication Validator

Lets a form library treat "these credentials authenticate" as one more
validation rule.  The validator fills the identity and credential into
a ``ValidatableAdapter``, runs it through an ``AuthenticationService``
and turns a failed ``Result`` into a message.
"""

from wsgiauth.auth.adapter import ValidatableAdapter
from wsgiauth.exceptions import InvalidArgumentError, SetupError
from wsgiauth.result import Result

IDENTITY_NOT_FOUND = 'identityNotFound'
IDENTITY_AMBIGUOUS = 'identityAmbiguous'
CREDENTIAL_INVALID = 'credentialInvalid'
UNCATEGORIZED = 'uncategorized'
GENERAL = 'general'

CODE_MAP = {
    Result.FAILURE_IDENTITY_NOT_FOUND: IDENTITY_NOT_FOUND,
    Result.FAILURE_CREDENTIAL_INVALID: CREDENTIAL_INVALID,
    Result.FAILURE_IDENTITY_AMBIGUOUS: IDENTITY_AMBIGUOUS,
    Result.FAILURE_UNCATEGORIZED: UNCATEGORIZED,
}

class AuthenticationValidator(object):
    """
    Validates an identity/credential pair by authenticating it

    Parameters:

        ``service``

            The ``AuthenticationService`` used to authenticate.

        ``adapter``

            A ``ValidatableAdapter``; when omitted the service's own
            adapter is used.

        ``identity``, ``credential``

            Either the values themselves or, when ``is_valid`` is given
            a ``context`` dictionary containing them as keys, the names
            of the fields holding them.

        ``code_map``

            Maps result codes to message keys, overriding the default
            mapping; unknown keys get the general message.
    """

    message_templates = {
        IDENTITY_NOT_FOUND: "Invalid identity",
        IDENTITY_AMBIGUOUS: "Identity is ambiguous",
        CREDENTIAL_INVALID: "Invalid password",
        UNCATEGORIZED: "Authentication failed",
        GENERAL: "Authentication failed",
    }

    def __init__(self, service=None, adapter=None, identity=None,
                 credential=None, code_map=None):
        self.service = service
        self.adapter = adapter
        self.identity = identity
        self.credential = credential
        self.message_templates = dict(self.message_templates)
        self.code_map = {}
        for code, template in (code_map or {}).items():
            if not template or not isinstance(template, str):
                raise InvalidArgumentError(
                    "Message key in code_map option must be a non-empty "
                    "string")
            self.message_templates.setdefault(
                template, self.message_templates[GENERAL])
            self.code_map[int(code)] = template
        self.messages = {}

    def is_valid(self, value=None, context=None):
        """
        True if and only if the credentials authenticate.  Otherwise
        ``messages`` explains why.  ``value``, when given, replaces
        the credential.
        """
        self.messages = {}
        if value is not None:
            self.credential = value
        if self.identity is None:
            raise SetupError("Identity must be set prior to validation")
        if self.credential is None:
            raise SetupError("Credential must be set prior to validation")
        if self.service is None:
            raise SetupError(
                "AuthenticationService must be set prior to validation")
        identity = self.identity
        credential = self.credential
        if context is not None:
            identity = context.get(identity, identity)
            credential = context.get(credential, credential)

        adapter = self.get_adapter()
        adapter.identity = identity
        adapter.credential = credential
        result = self.service.authenticate(adapter)
        if result.is_valid():
            return True
        key = self.message_key(result.code)
        self.messages[key] = self.message_templates[key]
        return False

    def message_key(self, code):
        if code in self.code_map:
            return self.code_map[code]
        return CODE_MAP.get(code, GENERAL)

    def get_adapter(self):
        adapter = self.adapter
        if adapter is None:
            adapter = self.service.adapter
        if adapter is None:
            raise SetupError("Adapter must be set prior to validation")
        if not isinstance(adapter, ValidatableAdapter):
            raise SetupError(
                "Adapter must be an instance of ValidatableAdapter; "
                "%s given" % type(adapter).__name__)
        return adapter

__all__ = ['AuthenticationValidator']
