"""Error taxonomy for the SAML session gate."""

from datetime import datetime


class SAMLError(Exception):
    """Base class for all session gate errors."""


class InvalidToken(SAMLError):
    """A relay-state or session token failed verification."""


class InvalidResponseError(SAMLError):
    """The assertion verifier rejected an identity-provider response.

    ``response`` and ``private_err`` are operator-facing only and must never
    be echoed to the caller.
    """

    def __init__(self, response: str, now: datetime, private_err: Exception) -> None:
        super().__init__("invalid SAML response")
        self.response = response
        self.now = now
        self.private_err = private_err


class RedirectRequestError(SAMLError):
    """The assertion verifier could not build an authentication request."""


class FatalMisconfiguration(SAMLError):
    """A programming or deployment error that must abort the request."""


class HeaderNamespaceViolation(FatalMisconfiguration):
    """An inbound request already carries trusted attribute headers."""


class RedirectLoopMisconfiguration(FatalMisconfiguration):
    """The assertion consumer path is wrapped by the account guard."""


class SigningKeyError(FatalMisconfiguration):
    """The configured signing key cannot be used as an HMAC secret."""
