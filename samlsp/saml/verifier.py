"""Contract for the SAML protocol engine consumed by the session gate."""

from typing import Protocol

from pydantic import BaseModel, Field
from starlette.requests import Request


class Attribute(BaseModel):
    """A verified assertion attribute."""

    name: str
    friendly_name: str = ""
    values: list[str] = Field(default_factory=list)

    @property
    def claim_name(self) -> str:
        """Session claim key: the friendly name, else the formal name."""
        return self.friendly_name or self.name


AssertionAttributes = list[Attribute]


class AssertionVerifier(Protocol):
    """Parses IdP responses, builds AuthnRequests and describes the SP.

    Implementations raise :class:`~samlsp.saml.errors.InvalidResponseError`
    from :meth:`parse_response` and
    :class:`~samlsp.saml.errors.RedirectRequestError` from
    :meth:`make_redirect_authentication_request`.
    """

    async def parse_response(
        self, request: Request, possible_request_ids: list[str]
    ) -> AssertionAttributes:
        """Validate the posted SAMLResponse and return its attributes."""
        ...

    def make_redirect_authentication_request(self, relay_state: str) -> str:
        """Return the IdP URL for an AuthnRequest carrying ``relay_state``."""
        ...

    def metadata(self) -> bytes:
        """Return the XML-serialized service-provider metadata."""
        ...
