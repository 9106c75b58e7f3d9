"""Type definitions for signed token claims."""

from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

ClaimValue = str | int | float
Claims = dict[str, ClaimValue]
Clock = Callable[[], datetime]


class DecodedToken(BaseModel):
    """Verified token claims. Every token carries an integer ``exp``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    exp: int

    def claims(self) -> Claims:
        """Return every claim, ``exp`` included."""
        return self.model_dump()

    def string_claims(self) -> dict[str, str]:
        """Return only the string-valued claims."""
        return {k: v for k, v in self.claims().items() if isinstance(v, str)}


class RelayState(BaseModel):
    """Relay-state claims: the request URI to return to after login."""

    uri: str
    exp: int
