"""HS256 signed tokens for relay state and sessions."""

from datetime import UTC, datetime

import jwt
from pydantic import ValidationError

from samlsp.crypto.types import Claims, Clock, DecodedToken
from samlsp.saml.errors import InvalidToken, SigningKeyError

ALGORITHM = "HS256"

# Values of the JWT ``typ`` header; a token only verifies as its own kind.
RELAY_STATE_TOKEN = "relay"
SESSION_TOKEN = "session"


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


class TokenCodec:
    """Signs and verifies HS256 JWTs with a shared secret.

    The accepted algorithm is fixed here, never taken from the token header,
    and expiry is checked against the injected clock rather than wall time.
    """

    def __init__(self, secret: bytes, clock: Clock = utc_now) -> None:
        if not secret:
            raise SigningKeyError("empty HMAC secret")
        self._secret = secret
        self._clock = clock

    def now(self) -> int:
        """Current clock reading as integer epoch seconds."""
        return int(self._clock().timestamp())

    def encode(self, claims: Claims, ttl_seconds: int, kind: str) -> str:
        """Sign ``claims`` as a ``kind`` token expiring in ``ttl_seconds``."""
        payload: dict[str, object] = dict(claims)
        payload["exp"] = self.now() + ttl_seconds
        return jwt.encode(
            payload, self._secret, algorithm=ALGORITHM, headers={"typ": kind}
        )

    def decode(self, token: str, kind: str) -> DecodedToken:
        """Verify signature, kind and expiry, returning the claim set."""
        try:
            verified = jwt.decode_complete(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "require": ["exp"]},
            )
            decoded = DecodedToken.model_validate(verified["payload"])
        except (jwt.PyJWTError, ValidationError) as exc:
            raise InvalidToken(str(exc)) from exc
        if verified["header"].get("typ") != kind:
            raise InvalidToken(f"not a {kind} token")
        if decoded.exp <= self.now():
            raise InvalidToken("token has expired")
        return decoded
