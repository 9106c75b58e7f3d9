"""Cookie-backed session authorization.

:class:`CookieSessionAuthorizer` is the default :class:`Authorizer`. It keeps
no server-side state: the session lives in a signed cookie holding the
assertion attributes, and expires with the token.
"""

import logging
from http import HTTPStatus
from typing import Protocol

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from samlsp.core.settings import SAMLSettings
from samlsp.crypto.tokens import RELAY_STATE_TOKEN, SESSION_TOKEN, TokenCodec
from samlsp.crypto.types import Claims, RelayState
from samlsp.saml.errors import InvalidToken
from samlsp.saml.headers import ensure_namespace_absent, set_trusted_attributes
from samlsp.saml.verifier import AssertionAttributes

logger = logging.getLogger(__name__)

RELAY_STATE_FIELD = "RelayState"


class Authorizer(Protocol):
    """Decides whether a request holds a session, and creates sessions."""

    async def is_authorized(self, request: Request) -> bool:
        """Return True for an authenticated request.

        Implementations populate the trusted header namespace before
        returning True.
        """
        ...

    async def on_assertion(
        self, request: Request, attributes: AssertionAttributes
    ) -> Response:
        """Establish a session from verified attributes."""
        ...


def forbidden() -> PlainTextResponse:
    """Generic 403 that reveals nothing about why."""
    return PlainTextResponse(
        HTTPStatus.FORBIDDEN.phrase, status_code=HTTPStatus.FORBIDDEN
    )


def is_local_uri(uri: str) -> bool:
    """True for a path on this site: one leading slash, no scheme or host."""
    return uri.startswith("/") and not uri.startswith(("//", "/\\"))


def session_claims(attributes: AssertionAttributes) -> Claims:
    """One claim per attribute, keyed by friendly name, first value wins."""
    claims: Claims = {}
    for attr in attributes:
        if attr.values:
            claims[attr.claim_name] = attr.values[0]
    return claims


class CookieSessionAuthorizer:
    """Default authorizer issuing and verifying a signed session cookie."""

    def __init__(self, settings: SAMLSettings, codec: TokenCodec) -> None:
        self._settings = settings
        self._codec = codec

    async def is_authorized(self, request: Request) -> bool:
        prefix = self._settings.header_prefix
        ensure_namespace_absent(request.scope, prefix)

        cookie = request.cookies.get(self._settings.cookie_name)
        if not cookie:
            return False
        try:
            token = self._codec.decode(cookie, SESSION_TOKEN)
        except InvalidToken as exc:
            logger.debug("Rejected session cookie: %s", exc)
            return False

        set_trusted_attributes(request.scope, prefix, token.string_claims())
        return True

    async def on_assertion(
        self, request: Request, attributes: AssertionAttributes
    ) -> Response:
        redirect_uri = self._settings.default_redirect
        form = await request.form()
        raw_relay_state = form.get(RELAY_STATE_FIELD)
        if raw_relay_state:
            if not isinstance(raw_relay_state, str):
                return forbidden()
            try:
                decoded = self._codec.decode(raw_relay_state, RELAY_STATE_TOKEN)
                relay_state = RelayState.model_validate(decoded.claims())
            except (InvalidToken, ValidationError) as exc:
                logger.warning("Rejected relay state: %s", exc)
                return forbidden()
            if not is_local_uri(relay_state.uri):
                logger.warning("Rejected relay state uri %r", relay_state.uri)
                return forbidden()
            redirect_uri = relay_state.uri

        ttl = self._settings.session_ttl
        session_token = self._codec.encode(
            session_claims(attributes), ttl, SESSION_TOKEN
        )

        response = RedirectResponse(redirect_uri, status_code=HTTPStatus.FOUND)
        response.set_cookie(
            self._settings.cookie_name,
            session_token,
            max_age=ttl,
            path="/",
            httponly=self._settings.cookie_http_only,
            secure=self._settings.cookie_secure,
        )
        return response
