"""ASGI guard requiring an authenticated SAML session."""

import logging
from collections.abc import Collection
from http import HTTPStatus
from typing import TYPE_CHECKING
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from samlsp.crypto.tokens import RELAY_STATE_TOKEN
from samlsp.saml.errors import RedirectLoopMisconfiguration, RedirectRequestError
from samlsp.saml.headers import PREFIX_STATE_KEY

if TYPE_CHECKING:
    from samlsp.saml.provider import ServiceProvider

logger = logging.getLogger(__name__)


def request_uri(scope: Scope) -> str:
    """Path plus query string of the request, as sent on the wire."""
    raw_path = scope.get("raw_path")
    uri = raw_path.decode("latin-1") if raw_path else quote(scope["path"])
    query = scope.get("query_string", b"")
    if query:
        uri = f"{uri}?{query.decode('latin-1')}"
    return uri


class RequireAccountMiddleware:
    """Pass authorized requests through, send the rest to the IdP.

    Do not wrap the assertion consumer path with this middleware unless it
    is listed in ``exempt_paths``; doing so raises
    :class:`RedirectLoopMisconfiguration` on the first unauthenticated
    callback instead of redirecting forever.
    """

    def __init__(
        self,
        app: ASGIApp,
        provider: "ServiceProvider",
        exempt_paths: Collection[str] = (),
    ) -> None:
        self.app = app
        self.provider = provider
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        if await self.provider.authorizer.is_authorized(request):
            state = scope.setdefault("state", {})
            state[PREFIX_STATE_KEY] = self.provider.settings.header_prefix
            await self.app(scope, receive, send)
            return

        response = self.start_login(request)
        await response(scope, receive, send)

    def start_login(self, request: Request) -> Response:
        """Build the relay state and redirect to the identity provider."""
        if request.url.path == self.provider.acs_path:
            raise RedirectLoopMisconfiguration(
                "the assertion consumer path is wrapped by RequireAccountMiddleware"
            )

        settings = self.provider.settings
        relay_state = self.provider.codec.encode(
            {"uri": request_uri(request.scope)},
            settings.relay_state_ttl,
            RELAY_STATE_TOKEN,
        )
        try:
            redirect_url = self.provider.verifier.make_redirect_authentication_request(
                relay_state
            )
        except RedirectRequestError:
            logger.exception("Cannot build authentication request")
            return PlainTextResponse(
                HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            )
        return RedirectResponse(redirect_url, status_code=HTTPStatus.FOUND)
