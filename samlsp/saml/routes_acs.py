"""SAML assertion consumer service endpoint."""

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

from samlsp.saml.errors import InvalidResponseError
from samlsp.saml.session import forbidden

if TYPE_CHECKING:
    from samlsp.saml.provider import ServiceProvider

logger = logging.getLogger(__name__)


def build_acs_router(provider: "ServiceProvider") -> APIRouter:
    """Consume IdP responses posted to the configured ACS path."""
    router = APIRouter()

    @router.post(provider.acs_path, response_class=Response)
    async def assertion_consumer(request: Request) -> Response:
        """POST acs -- verify the assertion and hand it to the authorizer."""
        # Request IDs are not tracked; the verifier enforces freshness.
        try:
            attributes = await provider.verifier.parse_response(
                request, possible_request_ids=[]
            )
        except InvalidResponseError as exc:
            logger.warning(
                "Invalid SAML response\nRESPONSE: ===\n%s\n===\nNOW: %s\nERROR: %s",
                exc.response,
                exc.now.isoformat(),
                exc.private_err,
            )
            return forbidden()

        return await provider.authorizer.on_assertion(request, attributes)

    return router
