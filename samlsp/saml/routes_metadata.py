"""SAML service-provider metadata endpoint."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Response

if TYPE_CHECKING:
    from samlsp.saml.provider import ServiceProvider

METADATA_MEDIA_TYPE = "application/samlmetadata+xml"


def build_metadata_router(provider: "ServiceProvider") -> APIRouter:
    """Serve the verifier's metadata document at the configured path."""
    router = APIRouter()

    @router.get(provider.metadata_path, response_class=Response)
    async def metadata() -> Response:
        """GET metadata -- SP metadata as XML."""
        return Response(
            content=provider.verifier.metadata(),
            media_type=METADATA_MEDIA_TYPE,
        )

    return router
