"""FastAPI application factory for a SAML-protected service."""

from collections.abc import Collection

from fastapi import FastAPI

from samlsp.saml.middleware import RequireAccountMiddleware
from samlsp.saml.provider import ServiceProvider


def create_app(
    provider: ServiceProvider, exempt_paths: Collection[str] = ()
) -> FastAPI:
    """Build an app serving the SAML endpoints behind the account guard.

    The metadata and assertion consumer paths are always exempt from the
    guard. Register application routes on the returned app.
    """
    app = FastAPI(title="SAML service provider", version="0.1.0")
    app.include_router(provider.router())
    app.add_middleware(
        RequireAccountMiddleware,
        provider=provider,
        exempt_paths={*provider.endpoint_paths, *exempt_paths},
    )
    return app
