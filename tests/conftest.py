"""Shared test fixtures for the SAML session gate."""

from collections.abc import AsyncIterator

import pytest
from fastapi import Depends, FastAPI, Request
from httpx import ASGITransport, AsyncClient

from samlsp.core.app import create_app
from samlsp.core.settings import SAMLSettings
from samlsp.crypto.keys import generate_sp_key_pem
from samlsp.saml.policy import require_attribute
from samlsp.saml.provider import ServiceProvider
from tests.fakes import FakeVerifier, FixedClock


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the operator's SAML_* environment out of test settings."""
    for name in ("SAML_KEY_PEM", "SAML_KEY_FILE", "SAML_HEADER_PREFIX"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def key_pem() -> str:
    """One RSA key for the whole run."""
    return generate_sp_key_pem()


@pytest.fixture
def settings(key_pem: str) -> SAMLSettings:
    return SAMLSettings(key_pem=key_pem)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def verifier(clock: FixedClock) -> FakeVerifier:
    return FakeVerifier(clock)


@pytest.fixture
def provider(
    settings: SAMLSettings, verifier: FakeVerifier, clock: FixedClock
) -> ServiceProvider:
    """Service provider with the fake verifier and fixed clock."""
    return ServiceProvider.from_settings(settings, verifier, clock=clock)


@pytest.fixture
def app(provider: ServiceProvider) -> FastAPI:
    """Guarded app with a plain and an attribute-gated route."""
    app = create_app(provider)

    @app.get("/protected")
    async def protected(request: Request) -> dict[str, str | None]:
        return {"uid": request.headers.get("x-saml-uid")}

    @app.get(
        "/staff",
        dependencies=[
            Depends(require_attribute("eduPersonAffiliation", "Staff"))
        ],
    )
    async def staff() -> dict[str, str]:
        return {"status": "ok"}

    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """httpx client bound to the guarded app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
