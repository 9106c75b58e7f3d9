"""Tests for the attribute policy gate."""

from collections.abc import AsyncIterator

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from samlsp.core.app import create_app
from samlsp.core.settings import SAMLSettings
from samlsp.saml.policy import require_attribute
from samlsp.saml.provider import ServiceProvider
from tests.fakes import FakeVerifier, FixedClock, session_token

STAFF_ONLY = [Depends(require_attribute("eduPersonAffiliation", "Staff"))]


class TestRequireAttribute:
    """Tests for require_attribute on a guarded route."""

    async def test_matching_value_passes(
        self, client: AsyncClient, provider: ServiceProvider
    ) -> None:
        client.cookies.set(
            "token",
            session_token(provider.codec, {"eduPersonAffiliation": "Staff"}),
        )
        resp = await client.get("/staff")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_other_value_forbidden(
        self, client: AsyncClient, provider: ServiceProvider
    ) -> None:
        client.cookies.set(
            "token",
            session_token(provider.codec, {"eduPersonAffiliation": "Student"}),
        )
        resp = await client.get("/staff")
        assert resp.status_code == 403

    async def test_missing_attribute_forbidden(
        self, client: AsyncClient, provider: ServiceProvider
    ) -> None:
        client.cookies.set("token", session_token(provider.codec, {"uid": "alice"}))
        resp = await client.get("/staff")
        assert resp.status_code == 403

    async def test_unauthenticated_goes_to_idp_first(self, client: AsyncClient) -> None:
        resp = await client.get("/staff", follow_redirects=False)
        assert resp.status_code == 302


class TestConfiguredPrefix:
    """The gate reads the namespace the provider was configured with."""

    @pytest.fixture
    def remote_provider(
        self, key_pem: str, verifier: FakeVerifier, clock: FixedClock
    ) -> ServiceProvider:
        settings = SAMLSettings(key_pem=key_pem, header_prefix="X-Remote")
        return ServiceProvider.from_settings(settings, verifier, clock=clock)

    @pytest.fixture
    async def remote_client(
        self, remote_provider: ServiceProvider
    ) -> AsyncIterator[AsyncClient]:
        app = create_app(remote_provider, exempt_paths={"/open"})

        @app.get("/staff", dependencies=STAFF_ONLY)
        async def staff() -> dict[str, str]:
            return {"status": "ok"}

        @app.get("/open", dependencies=STAFF_ONLY)
        async def open_route() -> dict[str, str]:
            return {"status": "ok"}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    async def test_custom_prefix_passes(
        self, remote_client: AsyncClient, remote_provider: ServiceProvider
    ) -> None:
        remote_client.cookies.set(
            "token",
            session_token(remote_provider.codec, {"eduPersonAffiliation": "Staff"}),
        )
        resp = await remote_client.get("/staff")
        assert resp.status_code == 200

    async def test_route_outside_guard_forbidden(
        self, remote_client: AsyncClient, remote_provider: ServiceProvider
    ) -> None:
        remote_client.cookies.set(
            "token",
            session_token(remote_provider.codec, {"eduPersonAffiliation": "Staff"}),
        )
        resp = await remote_client.get("/open")
        assert resp.status_code == 403
