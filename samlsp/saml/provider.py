"""Service-provider bundle shared by the guard and the SAML endpoints."""

from fastapi import APIRouter

from samlsp.core.settings import SAMLSettings
from samlsp.crypto.keys import load_hmac_secret
from samlsp.crypto.tokens import TokenCodec, utc_now
from samlsp.crypto.types import Clock
from samlsp.saml.routes_acs import build_acs_router
from samlsp.saml.routes_metadata import build_metadata_router
from samlsp.saml.session import Authorizer, CookieSessionAuthorizer
from samlsp.saml.verifier import AssertionVerifier


class ServiceProvider:
    """Configuration injected into every SAML component.

    Built once at startup and shared read-only by all requests.
    """

    __slots__ = ("settings", "verifier", "codec", "authorizer")

    def __init__(
        self,
        settings: SAMLSettings,
        verifier: AssertionVerifier,
        codec: TokenCodec,
        authorizer: Authorizer | None = None,
    ) -> None:
        self.settings = settings
        self.verifier = verifier
        self.codec = codec
        self.authorizer: Authorizer = authorizer or CookieSessionAuthorizer(
            settings, codec
        )

    @classmethod
    def from_settings(
        cls,
        settings: SAMLSettings,
        verifier: AssertionVerifier,
        authorizer: Authorizer | None = None,
        clock: Clock = utc_now,
    ) -> "ServiceProvider":
        """Load the signing secret and build the provider."""
        secret = load_hmac_secret(settings.load_key_pem())
        return cls(
            settings=settings,
            verifier=verifier,
            codec=TokenCodec(secret, clock=clock),
            authorizer=authorizer,
        )

    @property
    def acs_path(self) -> str:
        return self.settings.acs_path

    @property
    def metadata_path(self) -> str:
        return self.settings.metadata_path

    @property
    def endpoint_paths(self) -> tuple[str, str]:
        """Paths served by :meth:`router`."""
        return (self.metadata_path, self.acs_path)

    def router(self) -> APIRouter:
        """Router serving the metadata and assertion consumer endpoints."""
        router = APIRouter()
        router.include_router(build_metadata_router(self))
        router.include_router(build_acs_router(self))
        return router
