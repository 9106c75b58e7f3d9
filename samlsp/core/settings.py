"""Service-provider settings loaded from environment variables."""

from pathlib import Path
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

SESSION_TTL_DEFAULT = 3600
RELAY_STATE_TTL_DEFAULT = 600


class SAMLSettings(BaseSettings):
    """SAML endpoints, signing key and session cookie settings."""

    model_config = SettingsConfigDict(env_prefix="SAML_", frozen=True)

    key_pem: str = ""
    key_file: Path | None = None
    metadata_url: str = "http://localhost:8000/saml/metadata"
    acs_url: str = "http://localhost:8000/saml/acs"
    session_ttl: int = SESSION_TTL_DEFAULT
    relay_state_ttl: int = RELAY_STATE_TTL_DEFAULT
    cookie_name: str = "token"
    cookie_http_only: bool = False
    cookie_secure: bool = False
    header_prefix: str = "X-Saml"
    default_redirect: str = "/"

    @property
    def metadata_path(self) -> str:
        """Path component of the metadata URL."""
        return urlsplit(self.metadata_url).path or "/"

    @property
    def acs_path(self) -> str:
        """Path component of the assertion consumer service URL."""
        return urlsplit(self.acs_url).path or "/"

    def load_key_pem(self) -> str:
        """Return the PEM key, reading ``key_file`` when no inline key is set."""
        if self.key_pem:
            return self.key_pem
        if self.key_file is not None:
            return self.key_file.read_text(encoding="ascii")
        return ""
