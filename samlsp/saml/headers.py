"""Trusted attribute headers bridged from a verified session."""

import logging
import re
from collections.abc import Mapping

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import Scope

from samlsp.saml.errors import HeaderNamespaceViolation

logger = logging.getLogger(__name__)

# RFC 9110 token characters.
_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")

# Request state key under which the guard records the trusted prefix.
PREFIX_STATE_KEY = "saml_header_prefix"


def header_name(prefix: str, claim: str) -> str:
    """Return the trusted header name for ``claim``."""
    return f"{prefix}-{claim}"


def _to_wire(value: str) -> str:
    # ASGI headers are latin-1; carry anything else as raw UTF-8 bytes.
    return value.encode("utf-8").decode("latin-1")


def _from_wire(value: str) -> str:
    try:
        return value.encode("latin-1").decode("utf-8")
    except UnicodeError:
        return value


def ensure_namespace_absent(scope: Scope, prefix: str) -> None:
    """Raise if the inbound request already uses the trusted prefix."""
    lowered = prefix.lower().encode("latin-1")
    for name, _value in scope.get("headers", []):
        if name.lower().startswith(lowered):
            raise HeaderNamespaceViolation(
                f"inbound request carries {name.decode('latin-1')!r}"
            )


def set_trusted_attributes(
    scope: Scope, prefix: str, attributes: Mapping[str, str]
) -> None:
    """Write ``attributes`` into the request scope as trusted headers."""
    headers = MutableHeaders(scope=scope)
    for claim, value in attributes.items():
        name = header_name(prefix, claim)
        if not _TOKEN.match(name):
            logger.warning("Skipping claim %r: not a valid header name", claim)
            continue
        if _CONTROL.search(value):
            logger.warning("Skipping claim %r: control characters in value", claim)
            continue
        headers[name] = _to_wire(value)


def trusted_attributes(request: Request, prefix: str) -> dict[str, list[str]]:
    """Read the trusted attribute set back from ``request``."""
    marker = f"{prefix}-".lower()
    found: dict[str, list[str]] = {}
    for name, value in request.headers.items():
        if name.startswith(marker):
            found.setdefault(name[len(marker) :], []).append(_from_wire(value))
    return found
