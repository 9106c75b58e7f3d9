"""Service-provider key generation and HMAC secret extraction."""

import base64
import binascii
import re

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from samlsp.saml.errors import SigningKeyError

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

_PEM_BLOCK = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----"
    r"(?P<body>.*?)"
    r"-----END (?P=label)-----",
    re.DOTALL,
)


def generate_sp_key_pem() -> str:
    """Generate a new RSA-2048 service-provider key as PKCS8 PEM."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def load_hmac_secret(pem: str) -> bytes:
    """Return the decoded bytes of the first PEM block.

    Only the raw block contents are used as the HMAC secret; PEM headers
    such as ``Proc-Type`` are not supported.
    """
    match = _PEM_BLOCK.search(pem)
    if match is None:
        raise SigningKeyError("no PEM block found in signing key")
    body = "".join(match.group("body").split())
    try:
        secret = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SigningKeyError("malformed PEM block in signing key") from exc
    if not secret:
        raise SigningKeyError("empty PEM block in signing key")
    return secret
