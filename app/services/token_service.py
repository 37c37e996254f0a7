"""JWT access tokens (ES256) that identify the ledger caller.

The `sub` claim is the caller identity the ledger compares against the
owner and uses in progress keys.

Keys come from settings:
    JWT_PUBLIC_KEY_PEM   verifies tokens; required when APP_ENV=prod
    JWT_PRIVATE_KEY_PEM  optional; lets this process mint tokens too
Whoever holds the private key issues tokens; the ledger only needs the
public half.  In dev/test with neither set, an ephemeral pair is generated
so tests and the demo script can mint and verify in one process.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from app.core.config import SETTINGS, Settings

logger = logging.getLogger(__name__)

ALGORITHM = "ES256"
ISSUER = "progress-ledger"
AUDIENCE = "progress-ledger"
ACCESS_TOKEN_TTL_MIN = 15


@dataclass(frozen=True, slots=True)
class SigningKeys:
    public_key: ec.EllipticCurvePublicKey
    private_key: ec.EllipticCurvePrivateKey | None = None


def _load_private(pem: str) -> ec.EllipticCurvePrivateKey:
    key = serialization.load_pem_private_key(pem.encode(), password=None)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise ValueError("JWT_PRIVATE_KEY_PEM must be an EC private key")
    return key


def _load_public(pem: str) -> ec.EllipticCurvePublicKey:
    key = serialization.load_pem_public_key(pem.encode())
    if not isinstance(key, ec.EllipticCurvePublicKey):
        raise ValueError("JWT_PUBLIC_KEY_PEM must be an EC public key")
    return key


def keys_from_settings(settings: Settings) -> SigningKeys:
    """Build the key pair for these settings.

    Raises ValueError in prod when no key is configured.
    """
    private_key = (
        _load_private(settings.jwt_private_key_pem)
        if settings.jwt_private_key_pem
        else None
    )
    if settings.jwt_public_key_pem:
        return SigningKeys(
            public_key=_load_public(settings.jwt_public_key_pem),
            private_key=private_key,
        )
    if private_key is not None:
        return SigningKeys(public_key=private_key.public_key(), private_key=private_key)

    if settings.is_prod:
        raise ValueError("JWT_PUBLIC_KEY_PEM must be set when APP_ENV=prod")
    logger.warning("No JWT key configured; using an ephemeral key pair")
    ephemeral = ec.generate_private_key(ec.SECP256R1())
    return SigningKeys(public_key=ephemeral.public_key(), private_key=ephemeral)


_keys = keys_from_settings(SETTINGS)


def use_keys(keys: SigningKeys) -> SigningKeys:
    """Swap the active keys, returning the previous ones."""
    global _keys
    previous, _keys = _keys, keys
    return previous


def create_access_token(*, sub: str, ttl_minutes: int = ACCESS_TOKEN_TTL_MIN) -> str:
    """Build and sign an access token for caller `sub`."""
    if _keys.private_key is None:
        raise RuntimeError("No JWT private key configured; cannot mint tokens")
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": now + timedelta(minutes=ttl_minutes),
        "iat": now,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _keys.private_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and claims, return the payload.

    Pins the algorithm to ES256 so alg:none and alg-switching tokens fail.

    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    return jwt.decode(
        token,
        _keys.public_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "exp", "iat", "jti"]},
    )
