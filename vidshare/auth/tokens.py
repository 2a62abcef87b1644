"""HMAC-signed access tokens.

Tokens are ``base64url(json payload).base64url(hmac-sha256 signature)``. The
API only verifies them; issuing happens in the CLI or an external auth service
sharing ``SECRET_KEY``.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from uuid import UUID

ACCESS_TOKEN_TYPE = "access"


def _sign(secret: str, payload_b64: str) -> bytes:
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).digest()


def create_signed_token(payload: dict, secret: str, expires_in: int) -> str:
    payload = {**payload, "exp": int(time.time()) + expires_in}
    payload_bytes = json.dumps(payload, separators=(",", ":")).encode()
    payload_b64 = base64.urlsafe_b64encode(payload_bytes).decode()
    sig_b64 = base64.urlsafe_b64encode(_sign(secret, payload_b64)).decode()
    return f"{payload_b64}.{sig_b64}"


def verify_signed_token(token: str, secret: str) -> dict | None:
    """Return the payload, or None when the token is malformed, forged or expired."""
    payload_b64, sep, sig_b64 = token.partition(".")
    if not sep or "." in sig_b64:
        return None

    try:
        actual_sig = base64.urlsafe_b64decode(sig_b64)
    except (binascii.Error, ValueError):
        return None

    if not hmac.compare_digest(_sign(secret, payload_b64), actual_sig):
        return None

    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (binascii.Error, ValueError):
        return None

    if not isinstance(payload, dict):
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or time.time() > exp:
        return None

    return payload


def create_access_token(user_id: UUID, secret: str, expires_in: int) -> str:
    return create_signed_token({"sub": str(user_id), "type": ACCESS_TOKEN_TYPE}, secret, expires_in)


def read_access_token(token: str, secret: str) -> UUID | None:
    """Resolve an access token to the user id it was issued for."""
    payload = verify_signed_token(token, secret)
    if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        return None
