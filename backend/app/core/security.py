from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict

ACCESS = "access"
REFRESH = "refresh"


# -------- Minimal JWT (HS256) --------
def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def _sign_hs256(secret: str, header_payload: bytes) -> str:
    sig = hmac.new(secret.encode("utf-8"), header_payload, hashlib.sha256).digest()
    return _b64url(sig)


def issue_jwt(
    user_id: int,
    username: str,
    role: str,
    ttl_seconds: int,
    *,
    secret: str,
    token_type: str = ACCESS,
) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    now = int(time.time())
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "typ": token_type,
        "iat": now,
        "exp": now + max(1, int(ttl_seconds)),
        # distinct tokens even when issued within the same second
        "jti": _b64url(hashlib.sha256(f"{user_id}:{time.time_ns()}".encode("utf-8")).digest()[:12]),
    }
    header_b = _b64url(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b = _b64url(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    signing_input = f"{header_b}.{payload_b}".encode("utf-8")
    sig = _sign_hs256(secret, signing_input)
    return f"{header_b}.{payload_b}.{sig}"


def decode_jwt(token: str, *, secret: str, token_type: str = ACCESS) -> Dict[str, Any]:
    try:
        header_b64, payload_b64, sig_b64 = token.split(".")
    except ValueError as exc:  # noqa: PERF203
        raise ValueError("invalid_token") from exc
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    expected_sig = _sign_hs256(secret, signing_input)
    if not hmac.compare_digest(expected_sig, sig_b64):
        raise ValueError("invalid_signature")
    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError("invalid_payload") from exc
    if not isinstance(payload, dict):
        raise ValueError("invalid_payload")
    if payload.get("typ") != token_type:
        raise ValueError("wrong_token_type")
    exp = payload.get("exp")
    if not isinstance(exp, int) or exp < int(time.time()):
        raise ValueError("token_expired")
    return payload
