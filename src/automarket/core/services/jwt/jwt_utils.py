"""Cheap pre-verification parsing of bearer tokens and claim mapping."""

import base64
import binascii
import json
import re
import time
from dataclasses import dataclass
from typing import Any, Final

from fastapi import HTTPException

from src.automarket.core.models.claims import TokenClaims
from src.automarket.runtime.config.config_data import ConfigData, OIDCProviderConfig
from src.automarket.runtime.context import get_config

MAX_TOKEN_CHARS: Final = 4096
MAX_HEADER_BYTES: Final = 8 * 1024
MAX_PAYLOAD_BYTES: Final = 64 * 1024

# Compact JWS: three unpadded base64url segments
_COMPACT_JWS: Final = re.compile(r"([A-Za-z0-9_-]+)\.([A-Za-z0-9_-]+)\.([A-Za-z0-9_-]+)")


def _reject(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def _split_compact(token: str) -> tuple[str, str, str]:
    if not token or len(token) > MAX_TOKEN_CHARS:
        raise _reject("Invalid JWT size")
    match = _COMPACT_JWS.fullmatch(token)
    if match is None:
        raise _reject("Invalid JWT format")
    return match.group(1), match.group(2), match.group(3)


def _decode_segment(segment: str, what: str, max_bytes: int) -> dict[str, Any]:
    """base64url-decode one segment and parse it as a JSON object."""
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError) as exc:
        raise _reject(f"Invalid base64url in {what}") from exc
    if len(raw) > max_bytes:
        raise _reject(f"{what} too large")

    try:
        value = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise _reject(f"Non-UTF8 {what}") from exc
    except json.JSONDecodeError as exc:
        raise _reject(f"Invalid JSON in {what}") from exc
    if not isinstance(value, dict):
        raise _reject(f"{what} must be a JSON object")
    return value


@dataclass(frozen=True)
class JwtPreview:
    """Unverified header and claims, used to pick the provider and key."""

    header: dict[str, Any]
    claims: dict[str, Any]

    @property
    def alg(self) -> str | None:
        return self.header.get("alg")

    @property
    def kid(self) -> str | None:
        return self.header.get("kid")

    @property
    def iss(self) -> str | None:
        iss = self.claims.get("iss")
        return iss.rstrip("/") if isinstance(iss, str) and iss else None


def preview_jwt(token: str) -> JwtPreview:
    """Decode header and payload without checking the signature.

    Raises:
        HTTPException: 401 when the token is not a well-formed compact JWS
    """
    header_seg, payload_seg, _ = _split_compact(token)
    return JwtPreview(
        header=_decode_segment(header_seg, "JWT header", MAX_HEADER_BYTES),
        claims=_decode_segment(payload_seg, "JWT payload", MAX_PAYLOAD_BYTES),
    )


def lookup_config_by_issuer(
    issuer: str, config: ConfigData | None = None
) -> OIDCProviderConfig | None:
    """Look up the provider whose issuer matches exactly (trailing slash ignored)."""
    config = config or get_config()
    wanted = issuer.rstrip("/")
    return next(
        (p for p in config.oidc.providers.values() if p.issuer.rstrip("/") == wanted),
        None,
    )


def create_token_claims(token: str, claims: dict[str, Any]) -> TokenClaims:
    """Map verified JWT claims onto ``TokenClaims`` using the configured claim names."""
    mapping = get_config().jwt.claims
    now = int(time.time())
    remaining = dict(claims)

    subject = remaining.pop(mapping.user_id, None) or remaining.get("sub", "")
    remaining.pop("sub", None)

    return TokenClaims(
        raw_token=token,
        issuer=remaining.pop("iss", ""),
        subject=str(subject),
        audience=remaining.pop("aud", []),
        expires_at=remaining.pop("exp", now + 3600),
        issued_at=remaining.pop("iat", now),
        not_before=remaining.pop("nbf", None),
        email=remaining.pop(mapping.email, None),
        email_verified=bool(remaining.pop(mapping.email_verified, False)),
        name=remaining.pop(mapping.name, None),
        custom_claims=remaining,
    )
