"""JWT verification service."""

import time
from typing import Any

from authlib.jose import JoseError, JsonWebKey, jwt
from authlib.jose.rfc7517 import KeySet
from fastapi import HTTPException
from loguru import logger

from src.automarket.core.models.claims import TokenClaims
from src.automarket.core.services.jwt.jwks import JwksService
from src.automarket.core.services.jwt.jwt_utils import (
    JwtPreview,
    create_token_claims,
    lookup_config_by_issuer,
    preview_jwt,
)
from src.automarket.runtime.config.config_data import ConfigData, OIDCProviderConfig
from src.automarket.runtime.context import get_config

# Identity providers cap user ids at 128 characters
MAX_SUBJECT_LENGTH = 128


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


class JwtVerificationService:
    """Verifies ID tokens issued by the configured identity providers."""

    def __init__(self, jwks_service: JwksService):
        self._jwks_service = jwks_service

    def _provider_for(self, preview: JwtPreview, cfg: ConfigData) -> OIDCProviderConfig:
        if preview.alg not in cfg.jwt.allowed_algorithms:
            raise _unauthorized("Disallowed JWT algorithm")
        if not preview.iss:
            raise _unauthorized("Missing iss claim")

        provider = lookup_config_by_issuer(preview.iss, cfg)
        if provider is None:
            raise _unauthorized(f"Unknown issuer: {preview.iss}")
        return provider

    async def _signing_keys(self, provider: OIDCProviderConfig, kid: str | None) -> KeySet:
        jwks = await self._jwks_service.fetch_jwks(provider)
        keys = jwks.get("keys", [])
        if kid:
            keys = [k for k in keys if k.get("kid") == kid]
        if not keys:
            raise _unauthorized(f"No JWK matches kid={kid}")
        return JsonWebKey.import_key_set({"keys": keys})

    @staticmethod
    def _claims_options(provider: OIDCProviderConfig, cfg: ConfigData) -> dict[str, Any]:
        audiences = [*cfg.jwt.audiences, *provider.audiences]
        if provider.client_id:
            audiences.append(provider.client_id)
        if not audiences:
            raise _unauthorized("No expected audience configured")

        return {
            "iss": {"essential": True, "values": [provider.issuer.rstrip("/")]},
            "aud": {"essential": True, "values": list(dict.fromkeys(audiences))},
            "exp": {"essential": cfg.jwt.require_exp},
            "iat": {"essential": cfg.jwt.require_iat},
        }

    @staticmethod
    def _check_times(claims: dict[str, Any], cfg: ConfigData) -> None:
        now = int(time.time())
        skew = cfg.jwt.clock_skew
        checks = (
            ("exp", cfg.jwt.verify_exp, lambda v: now > v + skew),
            ("nbf", cfg.jwt.verify_nbf, lambda v: now < v - skew),
            ("iat", cfg.jwt.verify_iat, lambda v: v > now + skew),
            ("auth_time", cfg.jwt.verify_iat, lambda v: v > now + skew),
        )
        for name, enabled, invalid in checks:
            value = claims.get(name)
            if enabled and value is not None and invalid(int(value)):
                raise _unauthorized(f"Invalid {name} with skew")

    async def verify_jwt(
        self,
        token: str,
        *,
        preview: JwtPreview | None = None,
    ) -> TokenClaims:
        """Verify ``token`` and return its claims.

        Raises:
            HTTPException: 401 for any malformed, untrusted, or expired token
        """
        cfg = get_config()
        pv = preview or preview_jwt(token)

        provider = self._provider_for(pv, cfg)
        claims_options = self._claims_options(provider, cfg)
        key_set = await self._signing_keys(provider, pv.kid)

        logger.debug(
            f"Verifying JWT from {provider.issuer} for audiences {claims_options['aud']['values']}"
        )
        try:
            claims = jwt.decode(token, key_set, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            raise _unauthorized(f"JWT error: {exc}") from exc

        self._check_times(claims, cfg)

        subject = claims.get("sub")
        if not subject:
            raise _unauthorized("Missing sub claim")
        if not isinstance(subject, str) or len(subject) > MAX_SUBJECT_LENGTH:
            raise _unauthorized("Invalid sub claim")

        return create_token_claims(token=token, claims=dict(claims))
