import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from cachetools import TLRUCache
from fastapi import HTTPException
from loguru import logger

from src.automarket.runtime.config.config_data import OIDCProviderConfig

_MAX_AGE = re.compile(r"max-age=(\d+)")


class JWKSCache(ABC):
    @abstractmethod
    def get_jwks(self, jwks_url: str) -> dict[str, Any]:
        """
        Get the cached JWKS for the given URL.

        Args:
            jwks_url: The provider's JWKS endpoint

        Returns:
            JWKS dictionary, empty when nothing is cached
        """
        raise NotImplementedError

    @abstractmethod
    def set_jwks(self, jwks_url: str, jwks: dict[str, Any], ttl: float | None = None) -> None:
        """Store the JWKS fetched from ``jwks_url``, optionally for less than the default TTL."""
        raise NotImplementedError

    @abstractmethod
    def clear_jwks_cache(self) -> None:
        """Clear the JWKS cache."""
        raise NotImplementedError


@dataclass(frozen=True)
class _CachedKeys:
    jwks: dict[str, Any]
    ttl: float


class JWKSCacheInMemory(JWKSCache):
    """Per-process key cache; each entry lives for its own TTL."""

    def __init__(self, ttl: float = 3600, maxsize: int = 10) -> None:
        self._default_ttl = ttl
        self._cache = TLRUCache(
            maxsize=maxsize, ttu=lambda _url, entry, now: now + entry.ttl
        )

    def get_jwks(self, jwks_url: str) -> dict[str, Any]:
        entry = self._cache.get(jwks_url)
        return entry.jwks if entry else {}

    def set_jwks(self, jwks_url: str, jwks: dict[str, Any], ttl: float | None = None) -> None:
        lifetime = self._default_ttl if ttl is None else min(ttl, self._default_ttl)
        self._cache[jwks_url] = _CachedKeys(jwks, lifetime)

    def clear_jwks_cache(self) -> None:
        self._cache.clear()


def cache_max_age(headers: httpx.Headers | dict[str, str]) -> int | None:
    """Seconds the provider allows its key set to be cached, if it says."""
    match = _MAX_AGE.search(headers.get("cache-control") or headers.get("Cache-Control") or "")
    return int(match.group(1)) if match else None


class JwksService:
    """Fetches provider signing keys, honouring the provider's Cache-Control."""

    def __init__(self, cache: JWKSCache, timeout: float = 5.0) -> None:
        self._cache = cache
        self._timeout = timeout

    async def fetch_jwks(self, provider: OIDCProviderConfig) -> dict[str, Any]:
        jwks_url = provider.jwks_uri
        if not jwks_url:
            raise HTTPException(status_code=401, detail="Issuer has no JWKS URI configured")

        jwks = self._cache.get_jwks(jwks_url)
        if jwks:
            return jwks

        logger.debug(f"Fetching JWKS from {jwks_url}")
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(jwks_url)
                resp.raise_for_status()
                jwks = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Failed to fetch JWKS from {jwks_url}: {exc}")
            raise HTTPException(status_code=401, detail="Signing keys unavailable") from exc

        self._cache.set_jwks(jwks_url, jwks, ttl=cache_max_age(resp.headers))
        return jwks

    def clear(self) -> None:
        self._cache.clear_jwks_cache()
