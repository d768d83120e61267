"""Health check endpoints router for monitoring service availability."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from loguru import logger
from starlette.responses import JSONResponse

from src.automarket.api.http.app_data import ApplicationDependencies
from src.automarket.core.errors import StoreError
from src.automarket.runtime.context import get_config

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
def health() -> dict[str, str]:
    """Liveness probe: answers as long as the process is serving requests."""
    config = get_config()
    return {
        "status": "UP",
        "service": config.app.name,
        "version": config.app.version,
        "timestamp": datetime.now(UTC).isoformat(),
        "message": "Auto marketplace backend is running",
    }


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: checks the document store and the identity providers' JWKS.

    Returns 200 when ready, 503 otherwise. JWKS failures only count against
    readiness in production.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        store_healthy = app_deps.document_store.health_check()
    except StoreError as e:
        logger.warning(f"Document store readiness check failed: {e}")
        store_healthy = False
    checks["document_store"] = {
        "status": "healthy" if store_healthy else "unhealthy",
        "backend": config.store.backend,
    }
    all_healthy = all_healthy and store_healthy

    oidc_checks = {}
    for provider_name, provider_config in config.oidc.providers.items():
        try:
            await app_deps.jwks_service.fetch_jwks(provider_config)
            oidc_checks[provider_name] = {"status": "healthy", "issuer": provider_config.issuer}
        except HTTPException as e:
            oidc_checks[provider_name] = {
                "status": "unhealthy",
                "issuer": provider_config.issuer,
                "error": e.detail,
            }
            if config.app.environment == "production":
                all_healthy = False
    if oidc_checks:
        checks["oidc_providers"] = oidc_checks

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }
    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
