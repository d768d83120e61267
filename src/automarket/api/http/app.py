"""FastAPI application factory and setup."""

import asyncio
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.automarket.api.http.app_data import ApplicationDependencies, build_dependencies
from src.automarket.api.http.error_handlers import setup_exception_handlers
from src.automarket.api.http.middleware.access_control import AccessControlMiddleware
from src.automarket.api.http.routers import cars, health, users
from src.automarket.api.utils.app_startup import configure_logging
from src.automarket.runtime.config.config_data import ConfigData
from src.automarket.runtime.context import get_config

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), camera=(), microphone=()",
}
_HSTS = "max-age=31536000; includeSubDomains; preload"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if get_config().app.environment == "production":
            response.headers.setdefault("Strict-Transport-Security", _HSTS)
        return response


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def log_requests(request: Request, call_next):
    """Correlate every log line of a request and record its outcome."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - started) * 1000, 1)

    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=_client_ip(request),
    ):
        logger.debug("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.bind(
                status_code=500, duration_ms=elapsed_ms(), error_type=type(exc).__name__
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        logger.bind(status_code=response.status_code, duration_ms=elapsed_ms()).info(
            f"{request.method} {request.url.path} -> {response.status_code}"
        )
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def _warm_jwks(dependencies: ApplicationDependencies, config: ConfigData) -> None:
    """Fetch every provider's signing keys once so broken issuers show up at boot."""
    providers = list(config.oidc.providers.values())
    results = await asyncio.gather(
        *(dependencies.jwks_service.fetch_jwks(p) for p in providers),
        return_exceptions=True,
    )
    failed = [
        p.issuer for p, result in zip(providers, results, strict=True)
        if isinstance(result, Exception)
    ]
    for issuer in failed:
        logger.warning(f"Could not load signing keys for issuer {issuer}")
    if failed and config.app.environment == "production":
        raise RuntimeError(f"JWKS unavailable for issuers: {failed}")


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the API.

    Args:
        dependencies: Pre-built services (tests inject fakes here). When omitted
            they are built from the active configuration at startup.
    """
    config = get_config()
    configure_logging(config)
    is_production = config.app.environment == "production"

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.app_dependencies is None:
            app.state.app_dependencies = build_dependencies(get_config())
        await _warm_jwks(app.state.app_dependencies, get_config())
        logger.info(
            f"Starting {config.app.name} {config.app.version} "
            f"({config.app.environment}, {config.store.backend} store)"
        )
        try:
            yield
        finally:
            logger.info("Shutting down application")

    app = FastAPI(
        title=config.app.name,
        version=config.app.version,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.app_dependencies = dependencies
    setup_exception_handlers(app)

    # Last added runs first: logging, CORS, headers, then access control
    app.add_middleware(AccessControlMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)

    for router in (health.router, cars.router, users.router):
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
