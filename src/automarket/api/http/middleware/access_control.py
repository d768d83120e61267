"""Route-level access rules and bearer-token identity resolution.

Every request is matched against ``ACCESS_RULES`` before any token work is
done. Public routes never touch the identity provider. For everything else
the bearer token is verified; an invalid or missing token leaves the request
anonymous, and anonymous requests to authenticated routes are answered with
401 here, before reaching a handler. Paths no router defines are passed
through untouched so they get the router's 404.
"""

import re
from dataclasses import dataclass, field

from fastapi import HTTPException, Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from src.automarket.api.http.error_handlers import error_response
from src.automarket.core.models.claims import AuthenticatedPrincipal
from src.automarket.core.services.jwt.jwt_verify import JwtVerificationService

_PARAM = re.compile(r"\{[^/}]+\}")


@dataclass(frozen=True)
class AccessRule:
    methods: frozenset[str]
    pattern: str
    public: bool
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts = _PARAM.split(self.pattern)
        body = "[^/]+".join(re.escape(p) for p in parts)
        object.__setattr__(self, "_regex", re.compile(f"^{body}/?$"))

    def matches(self, method: str, path: str) -> bool:
        return method in self.methods and self._regex.match(path) is not None


def _rule(methods: str, pattern: str, public: bool) -> AccessRule:
    return AccessRule(frozenset(methods.split()), pattern, public)


# First match wins; unmatched routes require authentication
ACCESS_RULES: tuple[AccessRule, ...] = (
    _rule("GET", "/api/health", public=True),
    _rule("GET", "/api/health/ready", public=True),
    _rule("GET", "/docs", public=True),
    _rule("GET", "/redoc", public=True),
    _rule("GET", "/openapi.json", public=True),
    # Literal /cars/my paths before the /cars/{id} wildcard
    _rule("GET", "/cars/my", public=False),
    _rule("GET", "/cars/my/status/{status}", public=False),
    _rule("GET", "/cars", public=True),
    _rule("GET", "/cars/search", public=True),
    _rule("GET", "/cars/brand/{brand}", public=True),
    _rule("GET", "/cars/{id}/similar", public=True),
    _rule("GET", "/cars/{id}", public=True),
    _rule("POST", "/cars", public=False),
    _rule("PUT DELETE", "/cars/{id}", public=False),
    _rule("PATCH", "/cars/{id}/status", public=False),
    _rule("GET", "/api/users/sellers", public=True),
    _rule("GET", "/api/users/sellers/search", public=True),
    _rule("POST", "/api/users/profile", public=False),
    _rule("GET PUT DELETE", "/api/users/me", public=False),
    _rule("PUT", "/api/users/seller-info", public=False),
)


def is_public(method: str, path: str, rules: tuple[AccessRule, ...] = ACCESS_RULES) -> bool:
    """Classify a request; CORS preflights are always public."""
    if method == "OPTIONS":
        return True
    for rule in rules:
        if rule.matches(method, path):
            return rule.public
    return False


def bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def route_defined(request: Request) -> bool:
    """True when some route matches the path, whatever the method."""
    return any(
        route.matches(request.scope)[0] != Match.NONE for route in request.app.router.routes
    )


async def resolve_principal(
    request: Request, verifier: JwtVerificationService
) -> AuthenticatedPrincipal | None:
    token = bearer_token(request)
    if token is None:
        return None
    try:
        claims = await verifier.verify_jwt(token)
    except HTTPException as exc:
        logger.warning(f"Rejected bearer token: {exc.detail}")
        return None
    return claims.to_principal()


class AccessControlMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.principal = None

        if is_public(request.method, request.url.path) or not route_defined(request):
            return await call_next(request)

        verifier: JwtVerificationService = (
            request.app.state.app_dependencies.jwt_verify_service
        )
        principal = await resolve_principal(request, verifier)
        if principal is None:
            detail = (
                "Invalid or expired token"
                if bearer_token(request)
                else "Authentication required"
            )
            return error_response(request, 401, detail)

        request.state.principal = principal
        with logger.contextualize(subject=principal.subject):
            return await call_next(request)
