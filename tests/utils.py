import base64
import time
from typing import Any

from authlib.jose import jwt


def oct_jwk(key: bytes, kid: str) -> dict[str, str]:
    return {
        "kty": "oct",
        "k": base64.urlsafe_b64encode(key).rstrip(b"=").decode("ascii"),
        "alg": "HS256",
        "kid": kid,
    }


def encode_token(
    claims: dict[str, Any],
    secret: bytes,
    kid: str | None,
    alg: str = "HS256",
) -> str:
    header: dict[str, Any] = {"alg": alg, "typ": "JWT"}
    if kid is not None:
        header["kid"] = kid
    return jwt.encode(header, claims, secret).decode("ascii")


def id_token_claims(
    issuer: str,
    audience: str,
    subject: str,
    email: str | None = None,
    lifetime: int = 3600,
    **extra: Any,
) -> dict[str, Any]:
    now = int(time.time())
    claims: dict[str, Any] = {
        "iss": issuer,
        "aud": audience,
        "sub": subject,
        "iat": now,
        "exp": now + lifetime,
        "email_verified": True,
        **extra,
    }
    if email is not None:
        claims["email"] = email
    return claims


def car_payload(**overrides: Any) -> dict[str, Any]:
    """A valid listing body in the API's camelCase form."""
    payload: dict[str, Any] = {
        "brand": "BMW",
        "model": "320d",
        "year": 2019,
        "price": 25000,
        "mileage": 48000,
        "fuelType": "Diesel",
        "transmission": "Automatic",
        "condition": "Used",
        "color": "Black",
        "doors": 4,
        "seats": 5,
        "description": "Well maintained sedan with full service history and new tyres fitted.",
        "features": ["Navigation", "Heated seats"],
        "location": "Berlin",
    }
    payload.update(overrides)
    return payload


def car_fields(**overrides: Any) -> dict[str, Any]:
    """The same listing as ``car_payload`` in snake_case service form."""
    fields: dict[str, Any] = {
        "brand": "BMW",
        "model": "320d",
        "year": 2019,
        "price": 25000,
        "mileage": 48000,
        "fuel_type": "Diesel",
        "transmission": "Automatic",
        "condition": "Used",
        "description": "Well maintained sedan with full service history and new tyres fitted.",
    }
    fields.update(overrides)
    return fields
