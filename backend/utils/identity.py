"""
Identity provider adapter.

The OAuth dance itself (Google for sellers, Kakao for creators) happens between
the browser and Supabase Auth. This module only builds the authorize URLs and
turns the access token handed back on the callback into an ``Identity``.
"""

from urllib.parse import urlencode

from jose import JWTError

from config.constants import LOGIN_PROVIDERS
from config.env import SUPABASE_URL, AUTH_CALLBACK_URL
from models.auth import Identity
from utils.jwt import decode_provider_token


class InvalidProviderToken(Exception):
    pass


def build_authorize_url(provider: str, redirect_to: str | None = None) -> str:
    if provider not in LOGIN_PROVIDERS:
        raise ValueError(f"Unsupported provider: {provider}")

    query = urlencode({
        "provider": provider,
        "redirect_to": redirect_to or AUTH_CALLBACK_URL,
    })
    return f"{SUPABASE_URL}/auth/v1/authorize?{query}"


def identity_from_claims(claims: dict) -> Identity:
    app_metadata = claims.get("app_metadata") or {}
    user_metadata = claims.get("user_metadata") or {}

    return Identity(
        subject=str(claims["sub"]),
        provider=app_metadata.get("provider"),
        email=claims.get("email") or None,
        name=user_metadata.get("name") or user_metadata.get("full_name"),
    )


def identity_from_provider_token(token: str) -> Identity:
    try:
        claims = decode_provider_token(token)
    except JWTError as e:
        raise InvalidProviderToken(str(e)) from e

    if not claims.get("sub"):
        raise InvalidProviderToken("Token has no subject")

    return identity_from_claims(claims)
