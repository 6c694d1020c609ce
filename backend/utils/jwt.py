from datetime import datetime, timedelta
from jose import jwt, JWTError
from config.env import (
    JWT_SECRET,
    JWT_ALGORITHM,
    SESSION_TOKEN_MINUTES,
    SUPABASE_JWT_SECRET,
    SUPABASE_JWT_AUDIENCE,
)

SESSION_TOKEN_TYPE = "session"

def _require_secret(value, name: str) -> str:
    secret = (value or "").strip()
    if not secret:
        raise RuntimeError(f"{name} is not configured")
    return secret

def create_session_token(session_id: str) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": session_id,
        "typ": SESSION_TOKEN_TYPE,
        "exp": now + timedelta(minutes=SESSION_TOKEN_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, _require_secret(JWT_SECRET, "JWT_SECRET"), algorithm=JWT_ALGORITHM)

def decode_session_token(token: str) -> dict:
    payload = jwt.decode(token, _require_secret(JWT_SECRET, "JWT_SECRET"), algorithms=[JWT_ALGORITHM])
    if payload.get("typ") != SESSION_TOKEN_TYPE:
        raise JWTError("Not a session token")
    return payload

# Access tokens minted by the identity provider after the OAuth redirect
def decode_provider_token(token: str) -> dict:
    return jwt.decode(
        token,
        _require_secret(SUPABASE_JWT_SECRET, "SUPABASE_JWT_SECRET"),
        algorithms=["HS256"],
        audience=SUPABASE_JWT_AUDIENCE,
    )
