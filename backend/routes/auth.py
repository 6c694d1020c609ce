import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from database import get_db
from config.constants import API_PREFIX, LOGIN_PROVIDERS, UNAUTHORIZED_ERROR_CODE
from models.auth import BrandSelect, Role, SessionCreate
from utils.identity import InvalidProviderToken, build_authorize_url, identity_from_provider_token
from utils.jwt import create_session_token
from utils.roles import resolve_role
from utils.security import get_current_session, require_role, require_session
from utils.serializers import serialize_seller
from utils.sessions import AuthEvent, AuthEventType, AuthSession, SessionStore, get_session_store

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


# ======================
# Helpers
# ======================

def session_view(session: Optional[AuthSession]) -> dict:
    if session is None:
        return {
            "authenticated": False,
            "loading": False,
            "user": None,
            "role": Role.NONE.value,
            "brands": [],
            "selected_brand": None,
        }

    state = session.state
    identity = state.identity

    return {
        "authenticated": identity is not None,
        "loading": state.loading,
        "user": {
            "email": identity.email,
            "name": identity.display_name,
            "provider": identity.provider,
        } if identity else None,
        "role": state.role.value,
        "brands": [serialize_seller(b) for b in state.owned_brands],
        "selected_brand": serialize_seller(state.selected_brand) if state.selected_brand else None,
    }


def login_options() -> list:
    return [
        {
            "provider": provider,
            "role": role,
            "url": f"{API_PREFIX}{router.prefix}/login/{provider}",
        }
        for provider, role in LOGIN_PROVIDERS.items()
    ]


def _identity_or_401(access_token: str):
    try:
        return identity_from_provider_token(access_token)
    except InvalidProviderToken as e:
        logger.info("PROVIDER_TOKEN_REJECTED reason=%s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid provider token",
        )


# ======================
# Login entry point
# ======================

@router.get("/login")
async def login(error: Optional[str] = None):
    return {
        "providers": login_options(),
        "error": error,
        "message": (
            "This account is not allowed to use this area. "
            "Sellers must be registered by an administrator; creators sign in with Kakao."
        ) if error == UNAUTHORIZED_ERROR_CODE else None,
    }


@router.get("/login/{provider}")
async def login_with_provider(provider: str):
    if provider not in LOGIN_PROVIDERS:
        raise HTTPException(status_code=404, detail="Unknown login provider")

    return RedirectResponse(
        url=build_authorize_url(provider),
        status_code=status.HTTP_303_SEE_OTHER,
    )


# ======================
# Session lifecycle
# ======================

@router.post("/session")
async def create_session(
    data: SessionCreate,
    db=Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    identity = _identity_or_401(data.access_token)

    session = store.open(partial(resolve_role, db))
    await session.dispatch(AuthEvent(type=AuthEventType.SIGNED_IN, identity=identity))

    logger.info(
        "SESSION_OPENED session=%s provider=%s role=%s",
        session.session_id, identity.provider, session.role.value,
    )

    return {
        "session_token": create_session_token(session.session_id),
        "token_type": "bearer",
        **session_view(session),
    }


@router.post("/session/refresh")
async def refresh_session(
    data: SessionCreate,
    session: AuthSession = Depends(require_session),
):
    identity = _identity_or_401(data.access_token)

    same_user = session.identity is not None and session.identity.subject == identity.subject
    event_type = AuthEventType.TOKEN_REFRESHED if same_user else AuthEventType.SIGNED_IN

    await session.dispatch(AuthEvent(type=event_type, identity=identity))
    return session_view(session)


@router.get("/me")
async def me(session: Optional[AuthSession] = Depends(get_current_session)):
    return session_view(session)


@router.put("/session/brand")
async def select_brand(
    data: BrandSelect,
    gate=Depends(require_role(Role.SELLER)),
):
    if not gate.allowed:
        return gate.response()

    session = gate.session
    if session.find_owned_brand(data.brand_code) is None:
        raise HTTPException(status_code=404, detail="Brand not found")

    session.select_brand(data.brand_code)
    return session_view(session)


@router.post("/signout")
async def signout(
    session: AuthSession = Depends(require_session),
    store: SessionStore = Depends(get_session_store),
):
    await store.close(session.session_id)
    logger.info("SESSION_CLOSED session=%s", session.session_id)
    return {"message": "Signed out"}
