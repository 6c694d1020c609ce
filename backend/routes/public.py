from typing import Optional

from fastapi import APIRouter, Depends

from config.constants import API_PREFIX, SELLER_OAUTH_PROVIDER
from models.auth import Role
from routes.auth import login_options, session_view
from utils.security import get_current_session
from utils.sessions import AuthSession

router = APIRouter(tags=["Public"])

# ============================================================
# LANDING
# ============================================================

ROLE_LINKS = {
    Role.SELLER: [
        {"name": "register_product", "url": f"{API_PREFIX}/seller/products"},
        {"name": "applications", "url": f"{API_PREFIX}/seller/applications"},
    ],
    Role.CREATOR: [
        {"name": "catalog", "url": f"{API_PREFIX}/creator/catalog"},
        {"name": "applications", "url": f"{API_PREFIX}/creator/applications"},
    ],
}


@router.get("/home")
async def home(session: Optional[AuthSession] = Depends(get_current_session)):
    view = session_view(session)

    if view["loading"]:
        return {**view, "links": [], "login": [], "notice": None}

    role = Role(view["role"])
    notice = None

    if view["authenticated"] and role == Role.NONE and view["user"]["provider"] == SELLER_OAUTH_PROVIDER:
        notice = (
            "This Google account is not a registered seller. "
            "Contact an administrator, or sign out and use Kakao to apply as a creator."
        )

    return {
        **view,
        "links": ROLE_LINKS.get(role, []),
        "login": [] if role != Role.NONE else login_options(),
        "notice": notice,
    }
