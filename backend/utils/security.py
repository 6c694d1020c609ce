import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from config.env import ADMIN_API_KEY
from models.auth import Role
from utils.gate import GateDecision, GateOutcome, guard
from utils.jwt import decode_session_token
from utils.sessions import AuthSession, AuthState, SessionStore, get_session_store

security = HTTPBearer(auto_error=False)


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: SessionStore = Depends(get_session_store),
) -> Optional[AuthSession]:
    # Missing, invalid, expired or forgotten sessions all mean "no identity"
    if credentials is None:
        return None

    try:
        payload = decode_session_token(credentials.credentials)
    except JWTError:
        return None

    session_id = payload.get("sub")
    if not session_id:
        return None

    return store.get(session_id)


async def require_session(
    session: Optional[AuthSession] = Depends(get_current_session),
) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return session


# -------------------------------
# Gate → HTTP
# -------------------------------

def gate_response(decision: GateDecision) -> Response:
    if decision.outcome == GateOutcome.PENDING:
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content={"status": "authenticating"},
            headers={"Retry-After": "1"},
        )

    if decision.outcome == GateOutcome.REDIRECT:
        return RedirectResponse(
            url=decision.target,
            status_code=status.HTTP_303_SEE_OTHER,
            headers={"X-Redirect-Reason": decision.reason.value},
        )

    raise ValueError("Rendered decisions have no redirect response")


class GatedSession:
    def __init__(self, decision: GateDecision, session: Optional[AuthSession]):
        self.decision = decision
        self.session = session

    @property
    def allowed(self) -> bool:
        return self.decision.allowed

    def response(self) -> Response:
        return gate_response(self.decision)


def require_role(required_role: Role):
    async def checker(session: Optional[AuthSession] = Depends(get_current_session)) -> GatedSession:
        state = session.state if session is not None else AuthState.anonymous()
        return GatedSession(guard(required_role, state), session)

    return checker


# -------------------------------
# Admin key
# -------------------------------

async def require_admin(x_admin_key: Optional[str] = Header(None)):
    expected = (ADMIN_API_KEY or "").strip()
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API is not configured",
        )

    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
