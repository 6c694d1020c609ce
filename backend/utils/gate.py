from enum import Enum
from typing import Callable, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from config.constants import UNAUTHORIZED_ERROR_CODE
from config.env import LOGIN_PATH, LANDING_PATH
from models.auth import Role
from utils.sessions import AuthSession, AuthState


class GateOutcome(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    PENDING = "pending"


class RedirectReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    WRONG_ROLE = "wrong_role"


class GateDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: GateOutcome
    target: Optional[str] = None
    reason: Optional[RedirectReason] = None

    @classmethod
    def render(cls) -> "GateDecision":
        return cls(outcome=GateOutcome.RENDER)

    @classmethod
    def pending(cls) -> "GateDecision":
        return cls(outcome=GateOutcome.PENDING)

    @classmethod
    def redirect(cls, target: str, reason: RedirectReason) -> "GateDecision":
        return cls(outcome=GateOutcome.REDIRECT, target=target, reason=reason)

    @property
    def allowed(self) -> bool:
        return self.outcome == GateOutcome.RENDER


def unauthorized_login_url() -> str:
    separator = "&" if "?" in LOGIN_PATH else "?"
    return f"{LOGIN_PATH}{separator}{urlencode({'error': UNAUTHORIZED_ERROR_CODE})}"


def guard(required_role: Role, state: AuthState) -> GateDecision:
    if required_role == Role.NONE:
        raise ValueError("A gated view must require seller or creator")

    if state.loading:
        return GateDecision.pending()

    if state.identity is None:
        return GateDecision.redirect(LOGIN_PATH, RedirectReason.UNAUTHENTICATED)

    if state.role == required_role:
        return GateDecision.render()

    if state.role == Role.NONE:
        return GateDecision.redirect(unauthorized_login_url(), RedirectReason.UNAUTHORIZED)

    # authenticated, just in the other area
    return GateDecision.redirect(LANDING_PATH, RedirectReason.WRONG_ROLE)


class AccessGate:
    """Keeps a gate decision current for as long as it is mounted on a session."""

    def __init__(self, required_role: Role):
        self.required_role = required_role
        self.decision = GateDecision.pending()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self, session: AuthSession) -> GateDecision:
        self.unmount()
        self._unsubscribe = session.subscribe(self._on_change)
        self._on_change(session)
        return self.decision

    def unmount(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, session: AuthSession):
        self.decision = guard(self.required_role, session.state)
