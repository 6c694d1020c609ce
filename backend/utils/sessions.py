import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from models.auth import Identity, Role
from models.seller import SellerRecord
from utils.roles import RoleResolution

logger = logging.getLogger(__name__)

Resolver = Callable[[Optional[Identity]], Awaitable[RoleResolution]]
Listener = Callable[["AuthSession"], None]


# ============================================================
# AUTH EVENTS (identity provider → session)
# ============================================================

class AuthEventType(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    SIGNED_OUT = "SIGNED_OUT"


class AuthEvent(BaseModel):
    type: AuthEventType
    identity: Optional[Identity] = None


class AuthState(BaseModel):
    """Immutable snapshot of a session, the only input of the access gate."""

    model_config = ConfigDict(frozen=True)

    identity: Optional[Identity] = None
    role: Role = Role.NONE
    owned_brands: List[SellerRecord] = []
    selected_brand: Optional[SellerRecord] = None
    loading: bool = False

    @classmethod
    def anonymous(cls) -> "AuthState":
        return cls()


# ============================================================
# SESSION
# ============================================================

class AuthSession:
    """
    Per-browser auth state.

    Every auth event bumps ``generation``; a role resolution is applied only if
    no newer event arrived while it was in flight, so the last event wins.
    """

    def __init__(self, session_id: str, resolver: Resolver):
        self.session_id = session_id
        self._resolver = resolver
        self._generation = 0
        self._listeners: List[Listener] = []

        self.identity: Optional[Identity] = None
        self.role = Role.NONE
        self.owned_brands: List[SellerRecord] = []
        self.selected_brand: Optional[SellerRecord] = None
        self.current_seller: Optional[SellerRecord] = None
        self.loading = True
        self.closed = False
        self.last_seen_at = datetime.utcnow()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> AuthState:
        return AuthState(
            identity=self.identity,
            role=self.role,
            owned_brands=list(self.owned_brands),
            selected_brand=self.selected_brand,
            loading=self.loading,
        )

    def touch(self):
        self.last_seen_at = datetime.utcnow()

    # -------------------------
    # listeners
    # -------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("SESSION_LISTENER_ERROR session=%s", self.session_id)

    # -------------------------
    # event handling
    # -------------------------

    async def dispatch(self, event: AuthEvent) -> bool:
        """
        Apply an auth event. Returns False when the resulting resolution was
        superseded by a newer event and therefore discarded.
        """
        self._generation += 1
        generation = self._generation

        if event.type == AuthEventType.SIGNED_OUT or event.identity is None:
            self.identity = None
            self._apply(RoleResolution())
            self.loading = False
            if event.type == AuthEventType.SIGNED_OUT:
                self.closed = True
            self._notify()
            return True

        self.identity = event.identity
        self._apply(RoleResolution())
        self.loading = True
        self._notify()

        resolution = await self._resolver(event.identity)

        if generation != self._generation:
            logger.info(
                "STALE_ROLE_RESOLUTION_DISCARDED session=%s generation=%s current=%s",
                self.session_id, generation, self._generation,
            )
            return False

        self._apply(resolution)
        self.loading = False
        self._notify()
        return True

    def _apply(self, resolution: RoleResolution):
        self.role = resolution.role
        self.owned_brands = list(resolution.owned_brands)
        self.selected_brand = resolution.default_brand
        self.current_seller = resolution.default_brand

    # -------------------------
    # brand selection
    # -------------------------

    def find_owned_brand(self, brand_code: str) -> Optional[SellerRecord]:
        for brand in self.owned_brands:
            if brand.brand_code == brand_code:
                return brand
        return None

    def select_brand(self, brand_code: str) -> SellerRecord:
        brand = self.find_owned_brand(brand_code)
        if brand is None:
            raise ValueError(f"Brand {brand_code!r} is not owned by this session")

        self.selected_brand = brand
        self.current_seller = brand
        self._notify()
        return brand


# ============================================================
# SESSION STORE (process local)
# ============================================================

class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, AuthSession] = {}

    def __len__(self):
        return len(self._sessions)

    def open(self, resolver: Resolver) -> AuthSession:
        session = AuthSession(uuid.uuid4().hex, resolver)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[AuthSession]:
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch()
        return session

    async def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        await session.dispatch(AuthEvent(type=AuthEventType.SIGNED_OUT))
        return True

    async def sweep(self, idle_before: datetime) -> int:
        expired = [
            sid for sid, s in self._sessions.items()
            if s.last_seen_at < idle_before
        ]

        for sid in expired:
            await self.close(sid)

        return len(expired)


session_store = SessionStore()

def get_session_store() -> SessionStore:
    return session_store
