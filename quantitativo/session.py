"""
Session context — the current user for one request, passed explicitly to
every handler that needs it.

State machine: unknown (loading) → authenticated(user) | anonymous.
init() resolves the bearer token once, teardown() drops the user and the
listeners. login/logout/register move the state and notify listeners.
"""

import logging
from typing import Callable, List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .auth import AuthError
from .database import get_db
from .identity import AuthResult, IdentityBackend, get_identity_backend
from .schemas import SessionUser, UserProfile

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
AUTHENTICATED = "authenticated"
ANONYMOUS = "anonymous"

Listener = Callable[[str, Optional[SessionUser]], None]

security = HTTPBearer(auto_error=False)


class SessionContext:

    def __init__(self, backend: Optional[IdentityBackend]):
        self.backend = backend
        self.state = UNKNOWN
        self.current_user: Optional[SessionUser] = None
        self.access_token: Optional[str] = None
        self._listeners: List[Listener] = []

    @property
    def loading(self) -> bool:
        return self.state == UNKNOWN

    @property
    def backend_configured(self) -> bool:
        return self.backend is not None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AUTHENTICATED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change listener. Returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: str, user: Optional[SessionUser], token: Optional[str] = None):
        self.state = state
        self.current_user = user
        self.access_token = token
        for listener in list(self._listeners):
            try:
                listener(state, user)
            except Exception as e:
                logger.warning("Session listener failed: %s", e)

    def init(self, access_token: Optional[str] = None) -> "SessionContext":
        """Resolve the token. Raises AuthError for a token the backend rejects."""
        if self.backend is None or not access_token:
            self._transition(ANONYMOUS, None)
            return self
        user = self.backend.resolve(access_token)
        self._transition(AUTHENTICATED, user, access_token)
        return self

    def teardown(self) -> None:
        self._listeners.clear()
        self.state = UNKNOWN
        self.current_user = None
        self.access_token = None

    # --- Identity operations ---

    def _require_backend(self) -> IdentityBackend:
        if self.backend is None:
            raise AuthError("Authentication is not configured", status_code=503)
        return self.backend

    def login(self, email: str, password: str) -> AuthResult:
        result = self._require_backend().login(email, password)
        self._transition(AUTHENTICATED, result.user, result.access_token)
        return result

    def register(self, email: str, password: str, profile: Optional[UserProfile] = None) -> AuthResult:
        result = self._require_backend().register(email, password, profile or UserProfile())
        if result.access_token:
            self._transition(AUTHENTICATED, result.user, result.access_token)
        return result

    def logout(self) -> None:
        backend = self._require_backend()
        if self.access_token:
            backend.logout(self.access_token)
        self._transition(ANONYMOUS, None)


def get_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
):
    """FastAPI dependency — one initialized SessionContext per request, torn down afterwards."""
    ctx = SessionContext(get_identity_backend(db))
    try:
        ctx.init(credentials.credentials if credentials else None)
    except AuthError as e:
        # Stale or rejected token: the caller continues anonymously and can still log in
        logger.info("Bearer token not accepted (%s): %s", e.status_code, e)
        ctx._transition(ANONYMOUS, None)
    try:
        yield ctx
    finally:
        ctx.teardown()


def require_session(ctx: SessionContext = Depends(get_session)) -> SessionContext:
    """
    Gate for protected endpoints.

    With an identity backend configured, anonymous callers get 401.
    Without one, everyone is let through anonymously.
    """
    if ctx.backend_configured and not ctx.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return ctx
