"""
Identity backends — who is behind a bearer token.

- local:  accounts in our database, bcrypt passwords, our own JWTs
- remote: Supabase GoTrue; tokens are Supabase access tokens
- none:   no backend, every caller is anonymous (get_identity_backend returns None)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from . import models
from .auth import (
    AuthError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    revoke_refresh_tokens,
    store_refresh_token,
    verify_password,
)
from .config import settings
from .remote import RemoteError, SupabaseClient, get_remote_client
from .schemas import SessionUser, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: SessionUser
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class IdentityBackend:
    name = ""

    def login(self, email: str, password: str) -> AuthResult:
        raise NotImplementedError

    def register(self, email: str, password: str, profile: UserProfile) -> AuthResult:
        raise NotImplementedError

    def logout(self, access_token: str) -> None:
        raise NotImplementedError

    def resolve(self, access_token: str) -> SessionUser:
        """User behind an access token. Raises AuthError when the token is not valid."""
        raise NotImplementedError

    def refresh(self, refresh_token: str) -> AuthResult:
        raise NotImplementedError


def _require_credentials(email: str, password: str):
    if not email or not email.strip() or not password:
        raise AuthError("Email and password are required", status_code=422)


# --- Local accounts ---

class LocalIdentityBackend(IdentityBackend):
    name = "local"

    def __init__(self, db: Session):
        self.db = db

    def _to_session_user(self, user: models.User) -> SessionUser:
        return SessionUser(id=str(user.id), email=user.email, name=user.name, provider=self.name)

    def _issue(self, user: models.User) -> AuthResult:
        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token(user.id)
        store_refresh_token(self.db, user.id, refresh_token)
        return AuthResult(self._to_session_user(user), access_token, refresh_token)

    def login(self, email: str, password: str) -> AuthResult:
        _require_credentials(email, password)
        user = self.db.query(models.User).filter(models.User.email == email.strip()).first()
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password")
        return self._issue(user)

    def register(self, email: str, password: str, profile: UserProfile) -> AuthResult:
        _require_credentials(email, password)
        email = email.strip()
        existing = self.db.query(models.User).filter(models.User.email == email).first()
        if existing:
            raise AuthError("Account with this email already exists", status_code=409)

        user = models.User(
            email=email,
            password_hash=hash_password(password),
            **profile.model_dump(),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return self._issue(user)

    def logout(self, access_token: str) -> None:
        payload = decode_token(access_token)
        revoke_refresh_tokens(self.db, int(payload["sub"]))

    def resolve(self, access_token: str) -> SessionUser:
        payload = decode_token(access_token)
        if payload.get("type") != "access":
            raise AuthError("Invalid token type — use an access token")
        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid token payload")
        user = self.db.query(models.User).filter(models.User.id == int(user_id)).first()
        if not user:
            raise AuthError("User not found")
        return self._to_session_user(user)

    def refresh(self, refresh_token: str) -> AuthResult:
        payload = decode_token(refresh_token)
        if payload.get("type") != "refresh":
            raise AuthError("Invalid token type — expected refresh token")

        db_token = self.db.query(models.AuthToken).filter(
            models.AuthToken.token_hash == hash_token(refresh_token),
            models.AuthToken.token_type == "refresh",
        ).first()
        if not db_token:
            raise AuthError("Refresh token not found — it may have been revoked")
        if db_token.expires_at < datetime.utcnow():
            raise AuthError("Refresh token expired")

        user = self.db.query(models.User).filter(models.User.id == int(payload["sub"])).first()
        if not user:
            raise AuthError("User not found")
        # New access token only, the refresh token is reused
        return AuthResult(self._to_session_user(user), create_access_token(user.id), None)

    def profile(self, user_id: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == int(user_id)).first()


# --- Supabase GoTrue ---

def _remote_user(data: dict) -> SessionUser:
    metadata = data.get("user_metadata") or {}
    return SessionUser(
        id=str(data["id"]),
        email=data.get("email") or "",
        name=metadata.get("name") or metadata.get("nome"),
        provider="remote",
    )


def _upstream(e: RemoteError, action: str) -> AuthError:
    logger.warning("Remote %s failed: %s", action, e)
    if e.status in (400, 401, 403, 422):
        return AuthError("Invalid email or password" if action == "login" else str(e))
    return AuthError("Authentication service unavailable", status_code=502)


class RemoteIdentityBackend(IdentityBackend):
    name = "remote"

    def __init__(self, client: SupabaseClient):
        self.client = client

    def login(self, email: str, password: str) -> AuthResult:
        _require_credentials(email, password)
        try:
            session = self.client.sign_in_with_password(email.strip(), password)
        except RemoteError as e:
            raise _upstream(e, "login")
        return AuthResult(
            _remote_user(session["user"]),
            session.get("access_token"),
            session.get("refresh_token"),
        )

    def register(self, email: str, password: str, profile: UserProfile) -> AuthResult:
        _require_credentials(email, password)
        try:
            data = self.client.sign_up(email.strip(), password)
        except RemoteError as e:
            raise _upstream(e, "sign-up")

        # With email confirmation on, GoTrue answers with the bare user object
        user_data = data.get("user") or data
        user = _remote_user(user_data)

        row = {
            "id": user.id,
            "email": user.email,
            "nome": profile.name,
            "telefone": profile.phone,
            "endereco_obra": profile.site_address,
            "tipo_uso": profile.usage_type.value,
            "contribuinte_icms": profile.icms_taxpayer,
            "estado": profile.state.value if profile.state else None,
        }
        try:
            self.client.insert("users", row, access_token=data.get("access_token"))
        except RemoteError as e:
            # The auth user exists at this point; removing it needs admin rights
            logger.error("Auth user %s created but profile insert failed: %s", user.id, e)
            raise AuthError("Could not create user profile", status_code=502)

        user = user.model_copy(update={"name": profile.name})
        return AuthResult(user, data.get("access_token"), data.get("refresh_token"))

    def logout(self, access_token: str) -> None:
        try:
            self.client.sign_out(access_token)
        except RemoteError as e:
            raise _upstream(e, "sign-out")

    def resolve(self, access_token: str) -> SessionUser:
        try:
            data = self.client.get_user(access_token)
        except RemoteError as e:
            if e.status in (401, 403):
                raise AuthError("Invalid or expired token")
            raise _upstream(e, "session lookup")
        return _remote_user(data)

    def refresh(self, refresh_token: str) -> AuthResult:
        raise AuthError("Token refresh is handled by the Supabase client", status_code=400)


def get_identity_backend(db: Session) -> Optional[IdentityBackend]:
    """Backend selected by AUTH_BACKEND, or None when identity is disabled."""
    backend = settings.AUTH_BACKEND
    if backend == "local":
        return LocalIdentityBackend(db)
    if backend == "remote":
        client = get_remote_client()
        if client is None:
            logger.warning("AUTH_BACKEND=remote but Supabase is not configured — running anonymous")
            return None
        return RemoteIdentityBackend(client)
    if backend != "none":
        logger.warning("Unknown AUTH_BACKEND %r — running anonymous", backend)
    return None
