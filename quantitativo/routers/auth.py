"""
Auth endpoints — register, login, logout, refresh, me, session.

The identity backend is picked by AUTH_BACKEND (local accounts or Supabase).
Every call goes through the request's SessionContext.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..auth import AuthError
from ..identity import AuthResult, LocalIdentityBackend
from ..schemas import UserProfile
from ..session import SessionContext, get_session

router = APIRouter(prefix="/auth", tags=["auth"])


# --- Request schemas ---

class RegisterRequest(UserProfile):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


def _auth_response(result: AuthResult) -> dict:
    return {
        "access_token": result.access_token,
        "refresh_token": result.refresh_token,
        "token_type": "bearer",
        "user_id": result.user.id,
        "user": result.user.model_dump(),
    }


def _profile_to_dict(user) -> dict:
    """Local profile fields — never expose password_hash."""
    return {
        "name": user.name,
        "phone": user.phone,
        "site_address": user.site_address,
        "usage_type": user.usage_type.value if user.usage_type else None,
        "icms_taxpayer": user.icms_taxpayer,
        "state": user.state.value if user.state else None,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


# --- Endpoints ---

@router.post("/register")
def register(request: RegisterRequest, ctx: SessionContext = Depends(get_session)):
    profile = UserProfile(**request.model_dump(exclude={"email", "password"}))
    try:
        result = ctx.register(request.email, request.password, profile)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _auth_response(result)


@router.post("/login")
def login(request: LoginRequest, ctx: SessionContext = Depends(get_session)):
    """Authenticate with email + password."""
    try:
        result = ctx.login(request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _auth_response(result)


@router.post("/logout")
def logout(ctx: SessionContext = Depends(get_session)):
    try:
        ctx.logout()
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"ok": True}


@router.post("/refresh")
def refresh(request: RefreshRequest, ctx: SessionContext = Depends(get_session)):
    """Exchange a valid refresh token for a new access token."""
    if ctx.backend is None:
        raise HTTPException(status_code=503, detail="Authentication is not configured")
    try:
        result = ctx.backend.refresh(request.refresh_token)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"access_token": result.access_token, "token_type": "bearer", "user_id": result.user.id}


@router.get("/session")
def session_state(ctx: SessionContext = Depends(get_session)):
    """Current session — never fails for anonymous callers."""
    return {
        "state": ctx.state,
        "loading": ctx.loading,
        "user": ctx.current_user.model_dump() if ctx.current_user else None,
        "backend": ctx.backend.name if ctx.backend else None,
    }


@router.get("/me")
def me(ctx: SessionContext = Depends(get_session)):
    """The signed-in user, with the local profile when accounts are local."""
    if not ctx.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    data = ctx.current_user.model_dump()
    profile: Optional[dict] = None
    if isinstance(ctx.backend, LocalIdentityBackend):
        user = ctx.backend.profile(ctx.current_user.id)
        if user:
            profile = _profile_to_dict(user)
    data["profile"] = profile
    return data
