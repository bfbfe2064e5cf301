"""
Authentication API endpoints for MiniMart Online
- Email/password sign-in through Supabase Auth
- Sign-out
- Current identity
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from minimart.api.deps import http_error
from minimart.core.auth import (
    Identity,
    IdentityProvider,
    get_bearer_token,
    get_current_user,
    get_identity_provider,
)
from minimart.core.errors import MiniMartError


router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


@router.post("/login")
def login(request: LoginRequest, provider: IdentityProvider = Depends(get_identity_provider)):
    """Sign in and return the access token with the signed-in identity"""
    try:
        session = provider.login(request.email, request.password)
    except MiniMartError as e:
        raise http_error(e)
    return {"status": "success", "data": session.model_dump()}


@router.post("/logout")
def logout(
    user: Identity = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider)
):
    try:
        provider.logout(token)
    except MiniMartError as e:
        raise http_error(e)
    return {"status": "success", "message": f"Signed out {user.email}"}


@router.get("/me")
def get_me(user: Identity = Depends(get_current_user)):
    return {"status": "success", "data": user.model_dump()}
