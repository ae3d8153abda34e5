"""
Authentication endpoints.

POST /auth/register                - create an unverified account, mail the link
POST /auth/login                   - access + refresh credentials
GET  /auth/verify-email?token=     - activate the account
POST /auth/request-password-reset  - always the same reply
POST /auth/reset-password          - set a new password with a reset token
POST /auth/refresh                 - rotate the refresh token
POST /auth/logout                  - revoke one or every refresh token
GET  /auth/me                      - current user
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from dependencies import get_auth_service, get_current_user
from schemas.dto.requests.auth import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    RequestPasswordResetRequest,
    ResetPasswordRequest,
)
from schemas.dto.responses.auth import LoginResponse, TokenPairResponse, UserResponse
from schemas.dto.responses.common import ErrorResponse, MessageResponse
from schemas.models.user import UserDoc
from services.auth_service import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)


@router.post("/register", status_code=201, response_model=MessageResponse)
async def register(
    body: RegisterRequest, auth: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    message = await auth.register(body.email, body.pseudo, body.password, body.categorie)
    return MessageResponse(message=message)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest, auth: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    result = await auth.login(body.email, body.password)
    return LoginResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        user=UserResponse.from_doc(result.user),
    )


@router.get("/verify-email", response_model=MessageResponse)
async def verify_email(
    token: str = Query(..., min_length=1),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    return MessageResponse(message=await auth.verify_email(token))


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(
    body: RequestPasswordResetRequest, auth: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    return MessageResponse(message=await auth.request_password_reset(body.email))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    return MessageResponse(message=await auth.reset_password(body.token, body.password))


@router.post("/refresh", response_model=TokenPairResponse)
async def refresh(
    body: RefreshRequest, auth: AuthService = Depends(get_auth_service)
) -> TokenPairResponse:
    pair = await auth.refresh(body.refresh_token)
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    body: LogoutRequest, auth: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    return MessageResponse(message=await auth.logout(body.refresh_token, body.logout_all))


@router.get("/me", response_model=UserResponse)
async def me(user: UserDoc = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_doc(user)
