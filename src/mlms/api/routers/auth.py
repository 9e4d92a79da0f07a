"""Authentication endpoints: register and log in."""

import logging

from fastapi import APIRouter, Depends, status

from mlms.api.dependencies import get_auth_service
from mlms.api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from mlms.application.services import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create an account.

    400 on missing fields, a bad email or an over-long password; 409 when the
    email is already registered.
    """
    user = await auth_service.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        subscription_plan=body.subscription_plan,
    )
    return RegisterResponse(message="User registered successfully", user_id=user.id)


# Hey future me - wrong email and wrong password both come back as the SAME 401 message.
# Don't add a "user not found" branch here, it turns login into an email-exists oracle.
@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange email + password for a bearer token."""
    token, user = await auth_service.login(body.email, body.password)
    return LoginResponse(
        token=token,
        user=UserInfo(id=user.id, name=user.name, email=user.email, role=user.role),
    )
