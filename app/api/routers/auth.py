# app/api/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import get_db
from app.core.security import (
    create_token_pair,
    get_current_user,
    load_active_user,
    verify_refresh_token,
)
from app.services.user_auth import user_auth_service
from app.models.user_auth import User
from app.schemas.user_auth import (
    UserRegister,
    UserOut,
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
)

router = APIRouter(prefix="/auth", tags=["User Authentication"])


# =====================================================================
# PUBLIC ENDPOINTS - No authentication required
# =====================================================================

@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user account"
)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.

    - **name**: Display name, also used to derive the public handle
    - **email**: Valid email address
    - **password**: 8-72 characters with at least one letter and one digit
    """
    return user_auth_service.register_user(db, user_data)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login to get access token"
)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and receive access and refresh tokens.
    """
    user = user_auth_service.authenticate_user(db, login_data)
    access_token, refresh_token = create_token_pair(user.id)

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserOut.model_validate(user)
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token"
)
def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    """
    Get a new token pair using a refresh token.
    """
    user_id = verify_refresh_token(refresh_data.refresh_token)
    user = load_active_user(db, user_id)
    access_token, new_refresh_token = create_token_pair(user.id)

    return TokenResponse(
        access_token=access_token,
        refresh_token=new_refresh_token,
        user=UserOut.model_validate(user)
    )


# =====================================================================
# USER ENDPOINTS - Authentication required
# =====================================================================

@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current user"
)
def get_me(
    current_user: User = Depends(get_current_user)
):
    """
    Get the authenticated user's account information.
    """
    return current_user
