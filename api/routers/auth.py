"""
Auth API Endpoints.

Login for dashboard users; returns a bearer token for the other endpoints.
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_store
from api.models import LoginRequest, LoginResponse, UserResponse
from api.settings import Settings, get_settings
from repositories.store import EntityStore
from services.auth_service import AuthenticationError, authenticate_user, create_access_token

router = APIRouter()


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    summary="Log In",
    description="Exchange email and password for a bearer token (valid for 24 hours by default)."
)
def login(
    request: LoginRequest,
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate a dashboard user.

    **Example request:**
    ```json
    {"email": "admin@company.com", "password": "admin123"}
    ```
    """
    try:
        user = authenticate_user(store, request.email, request.password)
    except AuthenticationError:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(
        user,
        settings.jwt_secret,
        expires_delta=timedelta(hours=settings.jwt_expire_hours),
    )

    return LoginResponse(
        token=token,
        user=UserResponse(
            id=user.user_id,
            email=user.email,
            name=user.name,
            role=user.role.value,
        ),
    )
