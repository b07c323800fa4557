"""
Authentication API endpoints.

Login exchanges a username and password for a bearer token carrying the
user id; ``/auth/me`` returns the user the token belongs to.
"""

from fastapi import APIRouter, HTTPException, status

from salesflow.api.deps import CurrentUser, DatabaseDep, SettingsDep
from salesflow.core.logging import get_logger
from salesflow.core.security import create_access_token
from salesflow.schemas.auth import LoginRequest, TokenResponse, UserResponse
from salesflow.services.auth.service import AuthService

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="User login",
    description="Authenticate an active user and return an access token",
)
def login(credentials: LoginRequest, database: DatabaseDep, settings: SettingsDep) -> TokenResponse:
    """
    Raises:
        HTTPException: 401 if the credentials do not match an active user
    """
    with database.session() as session:
        user = AuthService(session).authenticate(credentials.username, credentials.password)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        user_id, role = user.id, user.role.value

    token = create_access_token(str(user_id), settings, extra_claims={"role": role})
    logger.info("User logged in", user_id=user_id, role=role)
    return TokenResponse(
        access_token=token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


@router.get("/me", response_model=UserResponse, summary="Current user")
def read_current_user(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
