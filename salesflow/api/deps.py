"""
FastAPI dependencies for authentication and application state.

The Database and Settings objects are created by the application factory
and stored on ``app.state``; dependencies read them from there. Endpoints
open their unit of work with ``database.session()`` in the endpoint body.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from salesflow.core.config import Settings
from salesflow.core.logging import get_logger, set_user_id
from salesflow.core.security import TokenError, decode_access_token
from salesflow.database.connection import Database
from salesflow.database.models.user import User

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    database: Annotated[Database, Depends(get_database)],
) -> User:
    """
    Validate JWT token and retrieve current authenticated user.

    The user is loaded in a short unit of work of its own and returned
    detached.

    Raises:
        HTTPException: 401 if token is invalid, expired, or user not found;
            403 if the user is inactive
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        logger.warning("Authentication failed: No credentials provided")
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials, settings)
        user_id = int(payload.get("sub", ""))
    except TokenError as e:
        logger.warning("Authentication failed: JWT validation error", code=e.code)
        raise credentials_exception
    except ValueError:
        logger.warning("Authentication failed: Invalid user ID format")
        raise credentials_exception

    with database.session() as session:
        user = session.get(User, user_id)

    if user is None:
        logger.warning("Authentication failed: User not found", user_id=user_id)
        raise credentials_exception

    if not user.is_active:
        logger.warning("Authentication failed: User account is inactive", user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account",
        )

    set_user_id(str(user.id))
    return user


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
CurrentUser = Annotated[User, Depends(get_current_user)]
