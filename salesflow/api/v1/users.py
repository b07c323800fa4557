"""
User administration API endpoints.

Every endpoint here requires a role allowed to manage users, including
listing.
"""

from fastapi import APIRouter, Response, status

from salesflow.api.deps import CurrentUser, DatabaseDep
from salesflow.schemas.auth import UserCreate, UserResponse, UserUpdate
from salesflow.services.auth.service import AuthService
from salesflow.services.authorization import Action, require_permission

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse], summary="List users")
def list_users(current_user: CurrentUser, database: DatabaseDep) -> list[UserResponse]:
    require_permission(current_user.role, Action.MANAGE_USERS, user_id=current_user.id)
    with database.session() as session:
        return [UserResponse.model_validate(u) for u in AuthService(session).list_users()]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
def create_user(request: UserCreate, current_user: CurrentUser, database: DatabaseDep) -> UserResponse:
    with database.session() as session:
        user = AuthService(session).create_user(current_user, request)
        return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update user")
def update_user(
    user_id: int,
    request: UserUpdate,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> UserResponse:
    with database.session() as session:
        user = AuthService(session).update_user(current_user, user_id, request)
        return UserResponse.model_validate(user)


@router.post("/{user_id}/deactivate", response_model=UserResponse, summary="Deactivate user")
def deactivate_user(user_id: int, current_user: CurrentUser, database: DatabaseDep) -> UserResponse:
    with database.session() as session:
        user = AuthService(session).deactivate_user(current_user, user_id)
        return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user")
def delete_user(user_id: int, current_user: CurrentUser, database: DatabaseDep) -> Response:
    with database.session() as session:
        AuthService(session).delete_user(current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
