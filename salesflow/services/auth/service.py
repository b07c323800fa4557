"""
Authentication service implementation.

This module provides authentication against stored password hashes and the
user administration operations: create, update, deactivate, delete and
list. Administration is restricted to roles allowed to manage users.
"""

from typing import Iterable, Optional, Union

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.core.security import hash_password, verify_password
from salesflow.database.base import utc_now
from salesflow.database.models.order import Order
from salesflow.database.models.user import User, UserRole
from salesflow.schemas.auth import UserCreate, UserUpdate
from salesflow.services import authorization
from salesflow.services.authorization import Action, require_permission
from salesflow.services.catalog.vehicles import VehicleService
from salesflow.services.errors import ConflictError, InvalidInputError, NotFoundError

logger = get_logger(__name__)


class AuthService:
    """
    Authentication service for user management and authentication.
    """

    def __init__(self, session: Session):
        """
        Initialize authentication service.

        Args:
            session: Session of the current unit of work
        """
        self.session = session
        self.logger = logger.bind(service="auth")

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate a user by username and password.

        Only active users can authenticate. A successful login stamps
        ``last_login``.

        Returns:
            The authenticated user, or None when the credentials do not
            match an active user
        """
        user = self.get_by_username(username)
        if user is None or not user.is_active:
            self.logger.warning("Login failed: unknown or inactive user", username=username)
            return None

        if not verify_password(password, user.password_hash):
            self.logger.warning("Login failed: invalid password", user_id=user.id)
            return None

        user.last_login = utc_now()
        self.session.flush()

        self.logger.info("User authenticated", user_id=user.id, role=user.role.value)
        return user

    @staticmethod
    def has_permission(
        role: Optional[Union[UserRole, str]],
        required_roles: Iterable[Union[UserRole, str]],
    ) -> bool:
        return authorization.has_permission(role, required_roles)

    def create_user(self, actor: User, data: UserCreate) -> User:
        """
        Create a user.

        Raises:
            PermissionDeniedError: If the actor may not manage users
            ConflictError: If the username is taken
            NotFoundError: If the manager does not exist
        """
        require_permission(actor.role, Action.MANAGE_USERS, user_id=actor.id)

        if self.get_by_username(data.username) is not None:
            raise ConflictError(
                f"Username {data.username!r} is already taken",
                username=data.username,
            )
        if data.manager_id is not None:
            self.get_user(data.manager_id)

        user = User(
            username=data.username,
            email=str(data.email),
            password_hash=hash_password(data.password),
            role=data.role,
            first_name=data.first_name,
            last_name=data.last_name,
            department=data.department,
            phone=data.phone,
            manager_id=data.manager_id,
            is_active=True,
        )
        self.session.add(user)
        self.session.flush()

        self.logger.info(
            "User created",
            user_id=user.id,
            role=user.role.value,
            created_by=actor.id,
        )
        return user

    def update_user(self, actor: User, user_id: int, data: UserUpdate) -> User:
        """
        Apply a partial update to a user.

        A delivery agent moved to another role loses their vehicle.
        """
        require_permission(actor.role, Action.MANAGE_USERS, user_id=actor.id)
        user = self.get_user(user_id)

        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        password = updates.pop("password", None)
        if "email" in updates:
            updates["email"] = str(updates["email"])
        if updates.get("manager_id") is not None:
            if updates["manager_id"] == user.id:
                raise InvalidInputError(
                    "A user cannot be their own manager",
                    user_id=user.id,
                    fields=["manager_id"],
                )
            self.get_user(updates["manager_id"])

        for field, value in updates.items():
            setattr(user, field, value)
        if password is not None:
            user.password_hash = hash_password(password)
        if user.role != UserRole.DELIVERY_AGENT:
            VehicleService(self.session).release_agent(user)
        self.session.flush()

        updated_fields = sorted(updates) + (["password"] if password is not None else [])
        self.logger.info(
            "User updated",
            user_id=user.id,
            updated_fields=updated_fields,
            updated_by=actor.id,
        )
        return user

    def deactivate_user(self, actor: User, user_id: int) -> User:
        """Deactivated users keep their history but can no longer log in."""
        require_permission(actor.role, Action.MANAGE_USERS, user_id=actor.id)
        user = self.get_user(user_id)
        if user.id == actor.id:
            raise InvalidInputError("Users cannot deactivate themselves", user_id=user.id)

        user.is_active = False
        self.session.flush()

        self.logger.info("User deactivated", user_id=user.id, deactivated_by=actor.id)
        return user

    def delete_user(self, actor: User, user_id: int) -> None:
        """
        Delete a user.

        Users who created orders cannot be deleted; deactivate them instead.
        Subordinates lose their manager and any vehicle assignment is
        released.

        Raises:
            PermissionDeniedError: If the actor may not manage users
            NotFoundError: If the user does not exist
            InvalidInputError: If the actor deletes themselves
            ConflictError: If the user created orders
        """
        require_permission(actor.role, Action.MANAGE_USERS, user_id=actor.id)
        user = self.get_user(user_id)
        if user.id == actor.id:
            raise InvalidInputError("Users cannot delete themselves", user_id=user.id)

        order_count = self.session.scalar(
            select(func.count()).select_from(Order).where(Order.created_by == user.id)
        )
        if order_count:
            raise ConflictError(
                f"User {user.id} created {order_count} order(s) and cannot be deleted",
                user_id=user.id,
                order_count=order_count,
            )

        VehicleService(self.session).release_agent(user)
        self.session.execute(
            update(User).where(User.manager_id == user.id).values(manager_id=None)
        )
        self.session.delete(user)
        self.session.flush()

        self.logger.info("User deleted", user_id=user_id, deleted_by=actor.id)

    def get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.scalar(select(User).where(User.username == username.strip()))

    def list_users(self, role: Optional[UserRole] = None) -> list[User]:
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list(self.session.scalars(stmt.order_by(User.id)))
