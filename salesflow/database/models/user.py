"""
User model with authentication and role management.

This module defines the User model and the closed set of roles used by the
role-based authorization model.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from salesflow.database.base import BaseModel, create_table_args


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""

    ADMIN = "Admin"
    MANAGEMENT = "Management"
    ACCOUNTS = "Accounts"
    MANAGER = "Manager"
    SALES = "Sales"
    INVENTORY = "Inventory"
    DELIVERY_AGENT = "DeliveryAgent"

    @classmethod
    def from_string(cls, value: str) -> "UserRole":
        """
        Convert string to UserRole enum.

        Accepts either the role value ("DeliveryAgent") or the member name
        ("DELIVERY_AGENT"), case-insensitively.

        Raises:
            ValueError: If value is not a valid role
        """
        normalized = value.strip().replace("_", "").lower()
        for role in cls:
            if role.value.lower() == normalized:
                return role
        raise ValueError(f"Invalid role: {value}")

    @property
    def is_superuser(self) -> bool:
        """Admin and Management are permitted every action."""
        return self in (UserRole.ADMIN, UserRole.MANAGEMENT)


class User(BaseModel):
    """
    User model for authentication and authorization.

    Attributes:
        id: Unique user identifier
        username: Login name (unique)
        email: User email address
        password_hash: Hashed password
        role: User role for access control
        is_active: Inactive users cannot authenticate
        first_name: User's first name
        last_name: User's last name
        department: Organizational department
        phone: Contact phone number
        manager_id: Reporting manager
        vehicle_id: Transport vehicle assigned to a delivery agent
        last_login: Timestamp of last successful login
        created_at: Account creation timestamp
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User email address",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password",
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(
            UserRole,
            name="user_role",
            native_enum=False,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        index=True,
        comment="User role for access control",
    )

    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
        comment="Account active status",
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    manager_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Reporting manager",
    )

    vehicle_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Assigned transport vehicle (delivery agents only)",
    )

    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Timestamp of last successful login",
    )

    __table_args__ = create_table_args(comment="Application users")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
