"""
Tests for authentication, user administration and the interactive session.
"""

from unittest.mock import Mock

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from salesflow.database.connection import Database
from salesflow.database.models import Order, TransportVehicle, User, UserRole
from salesflow.schemas.auth import UserCreate, UserUpdate
from salesflow.services.auth.service import AuthService
from salesflow.services.auth.session_manager import SessionManager
from salesflow.services.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from salesflow.services.orders.service import OrderService


def new_user(username: str = "nina_sales", role: UserRole = UserRole.SALES) -> UserCreate:
    return UserCreate(
        username=username,
        email=f"{username}@company.com",
        password="welcome123",
        role=role,
        first_name="Nina",
        last_name="Seller",
        department="Sales",
    )


# ============================================================================
# Authentication Tests
# ============================================================================


class TestAuthenticate:
    def test_valid_credentials(self, db_session: Session) -> None:
        user = AuthService(db_session).authenticate("mary_manager", "manager123")

        assert user is not None
        assert user.role == UserRole.MANAGER
        assert user.last_login is not None

    def test_wrong_password(self, db_session: Session) -> None:
        assert AuthService(db_session).authenticate("mary_manager", "wrong") is None

    def test_unknown_user(self, db_session: Session) -> None:
        assert AuthService(db_session).authenticate("nobody", "password") is None

    def test_inactive_user(self, db_session: Session) -> None:
        user = AuthService(db_session).get_by_username("john_sales")
        user.is_active = False

        assert AuthService(db_session).authenticate("john_sales", "password123") is None

    def test_has_permission_delegates_to_roles(self) -> None:
        assert AuthService.has_permission(UserRole.MANAGEMENT, [])
        assert not AuthService.has_permission("Sales", ["Admin", "Manager"])


# ============================================================================
# User Administration Tests
# ============================================================================


class TestUserAdministration:
    def test_admin_creates_user(self, db_session: Session, actors) -> None:
        service = AuthService(db_session)
        user = service.create_user(actors[UserRole.ADMIN], new_user())

        assert user.password_hash != "welcome123"
        assert service.authenticate("nina_sales", "welcome123").id == user.id

    def test_duplicate_username(self, db_session: Session, actors) -> None:
        with pytest.raises(ConflictError):
            AuthService(db_session).create_user(actors[UserRole.ADMIN], new_user("john_sales"))

    def test_manager_cannot_manage_users(self, db_session: Session, actors) -> None:
        with pytest.raises(PermissionDeniedError):
            AuthService(db_session).create_user(actors[UserRole.MANAGER], new_user())

    def test_management_can_manage_users(self, db_session: Session, actors) -> None:
        user = AuthService(db_session).create_user(actors[UserRole.MANAGEMENT], new_user())
        assert user.is_active

    def test_weak_password_rejected_by_schema(self) -> None:
        with pytest.raises(ValidationError):
            UserCreate(
                username="weak",
                email="weak@company.com",
                password="onlyletters",
                role=UserRole.SALES,
                first_name="W",
                last_name="K",
            )

    def test_update_user(self, db_session: Session, actors) -> None:
        service = AuthService(db_session)
        sales_id = actors[UserRole.SALES].id

        user = service.update_user(
            actors[UserRole.ADMIN],
            sales_id,
            UserUpdate(department="Key Accounts", password="newpass456"),
        )

        assert user.department == "Key Accounts"
        assert service.authenticate("john_sales", "newpass456") is not None
        assert service.authenticate("john_sales", "password123") is None

    def test_user_cannot_be_own_manager(self, db_session: Session, actors) -> None:
        admin = actors[UserRole.ADMIN]
        with pytest.raises(InvalidInputError):
            AuthService(db_session).update_user(admin, admin.id, UserUpdate(manager_id=admin.id))

    def test_agent_changing_role_loses_vehicle(self, db_session: Session, actors) -> None:
        agent_id = actors[UserRole.DELIVERY_AGENT].id
        user = AuthService(db_session).update_user(
            actors[UserRole.ADMIN], agent_id, UserUpdate(role=UserRole.INVENTORY)
        )

        assert user.vehicle_id is None
        van = db_session.get(TransportVehicle, 1)
        assert van.assigned_agent_id is None

    def test_deactivate_blocks_login(self, db_session: Session, actors) -> None:
        service = AuthService(db_session)
        service.deactivate_user(actors[UserRole.ADMIN], actors[UserRole.SALES].id)

        assert service.authenticate("john_sales", "password123") is None

    def test_delete_agent_releases_vehicle(self, db_session: Session, actors) -> None:
        service = AuthService(db_session)
        service.delete_user(actors[UserRole.ADMIN], actors[UserRole.DELIVERY_AGENT].id)

        assert db_session.get(User, actors[UserRole.DELIVERY_AGENT].id) is None
        assert db_session.get(TransportVehicle, 1).assigned_agent_id is None

    def test_delete_manager_clears_reports(self, db_session: Session, actors) -> None:
        AuthService(db_session).delete_user(actors[UserRole.ADMIN], actors[UserRole.MANAGER].id)

        sales = db_session.get(User, actors[UserRole.SALES].id)
        db_session.refresh(sales)
        assert sales.manager_id is None

    def test_user_with_orders_cannot_be_deleted(self, database: Database, actors, catalog) -> None:
        sales = actors[UserRole.SALES]
        with database.session() as session:
            OrderService(session).create_order(
                sales,
                catalog.customers["John Doe"].id,
                [{"product_id": catalog.products["MOU-001"].id, "quantity": 1}],
            )

        with pytest.raises(ConflictError):
            with database.session() as session:
                AuthService(session).delete_user(actors[UserRole.ADMIN], sales.id)

        with database.session() as session:
            assert session.get(User, sales.id) is not None
            assert session.query(Order).count() == 1

    def test_cannot_delete_self(self, db_session: Session, actors) -> None:
        admin = actors[UserRole.ADMIN]
        with pytest.raises(InvalidInputError):
            AuthService(db_session).delete_user(admin, admin.id)

    def test_unknown_user(self, db_session: Session, actors) -> None:
        with pytest.raises(NotFoundError):
            AuthService(db_session).deactivate_user(actors[UserRole.ADMIN], 999)

    def test_list_by_role(self, db_session: Session) -> None:
        service = AuthService(db_session)
        assert len(service.list_users()) == 7
        assert [u.username for u in service.list_users(UserRole.DELIVERY_AGENT)] == ["dave_agent"]


# ============================================================================
# Session Manager Tests
# ============================================================================


class TestSessionManager:
    def test_login_and_logout(self, database: Database) -> None:
        manager = SessionManager(database)
        listener = Mock()
        manager.subscribe(listener)

        assert manager.login("mary_manager", "manager123")
        assert manager.is_authenticated
        assert manager.current_user.full_name == "Mary Manager"
        listener.assert_called_with(manager.current_user)

        manager.logout()
        assert not manager.is_authenticated
        assert manager.current_user is None
        listener.assert_called_with(None)

    def test_failed_login_keeps_state(self, database: Database) -> None:
        manager = SessionManager(database)
        listener = Mock()
        manager.subscribe(listener)

        assert not manager.login("mary_manager", "nope")
        assert not manager.is_authenticated
        listener.assert_not_called()

    def test_has_permission(self, database: Database) -> None:
        manager = SessionManager(database)
        assert not manager.has_permission(["Sales"])

        manager.login("john_sales", "password123")
        assert manager.has_permission(["Admin", "Sales"])
        assert not manager.has_permission(["Admin", "Manager"])

        manager.logout()
        manager.login("Admin", "password")
        assert manager.has_permission([])

    def test_unsubscribe(self, database: Database) -> None:
        manager = SessionManager(database)
        listener = Mock()
        unsubscribe = manager.subscribe(listener)
        unsubscribe()

        manager.login("Admin", "password")
        listener.assert_not_called()
