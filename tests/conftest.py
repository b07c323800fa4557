"""
Pytest configuration and shared test fixtures.

Every test gets a fresh in-memory store loaded with the demo data plus one
user for each role the demo data lacks, so each role has exactly one actor.
"""

from types import SimpleNamespace
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from salesflow.core.config import Settings
from salesflow.core.security import hash_password
from salesflow.database.connection import Database, create_database
from salesflow.database.models import Customer, Product, TransportVehicle, User, UserRole
from salesflow.main import create_app
from salesflow.services.seed import seed_demo_data

TEST_SECRET_KEY = "test-secret-key-for-salesflow-suite-0001"

EXTRA_USERS = [
    ("grace_exec", UserRole.MANAGEMENT, "Grace", "Executive"),
    ("alan_accounts", UserRole.ACCOUNTS, "Alan", "Accountant"),
    ("ivy_stock", UserRole.INVENTORY, "Ivy", "Stock"),
]


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory store."""
    return Settings(
        environment="test",
        secret_key=TEST_SECRET_KEY,
        database_url="sqlite+pysqlite:///:memory:",
        log_level="WARNING",
        seed_demo_data=True,
    )


@pytest.fixture
def database(settings: Settings) -> Generator[Database, None, None]:
    """
    Fresh store with demo data and one user per role.

    Yields:
        Database: Ready to use store, disposed after the test
    """
    db = create_database(settings)
    with db.session() as session:
        seed_demo_data(session)
        for username, role, first_name, last_name in EXTRA_USERS:
            session.add(
                User(
                    username=username,
                    email=f"{username}@company.com",
                    password_hash=hash_password("secret123"),
                    role=role,
                    first_name=first_name,
                    last_name=last_name,
                    department="Operations",
                    is_active=True,
                )
            )
    yield db
    db.dispose()


@pytest.fixture
def db_session(
    database: Database, actors: dict[UserRole, User], catalog: SimpleNamespace
) -> Generator[Session, None, None]:
    """
    A single unit of work spanning the whole test.

    The store lock is held until teardown, so actors and catalog are loaded
    before the unit of work opens.
    """
    with database.session() as session:
        yield session


@pytest.fixture
def actors(database: Database) -> dict[UserRole, User]:
    """Detached users keyed by role."""
    with database.session() as session:
        users = session.scalars(select(User)).all()
    return {user.role: user for user in users}


@pytest.fixture
def catalog(database: Database) -> SimpleNamespace:
    """
    Detached demo catalog records.

    Returns:
        Namespace with customers by name, products by sku and vehicles by
        license plate
    """
    with database.session() as session:
        customers = {c.name: c for c in session.scalars(select(Customer))}
        products = {p.sku: p for p in session.scalars(select(Product))}
        vehicles = {v.license_plate: v for v in session.scalars(select(TransportVehicle))}
    return SimpleNamespace(customers=customers, products=products, vehicles=vehicles)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """
    Test client for an application with its own seeded store.

    Example:
        def test_health_endpoint(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def login(client: TestClient) -> Callable[[str, str], dict[str, str]]:
    """Log in through the API and return authorization headers."""

    def _login(username: str, password: str) -> dict[str, str]:
        response = client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def manager_headers(login) -> dict[str, str]:
    return login("mary_manager", "manager123")


@pytest.fixture
def sales_headers(login) -> dict[str, str]:
    return login("john_sales", "password123")


@pytest.fixture
def admin_headers(login) -> dict[str, str]:
    return login("Admin", "password")
