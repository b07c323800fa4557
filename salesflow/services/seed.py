"""
Demo data loaded into a fresh store.

Seeds the demo customers, products, users and transport fleet so a new
in-memory store is immediately usable. Seeding is skipped when any user
already exists.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.core.security import hash_password
from salesflow.database.models.customer import Customer, CustomerAddress, CustomerType
from salesflow.database.models.product import Product
from salesflow.database.models.user import User, UserRole
from salesflow.database.models.vehicle import TransportVehicle, VehicleStatus, VehicleType

logger = get_logger(__name__)

DEMO_CUSTOMERS = [
    {
        "name": "John Doe",
        "email": "john@example.com",
        "phone": "123-456-7890",
        "type": CustomerType.RETAIL,
        "addresses": [
            ("123 Main St", "Lagos", "Lagos", "100001", "Nigeria", True),
        ],
    },
    {
        "name": "ABC Corporation",
        "email": "orders@abc.com",
        "phone": "987-654-3210",
        "type": CustomerType.WHOLESALE,
        "addresses": [
            ("456 Business Ave", "Abuja", "FCT", "900001", "Nigeria", True),
            ("Warehouse 2, Industrial Rd", "Port Harcourt", "Rivers", "500001", "Nigeria", False),
        ],
    },
    {
        "name": "Market Vendor",
        "email": "vendor@market.com",
        "phone": "555-123-4567",
        "type": CustomerType.OPEN_MARKET,
        "addresses": [
            ("789 Market St", "Ibadan", "Oyo", "200001", "Nigeria", True),
        ],
    },
]

# (name, description, sku, base, retail, wholesale, open market, stock)
DEMO_PRODUCTS = [
    ("Laptop Pro", "High-performance laptop", "LAP-001", "800", "1200", "900", "1000", 50),
    ("Wireless Mouse", "Ergonomic wireless mouse", "MOU-001", "15", "25", "18", "22", 200),
    ("Smartphone", "Latest smartphone model", "PHO-001", "400", "600", "450", "550", 100),
]

DEMO_USERS = [
    {
        "username": "Admin",
        "email": "admin@company.com",
        "password": "password",
        "role": UserRole.ADMIN,
        "first_name": "Alice",
        "last_name": "Anderson",
        "department": "Administration",
        "phone": "555-000-0001",
        "manager": None,
    },
    {
        "username": "john_sales",
        "email": "john@company.com",
        "password": "password123",
        "role": UserRole.SALES,
        "first_name": "John",
        "last_name": "Doe",
        "department": "Sales",
        "phone": "555-000-0002",
        "manager": "mary_manager",
    },
    {
        "username": "mary_manager",
        "email": "mary@company.com",
        "password": "manager123",
        "role": UserRole.MANAGER,
        "first_name": "Mary",
        "last_name": "Manager",
        "department": "Sales",
        "phone": "555-000-0003",
        "manager": "Admin",
    },
    {
        "username": "dave_agent",
        "email": "dave@company.com",
        "password": "agentpass",
        "role": UserRole.DELIVERY_AGENT,
        "first_name": "Dave",
        "last_name": "Driver",
        "department": "Transport",
        "phone": "555-000-0004",
        "manager": "Admin",
        "vehicle": "VAN-001",
    },
]

DEMO_VEHICLES = [
    (VehicleType.VAN, "Delivery Van 1", "VAN-001", 1000, "Main city van"),
    (VehicleType.TRUCK, "Truck Alpha", "TRK-101", 5000, "Long haul truck"),
]


def seed_demo_data(session: Session) -> bool:
    """
    Load the demo data set.

    Returns:
        True if data was loaded, False if the store already had users
    """
    if session.scalar(select(func.count()).select_from(User)):
        logger.info("Demo data skipped, store not empty")
        return False

    for entry in DEMO_CUSTOMERS:
        session.add(
            Customer(
                name=entry["name"],
                email=entry["email"],
                phone=entry["phone"],
                type=entry["type"],
                addresses=[
                    CustomerAddress(
                        address=address,
                        city=city,
                        state=state,
                        postal_code=postal_code,
                        country=country,
                        is_default=is_default,
                    )
                    for address, city, state, postal_code, country, is_default in entry["addresses"]
                ],
            )
        )

    for name, description, sku, base, retail, wholesale, open_market, stock in DEMO_PRODUCTS:
        session.add(
            Product(
                name=name,
                description=description,
                sku=sku,
                base_price=Decimal(base),
                retail_price=Decimal(retail),
                wholesale_price=Decimal(wholesale),
                open_market_price=Decimal(open_market),
                stock_quantity=stock,
            )
        )

    vehicles = {}
    for vehicle_type, name, plate, capacity, notes in DEMO_VEHICLES:
        vehicles[plate] = TransportVehicle(
            type=vehicle_type,
            name=name,
            license_plate=plate,
            capacity=capacity,
            status=VehicleStatus.ACTIVE,
            notes=notes,
        )
        session.add(vehicles[plate])

    users = {}
    for entry in DEMO_USERS:
        users[entry["username"]] = User(
            username=entry["username"],
            email=entry["email"],
            password_hash=hash_password(entry["password"]),
            role=entry["role"],
            first_name=entry["first_name"],
            last_name=entry["last_name"],
            department=entry["department"],
            phone=entry["phone"],
            is_active=True,
        )
        session.add(users[entry["username"]])
    session.flush()

    for entry in DEMO_USERS:
        user = users[entry["username"]]
        if entry["manager"]:
            user.manager_id = users[entry["manager"]].id
        if entry.get("vehicle"):
            vehicle = vehicles[entry["vehicle"]]
            user.vehicle_id = vehicle.id
            vehicle.assigned_agent_id = user.id
    session.flush()

    logger.info(
        "Demo data loaded",
        customers=len(DEMO_CUSTOMERS),
        products=len(DEMO_PRODUCTS),
        users=len(DEMO_USERS),
        vehicles=len(DEMO_VEHICLES),
    )
    return True
