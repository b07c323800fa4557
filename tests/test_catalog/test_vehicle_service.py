"""
Tests for VehicleService: fleet registration and agent assignment.
"""

from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from salesflow.database.models import TransportVehicle, User, UserRole, VehicleStatus, VehicleType
from salesflow.schemas.catalog import VehicleCreate, VehicleUpdate
from salesflow.services.catalog.vehicles import VehicleService
from salesflow.services.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)


class TestFleet:
    def test_seeded_assignment_is_two_sided(self, db_session: Session, actors) -> None:
        agent = db_session.get(User, actors[UserRole.DELIVERY_AGENT].id)
        van = db_session.get(TransportVehicle, agent.vehicle_id)

        assert van.license_plate == "VAN-001"
        assert van.assigned_agent_id == agent.id

    def test_create_vehicle(self, db_session: Session, actors) -> None:
        vehicle = VehicleService(db_session).create_vehicle(
            actors[UserRole.MANAGER],
            VehicleCreate(type=VehicleType.VAN, name="City Van 2", license_plate="VAN-002", capacity=900),
        )

        assert vehicle.status == VehicleStatus.ACTIVE
        assert vehicle.is_active

    def test_duplicate_plate(self, db_session: Session, actors) -> None:
        with pytest.raises(ConflictError):
            VehicleService(db_session).create_vehicle(
                actors[UserRole.ADMIN],
                VehicleCreate(type=VehicleType.TRUCK, name="Copy", license_plate="TRK-101"),
            )

    def test_inventory_cannot_manage_fleet(self, db_session: Session, actors) -> None:
        with pytest.raises(PermissionDeniedError):
            VehicleService(db_session).create_vehicle(
                actors[UserRole.INVENTORY],
                VehicleCreate(type=VehicleType.VAN, name="Van", license_plate="VAN-003"),
            )

    def test_status_change_and_active_listing(
        self, db_session: Session, actors, catalog: SimpleNamespace
    ) -> None:
        service = VehicleService(db_session)
        service.update_vehicle(
            actors[UserRole.MANAGEMENT],
            catalog.vehicles["TRK-101"].id,
            VehicleUpdate(status=VehicleStatus.RETIRED),
        )

        assert [v.license_plate for v in service.list_vehicles(active_only=True)] == ["VAN-001"]
        assert len(service.list_vehicles()) == 2


class TestAssignAgent:
    def test_reassign_agent_releases_previous_vehicle(
        self, db_session: Session, actors, catalog: SimpleNamespace
    ) -> None:
        agent_id = actors[UserRole.DELIVERY_AGENT].id
        truck = VehicleService(db_session).assign_agent(
            actors[UserRole.MANAGER], catalog.vehicles["TRK-101"].id, agent_id
        )

        van = db_session.get(TransportVehicle, catalog.vehicles["VAN-001"].id)
        agent = db_session.get(User, agent_id)
        assert truck.assigned_agent_id == agent_id
        assert agent.vehicle_id == truck.id
        assert van.assigned_agent_id is None

    def test_only_delivery_agents(self, db_session: Session, actors, catalog: SimpleNamespace) -> None:
        with pytest.raises(InvalidInputError):
            VehicleService(db_session).assign_agent(
                actors[UserRole.ADMIN], catalog.vehicles["TRK-101"].id, actors[UserRole.SALES].id
            )

    def test_unknown_agent(self, db_session: Session, actors, catalog: SimpleNamespace) -> None:
        with pytest.raises(NotFoundError):
            VehicleService(db_session).assign_agent(
                actors[UserRole.ADMIN], catalog.vehicles["TRK-101"].id, 999
            )
