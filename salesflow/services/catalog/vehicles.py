"""
Transport fleet service.

This module implements the VehicleService class for registering vehicles,
changing their operational status and assigning delivery agents. An
assignment is kept on both sides: the vehicle names its agent and the
agent names their vehicle.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.models.user import User, UserRole
from salesflow.database.models.vehicle import TransportVehicle, VehicleStatus
from salesflow.schemas.catalog import VehicleCreate, VehicleUpdate
from salesflow.services.authorization import Action, require_permission
from salesflow.services.errors import ConflictError, InvalidInputError, NotFoundError

logger = get_logger(__name__)


class VehicleService:
    """
    Business logic service for transport vehicles.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_vehicle(self, actor: User, data: VehicleCreate) -> TransportVehicle:
        """
        Register a vehicle.

        Raises:
            PermissionDeniedError: If the actor may not manage vehicles
            ConflictError: If the license plate is already registered
        """
        require_permission(actor.role, Action.MANAGE_VEHICLES, user_id=actor.id)

        existing = self.session.scalar(
            select(TransportVehicle).where(TransportVehicle.license_plate == data.license_plate)
        )
        if existing is not None:
            raise ConflictError(
                f"Vehicle with license plate {data.license_plate!r} already exists",
                license_plate=data.license_plate,
            )

        vehicle = TransportVehicle(**data.model_dump())
        self.session.add(vehicle)
        self.session.flush()

        logger.info(
            "Vehicle created",
            vehicle_id=vehicle.id,
            vehicle_type=vehicle.type.value,
            created_by=actor.id,
        )
        return vehicle

    def update_vehicle(self, actor: User, vehicle_id: int, data: VehicleUpdate) -> TransportVehicle:
        """
        Update a vehicle. Taking a vehicle out of service does not affect
        orders already dispatched on it.
        """
        require_permission(actor.role, Action.MANAGE_VEHICLES, user_id=actor.id)
        vehicle = self.get_vehicle(vehicle_id)

        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in updates.items():
            setattr(vehicle, field, value)
        self.session.flush()

        logger.info(
            "Vehicle updated",
            vehicle_id=vehicle.id,
            status=vehicle.status.value,
            updated_fields=sorted(updates),
            updated_by=actor.id,
        )
        return vehicle

    def assign_agent(self, actor: User, vehicle_id: int, agent_id: int) -> TransportVehicle:
        """
        Assign a delivery agent to a vehicle.

        Any previous pairing of either side is released first.

        Raises:
            PermissionDeniedError: If the actor may not manage vehicles
            NotFoundError: If the vehicle or user does not exist
            InvalidInputError: If the user is not a delivery agent
        """
        require_permission(actor.role, Action.MANAGE_VEHICLES, user_id=actor.id)
        vehicle = self.get_vehicle(vehicle_id)
        agent = self.session.get(User, agent_id)
        if agent is None:
            raise NotFoundError("User", agent_id)
        if agent.role != UserRole.DELIVERY_AGENT:
            raise InvalidInputError(
                f"User {agent_id} is not a delivery agent",
                user_id=agent_id,
                role=agent.role.value,
                fields=["agent_id"],
            )

        if vehicle.assigned_agent_id is not None and vehicle.assigned_agent_id != agent.id:
            previous_agent = self.session.get(User, vehicle.assigned_agent_id)
            if previous_agent is not None:
                previous_agent.vehicle_id = None

        if agent.vehicle_id is not None and agent.vehicle_id != vehicle.id:
            previous_vehicle = self.session.get(TransportVehicle, agent.vehicle_id)
            if previous_vehicle is not None:
                previous_vehicle.assigned_agent_id = None

        vehicle.assigned_agent_id = agent.id
        agent.vehicle_id = vehicle.id
        self.session.flush()

        logger.info(
            "Delivery agent assigned to vehicle",
            vehicle_id=vehicle.id,
            agent_id=agent.id,
            assigned_by=actor.id,
        )
        return vehicle

    def release_agent(self, agent: User) -> None:
        """Clear the vehicle assignment of an agent being removed."""
        if agent.vehicle_id is None:
            return
        vehicle = self.session.get(TransportVehicle, agent.vehicle_id)
        if vehicle is not None and vehicle.assigned_agent_id == agent.id:
            vehicle.assigned_agent_id = None
        agent.vehicle_id = None

    def get_vehicle(self, vehicle_id: int) -> TransportVehicle:
        vehicle = self.session.get(TransportVehicle, vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle", vehicle_id)
        return vehicle

    def list_vehicles(self, active_only: bool = False) -> list[TransportVehicle]:
        stmt = select(TransportVehicle)
        if active_only:
            stmt = stmt.where(TransportVehicle.status == VehicleStatus.ACTIVE)
        stmt = stmt.order_by(TransportVehicle.id)
        return list(self.session.scalars(stmt))
