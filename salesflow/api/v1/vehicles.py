"""
Transport fleet API endpoints.
"""

from fastapi import APIRouter, Query, status

from salesflow.api.deps import CurrentUser, DatabaseDep
from salesflow.schemas.catalog import (
    VehicleAssignRequest,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
)
from salesflow.services.catalog.vehicles import VehicleService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleResponse], summary="List vehicles")
def list_vehicles(
    current_user: CurrentUser,
    database: DatabaseDep,
    active_only: bool = Query(False, description="Only vehicles available for dispatch"),
) -> list[VehicleResponse]:
    with database.session() as session:
        vehicles = VehicleService(session).list_vehicles(active_only=active_only)
        return [VehicleResponse.model_validate(v) for v in vehicles]


@router.post(
    "",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register vehicle",
)
def create_vehicle(
    request: VehicleCreate, current_user: CurrentUser, database: DatabaseDep
) -> VehicleResponse:
    with database.session() as session:
        vehicle = VehicleService(session).create_vehicle(current_user, request)
        return VehicleResponse.model_validate(vehicle)


@router.patch("/{vehicle_id}", response_model=VehicleResponse, summary="Update vehicle")
def update_vehicle(
    vehicle_id: int,
    request: VehicleUpdate,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> VehicleResponse:
    with database.session() as session:
        vehicle = VehicleService(session).update_vehicle(current_user, vehicle_id, request)
        return VehicleResponse.model_validate(vehicle)


@router.post(
    "/{vehicle_id}/assign",
    response_model=VehicleResponse,
    summary="Assign delivery agent",
)
def assign_agent(
    vehicle_id: int,
    request: VehicleAssignRequest,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> VehicleResponse:
    with database.session() as session:
        vehicle = VehicleService(session).assign_agent(current_user, vehicle_id, request.agent_id)
        return VehicleResponse.model_validate(vehicle)
