"""
Transport vehicle model referenced by order dispatch.
"""

import enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from salesflow.database.base import Base, IntegerIdMixin, create_table_args


class VehicleType(str, enum.Enum):
    VAN = "van"
    TRUCK = "truck"


class VehicleStatus(str, enum.Enum):
    """Operational status, independent of any order status."""

    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class TransportVehicle(Base, IntegerIdMixin):
    """Delivery vehicle, optionally assigned to a delivery agent."""

    __tablename__ = "transport_vehicles"

    type: Mapped[VehicleType] = mapped_column(
        SQLEnum(
            VehicleType,
            name="vehicle_type",
            native_enum=False,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    license_plate: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(nullable=False, default=0)

    status: Mapped[VehicleStatus] = mapped_column(
        SQLEnum(
            VehicleStatus,
            name="vehicle_status",
            native_enum=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=VehicleStatus.ACTIVE,
    )

    assigned_agent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = create_table_args(comment="Transport fleet")

    @property
    def is_active(self) -> bool:
        return self.status == VehicleStatus.ACTIVE
