"""
Catalog schemas: customers with their addresses, products and the transport
fleet.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from salesflow.database.models.customer import CustomerType
from salesflow.database.models.vehicle import VehicleStatus, VehicleType


class AddressRequest(BaseModel):
    """Customer shipping address."""

    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=1, max_length=255, description="Street address")
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    is_default: bool = Field(False, description="Use this address when none is selected")


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    address: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool


class CustomerCreate(BaseModel):
    """
    Customer creation request.

    At least one address is required. When no address is flagged default the
    first one becomes the default.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., examples=["buyer@example.com"])
    phone: str = Field("", max_length=50)
    type: CustomerType = Field(..., description="Pricing tier")
    addresses: list[AddressRequest] = Field(..., min_length=1)


class CustomerUpdate(BaseModel):
    """Partial customer update; omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    type: Optional[CustomerType] = None
    addresses: Optional[list[AddressRequest]] = Field(
        None,
        min_length=1,
        description="Replaces every address of the customer",
    )


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    type: CustomerType
    created_at: datetime
    last_modified_at: Optional[datetime] = None
    last_modified_by: Optional[str] = None
    last_modified_changes: Optional[str] = None
    addresses: list[AddressResponse] = Field(default_factory=list)


class ProductCreate(BaseModel):
    """Product creation request with one price per customer type."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    sku: str = Field(..., min_length=1, max_length=64, examples=["LAP-001"])
    base_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    retail_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    wholesale_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    open_market_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)


class ProductUpdate(BaseModel):
    """Partial product update. Existing orders keep their captured prices."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    retail_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    wholesale_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    open_market_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    sku: str
    base_price: Decimal
    retail_price: Decimal
    wholesale_price: Decimal
    open_market_price: Decimal
    stock_quantity: int
    created_at: datetime


class VehicleCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    type: VehicleType
    name: str = Field(..., min_length=1, max_length=255)
    license_plate: str = Field(..., min_length=1, max_length=32)
    capacity: int = Field(0, ge=0, description="Load capacity in kilograms")
    status: VehicleStatus = VehicleStatus.ACTIVE
    notes: Optional[str] = Field(None, max_length=500)


class VehicleUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None
    notes: Optional[str] = Field(None, max_length=500)


class VehicleAssignRequest(BaseModel):
    agent_id: int = Field(..., gt=0, description="Delivery agent user id")


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: VehicleType
    name: str
    license_plate: str
    capacity: int
    status: VehicleStatus
    assigned_agent_id: Optional[int] = None
    notes: Optional[str] = None
