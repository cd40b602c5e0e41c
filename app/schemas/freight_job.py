from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.freight_job import FreightStatus


class FreightJobCreate(BaseModel):
    origin_city: str = Field(min_length=1, max_length=100)
    origin_state: str = Field(min_length=1, max_length=50)
    origin_address: Optional[str] = Field(default=None, max_length=255)
    destination_city: str = Field(min_length=1, max_length=100)
    destination_state: str = Field(min_length=1, max_length=50)
    destination_address: Optional[str] = Field(default=None, max_length=255)

    vehicle_type: str = Field(min_length=1, max_length=32)
    cargo_description: Optional[str] = None

    price: float
    company_price: Optional[float] = None
    client_id: Optional[str] = None

    contact_name: Optional[str] = Field(default=None, max_length=100)
    contact_phone: Optional[str] = Field(default=None, max_length=32)

    pickup_at: Optional[datetime] = None

    # accepted for compatibility, always overridden to DISPONIVEL
    status: Optional[FreightStatus] = None


class FreightJobOut(BaseModel):
    id: str
    origin_city: str
    origin_state: str
    origin_address: Optional[str]
    destination_city: str
    destination_state: str
    destination_address: Optional[str]
    vehicle_type: str
    cargo_description: Optional[str]
    price: float
    company_price: Optional[float]
    client_id: Optional[str]
    contact_name: Optional[str]
    contact_phone: Optional[str]
    pickup_at: Optional[datetime]
    delivered_at: Optional[datetime]
    status: FreightStatus
    driver_id: Optional[str]
    vehicle_id: Optional[str]
    reserved_at: Optional[datetime]
    created_by_id: str
    created_at: datetime
    alert_count: int = 0

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    total: int
    page: int
    totalPages: int


class FreightJobPage(BaseModel):
    data: list[FreightJobOut]
    pagination: Pagination


class FreightJobEventOut(BaseModel):
    id: str
    job_id: str
    actor_user_id: str
    event_type: str
    message: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
