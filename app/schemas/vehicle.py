from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class VehicleCreate(BaseModel):
    vehicle_type: str = Field(min_length=1, max_length=32)
    plate: str = Field(min_length=2, max_length=16)
    make: Optional[str] = Field(default=None, max_length=64)
    model: Optional[str] = Field(default=None, max_length=64)
    year: Optional[int] = Field(default=None, ge=1950, le=2100)
    capacity_kg: Optional[float] = Field(default=None, gt=0)


class VehicleOut(BaseModel):
    id: str
    owner_id: str
    vehicle_type: str
    plate: str
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    capacity_kg: Optional[float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class VehicleDeleteResult(BaseModel):
    id: str
    removed: bool
    retired: bool
