from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AlertOut(BaseModel):
    id: str
    user_id: str
    alert_type: str
    job_id: Optional[str]
    title: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class AlertBroadcast(BaseModel):
    title: str = Field(min_length=1, max_length=120)
    message: str = Field(min_length=1, max_length=1000)
    # neither set: every driver with a registered device
    user_id: Optional[str] = None
    vehicle_type: Optional[str] = None
