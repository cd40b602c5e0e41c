from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    tax_id: Optional[str] = Field(default=None, max_length=32)
    phone: Optional[str] = Field(default=None, max_length=32)
    contact_name: Optional[str] = Field(default=None, max_length=100)


class ClientOut(BaseModel):
    id: str
    name: str
    email: Optional[str]
    tax_id: Optional[str]
    phone: Optional[str]
    contact_name: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
