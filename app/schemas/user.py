from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    push_platform: Optional[str] = None
    has_push_token: bool = False
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)
    tax_id: Optional[str] = Field(default=None, max_length=32)


class PushTokenUpdate(BaseModel):
    token: str = Field(min_length=1, max_length=512)
    platform: Optional[str] = Field(default=None, pattern="^(android|ios|web)$")


class AdminUserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    role: UserRole
    password: str = Field(min_length=8, max_length=128)
    tax_id: Optional[str] = Field(default=None, max_length=32)
    phone: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = True


class AdminUserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    tax_id: Optional[str] = Field(default=None, max_length=32)
    is_active: Optional[bool] = None


class AdminPasswordReset(BaseModel):
    new_password: str = Field(min_length=8, max_length=128)
