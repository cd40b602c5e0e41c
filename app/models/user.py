import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func

from app.core.db import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    DRIVER = "MOTORISTA"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # uuid string
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    password_hash = Column(String, nullable=False)

    tax_id = Column(String, nullable=True)  # CPF / CNPJ
    phone = Column(String, nullable=True)

    push_token = Column(String, nullable=True)
    push_platform = Column(String, nullable=True)  # android, ios

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    @property
    def has_push_token(self) -> bool:
        return bool(self.push_token)
