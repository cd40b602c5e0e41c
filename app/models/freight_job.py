import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Enum, Float, Text, ForeignKey
from sqlalchemy.sql import func

from app.core.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class FreightStatus(str, enum.Enum):
    AVAILABLE = "DISPONIVEL"
    RESERVED = "RESERVADO"
    COMPLETED = "FINALIZADO"


class FreightJob(Base):
    __tablename__ = "freight_jobs"

    id = Column(String, primary_key=True)  # uuid string

    origin_city = Column(String, nullable=False)
    origin_state = Column(String, nullable=False)
    origin_address = Column(String, nullable=True)
    destination_city = Column(String, nullable=False)
    destination_state = Column(String, nullable=False)
    destination_address = Column(String, nullable=True)

    vehicle_type = Column(String, index=True, nullable=False)
    cargo_description = Column(Text, nullable=True)

    price = Column(Float, nullable=False)  # paid to the driver
    company_price = Column(Float, nullable=True)  # charged to the client
    client_id = Column(String, ForeignKey("clients.id"), index=True, nullable=True)

    contact_name = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)

    pickup_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)

    status = Column(Enum(FreightStatus), default=FreightStatus.AVAILABLE, index=True, nullable=False)

    # set together with status, never on their own
    driver_id = Column(String, ForeignKey("users.id"), index=True, nullable=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), index=True, nullable=True)
    reserved_at = Column(DateTime(timezone=True), nullable=True)

    created_by_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
