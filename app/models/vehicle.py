from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, ForeignKey, Index

from app.core.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)  # uuid string
    owner_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)

    vehicle_type = Column(String, index=True, nullable=False)  # TRUCK, CARRETA, VAN, ...
    plate = Column(String, index=True, nullable=False)
    make = Column(String, nullable=True)
    model = Column(String, nullable=True)
    year = Column(Integer, nullable=True)
    capacity_kg = Column(Float, nullable=True)

    # Retired vehicles keep their job history but free the plate
    is_active = Column(Boolean, default=True, nullable=False)

    # Python-side default keeps sub-second registration order
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_vehicles_active_plate",
            plate,
            unique=True,
            sqlite_where=is_active.is_(True),
            postgresql_where=is_active.is_(True),
        ),
    )
