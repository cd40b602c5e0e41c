from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicatePlate, NotFound, NotOwner, ValidationError, VehicleInUse
from app.models.freight_job import FreightJob, FreightStatus
from app.models.user import User
from app.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


def normalize_plate(plate: str) -> str:
    return "".join(plate.split()).replace("-", "").upper()


def normalize_vehicle_type(vehicle_type: str) -> str:
    return vehicle_type.strip().upper()


class VehicleService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, vehicle_id: str) -> Vehicle:
        vehicle = self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            raise NotFound("Vehicle not found")
        return vehicle

    def register(
        self,
        owner: User,
        vehicle_type: str,
        plate: str,
        make: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
        capacity_kg: Optional[float] = None,
    ) -> Vehicle:
        plate = normalize_plate(plate)
        vehicle_type = normalize_vehicle_type(vehicle_type)
        if len(plate) < 2:
            raise ValidationError("plate is required")
        if not vehicle_type:
            raise ValidationError("vehicle_type is required")

        existing = self.db.scalars(
            select(Vehicle.id).where(Vehicle.plate == plate, Vehicle.is_active.is_(True))
        ).first()
        if existing:
            raise DuplicatePlate()

        vehicle = Vehicle(
            id=str(uuid.uuid4()),
            owner_id=owner.id,
            vehicle_type=vehicle_type,
            plate=plate,
            make=make,
            model=model,
            year=year,
            capacity_kg=capacity_kg,
            is_active=True,
        )
        self.db.add(vehicle)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicatePlate()
        self.db.refresh(vehicle)
        logger.info("Vehicle registered", extra={"vehicle_id": vehicle.id, "owner_id": owner.id})
        return vehicle

    def list_for_owner(self, owner: User, include_retired: bool = False) -> list[Vehicle]:
        q = select(Vehicle).where(Vehicle.owner_id == owner.id)
        if not include_retired:
            q = q.where(Vehicle.is_active.is_(True))
        return list(self.db.scalars(q.order_by(Vehicle.created_at.asc())))

    def list_all(self, vehicle_type: Optional[str] = None) -> list[Vehicle]:
        q = select(Vehicle).where(Vehicle.is_active.is_(True))
        if vehicle_type:
            q = q.where(Vehicle.vehicle_type == normalize_vehicle_type(vehicle_type))
        return list(self.db.scalars(q.order_by(Vehicle.created_at.asc())))

    def compatible_for(self, driver_id: str, vehicle_type: str) -> Optional[Vehicle]:
        """First active vehicle of the type the driver registered."""
        return self.db.scalars(
            select(Vehicle)
            .where(
                Vehicle.owner_id == driver_id,
                Vehicle.vehicle_type == normalize_vehicle_type(vehicle_type),
                Vehicle.is_active.is_(True),
            )
            .order_by(Vehicle.created_at.asc(), Vehicle.id.asc())
        ).first()

    def delete(self, caller: User, vehicle_id: str) -> tuple[bool, bool]:
        """
        Remove or retire a vehicle.
        Returns (removed, retired): vehicles with job history are retired, not removed.
        """
        vehicle = self.get(vehicle_id)
        if vehicle.owner_id != caller.id:
            raise NotOwner()

        in_use = self.db.scalars(
            select(FreightJob.id).where(
                FreightJob.vehicle_id == vehicle.id,
                FreightJob.status == FreightStatus.RESERVED,
            )
        ).first()
        if in_use:
            raise VehicleInUse()

        has_history = self.db.scalars(select(FreightJob.id).where(FreightJob.vehicle_id == vehicle.id)).first()
        if has_history:
            vehicle.is_active = False
            self.db.commit()
            logger.info("Vehicle retired", extra={"vehicle_id": vehicle.id})
            return False, True

        self.db.delete(vehicle)
        self.db.commit()
        logger.info("Vehicle removed", extra={"vehicle_id": vehicle_id})
        return True, False
