"""
Freight job lifecycle.

    DISPONIVEL --claim(driver)--> RESERVADO --finalize(admin)--> FINALIZADO

Claim and finalize are single conditional UPDATEs on the current status, so
two concurrent callers can never both win; zero affected rows is the failure.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session

from app.core.errors import (
    Forbidden,
    JobInUse,
    NoCompatibleVehicle,
    NotAvailable,
    NotFound,
    NotReserved,
    ValidationError,
)
from app.models.alert import AlertRecord
from app.models.client import Client
from app.models.event import FreightJobEvent
from app.models.freight_job import FreightJob, FreightStatus
from app.models.user import User, UserRole
from app.schemas.freight_job import FreightJobCreate, FreightJobOut
from app.services.vehicles import VehicleService, normalize_vehicle_type

logger = logging.getLogger(__name__)


def _parse_price(value, field: str = "price", required: bool = True) -> Optional[float]:
    if value is None:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be numeric")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be numeric")
    if not math.isfinite(price) or price < 0:
        raise ValidationError(f"{field} must be a non-negative number")
    return price


def _required_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class FreightJobService:
    def __init__(self, db: Session):
        self.db = db

    def _log_event(self, job_id: str, actor_user_id: str, event_type: str, message: str | None = None):
        self.db.add(
            FreightJobEvent(
                id=str(uuid.uuid4()),
                job_id=job_id,
                actor_user_id=actor_user_id,
                event_type=event_type,
                message=message,
            )
        )

    # -------- reads --------
    def get(self, job_id: str) -> FreightJob:
        job = self.db.get(FreightJob, job_id)
        if not job:
            raise NotFound("Freight job not found")
        return job

    def events(self, job_id: str) -> list[FreightJobEvent]:
        job = self.get(job_id)
        return list(
            self.db.scalars(
                select(FreightJobEvent)
                .where(FreightJobEvent.job_id == job.id)
                .order_by(FreightJobEvent.created_at.asc(), FreightJobEvent.id.asc())
            )
        )

    def _filtered(
        self,
        status: Optional[FreightStatus] = None,
        vehicle_type: Optional[str] = None,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
    ):
        q = select(FreightJob)
        if status is not None:
            q = q.where(FreightJob.status == status)
        if vehicle_type:
            q = q.where(FreightJob.vehicle_type == normalize_vehicle_type(vehicle_type))
        if origin and origin.strip():
            like = f"%{origin.strip()}%"
            q = q.where(or_(FreightJob.origin_city.ilike(like), FreightJob.origin_state.ilike(like)))
        if destination and destination.strip():
            like = f"%{destination.strip()}%"
            q = q.where(or_(FreightJob.destination_city.ilike(like), FreightJob.destination_state.ilike(like)))
        return q

    def list_available(
        self,
        vehicle_type: Optional[str] = None,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> list[FreightJob]:
        q = self._filtered(FreightStatus.AVAILABLE, vehicle_type, origin, destination)
        return list(self.db.scalars(q.order_by(FreightJob.created_at.asc(), FreightJob.id.asc())))

    def list_paginated(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[FreightStatus] = None,
        vehicle_type: Optional[str] = None,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> tuple[list[FreightJob], dict]:
        if page < 1:
            raise ValidationError("page must be >= 1")
        if page_size < 1:
            raise ValidationError("page_size must be >= 1")

        q = self._filtered(status, vehicle_type, origin, destination)
        total = self.db.scalar(select(func.count()).select_from(q.subquery())) or 0
        jobs = list(
            self.db.scalars(
                q.order_by(FreightJob.created_at.desc(), FreightJob.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
        )
        pagination = {"total": total, "page": page, "totalPages": math.ceil(total / page_size)}
        return jobs, pagination

    def list_for_driver(self, driver: User) -> list[FreightJob]:
        return list(
            self.db.scalars(
                select(FreightJob)
                .where(FreightJob.driver_id == driver.id)
                .order_by(FreightJob.reserved_at.desc(), FreightJob.id.asc())
            )
        )

    def alert_counts(self, job_ids: Iterable[str]) -> dict[str, int]:
        ids = list(job_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(AlertRecord.job_id, func.count(AlertRecord.id))
            .where(AlertRecord.job_id.in_(ids))
            .group_by(AlertRecord.job_id)
        )
        return {job_id: count for job_id, count in rows}

    def to_out(self, jobs: list[FreightJob]) -> list[FreightJobOut]:
        counts = self.alert_counts(j.id for j in jobs)
        return [
            FreightJobOut.model_validate(j).model_copy(update={"alert_count": counts.get(j.id, 0)})
            for j in jobs
        ]

    # -------- lifecycle --------
    def create(self, admin: User, payload: FreightJobCreate) -> FreightJob:
        price = _parse_price(payload.price)
        company_price = _parse_price(payload.company_price, "company_price", required=False)

        vehicle_type = normalize_vehicle_type(payload.vehicle_type)
        if not vehicle_type:
            raise ValidationError("vehicle_type is required")

        if payload.client_id and not self.db.get(Client, payload.client_id):
            raise NotFound("Client not found")

        job = FreightJob(
            id=str(uuid.uuid4()),
            origin_city=_required_text(payload.origin_city, "origin_city"),
            origin_state=_required_text(payload.origin_state, "origin_state"),
            origin_address=_optional_text(payload.origin_address),
            destination_city=_required_text(payload.destination_city, "destination_city"),
            destination_state=_required_text(payload.destination_state, "destination_state"),
            destination_address=_optional_text(payload.destination_address),
            vehicle_type=vehicle_type,
            cargo_description=_optional_text(payload.cargo_description),
            price=price,
            company_price=company_price,
            client_id=payload.client_id,
            contact_name=_optional_text(payload.contact_name),
            contact_phone=_optional_text(payload.contact_phone),
            pickup_at=payload.pickup_at,
            # whatever the caller sent, new jobs start available
            status=FreightStatus.AVAILABLE,
            created_by_id=admin.id,
        )
        self.db.add(job)
        self._log_event(
            job.id,
            admin.id,
            "CREATED",
            f"{job.origin_city}/{job.origin_state} -> {job.destination_city}/{job.destination_state} ({vehicle_type})",
        )
        self.db.commit()
        self.db.refresh(job)
        logger.info("Freight job created", extra={"job_id": job.id, "vehicle_type": vehicle_type})
        return job

    def claim(self, driver: User, job_id: str) -> FreightJob:
        if driver.role != UserRole.DRIVER:
            raise Forbidden("Only drivers can claim freight jobs")

        job = self.get(job_id)

        vehicle = VehicleService(self.db).compatible_for(driver.id, job.vehicle_type)
        if vehicle is None:
            raise NoCompatibleVehicle(f"You have no active {job.vehicle_type} vehicle")

        now = datetime.now(timezone.utc)
        result = self.db.execute(
            update(FreightJob)
            .where(FreightJob.id == job.id, FreightJob.status == FreightStatus.AVAILABLE)
            .values(
                status=FreightStatus.RESERVED,
                driver_id=driver.id,
                vehicle_id=vehicle.id,
                reserved_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise NotAvailable()

        self._log_event(job.id, driver.id, "CLAIMED", f"Reserved by driver {driver.id} with vehicle {vehicle.plate}")
        self.db.commit()
        self.db.refresh(job)
        logger.info("Freight job reserved", extra={"job_id": job.id, "driver_id": driver.id, "vehicle_id": vehicle.id})
        return job

    def finalize(self, caller: User, job_id: str) -> FreightJob:
        if caller.role != UserRole.ADMIN:
            raise Forbidden("Only admins can finalize freight jobs")

        job = self.get(job_id)

        now = datetime.now(timezone.utc)
        result = self.db.execute(
            update(FreightJob)
            .where(FreightJob.id == job.id, FreightJob.status == FreightStatus.RESERVED)
            .values(status=FreightStatus.COMPLETED, delivered_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise NotReserved()

        self._log_event(job.id, caller.id, "FINALIZED", "Delivery confirmed")
        self.db.commit()
        self.db.refresh(job)
        logger.info("Freight job completed", extra={"job_id": job.id})
        return job

    def delete(self, admin: User, job_id: str) -> None:
        if admin.role != UserRole.ADMIN:
            raise Forbidden("Only admins can delete freight jobs")

        job = self.get(job_id)
        if job.status == FreightStatus.RESERVED:
            raise JobInUse()

        self.db.execute(delete(FreightJobEvent).where(FreightJobEvent.job_id == job.id))
        self.db.execute(
            update(AlertRecord)
            .where(AlertRecord.job_id == job.id)
            .values(job_id=None)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(FreightJob)
            .where(FreightJob.id == job.id, FreightJob.status != FreightStatus.RESERVED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            # claimed between the check and the delete
            self.db.rollback()
            raise JobInUse()
        self.db.commit()
        self.db.expunge(job)
        logger.info("Freight job deleted", extra={"job_id": job_id, "admin_id": admin.id})
