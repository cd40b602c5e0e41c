from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.alert import AlertRecord
from app.models.freight_job import FreightJob, FreightStatus
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle


def build_summary(db: Session) -> dict:
    """Aggregate counters for the admin dashboard."""
    by_status = {s.value: 0 for s in FreightStatus}
    for status, count in db.execute(select(FreightJob.status, func.count(FreightJob.id)).group_by(FreightJob.status)):
        by_status[status.value] = count

    by_vehicle_type = {
        vehicle_type: count
        for vehicle_type, count in db.execute(
            select(FreightJob.vehicle_type, func.count(FreightJob.id))
            .group_by(FreightJob.vehicle_type)
            .order_by(FreightJob.vehicle_type.asc())
        )
    }

    paid, billed = db.execute(
        select(func.coalesce(func.sum(FreightJob.price), 0.0), func.coalesce(func.sum(FreightJob.company_price), 0.0))
        .where(FreightJob.status == FreightStatus.COMPLETED)
    ).one()

    users_by_role = {r.value: 0 for r in UserRole}
    for role, count in db.execute(select(User.role, func.count(User.id)).group_by(User.role)):
        users_by_role[role.value] = count

    active_vehicles = db.scalar(select(func.count(Vehicle.id)).where(Vehicle.is_active.is_(True))) or 0
    alerts = db.scalar(select(func.count(AlertRecord.id))) or 0

    return {
        "jobs": {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_vehicle_type": by_vehicle_type,
        },
        "revenue": {
            "driver_payout_completed": float(paid),
            "billed_completed": float(billed),
            "margin_completed": float(billed) - float(paid),
        },
        "users": users_by_role,
        "active_vehicles": active_vehicles,
        "alerts_sent": alerts,
    }
