from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.db import get_db
from app.schemas.vehicle import VehicleCreate, VehicleDeleteResult, VehicleOut
from app.services.vehicles import VehicleService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("", response_model=VehicleOut, status_code=status.HTTP_201_CREATED)
def register_vehicle(
    payload: VehicleCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return VehicleService(db).register(
        owner=ctx.user,
        vehicle_type=payload.vehicle_type,
        plate=payload.plate,
        make=payload.make,
        model=payload.model,
        year=payload.year,
        capacity_kg=payload.capacity_kg,
    )


@router.get("", response_model=list[VehicleOut])
def list_vehicles(
    vehicle_type: Optional[str] = None,
    all_owners: bool = False,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    service = VehicleService(db)
    # admins may look at the whole fleet
    if all_owners and ctx.is_admin:
        return service.list_all(vehicle_type)
    return service.list_for_owner(ctx.user)


@router.delete("/{vehicle_id}", response_model=VehicleDeleteResult)
def delete_vehicle(
    vehicle_id: str,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    removed, retired = VehicleService(db).delete(ctx.user, vehicle_id)
    return {"id": vehicle_id, "removed": removed, "retired": retired}
