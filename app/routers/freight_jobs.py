from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context, require_admin, require_driver
from app.core.config import settings
from app.core.db import get_db
from app.models.freight_job import FreightStatus
from app.schemas.freight_job import FreightJobCreate, FreightJobEventOut, FreightJobOut, FreightJobPage
from app.services.freight_jobs import FreightJobService
from app.services.notifications import NotificationDispatcher, get_dispatcher

router = APIRouter(prefix="/freight-jobs", tags=["freight-jobs"])


def get_service(db: Session = Depends(get_db)) -> FreightJobService:
    return FreightJobService(db)


@router.post("", response_model=FreightJobOut, status_code=status.HTTP_201_CREATED)
def create_freight_job(
    payload: FreightJobCreate,
    background_tasks: BackgroundTasks,
    service: FreightJobService = Depends(get_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    ctx: AuthContext = Depends(require_admin),
):
    job = service.create(ctx.user, payload)
    # runs after the response is sent; the job row is already committed
    background_tasks.add_task(dispatcher.notify_new_job, job.id)
    return service.to_out([job])[0]


@router.get("", response_model=FreightJobPage)
def list_freight_jobs(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status_filter: Optional[FreightStatus] = Query(None, alias="status"),
    vehicle_type: Optional[str] = None,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    service: FreightJobService = Depends(get_service),
    _ctx: AuthContext = Depends(require_admin),
):
    jobs, pagination = service.list_paginated(
        page=page,
        page_size=page_size,
        status=status_filter,
        vehicle_type=vehicle_type,
        origin=origin,
        destination=destination,
    )
    return {"data": service.to_out(jobs), "pagination": pagination}


@router.get("/available", response_model=list[FreightJobOut])
def list_available_freight_jobs(
    vehicle_type: Optional[str] = None,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    service: FreightJobService = Depends(get_service),
    _ctx: AuthContext = Depends(get_auth_context),
):
    return service.to_out(service.list_available(vehicle_type, origin, destination))


@router.get("/mine", response_model=list[FreightJobOut])
def list_my_freight_jobs(
    service: FreightJobService = Depends(get_service),
    ctx: AuthContext = Depends(require_driver),
):
    return service.to_out(service.list_for_driver(ctx.user))


@router.get("/{job_id}", response_model=FreightJobOut)
def get_freight_job(
    job_id: str,
    service: FreightJobService = Depends(get_service),
    _ctx: AuthContext = Depends(get_auth_context),
):
    return service.to_out([service.get(job_id)])[0]


@router.get("/{job_id}/events", response_model=list[FreightJobEventOut])
def get_freight_job_events(
    job_id: str,
    service: FreightJobService = Depends(get_service),
    _ctx: AuthContext = Depends(require_admin),
):
    return service.events(job_id)


@router.post("/{job_id}/claim", response_model=FreightJobOut)
def claim_freight_job(
    job_id: str,
    service: FreightJobService = Depends(get_service),
    ctx: AuthContext = Depends(require_driver),
):
    return service.to_out([service.claim(ctx.user, job_id)])[0]


@router.post("/{job_id}/finalize", response_model=FreightJobOut)
def finalize_freight_job(
    job_id: str,
    service: FreightJobService = Depends(get_service),
    ctx: AuthContext = Depends(require_admin),
):
    return service.to_out([service.finalize(ctx.user, job_id)])[0]


@router.delete("/{job_id}")
def delete_freight_job(
    job_id: str,
    service: FreightJobService = Depends(get_service),
    ctx: AuthContext = Depends(require_admin),
):
    service.delete(ctx.user, job_id)
    return {"ok": True, "id": job_id}
