from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, require_admin
from app.core.db import get_db
from app.core.errors import NotFound
from app.models.alert import AlertRecord
from app.models.user import User, UserRole
from app.schemas.alert import AlertBroadcast, AlertOut
from app.schemas.user import AdminPasswordReset, AdminUserCreate, AdminUserUpdate, UserOut
from app.services.notifications import NotificationDispatcher, get_dispatcher
from app.services.reports import build_summary
from app.services.users import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


# -------- Users (ADMIN-only) --------
@router.get("/users", response_model=list[UserOut])
def admin_list_users(
    role: Optional[UserRole] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return UserService(db).list_users(role=role, q=q)


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def admin_create_user(
    payload: AdminUserCreate,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return UserService(db).create(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        tax_id=payload.tax_id,
        phone=payload.phone,
        is_active=payload.is_active,
    )


@router.patch("/users/{user_id}", response_model=UserOut)
def admin_update_user(
    user_id: str,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    return UserService(db).update_user(admin.user, user_id, **payload.model_dump(exclude_unset=True))


@router.post("/users/{user_id}/reset-password")
def admin_reset_password(
    user_id: str,
    payload: AdminPasswordReset,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    UserService(db).reset_password(admin.user, user_id, payload.new_password)
    return {"ok": True}


@router.delete("/users/{user_id}")
def admin_delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    UserService(db).delete_user(admin.user, user_id)
    return {"ok": True, "id": user_id}


# -------- Reports --------
@router.get("/reports")
def admin_reports(
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return build_summary(db)


# -------- Alerts --------
@router.post("/alerts", status_code=status.HTTP_202_ACCEPTED)
def admin_send_alert(
    payload: AlertBroadcast,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _admin: AuthContext = Depends(require_admin),
):
    if payload.user_id and not db.get(User, payload.user_id):
        raise NotFound("User not found")

    background_tasks.add_task(
        dispatcher.broadcast,
        payload.title.strip(),
        payload.message.strip(),
        user_id=payload.user_id,
        vehicle_type=payload.vehicle_type,
    )
    return {"ok": True, "queued": True}


@router.get("/alerts", response_model=list[AlertOut])
def admin_list_alerts(
    user_id: Optional[str] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    q = select(AlertRecord)
    if user_id:
        q = q.where(AlertRecord.user_id == user_id)
    q = q.order_by(AlertRecord.created_at.desc()).limit(max(1, min(limit, 500)))
    return list(db.scalars(q))
