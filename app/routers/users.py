from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.db import get_db
from app.schemas.user import ProfileUpdate, PushTokenUpdate, UserOut
from app.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def get_profile(ctx: AuthContext = Depends(get_auth_context)):
    return ctx.user


@router.patch("/me", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return UserService(db).update_profile(ctx.user, name=payload.name, phone=payload.phone, tax_id=payload.tax_id)


@router.put("/me/push-token", response_model=UserOut)
def set_push_token(
    payload: PushTokenUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return UserService(db).set_push_token(ctx.user, payload.token, payload.platform)


@router.delete("/me/push-token", response_model=UserOut)
def clear_push_token(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    return UserService(db).clear_push_token(ctx.user)
