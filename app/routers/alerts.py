from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.db import get_db
from app.models.alert import AlertRecord
from app.schemas.alert import AlertOut

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("/me", response_model=list[AlertOut])
def my_alerts(
    limit: int = 50,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context),
):
    q = (
        select(AlertRecord)
        .where(AlertRecord.user_id == ctx.user_id)
        .order_by(AlertRecord.created_at.desc())
        .limit(max(1, min(limit, 200)))
    )
    return list(db.scalars(q))
