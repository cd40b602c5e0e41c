import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Text

from app.core.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class AlertType(str, enum.Enum):
    NEW_JOB = "NOVO_FRETE"
    NOTICE = "AVISO"


class AlertRecord(Base):
    """Append-only log of push alerts delivered to a user."""

    __tablename__ = "alerts"

    id = Column(String, primary_key=True)  # uuid
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    alert_type = Column(String, nullable=False)
    job_id = Column(String, ForeignKey("freight_jobs.id", ondelete="SET NULL"), index=True, nullable=True)

    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
