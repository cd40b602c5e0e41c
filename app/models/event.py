from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.sql import func

from app.core.db import Base


class FreightJobEvent(Base):
    __tablename__ = "freight_job_events"

    id = Column(String, primary_key=True)  # uuid
    job_id = Column(String, ForeignKey("freight_jobs.id", ondelete="CASCADE"), index=True, nullable=False)
    actor_user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)

    event_type = Column(String, nullable=False)  # CREATED, CLAIMED, FINALIZED
    message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
