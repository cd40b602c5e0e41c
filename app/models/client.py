from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from app.core.db import Base


class Client(Base):
    """Shipper that hires the freight."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True)  # uuid
    name = Column(String, nullable=False)
    email = Column(String, index=True, nullable=True)
    tax_id = Column(String, nullable=True)  # CNPJ
    phone = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
