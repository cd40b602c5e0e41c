import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationError
from app.models.client import Client
from app.models.freight_job import FreightJob
from app.schemas.client import ClientCreate


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, client_id: str) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFound("Client not found")
        return client

    def create(self, payload: ClientCreate) -> Client:
        name = payload.name.strip()
        if not name:
            raise ValidationError("name is required")
        client = Client(
            id=str(uuid.uuid4()),
            name=name,
            email=payload.email.lower() if payload.email else None,
            tax_id=(payload.tax_id or "").strip() or None,
            phone=(payload.phone or "").strip() or None,
            contact_name=(payload.contact_name or "").strip() or None,
        )
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def list_clients(self, q: str | None = None) -> list[Client]:
        query = select(Client)
        if q:
            like = f"%{q.strip()}%"
            query = query.where(Client.name.ilike(like) | Client.tax_id.ilike(like))
        return list(self.db.scalars(query.order_by(Client.name.asc())))

    def delete(self, client_id: str) -> None:
        client = self.get(client_id)
        if self.db.scalars(select(FreightJob.id).where(FreightJob.client_id == client.id)).first():
            raise Conflict("Client has freight jobs")
        self.db.delete(client)
        self.db.commit()
