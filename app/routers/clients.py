from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, require_admin
from app.core.db import get_db
from app.schemas.client import ClientCreate, ClientOut
from app.services.clients import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return ClientService(db).create(payload)


@router.get("", response_model=list[ClientOut])
def list_clients(
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return ClientService(db).list_clients(q)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: str,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    return ClientService(db).get(client_id)


@router.delete("/{client_id}")
def delete_client(
    client_id: str,
    db: Session = Depends(get_db),
    _admin: AuthContext = Depends(require_admin),
):
    ClientService(db).delete(client_id)
    return {"ok": True, "id": client_id}
