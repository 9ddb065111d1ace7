"""Growth OS — Restaurant Client API Routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.models.client_models import Client, ClientCreate, ClientUpdate

logger = get_logger("api.clients")

router = APIRouter(prefix="/api/clients", tags=["Clients"])


@router.get("")
async def list_clients(
    limit: int = Query(100, ge=1, le=500),
    session: Session = Depends(get_session),
):
    """All clients, alphabetically."""
    clients = session.exec(
        select(Client).order_by(Client.name).limit(limit)  # type: ignore
    ).all()
    return {"status": "success", "count": len(clients), "clients": clients}


@router.post("", status_code=201)
async def create_client(body: ClientCreate, session: Session = Depends(get_session)):
    if session.get(Client, body.id):
        raise HTTPException(status_code=409, detail=f"Client '{body.id}' already exists")
    client = Client(**body.model_dump(mode="json"))
    session.add(client)
    session.commit()
    session.refresh(client)
    logger.info(f"Created client {client.name}", extra={"entity_id": client.id})
    return {"status": "success", "client": client}


@router.get("/{client_id}")
async def get_client(client_id: str, session: Session = Depends(get_session)):
    client = session.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail=f"Client '{client_id}' not found")
    return {"status": "success", "client": client}


@router.patch("/{client_id}")
async def update_client(
    client_id: str, body: ClientUpdate, session: Session = Depends(get_session)
):
    """Update only the fields present in the body."""
    client = session.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail=f"Client '{client_id}' not found")
    for field, value in body.model_dump(mode="json", exclude_unset=True, exclude_none=True).items():
        setattr(client, field, value)
    client.updated_at = datetime.now(timezone.utc)
    session.add(client)
    session.commit()
    session.refresh(client)
    return {"status": "success", "client": client}
