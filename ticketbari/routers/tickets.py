from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ticketbari.config import get_settings
from ticketbari.database import get_db
from ticketbari.services.auth import get_current_vendor, get_current_vendor_or_admin
from ticketbari.services.ticket import TicketService
from ticketbari.schemas.base import Pagination
from ticketbari.schemas.ticket import TicketCreate, TicketUpdate, TicketResponse
from ticketbari.models.ticket import TransportType
from ticketbari.models.user import User

router = APIRouter(prefix="/tickets", tags=["tickets"])
settings = get_settings()


def _serialize(tickets):
    return [TicketResponse.model_validate(t) for t in tickets]


@router.get("")
async def browse_tickets(
    from_location: Optional[str] = Query(None, alias="from"),
    to_location: Optional[str] = Query(None, alias="to"),
    transport_type: Optional[TransportType] = Query(None, alias="transportType"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(9, ge=1, le=100),
    db: Session = Depends(get_db)
):
    tickets, total = TicketService.browse(
        db,
        from_location=from_location,
        to_location=to_location,
        transport_type=transport_type,
        sort_by=sort_by,
        page=page,
        limit=limit
    )

    return {
        "success": True,
        "data": _serialize(tickets),
        "pagination": Pagination(page=page, limit=limit, total=total, pages=ceil(total / limit))
    }


@router.get("/latest")
async def latest_tickets(db: Session = Depends(get_db)):
    return {"success": True, "data": _serialize(TicketService.get_latest(db))}


@router.get("/advertised")
async def advertised_tickets(db: Session = Depends(get_db)):
    tickets = TicketService.get_advertised(db, settings.max_advertised_tickets)
    return {"success": True, "data": _serialize(tickets)}


@router.get("/vendor/me")
async def my_tickets(
    vendor: User = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": _serialize(TicketService.get_vendor_tickets(db, vendor.id))}


@router.get("/{ticket_id}")
async def get_ticket(ticket_id: str, db: Session = Depends(get_db)):
    ticket = TicketService.get_ticket(db, ticket_id)
    return {"success": True, "data": TicketResponse.model_validate(ticket)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket_data: TicketCreate,
    vendor: User = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    ticket = TicketService.create_ticket(db, vendor, ticket_data)
    return {
        "success": True,
        "message": "Ticket added successfully. Waiting for admin approval.",
        "data": TicketResponse.model_validate(ticket)
    }


@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    ticket_data: TicketUpdate,
    vendor: User = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    ticket = TicketService.update_ticket(db, vendor, ticket_id, ticket_data)
    return {
        "success": True,
        "message": "Ticket updated successfully",
        "data": TicketResponse.model_validate(ticket)
    }


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    user: User = Depends(get_current_vendor_or_admin),
    db: Session = Depends(get_db)
):
    TicketService.delete_ticket(db, user, ticket_id)
    return {"success": True, "message": "Ticket deleted successfully"}
