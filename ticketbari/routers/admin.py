from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketbari.database import get_db
from ticketbari.services.auth import get_current_admin
from ticketbari.services.moderation import ModerationService
from ticketbari.schemas.base import Pagination
from ticketbari.schemas.ticket import AdvertiseUpdate, TicketResponse, TicketStatusUpdate
from ticketbari.schemas.transaction import TransactionResponse
from ticketbari.schemas.user import FraudUpdate, RoleUpdate, UserResponse
from ticketbari.models.transaction import TransactionStatus
from ticketbari.models.user import User

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats")
async def admin_stats(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": ModerationService.get_stats(db)}


@router.get("/tickets")
async def admin_tickets(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    tickets = ModerationService.list_tickets(db)
    return {"success": True, "data": [TicketResponse.model_validate(t) for t in tickets]}


@router.put("/tickets/{ticket_id}/status")
async def set_ticket_status(
    ticket_id: str,
    status_data: TicketStatusUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    ticket = ModerationService.set_ticket_status(db, ticket_id, status_data.status)
    return {
        "success": True,
        "message": f"Ticket {ticket.status.value} successfully",
        "data": TicketResponse.model_validate(ticket)
    }


@router.put("/tickets/{ticket_id}/advertise")
async def set_ticket_advertised(
    ticket_id: str,
    advertise_data: AdvertiseUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    ticket = ModerationService.set_advertised(db, ticket_id, advertise_data.is_advertised)
    return {
        "success": True,
        "message": "Ticket advertised" if ticket.is_advertised else "Advertisement removed",
        "data": TicketResponse.model_validate(ticket)
    }


@router.get("/users")
async def admin_users(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    users = ModerationService.list_users(db)
    return {"success": True, "data": [UserResponse.model_validate(u) for u in users]}


@router.put("/users/{user_id}/role")
async def set_user_role(
    user_id: str,
    role_data: RoleUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    target_user = ModerationService.set_role(db, admin, user_id, role_data.role)
    return {
        "success": True,
        "message": f"User role updated to {target_user.role.value}",
        "data": UserResponse.model_validate(target_user)
    }


@router.put("/users/{user_id}/fraud")
async def set_user_fraud(
    user_id: str,
    fraud_data: FraudUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    target_user = ModerationService.set_fraud(db, user_id, fraud_data.is_fraud)
    return {
        "success": True,
        "message": "Vendor marked as fraud" if target_user.is_fraud else "Fraud status removed",
        "data": UserResponse.model_validate(target_user)
    }


@router.get("/transactions")
async def admin_transactions(
    page: int = Query(1, ge=1),
    status: Optional[TransactionStatus] = None,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    per_page = 20
    transactions, total = ModerationService.list_transactions(db, status, page, per_page)

    return {
        "success": True,
        "data": [TransactionResponse.model_validate(t) for t in transactions],
        "pagination": Pagination(page=page, limit=per_page, total=total, pages=ceil(total / per_page))
    }
