import logging
from typing import List, Optional, Tuple
from sqlalchemy import func, update
from sqlalchemy.orm import Session

from ticketbari.config import get_settings
from ticketbari.exceptions import InvalidState, UserNotFound
from ticketbari.models.booking import Booking
from ticketbari.models.ticket import Ticket, TicketStatus
from ticketbari.models.transaction import Transaction, TransactionStatus
from ticketbari.models.user import User, UserRole
from ticketbari.services.ticket import TicketService

settings = get_settings()
logger = logging.getLogger(__name__)


class ModerationService:
    @staticmethod
    def set_ticket_status(db: Session, ticket_id: str, status: TicketStatus) -> Ticket:
        if status == TicketStatus.PENDING:
            raise InvalidState("Tickets can only be approved or rejected")

        ticket = TicketService.get_ticket(db, ticket_id)
        ticket.status = status
        db.commit()
        db.refresh(ticket)

        logger.info(f"Ticket {ticket_id} {status.value}")
        return ticket

    @staticmethod
    def set_advertised(db: Session, ticket_id: str, is_advertised: bool) -> Ticket:
        """
        Toggle a ticket's advertisement.
        The cap is a count-then-set check, so concurrent requests can overshoot it.
        """
        ticket = TicketService.get_ticket(db, ticket_id)

        if is_advertised:
            if ticket.status != TicketStatus.APPROVED:
                raise InvalidState("Only approved tickets can be advertised")

            advertised_count = db.query(Ticket).filter(
                Ticket.is_advertised.is_(True),
                Ticket.id != ticket_id
            ).count()

            if advertised_count >= settings.max_advertised_tickets:
                raise InvalidState(
                    f"Maximum {settings.max_advertised_tickets} tickets can be advertised at a time"
                )

        ticket.is_advertised = is_advertised
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        return user

    @staticmethod
    def set_role(db: Session, admin: User, user_id: str, role: UserRole) -> User:
        target_user = ModerationService.get_user(db, user_id)

        if target_user.id == admin.id:
            raise InvalidState("Cannot modify your own role")

        target_user.role = role
        db.commit()
        db.refresh(target_user)
        return target_user

    @staticmethod
    def set_fraud(db: Session, user_id: str, is_fraud: bool) -> User:
        """Flag a vendor as fraudulent. Flagging rejects every listing they own."""
        target_user = ModerationService.get_user(db, user_id)

        if is_fraud and target_user.role != UserRole.VENDOR:
            raise InvalidState("Only vendors can be marked as fraud")

        target_user.is_fraud = is_fraud

        if is_fraud:
            result = db.execute(
                update(Ticket)
                .where(Ticket.vendor_id == target_user.id)
                .values(status=TicketStatus.REJECTED)
                .execution_options(synchronize_session=False)
            )
            logger.warning(
                f"Vendor {target_user.id} marked as fraud, {result.rowcount} ticket(s) rejected"
            )

        db.commit()
        db.expire_all()
        db.refresh(target_user)
        return target_user

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.desc()).all()

    @staticmethod
    def list_tickets(db: Session) -> List[Ticket]:
        return db.query(Ticket).order_by(Ticket.created_at.desc()).all()

    @staticmethod
    def list_transactions(
        db: Session,
        status: Optional[TransactionStatus] = None,
        page: int = 1,
        per_page: int = 20
    ) -> Tuple[List[Transaction], int]:
        query = db.query(Transaction)

        if status:
            query = query.filter(Transaction.status == status)

        total = query.count()
        transactions = query.order_by(
            Transaction.payment_date.desc()
        ).offset((page - 1) * per_page).limit(per_page).all()
        return transactions, total

    @staticmethod
    def get_stats(db: Session) -> dict:
        revenue = db.query(func.sum(Transaction.amount)).filter(
            Transaction.status == TransactionStatus.COMPLETED
        ).scalar() or 0

        return {
            "totalUsers": db.query(User).count(),
            "totalVendors": db.query(User).filter(User.role == UserRole.VENDOR).count(),
            "totalTickets": db.query(Ticket).count(),
            "pendingTickets": db.query(Ticket).filter(
                Ticket.status == TicketStatus.PENDING
            ).count(),
            "totalBookings": db.query(Booking).count(),
            "completedTransactions": db.query(Transaction).filter(
                Transaction.status == TransactionStatus.COMPLETED
            ).count(),
            "failedTransactions": db.query(Transaction).filter(
                Transaction.status == TransactionStatus.FAILED
            ).count(),
            "revenue": revenue
        }
