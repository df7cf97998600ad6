import logging
from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlalchemy.orm import Session

from ticketbari.exceptions import Conflict, Forbidden, InvalidState, TicketNotFound
from ticketbari.models.booking import Booking, TERMINAL_BOOKING_STATUSES
from ticketbari.models.ticket import Ticket, TicketStatus, TransportType
from ticketbari.models.user import User, UserRole
from ticketbari.schemas.ticket import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)

LATEST_TICKETS_LIMIT = 8


class TicketService:
    @staticmethod
    def browse(
        db: Session,
        from_location: Optional[str] = None,
        to_location: Optional[str] = None,
        transport_type: Optional[TransportType] = None,
        sort_by: Optional[str] = None,
        page: int = 1,
        limit: int = 9
    ) -> Tuple[List[Ticket], int]:
        """Approved tickets matching the filters, one page at a time."""
        query = db.query(Ticket).filter(Ticket.status == TicketStatus.APPROVED)

        if from_location:
            query = query.filter(Ticket.from_location.ilike(f"%{from_location}%"))
        if to_location:
            query = query.filter(Ticket.to_location.ilike(f"%{to_location}%"))
        if transport_type:
            query = query.filter(Ticket.transport_type == transport_type)

        if sort_by == "price-asc":
            query = query.order_by(Ticket.price.asc())
        elif sort_by == "price-desc":
            query = query.order_by(Ticket.price.desc())
        else:
            query = query.order_by(Ticket.created_at.desc())

        total = query.count()
        tickets = query.offset((page - 1) * limit).limit(limit).all()
        return tickets, total

    @staticmethod
    def get_ticket(db: Session, ticket_id: str) -> Ticket:
        ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
        if not ticket:
            raise TicketNotFound()
        return ticket

    @staticmethod
    def get_latest(db: Session) -> List[Ticket]:
        return db.query(Ticket).filter(
            Ticket.status == TicketStatus.APPROVED
        ).order_by(Ticket.created_at.desc()).limit(LATEST_TICKETS_LIMIT).all()

    @staticmethod
    def get_advertised(db: Session, limit: int) -> List[Ticket]:
        return db.query(Ticket).filter(
            Ticket.status == TicketStatus.APPROVED,
            Ticket.is_advertised.is_(True)
        ).limit(limit).all()

    @staticmethod
    def get_vendor_tickets(db: Session, vendor_id: str) -> List[Ticket]:
        return db.query(Ticket).filter(
            Ticket.vendor_id == vendor_id
        ).order_by(Ticket.created_at.desc()).all()

    @staticmethod
    def create_ticket(db: Session, vendor: User, ticket_data: TicketCreate) -> Ticket:
        if vendor.is_fraud:
            raise Forbidden("Vendors marked as fraud cannot add tickets")

        ticket = Ticket(
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            vendor_email=vendor.email,
            title=ticket_data.title,
            from_location=ticket_data.from_location,
            to_location=ticket_data.to_location,
            transport_type=ticket_data.transport_type,
            price=ticket_data.price,
            quantity=ticket_data.quantity,
            departure_date=ticket_data.departure_date,
            departure_time=ticket_data.departure_time,
            perks=ticket_data.perks,
            image_url=ticket_data.image_url,
            status=TicketStatus.PENDING,
            is_advertised=False
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)

        logger.info(f"Ticket {ticket.id} added by vendor {vendor.id}, awaiting approval")
        return ticket

    @staticmethod
    def update_ticket(db: Session, vendor: User, ticket_id: str, ticket_data: TicketUpdate) -> Ticket:
        """
        Edit listing details. Moderation fields are never touched here.

        Seat count can only change while no booking is pending or accepted,
        and is written only if it still holds the value read here, so a
        settlement that lands in between is never overwritten.
        """
        ticket = TicketService.get_ticket(db, ticket_id)

        if ticket.vendor_id != vendor.id:
            raise Forbidden("You can only edit your own tickets")

        changes = ticket_data.model_dump(exclude_unset=True)
        new_quantity = changes.pop("quantity", None)

        if new_quantity is not None and new_quantity != ticket.quantity:
            open_bookings = db.query(Booking).filter(
                Booking.ticket_id == ticket.id,
                Booking.status.notin_(TERMINAL_BOOKING_STATUSES)
            ).count()
            if open_bookings:
                raise InvalidState("Seat count cannot change while bookings are pending or accepted")

            result = db.execute(
                update(Ticket)
                .where(Ticket.id == ticket.id, Ticket.quantity == ticket.quantity)
                .values(quantity=new_quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                raise Conflict("Seat count changed, reload the ticket and try again")

        for key, value in changes.items():
            setattr(ticket, key, value)

        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def delete_ticket(db: Session, actor: User, ticket_id: str) -> None:
        ticket = TicketService.get_ticket(db, ticket_id)

        if ticket.vendor_id != actor.id and actor.role != UserRole.ADMIN:
            raise Forbidden("You can only delete your own tickets")

        if ticket.bookings:
            raise InvalidState("Tickets with bookings cannot be deleted")

        db.delete(ticket)
        db.commit()
        logger.info(f"Ticket {ticket_id} deleted by {actor.id}")
