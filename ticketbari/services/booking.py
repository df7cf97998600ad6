import logging
from typing import List
from sqlalchemy.orm import Session

from ticketbari.exceptions import (
    BookingNotFound, Forbidden, InsufficientQuantity, InvalidState,
    TicketNotBookable, TicketNotFound
)
from ticketbari.models.booking import Booking, BookingStatus
from ticketbari.models.ticket import Ticket, TicketStatus
from ticketbari.models.user import User, UserRole

logger = logging.getLogger(__name__)

REVIEW_STATUSES = {BookingStatus.ACCEPTED, BookingStatus.REJECTED}


class BookingService:
    @staticmethod
    def create_booking(db: Session, user: User, ticket_id: str, quantity: int) -> Booking:
        """
        Create a pending booking against an approved ticket.

        Availability is only checked here, not reserved: inventory is taken
        at settlement. The unit price is copied onto the booking so later
        listing edits do not change what the buyer owes.
        """
        ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
        if not ticket:
            raise TicketNotFound()

        if ticket.status != TicketStatus.APPROVED:
            raise TicketNotBookable()

        if ticket.vendor_id == user.id:
            raise InvalidState("Cannot book tickets for your own listing")

        if ticket.quantity < quantity:
            raise InsufficientQuantity(f"Only {ticket.quantity} tickets available")

        booking = Booking(
            ticket_id=ticket.id,
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            ticket_title=ticket.title,
            from_location=ticket.from_location,
            to_location=ticket.to_location,
            departure_date=ticket.departure_date,
            departure_time=ticket.departure_time,
            quantity=quantity,
            unit_price=ticket.price,
            total_price=ticket.price * quantity,
            status=BookingStatus.PENDING
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)

        logger.info(f"Booking {booking.id} created for ticket {ticket.id} ({quantity} seat(s))")
        return booking

    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Booking:
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise BookingNotFound()
        return booking

    @staticmethod
    def get_user_bookings(db: Session, user_id: str) -> List[Booking]:
        return db.query(Booking).filter(
            Booking.user_id == user_id
        ).order_by(Booking.created_at.desc()).all()

    @staticmethod
    def get_vendor_bookings(db: Session, vendor_id: str) -> List[Booking]:
        """Bookings made against any of the vendor's tickets."""
        return db.query(Booking).join(Ticket, Booking.ticket_id == Ticket.id).filter(
            Ticket.vendor_id == vendor_id
        ).order_by(Booking.created_at.desc()).all()

    @staticmethod
    def update_status(db: Session, actor: User, booking_id: str, status: BookingStatus) -> Booking:
        """Vendor or admin review of a pending booking."""
        if status not in REVIEW_STATUSES:
            raise InvalidState("Booking status can only be set to accepted or rejected")

        booking = BookingService.get_booking(db, booking_id)

        if actor.role != UserRole.ADMIN and booking.ticket.vendor_id != actor.id:
            raise Forbidden("Only the ticket's vendor can review this booking")

        if booking.status != BookingStatus.PENDING:
            raise InvalidState(f"Booking is already {booking.status.value}")

        booking.status = status
        db.commit()
        db.refresh(booking)

        logger.info(f"Booking {booking.id} {status.value} by {actor.id}")
        return booking
