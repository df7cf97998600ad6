from sqlalchemy import (
    Column, String, Float, Integer, Date, DateTime, ForeignKey, Enum, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ticketbari.database import Base, generate_id
import enum


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"


TERMINAL_BOOKING_STATUSES = {
    BookingStatus.PAID,
    BookingStatus.REJECTED,
    BookingStatus.PAYMENT_FAILED,
}


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=generate_id)
    ticket_id = Column(String(32), ForeignKey("tickets.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    user_email = Column(String(255), nullable=False)
    ticket_title = Column(String(200), nullable=False)
    from_location = Column(String(100), nullable=False)
    to_location = Column(String(100), nullable=False)
    departure_date = Column(Date, nullable=True)
    departure_time = Column(String(10), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False)
    checkout_session_id = Column(String(255), nullable=True, index=True)
    transaction_id = Column(String(255), nullable=True)
    payment_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    ticket = relationship("Ticket", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
    )
