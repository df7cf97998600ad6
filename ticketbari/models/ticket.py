from sqlalchemy import (
    Column, String, Float, Integer, Boolean, Date, DateTime, ForeignKey, Enum, JSON,
    CheckConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ticketbari.database import Base, generate_id
import enum


class TicketStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransportType(str, enum.Enum):
    BUS = "bus"
    TRAIN = "train"
    LAUNCH = "launch"
    PLANE = "plane"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(32), primary_key=True, default=generate_id)
    vendor_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    vendor_name = Column(String(100), nullable=False)
    vendor_email = Column(String(255), nullable=False)
    title = Column(String(200), nullable=False)
    from_location = Column(String(100), nullable=False)
    to_location = Column(String(100), nullable=False)
    transport_type = Column(Enum(TransportType), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    departure_date = Column(Date, nullable=True)
    departure_time = Column(String(10), nullable=True)
    perks = Column(JSON, default=list)
    image_url = Column(String(500), nullable=True)
    status = Column(Enum(TicketStatus), default=TicketStatus.PENDING, nullable=False)
    is_advertised = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    vendor = relationship("User", back_populates="tickets")
    bookings = relationship("Booking", back_populates="ticket")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_ticket_quantity_non_negative"),
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        Index("ix_tickets_status_advertised", "status", "is_advertised"),
        Index("ix_tickets_route", "from_location", "to_location"),
    )
