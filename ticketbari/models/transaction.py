from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ticketbari.database import Base, generate_id
import enum


class TransactionStatus(str, enum.Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class Transaction(Base):
    """Append-only record of one settlement attempt."""

    __tablename__ = "transactions"

    id = Column(String(32), primary_key=True, default=generate_id)
    transaction_ref = Column(String(255), nullable=True, index=True)
    booking_id = Column(String(32), ForeignKey("bookings.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    ticket_title = Column(String(200), nullable=False)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(20), default="card", nullable=False)
    status = Column(Enum(TransactionStatus), nullable=False)
    note = Column(String(500), nullable=True)
    payment_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="transactions")
    booking = relationship("Booking")
