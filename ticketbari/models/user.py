from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ticketbari.database import Base, generate_id
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    VENDOR = "vendor"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    photo_url = Column(String(500), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    is_fraud = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    tickets = relationship("Ticket", back_populates="vendor")
    bookings = relationship("Booking", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")
