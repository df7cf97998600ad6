from ticketbari.schemas.user import UserCreate, UserLogin, UserResponse, RoleUpdate, FraudUpdate
from ticketbari.schemas.ticket import (
    TicketCreate, TicketUpdate, TicketResponse, TicketStatusUpdate, AdvertiseUpdate
)
from ticketbari.schemas.booking import BookingCreate, BookingStatusUpdate, BookingResponse
from ticketbari.schemas.payment import CheckoutSessionCreate, CheckoutSessionResponse, PaymentVerify
from ticketbari.schemas.transaction import TransactionResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "RoleUpdate", "FraudUpdate",
    "TicketCreate", "TicketUpdate", "TicketResponse", "TicketStatusUpdate", "AdvertiseUpdate",
    "BookingCreate", "BookingStatusUpdate", "BookingResponse",
    "CheckoutSessionCreate", "CheckoutSessionResponse", "PaymentVerify",
    "TransactionResponse"
]
