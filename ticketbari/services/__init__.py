from ticketbari.services.auth import AuthService
from ticketbari.services.ticket import TicketService
from ticketbari.services.booking import BookingService
from ticketbari.services.payment import PaymentService
from ticketbari.services.moderation import ModerationService
from ticketbari.services.email import EmailService

__all__ = [
    "AuthService",
    "TicketService",
    "BookingService",
    "PaymentService",
    "ModerationService",
    "EmailService"
]
