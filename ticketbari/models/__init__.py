from ticketbari.models.user import User
from ticketbari.models.ticket import Ticket
from ticketbari.models.booking import Booking
from ticketbari.models.transaction import Transaction

__all__ = ["User", "Ticket", "Booking", "Transaction"]
