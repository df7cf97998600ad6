from ticketbari.routers.auth import router as auth_router
from ticketbari.routers.tickets import router as tickets_router
from ticketbari.routers.bookings import router as bookings_router
from ticketbari.routers.payments import router as payments_router
from ticketbari.routers.transactions import router as transactions_router
from ticketbari.routers.admin import router as admin_router

__all__ = [
    "auth_router",
    "tickets_router",
    "bookings_router",
    "payments_router",
    "transactions_router",
    "admin_router"
]
