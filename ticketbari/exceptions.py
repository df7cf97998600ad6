class MarketplaceError(Exception):
    """
    Base exception for marketplace errors.
    Carries the HTTP status the handler boundary responds with.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(MarketplaceError):
    status_code = 404
    default_message = "Not found"


class TicketNotFound(NotFound):
    default_message = "Ticket not found"


class BookingNotFound(NotFound):
    default_message = "Booking not found"


class UserNotFound(NotFound):
    default_message = "User not found"


class InvalidState(MarketplaceError):
    """Operation is not valid for the entity's current status."""

    status_code = 400
    default_message = "Operation not allowed in the current state"


class TicketNotBookable(InvalidState):
    default_message = "Ticket is not available for booking"


class PaymentNotCompleted(InvalidState):
    default_message = "Payment not completed"


class InsufficientInventory(MarketplaceError):
    status_code = 400
    default_message = "Not enough tickets available"


class InsufficientQuantity(InsufficientInventory):
    """Soft check at booking time."""


class InventoryConflict(InsufficientInventory):
    """Hard check at settlement time; payment was taken but seats ran out."""

    status_code = 409
    default_message = (
        "Not enough tickets left to complete this booking. "
        "Payment requires manual reconciliation."
    )


class Unauthorized(MarketplaceError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(MarketplaceError):
    status_code = 403
    default_message = "Not authorized"


class Conflict(MarketplaceError):
    status_code = 409
    default_message = "Resource already exists"


class PaymentGatewayError(MarketplaceError):
    status_code = 502
    default_message = "Payment gateway error"
