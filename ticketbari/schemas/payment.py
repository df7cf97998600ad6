from ticketbari.schemas.base import CamelModel


class CheckoutSessionCreate(CamelModel):
    booking_id: str


class CheckoutSessionResponse(CamelModel):
    session_id: str
    url: str


class PaymentVerify(CamelModel):
    session_id: str
