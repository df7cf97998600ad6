from pydantic import Field
from datetime import date, datetime
from typing import Optional

from ticketbari.models.booking import BookingStatus
from ticketbari.schemas.base import CamelModel


class BookingCreate(CamelModel):
    ticket_id: str
    quantity: int = Field(default=1, gt=0)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingResponse(CamelModel):
    id: str
    ticket_id: str
    user_id: str
    user_name: str
    user_email: str
    ticket_title: str
    from_location: str = Field(alias="from")
    to_location: str = Field(alias="to")
    departure_date: Optional[date]
    departure_time: Optional[str]
    quantity: int
    unit_price: float
    total_price: float
    status: BookingStatus
    transaction_id: Optional[str]
    payment_date: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
