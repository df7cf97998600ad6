from pydantic import Field, field_validator
from datetime import date, datetime
from typing import List, Optional

from ticketbari.models.ticket import TicketStatus, TransportType
from ticketbari.schemas.base import CamelModel


class TicketCreate(CamelModel):
    title: str
    from_location: str = Field(alias="from")
    to_location: str = Field(alias="to")
    transport_type: TransportType
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)
    departure_date: Optional[date] = None
    departure_time: Optional[str] = None
    perks: List[str] = []
    image_url: Optional[str] = None


class TicketUpdate(CamelModel):
    title: Optional[str] = None
    from_location: Optional[str] = Field(default=None, alias="from")
    to_location: Optional[str] = Field(default=None, alias="to")
    transport_type: Optional[TransportType] = None
    price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    departure_date: Optional[date] = None
    departure_time: Optional[str] = None
    perks: Optional[List[str]] = None
    image_url: Optional[str] = None

    @field_validator("title", "from_location", "to_location", "transport_type", "price", "quantity")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("cannot be null")
        return v


class TicketResponse(CamelModel):
    id: str
    vendor_id: str
    vendor_name: str
    vendor_email: str
    title: str
    from_location: str = Field(alias="from")
    to_location: str = Field(alias="to")
    transport_type: TransportType
    price: float
    quantity: int
    departure_date: Optional[date]
    departure_time: Optional[str]
    perks: Optional[List[str]] = None
    image_url: Optional[str]
    status: TicketStatus
    is_advertised: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class TicketStatusUpdate(CamelModel):
    status: TicketStatus


class AdvertiseUpdate(CamelModel):
    is_advertised: bool
