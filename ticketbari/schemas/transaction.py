from datetime import datetime
from typing import Optional

from ticketbari.models.transaction import TransactionStatus
from ticketbari.schemas.base import CamelModel


class TransactionResponse(CamelModel):
    id: str
    transaction_ref: Optional[str]
    booking_id: str
    user_id: str
    ticket_title: str
    amount: float
    payment_method: str
    status: TransactionStatus
    note: Optional[str]
    payment_date: datetime
    created_at: Optional[datetime]
