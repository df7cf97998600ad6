from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketbari.database import get_db
from ticketbari.services.auth import get_current_user_required
from ticketbari.services.payment import PaymentService
from ticketbari.schemas.transaction import TransactionResponse
from ticketbari.models.user import User

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("/me")
async def my_transactions(
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    transactions = PaymentService.get_user_transactions(db, user.id)
    return {
        "success": True,
        "data": [TransactionResponse.model_validate(t) for t in transactions]
    }
