import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from sqlalchemy.orm import Session

from ticketbari.database import get_db
from ticketbari.exceptions import InvalidState, InventoryConflict, NotFound
from ticketbari.services.auth import get_current_user_required
from ticketbari.services.email import EmailService
from ticketbari.services.payment import PaymentService, StripeGateway, get_payment_gateway
from ticketbari.schemas.booking import BookingResponse
from ticketbari.schemas.payment import CheckoutSessionCreate, CheckoutSessionResponse, PaymentVerify
from ticketbari.models.booking import Booking
from ticketbari.models.user import User

router = APIRouter(prefix="/payment", tags=["payments"])
logger = logging.getLogger(__name__)


def _queue_confirmation(background_tasks: BackgroundTasks, booking: Booking):
    background_tasks.add_task(
        EmailService.send_payment_confirmation,
        booking.user_email,
        booking.user_name,
        booking.ticket_title,
        booking.quantity,
        booking.total_price,
        booking.transaction_id
    )


@router.post("/create-session")
async def create_session(
    session_data: CheckoutSessionCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    session = PaymentService.create_checkout_session(db, gateway, user, session_data.booking_id)
    return {
        "success": True,
        "data": CheckoutSessionResponse(session_id=session.id, url=session.url or "")
    }


@router.post("/verify")
async def verify_payment(
    verify_data: PaymentVerify,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    booking, settled = PaymentService.verify_payment(db, gateway, verify_data.session_id, user)

    if settled:
        _queue_confirmation(background_tasks, booking)

    return {
        "success": True,
        "message": "Payment successful" if settled else "Payment already processed",
        "data": BookingResponse.model_validate(booking)
    }


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: str = Header(None, alias="stripe-signature"),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    if not stripe_signature:
        raise InvalidState("Missing signature")

    payload = await request.body()

    try:
        event = gateway.construct_event(payload, stripe_signature)
    except ValueError:
        raise InvalidState("Invalid signature")

    if event["type"] != "checkout.session.completed":
        return {"received": True}

    try:
        booking, settled = PaymentService.handle_checkout_completed(db, event["data"]["object"])
    except InventoryConflict as e:
        # Already recorded as payment_failed; acknowledging stops gateway retries
        logger.error(f"Webhook settlement conflict: {e.message}")
        return {"received": True, "settled": False}
    except (NotFound, InvalidState) as e:
        logger.warning(f"Webhook event {event.get('id')} not settled: {e.message}")
        return {"received": True, "settled": False}

    if settled:
        _queue_confirmation(background_tasks, booking)

    return {"received": True, "settled": True}
