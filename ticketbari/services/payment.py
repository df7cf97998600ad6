import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

import stripe
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketbari.config import get_settings
from ticketbari.exceptions import (
    BookingNotFound, Forbidden, InvalidState, InventoryConflict,
    PaymentGatewayError, PaymentNotCompleted
)
from ticketbari.models.booking import Booking, BookingStatus
from ticketbari.models.ticket import Ticket
from ticketbari.models.transaction import Transaction, TransactionStatus
from ticketbari.models.user import User

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    id: str
    url: Optional[str]


@dataclass
class GatewaySession:
    id: str
    payment_status: str
    payment_reference: Optional[str]
    metadata: dict = field(default_factory=dict)


class StripeGateway:
    """Card payments through Stripe Checkout."""

    def __init__(self, api_key: str, webhook_secret: str, currency: str):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.currency = currency

    def create_checkout_session(
        self,
        amount: float,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: dict
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=[{
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": description},
                        "unit_amount": int(round(amount * 100))
                    },
                    "quantity": 1
                }],
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata
            )
        except stripe.StripeError as e:
            raise PaymentGatewayError(f"Stripe error: {str(e)}")

        return CheckoutSession(id=session.id, url=session.url)

    def retrieve_session(self, session_id: str) -> GatewaySession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise PaymentGatewayError(f"Stripe error: {str(e)}")

        return self.session_from_object(session)

    @staticmethod
    def session_from_object(session) -> GatewaySession:
        metadata = session.get("metadata") or {}
        return GatewaySession(
            id=session.get("id"),
            payment_status=session.get("payment_status"),
            payment_reference=session.get("payment_intent"),
            metadata=dict(metadata)
        )

    def construct_event(self, payload: bytes, signature: str) -> dict:
        """Verify Stripe webhook signature and return the event."""
        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError):
            raise ValueError("Invalid signature")


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(
        api_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        currency=settings.payment_currency
    )


class PaymentService:
    @staticmethod
    def create_checkout_session(
        db: Session,
        gateway: StripeGateway,
        user: User,
        booking_id: str
    ) -> CheckoutSession:
        """
        Open a checkout session for an accepted booking.
        The charged amount is the total captured when the booking was made.
        """
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise BookingNotFound()

        if booking.user_id != user.id:
            raise Forbidden("You can only pay for your own bookings")

        if booking.status != BookingStatus.ACCEPTED:
            raise InvalidState("Only accepted bookings can be paid")

        session = gateway.create_checkout_session(
            amount=booking.total_price,
            description=f"{booking.quantity} ticket(s): {booking.ticket_title}",
            success_url=f"{settings.frontend_url}/payment/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.frontend_url}/dashboard/bookings",
            metadata={"booking_id": booking.id}
        )

        booking.checkout_session_id = session.id
        db.commit()

        logger.info(f"Checkout session {session.id} created for booking {booking.id}")
        return session

    @staticmethod
    def verify_payment(
        db: Session,
        gateway: StripeGateway,
        session_id: str,
        user: Optional[User] = None
    ) -> Tuple[Booking, bool]:
        """Look up a checkout session at the gateway and settle its booking."""
        session = gateway.retrieve_session(session_id)

        booking_id = session.metadata.get("booking_id")
        if not booking_id:
            raise BookingNotFound("No booking is attached to this payment session")

        if user is not None:
            booking = db.query(Booking).filter(Booking.id == booking_id).first()
            if booking and booking.user_id != user.id:
                raise Forbidden("You can only verify your own payments")

        if session.payment_status != "paid":
            raise PaymentNotCompleted()

        return PaymentService.settle_booking(
            db, booking_id, session.payment_reference or session.id
        )

    @staticmethod
    def handle_checkout_completed(db: Session, session_object) -> Tuple[Booking, bool]:
        """Settle the booking named by a checkout.session.completed webhook event."""
        session = StripeGateway.session_from_object(session_object)

        booking_id = session.metadata.get("booking_id")
        if not booking_id:
            raise BookingNotFound("No booking is attached to this payment session")

        if session.payment_status != "paid":
            raise PaymentNotCompleted()

        return PaymentService.settle_booking(
            db, booking_id, session.payment_reference or session.id
        )

    @staticmethod
    def settle_booking(db: Session, booking_id: str, payment_reference: str) -> Tuple[Booking, bool]:
        """
        Apply a confirmed payment to a booking.

        The booking is claimed with a status-guarded update, then the ticket
        inventory is decremented with a single conditional update. Both are
        committed together before the transaction record is appended.

        Returns the booking and whether this call settled it. A booking that
        is already paid is returned untouched.
        """
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise BookingNotFound()

        if booking.status == BookingStatus.PAID:
            logger.info(f"Booking {booking_id} already paid, skipping settlement")
            return booking, False

        if booking.status != BookingStatus.ACCEPTED:
            raise InvalidState(
                f"Booking cannot be settled while {booking.status.value}"
            )

        ticket_id = booking.ticket_id
        quantity = booking.quantity
        payment_date = datetime.utcnow()

        try:
            claimed = db.execute(
                update(Booking)
                .where(
                    Booking.id == booking_id,
                    Booking.status == BookingStatus.ACCEPTED
                )
                .values(
                    status=BookingStatus.PAID,
                    transaction_id=payment_reference,
                    payment_date=payment_date
                )
                .execution_options(synchronize_session=False)
            )

            if claimed.rowcount == 0:
                db.rollback()
                return PaymentService._resolve_lost_claim(db, booking)

            decremented = db.execute(
                update(Ticket)
                .where(
                    Ticket.id == ticket_id,
                    Ticket.quantity >= quantity
                )
                .values(quantity=Ticket.quantity - quantity)
                .execution_options(synchronize_session=False)
            )

            if decremented.rowcount == 0:
                db.rollback()
                raise PaymentService._fail_settlement(
                    db, booking, payment_reference, payment_date
                )

            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(booking)
        logger.info(
            f"Booking {booking_id} paid: {quantity} ticket(s) taken from ticket {ticket_id}"
        )

        PaymentService._record_transaction(
            db,
            booking,
            payment_reference,
            payment_date,
            TransactionStatus.COMPLETED
        )
        return booking, True

    @staticmethod
    def _resolve_lost_claim(db: Session, booking: Booking) -> Tuple[Booking, bool]:
        # Another confirmation for the same booking finished first
        db.refresh(booking)
        if booking.status == BookingStatus.PAID:
            logger.info(f"Booking {booking.id} settled by a concurrent confirmation")
            return booking, False
        raise InvalidState(f"Booking cannot be settled while {booking.status.value}")

    @staticmethod
    def _fail_settlement(
        db: Session,
        booking: Booking,
        payment_reference: str,
        payment_date: datetime
    ) -> InventoryConflict:
        """Mark the booking payment_failed and log a failed transaction."""
        failed = db.execute(
            update(Booking)
            .where(
                Booking.id == booking.id,
                Booking.status == BookingStatus.ACCEPTED
            )
            .values(status=BookingStatus.PAYMENT_FAILED)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        db.refresh(booking)

        if failed.rowcount == 0:
            if booking.status == BookingStatus.PAID:
                raise InvalidState("Booking was already settled")
            raise InvalidState(f"Booking cannot be settled while {booking.status.value}")

        logger.error(
            f"Settlement conflict for booking {booking.id}: ticket {booking.ticket_id} "
            f"has fewer than {booking.quantity} seat(s) left; payment {payment_reference} "
            f"needs manual reconciliation"
        )

        PaymentService._record_transaction(
            db,
            booking,
            payment_reference,
            payment_date,
            TransactionStatus.FAILED,
            note="Insufficient ticket quantity at settlement; manual reconciliation required"
        )
        return InventoryConflict()

    @staticmethod
    def _record_transaction(
        db: Session,
        booking: Booking,
        payment_reference: str,
        payment_date: datetime,
        status: TransactionStatus,
        note: Optional[str] = None
    ) -> Optional[Transaction]:
        transaction = Transaction(
            transaction_ref=payment_reference,
            booking_id=booking.id,
            user_id=booking.user_id,
            ticket_title=booking.ticket_title,
            amount=booking.total_price,
            payment_method="card",
            status=status,
            note=note,
            payment_date=payment_date
        )
        db.add(transaction)
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Failed to record {status.value} transaction for booking {booking.id}: {e}"
            )
            return None

        db.refresh(transaction)
        return transaction

    @staticmethod
    def get_user_transactions(db: Session, user_id: str) -> list:
        return db.query(Transaction).filter(
            Transaction.user_id == user_id
        ).order_by(Transaction.payment_date.desc()).all()
