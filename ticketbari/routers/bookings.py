from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from ticketbari.database import get_db
from ticketbari.services.auth import (
    get_current_user_required, get_current_vendor, get_current_vendor_or_admin
)
from ticketbari.services.booking import BookingService
from ticketbari.services.email import EmailService
from ticketbari.schemas.booking import BookingCreate, BookingStatusUpdate, BookingResponse
from ticketbari.models.user import User

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    booking = BookingService.create_booking(
        db, user, booking_data.ticket_id, booking_data.quantity
    )
    return {
        "success": True,
        "message": "Booking created successfully. Waiting for vendor approval.",
        "data": BookingResponse.model_validate(booking)
    }


@router.get("/me")
async def my_bookings(
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    bookings = BookingService.get_user_bookings(db, user.id)
    return {"success": True, "data": [BookingResponse.model_validate(b) for b in bookings]}


@router.get("/vendor/me")
async def vendor_bookings(
    vendor: User = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    bookings = BookingService.get_vendor_bookings(db, vendor.id)
    return {"success": True, "data": [BookingResponse.model_validate(b) for b in bookings]}


@router.put("/{booking_id}/status")
async def update_booking_status(
    booking_id: str,
    status_data: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_vendor_or_admin),
    db: Session = Depends(get_db)
):
    booking = BookingService.update_status(db, user, booking_id, status_data.status)

    background_tasks.add_task(
        EmailService.send_booking_status_update,
        booking.user_email,
        booking.user_name,
        booking.ticket_title,
        booking.status.value
    )

    return {
        "success": True,
        "message": f"Booking {booking.status.value} successfully",
        "data": BookingResponse.model_validate(booking)
    }
