import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import logging

from ticketbari.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class EmailService:
    @staticmethod
    async def send_email(to_email: str, subject: str, html_content: str) -> bool:
        """Send an email using SMTP."""
        if not settings.smtp_user or not settings.smtp_password:
            logger.warning("SMTP not configured, skipping email send")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = settings.smtp_user
        message["To"] = to_email
        message["Subject"] = subject

        html_part = MIMEText(html_content, "html")
        message.attach(html_part)

        try:
            await aiosmtplib.send(
                message,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_password,
                start_tls=True
            )
            return True
        except aiosmtplib.SMTPException as e:
            logger.error(f"Failed to send email: {e}")
            return False

    @staticmethod
    async def send_payment_confirmation(
        to_email: str,
        name: str,
        ticket_title: str,
        quantity: int,
        total_amount: float,
        transaction_ref: str
    ) -> bool:
        """Send payment receipt once a booking is settled."""
        bookings_url = f"{settings.frontend_url}/dashboard/bookings"

        html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #0F766E;">Payment Received</h1>
            <p>Hi {name},</p>
            <p>Your booking is paid and confirmed:</p>
            <div style="background-color: #F3F4F6; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <p style="margin: 5px 0;"><strong>Ticket:</strong> {ticket_title}</p>
                <p style="margin: 5px 0;"><strong>Seats:</strong> {quantity}</p>
                <p style="margin: 5px 0;"><strong>Total:</strong> {total_amount:.2f} {settings.payment_currency.upper()}</p>
                <p style="margin: 5px 0;"><strong>Transaction:</strong> {transaction_ref}</p>
            </div>
            <p><a href="{bookings_url}">View your bookings</a></p>
            <p>Have a safe journey!</p>
            <p>Best,<br>The TicketBari Team</p>
        </body>
        </html>
        """

        return await EmailService.send_email(to_email, f"Payment confirmed: {ticket_title}", html_content)

    @staticmethod
    async def send_booking_status_update(
        to_email: str,
        name: str,
        ticket_title: str,
        status: str
    ) -> bool:
        """Tell the buyer the vendor accepted or rejected their booking."""
        bookings_url = f"{settings.frontend_url}/dashboard/bookings"

        if status == "accepted":
            next_step = "You can now complete the payment from your bookings page."
        else:
            next_step = "You have not been charged. Feel free to look for another ticket."

        html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1 style="color: #0F766E;">Booking {status.capitalize()}</h1>
            <p>Hi {name},</p>
            <p>Your booking for <strong>{ticket_title}</strong> was {status} by the vendor.</p>
            <p>{next_step}</p>
            <p style="margin: 30px 0;">
                <a href="{bookings_url}"
                   style="background-color: #0F766E; color: white; padding: 12px 24px;
                          text-decoration: none; border-radius: 6px;">
                    My Bookings
                </a>
            </p>
            <p>Best,<br>The TicketBari Team</p>
        </body>
        </html>
        """

        return await EmailService.send_email(to_email, f"Booking {status}: {ticket_title}", html_content)
