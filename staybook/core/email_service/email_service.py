"""
Staybook Email Service - SendGrid Integration
Sends booking confirmations once an order has been materialized
"""

import logging
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from staybook.core.config import SENDGRID_API_KEY, FROM_EMAIL, BASE_URL

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, api_key: str = SENDGRID_API_KEY, from_email: str = FROM_EMAIL, base_url: str = BASE_URL):
        self.from_email = from_email
        self.base_url = base_url

        if api_key:
            self.client = SendGridAPIClient(api_key)
        else:
            self.client = None

    def send_booking_confirmation(self, user_email: str, booking_data: dict):
        """Send booking confirmation email"""
        if not self.client:
            logger.info("[MOCK EMAIL] Booking confirmation to %s for order %s", user_email, booking_data["order_id"])
            return

        subject = f"You're booked: {booking_data['listing_title']}"

        amount = booking_data["amount_total"] / 100
        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #1677ff; color: white; padding: 30px; text-align: center; border-radius: 8px; }}
                .content {{ padding: 30px; background: #f8fafc; border-radius: 8px; margin: 20px 0; }}
                .detail-row {{ padding: 12px 0; border-bottom: 1px solid #e2e8f0; }}
                .label {{ font-weight: bold; color: #475569; }}
                .button {{ background: #1677ff; color: white; padding: 12px 24px; text-decoration: none;
                          border-radius: 6px; display: inline-block; margin: 10px 0; }}
            </style>
        </head>
        <body>
            <div class="header">
                <h1>Your stay is booked</h1>
            </div>
            <div class="content">
                <div class="detail-row">
                    <span class="label">Order ID:</span> {booking_data['order_id']}
                </div>
                <div class="detail-row">
                    <span class="label">Stay:</span> {booking_data['listing_title']}
                </div>
                <div class="detail-row">
                    <span class="label">Location:</span> {booking_data['location']}
                </div>
                <div class="detail-row">
                    <span class="label">Paid:</span> {amount:.2f} {booking_data['currency'].upper()}
                </div>
                <a href="{self.base_url}/dashboard" class="button">View your bookings</a>
            </div>
        </body>
        </html>
        """

        message = Mail(
            from_email=self.from_email,
            to_emails=user_email,
            subject=subject,
            html_content=html_content,
        )
        try:
            response = self.client.send(message)
            logger.info("Booking confirmation sent to %s (status %s)", user_email, response.status_code)
        except Exception:
            # Runs as a background task after the response; the order is already stored
            logger.exception("Failed to send booking confirmation to %s", user_email)
