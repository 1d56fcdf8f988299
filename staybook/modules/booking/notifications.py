import asyncio
import logging
from staybook.core.email_service.email_service import EmailService
from staybook.modules.booking.models import Order
from staybook.modules.listing.repository import ListingRepository

logger = logging.getLogger(__name__)


async def notify_order_confirmed(
    email_service: EmailService,
    listing_repo: ListingRepository,
    user_email: str,
    order: Order,
):
    """Background task run after the confirmation response is sent."""
    try:
        listing = await listing_repo.get_listing_by_id(order.listing_id) or {}
    except Exception:
        logger.exception("Could not load listing %s for order %s email", order.listing_id, order.id)
        listing = {}

    booking_data = {
        "order_id": order.id,
        "listing_title": listing.get("title", "Your stay"),
        "location": listing.get("location", ""),
        "amount_total": order.session.amount_total,
        "currency": order.session.currency,
    }
    await asyncio.to_thread(email_service.send_booking_confirmation, user_email, booking_data)
