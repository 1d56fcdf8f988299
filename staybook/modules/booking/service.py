"""Checkout and confirmation for bookings.

A booking goes through two requests. ``BookingSessionManager.create_session``
opens a checkout with the payment gateway and parks it in the user's pending
slot. After the gateway redirects back, ``OrderMaterializer.confirm`` asks the
gateway whether that checkout was paid and turns it into exactly one order.

Nothing here takes a lock. Races are settled by MongoDB: the pending slot is
written with single-document updates and orders carry a unique index on the
checkout session id.
"""

import logging
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from staybook.core.config import PLATFORM_FEE_PERCENT, STRIPE_CANCEL_URL, STRIPE_SUCCESS_URL
from staybook.core.errors import NoPendingSession, NotFoundError, PaymentNotCompleted, PreconditionFailed
from staybook.modules.booking.models import Confirmation, Order, PendingSession
from staybook.modules.booking.repository import OrderRepository
from staybook.modules.listing.repository import ListingRepository
from staybook.modules.payments.gateway import PaymentGatewayAdapter, to_minor_units
from staybook.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class BookingSessionManager:
    def __init__(
        self,
        listing_repo: ListingRepository,
        user_repo: UserRepository,
        gateway: PaymentGatewayAdapter,
        fee_percent: float = PLATFORM_FEE_PERCENT,
        success_url: str = STRIPE_SUCCESS_URL,
        cancel_url: str = STRIPE_CANCEL_URL,
    ):
        self.listing_repo = listing_repo
        self.user_repo = user_repo
        self.gateway = gateway
        self.fee_percent = fee_percent
        self.success_url = success_url
        self.cancel_url = cancel_url

    async def create_session(self, current_user: Dict[str, Any], listing_id: str) -> str:
        listing = await self.listing_repo.get_listing_by_id(listing_id)
        if not listing:
            raise NotFoundError("Listing not found")

        owner = await self.user_repo.find_user_by_id(listing["posted_by"])
        destination = (owner or {}).get("stripe_account_id")
        if not destination:
            raise PreconditionFailed("Listing owner has not set up a payout account")

        # Gateway failures propagate as GatewayError; the client may simply retry
        session = await self.gateway.create_checkout_session(
            amount=to_minor_units(listing["price"]),
            fee_percent=self.fee_percent,
            destination=destination,
            success_url=f"{self.success_url}/{listing_id}",
            cancel_url=self.cancel_url,
            product_name=listing["title"],
            listing_id=listing_id,
        )

        await self.user_repo.set_pending_session(
            current_user["id"],
            PendingSession(session=session, listing_id=listing_id),
        )
        logger.info(
            "Checkout session %s opened for user %s on listing %s",
            session.id, current_user["id"], listing_id
        )
        return session.id


class OrderMaterializer:
    def __init__(
        self,
        user_repo: UserRepository,
        order_repo: OrderRepository,
        gateway: PaymentGatewayAdapter,
    ):
        self.user_repo = user_repo
        self.order_repo = order_repo
        self.gateway = gateway

    async def confirm(self, current_user: Dict[str, Any]) -> Confirmation:
        """Turn the user's pending checkout into an order if the gateway says it is paid.

        Safe to call any number of times, concurrently included: every call for
        the same checkout returns the same order. Payment status is read from
        the gateway only; the stored snapshot is used for its session id alone.
        """
        user_id = current_user["id"]

        # Read the slot from storage, not from the user loaded at authentication
        user = await self.user_repo.find_user_by_id(user_id)
        slot = (user or {}).get("stripe_session")
        if not slot:
            raise NoPendingSession()
        pending = PendingSession(**slot)

        session = await self.gateway.retrieve_checkout_session(pending.session.id)
        if not session.is_paid:
            # Slot stays so a later confirmation of the same checkout can still succeed
            logger.info(
                "Checkout session %s for user %s not paid (status %s)",
                session.id, user_id, session.payment_status
            )
            raise PaymentNotCompleted(f"Payment not completed (status: {session.payment_status})")

        order = Order(
            listing_id=session.listing_id or pending.listing_id,
            session=session,
            ordered_by=user_id,
        )
        try:
            await self.order_repo.insert_order(order)
            created = True
        except DuplicateKeyError:
            existing = await self.order_repo.find_order_by_session_id(session.id)
            if existing is None:
                raise
            order = Order(**existing)
            created = False

        # Conditional on the session id, so a newer checkout in the slot survives
        await self.user_repo.clear_pending_session(user_id, session.id)

        if created:
            logger.info("Order %s created for checkout session %s", order.id, session.id)
        else:
            logger.info("Checkout session %s already confirmed as order %s", session.id, order.id)
        return Confirmation(order=order, created=created)


class BookingService:
    def __init__(self, order_repo: OrderRepository, listing_repo: ListingRepository):
        self.order_repo = order_repo
        self.listing_repo = listing_repo

    async def get_my_orders(self, current_user: Dict[str, Any]):
        orders = await self.order_repo.find_orders_by_user(current_user["id"])
        listings = await self.listing_repo.get_listings_by_ids({o["listing_id"] for o in orders})
        by_id = {listing["id"]: listing for listing in listings}

        for order in orders:
            # Listing may have been deleted since; the order stays
            order["listing"] = by_id.get(order["listing_id"])
        return orders

    async def is_already_booked(self, current_user: Dict[str, Any], listing_id: str) -> Dict[str, bool]:
        booked = await self.order_repo.user_has_order_for_listing(current_user["id"], listing_id)
        return {"ok": booked}
