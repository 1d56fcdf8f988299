"""In-memory stand-ins for the Mongo repositories and the payment gateway."""

import asyncio
import copy
import itertools
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from staybook.core.errors import GatewayError
from staybook.modules.auth.utility import create_token
from staybook.modules.booking.models import Order, PendingSession
from staybook.modules.listing.filters import as_utc
from staybook.modules.listing.models import Listing
from staybook.modules.payments.gateway import platform_fee
from staybook.modules.payments.models import CheckoutSession, PaymentStatus
from staybook.modules.users.models import User


def _public(listing: dict) -> dict:
    doc = copy.deepcopy(listing)
    if doc.get("image"):
        doc["image"].pop("data", None)
    return doc


def _value_matches(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict):
        for op, operand in condition.items():
            if op == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if value is None or re.search(operand, value, flags) is None:
                    return False
            elif op == "$options":
                continue
            elif op == "$gte":
                if value is None or as_utc(value) < as_utc(operand):
                    return False
            elif op == "$lte":
                if value is None or as_utc(value) > as_utc(operand):
                    return False
            else:
                raise NotImplementedError(op)
        return True
    return value == condition


def evaluate_query(doc: dict, query: dict) -> bool:
    """Evaluates the subset of MongoDB query syntax the listing filter emits."""
    return all(_value_matches(doc.get(field), condition) for field, condition in query.items())


class InMemoryUserRepository:
    """Implements both AuthRepository and UserRepository over one dict."""

    def __init__(self):
        self.users: Dict[str, dict] = {}

    def add(self, user: User) -> dict:
        self.users[user.id] = user.model_dump()
        return copy.deepcopy(self.users[user.id])

    async def user_exists(self, email: str) -> bool:
        return any(u["email"] == email for u in self.users.values())

    async def create_user(self, user: User) -> dict:
        if await self.user_exists(user.email):
            raise DuplicateKeyError("E11000 duplicate key error: email", 11000)
        return self.add(user)

    async def find_user(self, email: str) -> Optional[dict]:
        for user in self.users.values():
            if user["email"] == email:
                return copy.deepcopy(user)
        return None

    async def find_user_by_id(self, id: str) -> Optional[dict]:
        user = self.users.get(id)
        return copy.deepcopy(user) if user else None

    async def find_users_by_ids(self, user_ids):
        wanted = set(user_ids)
        return [{"id": u["id"], "name": u["name"]} for u in self.users.values() if u["id"] in wanted]

    async def set_pending_session(self, user_id: str, pending: PendingSession):
        self.users[user_id]["stripe_session"] = pending.model_dump()

    async def clear_pending_session(self, user_id: str, session_id: str) -> bool:
        slot = self.users[user_id].get("stripe_session")
        if slot and slot["session"]["id"] == session_id:
            self.users[user_id]["stripe_session"] = None
            return True
        return False

    async def set_payout_account(self, user_id: str, account_id: str) -> bool:
        if self.users[user_id].get("stripe_account_id"):
            return False
        self.users[user_id]["stripe_account_id"] = account_id
        return True

    async def update_stripe_seller(self, user_id: str, seller: dict) -> dict:
        self.users[user_id]["stripe_seller"] = seller
        return copy.deepcopy(self.users[user_id])


class _Cursor:
    def __init__(self, docs: List[dict]):
        self._docs = docs

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class InMemoryListingRepository:
    def __init__(self):
        self.listings: Dict[str, dict] = {}
        self.queries: List[dict] = []

    def add(self, listing: Listing) -> dict:
        self.listings[listing.id] = listing.model_dump()
        return _public(self.listings[listing.id])

    async def create_listing(self, listing: Listing) -> dict:
        return self.add(listing)

    async def get_listing_by_id(self, listing_id):
        listing = self.listings.get(listing_id)
        return _public(listing) if listing else None

    async def get_listing_image(self, listing_id):
        listing = self.listings.get(listing_id)
        return {"image": copy.deepcopy(listing.get("image"))} if listing else None

    async def get_listings(self, limit: int):
        return [_public(l) for l in self.listings.values()][:limit]

    async def get_listings_by_owner(self, owner_id: str):
        return [_public(l) for l in self.listings.values() if l["posted_by"] == owner_id]

    async def get_listings_by_ids(self, listing_ids):
        return [_public(l) for lid, l in self.listings.items() if lid in set(listing_ids)]

    def search(self, query: dict):
        self.queries.append(query)
        return _Cursor([_public(l) for l in self.listings.values() if evaluate_query(l, query)])

    async def update_listing(self, listing_id, data: dict):
        if listing_id not in self.listings:
            return None
        self.listings[listing_id].update(copy.deepcopy(data))
        self.listings[listing_id]["updated_at"] = datetime.now(timezone.utc)
        return _public(self.listings[listing_id])

    async def delete_listing(self, listing_id):
        listing = self.listings.pop(listing_id, None)
        return _public(listing) if listing else None


class InMemoryOrderRepository:
    def __init__(self):
        self.orders: List[dict] = []
        self.insert_attempts = 0

    async def insert_order(self, order: Order):
        self.insert_attempts += 1
        # Check and append with no await in between, like a unique index
        if any(o["session"]["id"] == order.session.id for o in self.orders):
            raise DuplicateKeyError("E11000 duplicate key error: session.id", 11000)
        self.orders.append(order.model_dump())

    async def find_order_by_session_id(self, session_id: str):
        for order in self.orders:
            if order["session"]["id"] == session_id:
                return copy.deepcopy(order)
        return None

    async def find_orders_by_user(self, user_id: str):
        mine = [copy.deepcopy(o) for o in self.orders if o["ordered_by"] == user_id]
        return sorted(mine, key=lambda o: o["created_at"], reverse=True)

    async def user_has_order_for_listing(self, user_id: str, listing_id: str) -> bool:
        return any(o["ordered_by"] == user_id and o["listing_id"] == listing_id for o in self.orders)


class FakeGateway:
    """PaymentGatewayAdapter double. Every call yields to the event loop once."""

    def __init__(self):
        self.sessions: Dict[str, CheckoutSession] = {}
        self.created_calls: List[dict] = []
        self.retrieve_calls: List[str] = []
        self.payout_accounts: List[str] = []
        self.fail_with: Optional[GatewayError] = None
        self._ids = itertools.count(1)

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def set_status(self, session_id: str, status: PaymentStatus):
        self.sessions[session_id] = self.sessions[session_id].model_copy(
            update={"payment_status": status.value}
        )

    async def create_payout_account(self, user):
        await asyncio.sleep(0)
        self._maybe_fail()
        account_id = f"acct_{next(self._ids)}"
        self.payout_accounts.append(account_id)
        return account_id

    async def create_onboarding_link(self, account_id, email=None):
        await asyncio.sleep(0)
        self._maybe_fail()
        return f"https://connect.example.test/onboarding/{account_id}"

    async def create_checkout_session(
        self, amount, fee_percent, destination, success_url, cancel_url, product_name, listing_id
    ):
        await asyncio.sleep(0)
        self._maybe_fail()
        self.created_calls.append({
            "amount": amount,
            "fee_percent": fee_percent,
            "destination": destination,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "product_name": product_name,
            "listing_id": listing_id,
        })
        session = CheckoutSession(
            id=f"cs_test_{next(self._ids)}",
            payment_status=PaymentStatus.unpaid,
            amount_total=amount,
            application_fee_amount=platform_fee(amount, fee_percent),
            currency="usd",
            destination=destination,
            listing_id=listing_id,
            url="https://checkout.example.test/pay",
        )
        self.sessions[session.id] = session
        return session

    async def retrieve_checkout_session(self, session_id):
        await asyncio.sleep(0)
        self.retrieve_calls.append(session_id)
        self._maybe_fail()
        return self.sessions[session_id].model_copy()

    async def retrieve_payout_account(self, account_id):
        await asyncio.sleep(0)
        self._maybe_fail()
        return {"id": account_id, "charges_enabled": True}

    async def update_payout_delay(self, account_id, delay_days):
        await asyncio.sleep(0)
        self._maybe_fail()
        return {
            "id": account_id,
            "charges_enabled": True,
            "settings": {"payouts": {"schedule": {"delay_days": delay_days}}},
        }

    async def retrieve_balance(self, account_id):
        await asyncio.sleep(0)
        self._maybe_fail()
        return {"available": [{"amount": 0, "currency": "usd"}], "pending": []}

    async def create_login_link(self, account_id):
        await asyncio.sleep(0)
        self._maybe_fail()
        return {"object": "login_link", "url": f"https://connect.example.test/express/{account_id}"}


def make_listing(owner_id, **overrides) -> Listing:
    fields = dict(
        title="Loft by the canal",
        content="Two rooms, quiet street",
        location="Paris Downtown",
        price=120.5,
        from_date=datetime(2025, 6, 1, tzinfo=timezone.utc),
        to_date=datetime(2025, 6, 30, tzinfo=timezone.utc),
        bed=2,
        posted_by=owner_id,
    )
    fields.update(overrides)
    return Listing(**fields)


def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {create_token(user['id'])}"}


class RecordingEmailService:
    client = None

    def __init__(self):
        self.sent = []

    def send_booking_confirmation(self, user_email, booking_data):
        self.sent.append((user_email, booking_data))
