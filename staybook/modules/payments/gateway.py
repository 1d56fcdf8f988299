"""Payment gateway boundary.

The booking pipeline only talks to ``PaymentGatewayAdapter``; ``StripeGateway``
is the production implementation. Instances are handed to services through
``get_payment_gateway`` so tests can swap in a fake.
"""

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Protocol
from urllib.parse import urlencode

import stripe

from staybook.core.config import CURRENCY, STRIPE_REDIRECT_URL
from staybook.core.errors import GatewayError
from staybook.modules.payments.models import CheckoutSession, PaymentStatus

logger = logging.getLogger(__name__)


class PaymentGatewayAdapter(Protocol):
    async def create_payout_account(self, user: Dict[str, Any]) -> str: ...

    async def create_onboarding_link(self, account_id: str, email: Optional[str] = None) -> str: ...

    async def create_checkout_session(
        self,
        amount: int,
        fee_percent: float,
        destination: str,
        success_url: str,
        cancel_url: str,
        product_name: str,
        listing_id: str,
    ) -> CheckoutSession: ...

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession: ...

    async def retrieve_payout_account(self, account_id: str) -> Dict[str, Any]: ...

    async def update_payout_delay(self, account_id: str, delay_days: int) -> Dict[str, Any]: ...

    async def retrieve_balance(self, account_id: str) -> Dict[str, Any]: ...

    async def create_login_link(self, account_id: str) -> Dict[str, Any]: ...


def to_minor_units(price) -> int:
    """Major-unit price (e.g. 120.5 dollars) to minor units (12050 cents).

    Goes through the decimal text of ``price`` so 1.005 becomes 101, not the
    100 that float multiplication gives.
    """
    cents = Decimal(str(price)) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def platform_fee(amount: int, fee_percent: float) -> int:
    """Platform fee in minor units for an ``amount`` in minor units."""
    return int(round(amount * fee_percent / 100))


def _as_dict(obj: Any) -> Dict[str, Any]:
    to_dict = getattr(obj, "to_dict", None) or getattr(obj, "to_dict_recursive", None)
    if to_dict is not None:
        return to_dict()
    return dict(obj)


class StripeGateway:
    def __init__(
        self,
        api_key: str,
        currency: str = CURRENCY,
        onboarding_redirect_url: str = STRIPE_REDIRECT_URL,
    ) -> None:
        self.api_key = api_key
        self.currency = currency
        self.onboarding_redirect_url = onboarding_redirect_url

    async def _call(self, operation: str, fn, *args, **kwargs):
        # The SDK is blocking; keep it off the event loop. No retries here:
        # a failed call is reported once and the caller decides.
        try:
            return await asyncio.to_thread(fn, *args, api_key=self.api_key, **kwargs)
        except stripe.StripeError as e:
            logger.error("Stripe %s failed: %s", operation, e)
            raise GatewayError(f"Payment gateway error during {operation}") from e

    async def create_payout_account(self, user: Dict[str, Any]) -> str:
        account = await self._call(
            "create_account",
            stripe.Account.create,
            type="express",
            email=user.get("email"),
            metadata={"user_id": user["id"]},
        )
        logger.info("Created Stripe Express account %s for user %s", account.id, user["id"])
        return account.id

    async def create_onboarding_link(self, account_id: str, email: Optional[str] = None) -> str:
        account_link = await self._call(
            "create_account_link",
            stripe.AccountLink.create,
            account=account_id,
            refresh_url=self.onboarding_redirect_url,
            return_url=self.onboarding_redirect_url,
            type="account_onboarding",
        )
        url = account_link.url
        if email:
            # Prefills the email field on the hosted onboarding form
            url = f"{url}?{urlencode({'stripe_user[email]': email})}"
        return url

    async def create_checkout_session(
        self,
        amount: int,
        fee_percent: float,
        destination: str,
        success_url: str,
        cancel_url: str,
        product_name: str,
        listing_id: str,
    ) -> CheckoutSession:
        fee = platform_fee(amount, fee_percent)
        session = await self._call(
            "create_checkout_session",
            stripe.checkout.Session.create,
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": product_name},
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }
            ],
            payment_intent_data={
                "application_fee_amount": fee,
                "transfer_data": {"destination": destination},
            },
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={
                "listing_id": listing_id,
                "destination": destination,
                "application_fee_amount": str(fee),
            },
        )
        return self._to_checkout_session(session)

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        session = await self._call(
            "retrieve_checkout_session",
            stripe.checkout.Session.retrieve,
            session_id,
        )
        return self._to_checkout_session(session)

    async def retrieve_payout_account(self, account_id: str) -> Dict[str, Any]:
        account = await self._call("retrieve_account", stripe.Account.retrieve, account_id)
        return _as_dict(account)

    async def update_payout_delay(self, account_id: str, delay_days: int) -> Dict[str, Any]:
        account = await self._call(
            "update_account",
            stripe.Account.modify,
            account_id,
            settings={"payouts": {"schedule": {"delay_days": delay_days}}},
        )
        return _as_dict(account)

    async def retrieve_balance(self, account_id: str) -> Dict[str, Any]:
        balance = await self._call("retrieve_balance", stripe.Balance.retrieve, stripe_account=account_id)
        return _as_dict(balance)

    async def create_login_link(self, account_id: str) -> Dict[str, Any]:
        link = await self._call("create_login_link", stripe.Account.create_login_link, account_id)
        return _as_dict(link)

    def _to_checkout_session(self, session: Any) -> CheckoutSession:
        data = _as_dict(session)
        metadata = data.get("metadata") or {}

        status = data.get("payment_status")
        if data.get("status") == "expired":
            status = PaymentStatus.expired.value
        try:
            status = PaymentStatus(status).value
        except ValueError:
            status = PaymentStatus.unpaid.value

        return CheckoutSession(
            id=data["id"],
            payment_status=status,
            amount_total=data.get("amount_total") or 0,
            application_fee_amount=int(metadata.get("application_fee_amount") or 0),
            currency=data.get("currency") or self.currency,
            destination=metadata.get("destination"),
            listing_id=metadata.get("listing_id"),
            url=data.get("url"),
        )
