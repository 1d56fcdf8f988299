from functools import lru_cache
from fastapi import Depends
from staybook.core.config import STRIPE_SECRET
from staybook.modules.payments.gateway import PaymentGatewayAdapter, StripeGateway
from staybook.modules.payments.service import PayoutService
from staybook.modules.users.repository import UserRepository


@lru_cache
def get_payment_gateway() -> PaymentGatewayAdapter:
    return StripeGateway(api_key=STRIPE_SECRET)

def get_payout_service(
    user_repo: UserRepository = Depends(),
    gateway: PaymentGatewayAdapter = Depends(get_payment_gateway),
) -> PayoutService:
    return PayoutService(user_repo=user_repo, gateway=gateway)
