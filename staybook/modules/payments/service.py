import logging
from typing import Dict, Any
from staybook.core.config import PAYOUT_DELAY_DAYS
from staybook.core.errors import PreconditionFailed
from staybook.modules.payments.gateway import PaymentGatewayAdapter
from staybook.modules.users.repository import UserRepository
from staybook.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)


class PayoutService:
    """Connected payout accounts for hosts who receive booking transfers."""

    def __init__(self, user_repo: UserRepository, gateway: PaymentGatewayAdapter):
        self.user_repo = user_repo
        self.gateway = gateway

    async def connect_account(self, current_user: Dict[str, Any]) -> Dict[str, str]:
        account_id = current_user.get("stripe_account_id")

        if not account_id:
            account_id = await self.gateway.create_payout_account(current_user)
            if not await self.user_repo.set_payout_account(current_user["id"], account_id):
                # A concurrent request stored its account first; that one is kept
                user = await self.user_repo.find_user_by_id(current_user["id"])
                logger.warning(
                    "Payout account %s for user %s discarded, %s already set",
                    account_id, current_user["id"], user["stripe_account_id"]
                )
                account_id = user["stripe_account_id"]

        url = await self.gateway.create_onboarding_link(account_id, current_user.get("email"))
        return {"url": url}

    async def account_status(self, current_user: Dict[str, Any]) -> UserResponse:
        account_id = self._require_account(current_user)

        account = await self.gateway.retrieve_payout_account(account_id)
        updated_account = await self.gateway.update_payout_delay(account["id"], PAYOUT_DELAY_DAYS)
        user = await self.user_repo.update_stripe_seller(current_user["id"], updated_account)
        return UserResponse(**user)

    async def account_balance(self, current_user: Dict[str, Any]) -> Dict[str, Any]:
        account_id = self._require_account(current_user)
        return await self.gateway.retrieve_balance(account_id)

    async def payout_setting(self, current_user: Dict[str, Any]) -> Dict[str, Any]:
        account_id = self._require_account(current_user)
        return await self.gateway.create_login_link(account_id)

    @staticmethod
    def _require_account(current_user: Dict[str, Any]) -> str:
        account_id = current_user.get("stripe_account_id")
        if not account_id:
            raise PreconditionFailed("Payout account missing")
        return account_id
