from fastapi import APIRouter, Depends
from typing import Dict
from staybook.modules.auth.utility import get_current_user
from staybook.modules.payments.dependencies import get_payout_service
from staybook.modules.payments.service import PayoutService
from staybook.modules.users.schemas import UserResponse

payments_router = APIRouter(prefix="/payments", tags=["Payments"])

@payments_router.post("/connect-account")
async def create_connect_account(
    current_user: Dict = Depends(get_current_user),
    payout_service: PayoutService = Depends(get_payout_service)
):
    return await payout_service.connect_account(current_user)

@payments_router.post("/account-status", response_model=UserResponse)
async def get_account_status(
    current_user: Dict = Depends(get_current_user),
    payout_service: PayoutService = Depends(get_payout_service)
):
    return await payout_service.account_status(current_user)

@payments_router.post("/balance")
async def get_account_balance(
    current_user: Dict = Depends(get_current_user),
    payout_service: PayoutService = Depends(get_payout_service)
):
    return await payout_service.account_balance(current_user)

@payments_router.post("/payout-setting")
async def payout_setting(
    current_user: Dict = Depends(get_current_user),
    payout_service: PayoutService = Depends(get_payout_service)
):
    return await payout_service.payout_setting(current_user)
