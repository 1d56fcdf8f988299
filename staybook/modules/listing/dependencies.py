from fastapi import Depends
from typing import Dict
from staybook.modules.auth.utility import get_current_user
from staybook.modules.listing.guard import ListingOwnershipGuard
from staybook.modules.listing.repository import ListingRepository
from staybook.modules.listing.service import ListingService
from staybook.modules.users.repository import UserRepository

def get_listing_service(
    listing_repo: ListingRepository = Depends(),
    user_repo: UserRepository = Depends(),
) -> ListingService:
    return ListingService(listing_repo, user_repo)

def get_ownership_guard(
    listing_repo: ListingRepository = Depends(),
) -> ListingOwnershipGuard:
    return ListingOwnershipGuard(listing_repo)

async def require_listing_owner(
    listing_id: str,
    current_user: Dict = Depends(get_current_user),
    guard: ListingOwnershipGuard = Depends(get_ownership_guard),
) -> Dict:
    return await guard.check(current_user["id"], listing_id)
