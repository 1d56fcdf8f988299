import logging
from staybook.core.errors import AuthorizationError, NotFoundError
from staybook.modules.listing.repository import ListingRepository

logger = logging.getLogger(__name__)


class ListingOwnershipGuard:
    """Decides whether an actor may mutate a listing. Never mutates anything."""

    def __init__(self, listing_repo: ListingRepository):
        self.listing_repo = listing_repo

    async def check(self, actor_id: str, listing_id: str) -> dict:
        listing = await self.listing_repo.get_listing_by_id(listing_id)
        if not listing:
            raise NotFoundError("Listing not found")

        if listing.get("posted_by") != actor_id:
            logger.warning("User %s denied access to listing %s", actor_id, listing_id)
            raise AuthorizationError("Only the owner can modify this listing")

        return listing
