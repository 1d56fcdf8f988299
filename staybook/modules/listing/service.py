import logging
from typing import Dict, Any, Optional, Tuple
from staybook.core.config import LISTINGS_PAGE_LIMIT
from staybook.core.errors import NotFoundError, ValidationError
from staybook.modules.listing.filters import ListingSearchFilter, as_utc
from staybook.modules.listing.models import Listing, ListingImage
from staybook.modules.listing.repository import ListingRepository
from staybook.modules.listing.schemas import ListingCreate, ListingUpdate
from staybook.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


def _check_window(from_date, to_date):
    if as_utc(from_date) > as_utc(to_date):
        raise ValidationError("Availability must start before it ends")


class ListingService:
    def __init__(self, listing_repo: ListingRepository, user_repo: UserRepository):
        self.listing_repo = listing_repo
        self.user_repo = user_repo

    async def _with_owners(self, listings):
        owners = await self.user_repo.find_users_by_ids({l["posted_by"] for l in listings})
        by_id = {owner["id"]: owner for owner in owners}
        for listing in listings:
            # posted_by stays the raw id; owner is the display card
            listing["owner"] = by_id.get(listing["posted_by"])
        return listings

    async def create_listing(
        self,
        data: ListingCreate,
        current_user: Dict[str, Any],
        image: Optional[ListingImage] = None,
    ):
        _check_window(data.from_date, data.to_date)
        listing = Listing(**data.model_dump(), posted_by=current_user["id"], image=image)
        created = await self.listing_repo.create_listing(listing)
        logger.info("User %s created listing %s", current_user["id"], listing.id)
        return created

    async def get_listings(self):
        listings = await self.listing_repo.get_listings(LISTINGS_PAGE_LIMIT)
        return await self._with_owners(listings)

    async def get_seller_listings(self, current_user: Dict[str, Any]):
        listings = await self.listing_repo.get_listings_by_owner(current_user["id"])
        return await self._with_owners(listings)

    async def get_listing_by_id(self, listing_id: str):
        listing = await self.listing_repo.get_listing_by_id(listing_id)
        if not listing:
            raise NotFoundError("Listing not found")
        await self._with_owners([listing])
        return listing

    async def get_listing_image(self, listing_id: str) -> Tuple[bytes, str]:
        listing = await self.listing_repo.get_listing_image(listing_id)
        image = (listing or {}).get("image")
        if not image or not image.get("data"):
            raise NotFoundError("No image found")
        return bytes(image["data"]), image["content_type"]

    async def update_listing(self, listing: Dict[str, Any], data: ListingUpdate):
        # ``listing`` comes from the ownership guard; only whitelisted fields reach the store
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return listing

        _check_window(
            changes.get("from_date", listing["from_date"]),
            changes.get("to_date", listing["to_date"]),
        )
        updated = await self.listing_repo.update_listing(listing["id"], changes)
        if not updated:
            raise NotFoundError("Listing not found")
        return updated

    async def update_listing_image(self, listing: Dict[str, Any], image: ListingImage):
        updated = await self.listing_repo.update_listing(listing["id"], {"image": image.model_dump()})
        if not updated:
            raise NotFoundError("Listing not found")
        return updated

    async def delete_listing(self, listing: Dict[str, Any]):
        removed = await self.listing_repo.delete_listing(listing["id"])
        if not removed:
            raise NotFoundError("Listing not found")
        logger.info("Listing %s removed by owner %s", listing["id"], listing["posted_by"])
        return removed

    async def search_listings(self, search_filter: ListingSearchFilter):
        cursor = self.listing_repo.search(search_filter.to_query())
        return [listing async for listing in cursor]
