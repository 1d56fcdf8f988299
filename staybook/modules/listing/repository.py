from datetime import datetime, timezone
from pymongo import DESCENDING, ReturnDocument
from staybook.core.database import mongodb
from staybook.modules.listing.filters import LISTING_PUBLIC_PROJECTION
from staybook.modules.listing.models import Listing


class ListingRepository:
    async def create_listing(self, listing: Listing) -> dict:
        await mongodb.db.listings.insert_one(listing.model_dump())
        return await self.get_listing_by_id(listing.id)

    async def get_listing_by_id(self, listing_id):
        return await mongodb.db.listings.find_one({"id": listing_id}, LISTING_PUBLIC_PROJECTION)

    async def get_listing_image(self, listing_id):
        return await mongodb.db.listings.find_one({"id": listing_id}, {"_id": 0, "image": 1})

    async def get_listings(self, limit: int):
        return await mongodb.db.listings.find({}, LISTING_PUBLIC_PROJECTION).sort("created_at", DESCENDING).to_list(limit)

    async def get_listings_by_owner(self, owner_id: str):
        return await mongodb.db.listings.find(
            {"posted_by": owner_id}, LISTING_PUBLIC_PROJECTION
        ).sort("created_at", DESCENDING).to_list(None)

    async def get_listings_by_ids(self, listing_ids):
        return await mongodb.db.listings.find(
            {"id": {"$in": list(listing_ids)}}, LISTING_PUBLIC_PROJECTION
        ).to_list(None)

    def search(self, query: dict):
        """Cursor over matching listings; nothing is fetched until iterated."""
        return mongodb.db.listings.find(query, LISTING_PUBLIC_PROJECTION)

    async def update_listing(self, listing_id, data: dict):
        data["updated_at"] = datetime.now(timezone.utc)
        return await mongodb.db.listings.find_one_and_update(
            {"id": listing_id},
            {"$set": data},
            projection=LISTING_PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )

    async def delete_listing(self, listing_id):
        return await mongodb.db.listings.find_one_and_delete(
            {"id": listing_id},
            projection=LISTING_PUBLIC_PROJECTION,
        )
