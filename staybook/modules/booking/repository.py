from pymongo import DESCENDING
from staybook.core.database import mongodb
from staybook.modules.booking.models import Order


class OrderRepository:
    """Append-only access to ``orders``.

    ``insert_order`` raises ``pymongo.errors.DuplicateKeyError`` when an order
    for the same checkout session already exists (unique index on
    ``session.id``, see ``ensure_indexes``).
    """

    async def insert_order(self, order: Order):
        return await mongodb.db.orders.insert_one(order.model_dump())

    async def find_order_by_session_id(self, session_id: str):
        return await mongodb.db.orders.find_one({"session.id": session_id}, {"_id": 0})

    async def find_orders_by_user(self, user_id: str):
        return await mongodb.db.orders.find(
            {"ordered_by": user_id}, {"_id": 0}
        ).sort("created_at", DESCENDING).to_list(None)

    async def user_has_order_for_listing(self, user_id: str, listing_id: str) -> bool:
        count = await mongodb.db.orders.count_documents(
            {"ordered_by": user_id, "listing_id": listing_id}, limit=1
        )
        return count > 0
