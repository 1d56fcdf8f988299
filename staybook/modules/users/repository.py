from datetime import datetime, timezone
from staybook.core.database import mongodb
from staybook.modules.booking.models import PendingSession


class UserRepository:
    """Writes against a single user document.

    Every method is one ``update_one``; MongoDB applies each atomically to the
    document, so concurrent writers never lose each other's fields.
    """

    async def find_user_by_id(self, id: str) -> dict:
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0})

    async def set_pending_session(self, user_id: str, pending: PendingSession):
        # Unconditional overwrite: the newest checkout always wins the slot
        return await mongodb.db.users.update_one(
            {"id": user_id},
            {"$set": {
                "stripe_session": pending.model_dump(),
                "updated_at": datetime.now(timezone.utc),
            }}
        )

    async def clear_pending_session(self, user_id: str, session_id: str) -> bool:
        result = await mongodb.db.users.update_one(
            {"id": user_id, "stripe_session.session.id": session_id},
            {"$set": {
                "stripe_session": None,
                "updated_at": datetime.now(timezone.utc),
            }}
        )
        return result.modified_count == 1

    async def set_payout_account(self, user_id: str, account_id: str) -> bool:
        # Matches both a missing field and an explicit null
        result = await mongodb.db.users.update_one(
            {"id": user_id, "stripe_account_id": None},
            {"$set": {
                "stripe_account_id": account_id,
                "updated_at": datetime.now(timezone.utc),
            }}
        )
        return result.modified_count == 1

    async def update_stripe_seller(self, user_id: str, seller: dict) -> dict:
        await mongodb.db.users.update_one(
            {"id": user_id},
            {"$set": {
                "stripe_seller": seller,
                "updated_at": datetime.now(timezone.utc),
            }}
        )
        return await self.find_user_by_id(user_id)

    async def find_users_by_ids(self, user_ids) -> list:
        # Public owner card only: id and name
        return await mongodb.db.users.find(
            {"id": {"$in": list(user_ids)}}, {"_id": 0, "id": 1, "name": 1}
        ).to_list(None)
