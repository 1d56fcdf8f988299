from staybook.core.database import mongodb
from staybook.modules.users.models import User


class AuthRepository:
    async def user_exists(self, email: str) -> bool:
        return await mongodb.db.users.find_one({"email": email}, {"_id": 0, "id": 1}) is not None

    async def create_user(self, user: User) -> dict:
        data = user.model_dump()
        await mongodb.db.users.insert_one(data)
        data.pop("_id", None)
        return data

    async def find_user(self, email: str) -> dict:
        return await mongodb.db.users.find_one({"email": email}, {"_id": 0})

    async def find_user_by_id(self, id: str) -> dict:
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0})
