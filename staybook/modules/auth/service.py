import logging
from pymongo.errors import DuplicateKeyError
from staybook.core.errors import AuthError, ConflictError
from staybook.modules.auth.repository import AuthRepository
from staybook.modules.auth.schemas import TokenResponse
from staybook.modules.users.schemas import UserResponse, UserLogin, UserRegister
from staybook.modules.users.models import User
from staybook.modules.auth.utility import hash_password, create_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, auth_repo: AuthRepository):
        self.auth_repo = auth_repo

    async def register(self, data: UserRegister) -> TokenResponse:
        email = data.email.lower()
        if await self.auth_repo.user_exists(email):
            raise ConflictError("Email already registered")

        user = User(
            name=data.name,
            email=email,
            hashed_password=hash_password(data.password)
        )
        try:
            inserted_user = await self.auth_repo.create_user(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("Email already registered")

        logger.info("Registered user %s", user.id)
        return TokenResponse(
            access_token=create_token(user.id),
            user=UserResponse(**inserted_user)
        )

    async def login(self, data: UserLogin) -> TokenResponse:
        user = await self.auth_repo.find_user(data.email.lower())
        if not user or not verify_password(data.password, user["hashed_password"]):
            raise AuthError("Invalid credentials")

        return TokenResponse(
            access_token=create_token(user["id"]),
            user=UserResponse(**user)
        )

    async def get_me(self, current_user: dict) -> UserResponse:
        return UserResponse(**current_user)
