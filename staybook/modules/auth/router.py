from fastapi import APIRouter, Depends
from staybook.modules.auth.schemas import TokenResponse
from staybook.modules.users.schemas import UserLogin, UserRegister, UserResponse
from staybook.modules.auth.service import AuthService
from staybook.modules.auth.dependencies import get_auth_service
from staybook.modules.auth.utility import get_current_user

auth_router = APIRouter(prefix="/auth", tags=["Auth"])

@auth_router.post("/register", response_model=TokenResponse)
async def register(
    data: UserRegister,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.register(data)

@auth_router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.login(data)

@auth_router.get("/me", response_model=UserResponse)
async def get_me(
     current_user: dict = Depends(get_current_user),
     service: AuthService = Depends(get_auth_service)
    ):
     return await service.get_me(current_user)
