from fastapi import Depends
from staybook.modules.auth.repository import AuthRepository
from staybook.modules.auth.service import AuthService

def get_auth_service(
    auth_repo: AuthRepository = Depends(),
) -> AuthService:
    return AuthService(auth_repo=auth_repo)
