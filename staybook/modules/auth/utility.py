from fastapi import Depends
from typing import Dict, Optional
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import bcrypt
import jwt
from datetime import datetime, timezone, timedelta
from staybook.core.errors import AuthError
from staybook.modules.auth.repository import AuthRepository
from staybook.core.config import JWT_ALGORITHM, JWT_EXPIRY_HOURS, JWT_SECRET

# auto_error=False so a missing header is a 401 like every other auth failure
security = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

def create_token(user_id: str) -> str:
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRY_HOURS)
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_repo: AuthRepository = Depends(),
) -> Dict:
    if credentials is None:
        raise AuthError("Missing bearer token")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token")

    user = await auth_repo.find_user_by_id(user_id)
    if not user:
        raise AuthError("User not found")
    return user
