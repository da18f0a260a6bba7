# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config import settings
from schemas.user import User
from store import Store, get_store
from utils.seed import USERS

# Authorization scheme
bearer_scheme = HTTPBearer()

# What each role may do; checked at every route that needs it
ROLE_CAPABILITIES = {
    "STAFF": {"billing", "customers", "inventory:read", "dashboard"},
    "ADMIN": {"billing", "customers", "inventory:read", "dashboard",
              "reports", "settings:write", "backup", "logs:read"},
}

# Look up one of the fixed accounts by username
def find_user(username: str) -> Optional[User]:
    for u in USERS:
        if u["username"] == username:
            return User(**u)
    return None

def capabilities_for(user: User) -> set:
    return ROLE_CAPABILITIES.get(user.role, set())

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Retrieve the logged-in user; the token must match the persisted session
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    store: Store = Depends(get_store),
) -> User:
    token = credentials.credentials
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = find_user(username)
    session = store.get_session()
    # Logging out clears the session, which invalidates outstanding tokens
    if user is None or session is None or session.username != user.username:
        raise credentials_exception
    return user

# Dependency factory for capability checks
def capability_required(capability: str):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if capability not in capabilities_for(current_user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return _checker
