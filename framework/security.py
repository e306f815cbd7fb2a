from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from framework.config import settings

# 1. Password hashing (BCrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. OAuth2 scheme and token URL
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_SECURITY_PREFIX}/login", auto_error=False)

# --- Core models ---

class CurrentUser(BaseModel):
    """Current logged-in user context"""
    id: int
    user_name: str

# --- Helpers ---

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


class JwtProvider:
    """Issues signed access tokens."""

    def __init__(self, algorithm: str = settings.JWT_ALGORITHM):
        self.algorithm = algorithm

    def generate_jwt(self, claims: dict, token_duration: timedelta, secret: str) -> Tuple[str, datetime]:
        """Return (token, expires_at) for the given claims."""
        expires_at = datetime.now(timezone.utc) + token_duration
        to_encode = dict(claims)
        to_encode.update({"exp": expires_at})
        token = jwt.encode(to_encode, secret, algorithm=self.algorithm)
        return token, expires_at

    def decode(self, token: str, secret: str) -> dict:
        return jwt.decode(token, secret, algorithms=[self.algorithm])


jwt_provider = JwtProvider()

# --- FastAPI dependencies ---

def get_jwt_provider() -> JwtProvider:
    return jwt_provider

def get_token_from_request(
    request: Request,
    token_from_header: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    """
    Get token from request: prefer cookie, then Authorization header.
    """
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)

    if not token and token_from_header:
        token = token_from_header

    return token

def get_current_user(
    token: Optional[str] = Depends(get_token_from_request),
    provider: JwtProvider = Depends(get_jwt_provider),
) -> CurrentUser:
    """
    Dependency: validate token and extract user. Use in router as user: CurrentUser = Depends(get_current_user).
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = provider.decode(token, settings.SECRET_KEY)
    except JWTError:
        raise credentials_exception

    user_name = payload.get("sub")
    user_id = payload.get("user_id")
    if user_name is None or user_id is None:
        raise credentials_exception

    return CurrentUser(id=user_id, user_name=user_name)
