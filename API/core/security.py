"""
Owner authentication primitives.

Passwords are bcrypt hashes; sessions are stateless JWT access tokens that
carry the owner id and the restaurant the owner belongs to.
"""

from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings


TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


class OwnerClaims(NamedTuple):
    """What an access token says about its bearer."""
    user_id: int
    restaurant_id: int
    email: str
    role: str


def create_access_token(owner: OwnerClaims, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(owner.user_id),
        "restaurant_id": owner.restaurant_id,
        "email": owner.email,
        "role": owner.role,
        "type": TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(token: str) -> Optional[OwnerClaims]:
    """
    Decode a bearer token.

    Returns None for a bad signature, an expired token, a token of another
    type, or one missing the owner / restaurant ids.
    """
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if claims.get("type") != TOKEN_TYPE:
        return None
    try:
        return OwnerClaims(
            user_id=int(claims["sub"]),
            restaurant_id=int(claims["restaurant_id"]),
            email=claims.get("email", ""),
            role=claims.get("role", ""),
        )
    except (KeyError, TypeError, ValueError):
        return None
