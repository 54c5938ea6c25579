"""Password hashing and bearer-token helpers used at the auth boundary."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError

from quickbite.core.config import JWT_ALGORITHM, JWT_EXPIRE_HOURS, JWT_SECRET

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHash):
        return False


def create_access_token(user_id: UUID, role: str, email: str, expires_in: timedelta = None) -> str:
    """Issues an HS256 token carrying the identity claims the API reads back."""
    expires_in = expires_in or timedelta(hours=JWT_EXPIRE_HOURS)
    claims = {
        "user_id": str(user_id),
        "role": role,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Returns the token claims. Raises jwt.InvalidTokenError (expired included)."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
