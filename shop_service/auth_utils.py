# shop_service/auth_utils.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenPayload:
    id: int
    email: str


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a fresh random salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def create_access_token(
    user_id: int,
    email: str,
    secret_key: str,
    algorithm: str = "HS256",
    expire_minutes: Optional[int] = None,
) -> str:
    """Sign a bearer token carrying {id, email}.

    Without ``expire_minutes`` the token has no ``exp`` claim and never expires.
    """
    to_encode = {"id": user_id, "email": email}
    if expire_minutes is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> TokenPayload:
    """Verify a token and return its payload.

    Raises ``jwt.InvalidTokenError`` (or a subclass such as
    ``ExpiredSignatureError``) when the signature or the claims are bad.
    """
    payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    user_id = payload.get("id")
    email = payload.get("email")
    if not isinstance(user_id, int) or not isinstance(email, str):
        raise jwt.InvalidTokenError("Token payload is missing id or email")
    return TokenPayload(id=user_id, email=email)
