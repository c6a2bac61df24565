# social_api/core/security.py

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from social_api.core.config import MAX_TOKEN_DAYS
from social_api.core.errors import Unauthenticated

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        return password_bytes[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
    return password


class PasswordHasher:
    """One-way password hashing backed by bcrypt."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(_truncate(password))

    def verify(self, password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False
        return self._context.verify(_truncate(password), hashed_password)


class TokenCodec:
    """
    Signs and verifies session tokens.

    A token is a JWT carrying {"userId", "iat", "exp"}. The lifetime is capped
    at MAX_TOKEN_DAYS no matter what the caller asks for.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = MAX_TOKEN_DAYS):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.lifetime = timedelta(days=min(expire_days, MAX_TOKEN_DAYS))

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "userId": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the user id the token was issued for."""
        if not token:
            raise Unauthenticated("Unauthorized: No token provided")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_iat": True},
            )
        except ExpiredSignatureError:
            raise Unauthenticated("Unauthorized: Token expired")
        except JWTError:
            raise Unauthenticated("Unauthorized: Invalid token")

        user_id = payload.get("userId")
        if not user_id or not isinstance(user_id, str):
            raise Unauthenticated("Unauthorized: Invalid token")
        return user_id

    def __repr__(self) -> str:
        return f"TokenCodec(algorithm={self._algorithm!r}, lifetime={self.lifetime!r})"
