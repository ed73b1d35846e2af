"""JWT token handling for authentication."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError

from printtrack.config import get_settings
from printtrack.utils import get_logger

logger = get_logger("auth.jwt")


@dataclass
class TokenPayload:
    """JWT token payload structure."""
    sub: str  # User ID
    email: str
    exp: datetime
    iat: datetime
    type: str = "access"

    def to_dict(self) -> dict:
        """Convert to dictionary for JWT encoding."""
        return {
            "sub": self.sub,
            "email": self.email,
            "exp": self.exp,
            "iat": self.iat,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TokenPayload":
        """Create from dictionary (decoded JWT)."""
        def _instant(value):
            if isinstance(value, (int, float)):
                return datetime.fromtimestamp(value, tz=timezone.utc)
            return value

        return cls(
            sub=data["sub"],
            email=data.get("email", ""),
            exp=_instant(data["exp"]),
            iat=_instant(data["iat"]),
            type=data.get("type", "access"),
        )


def create_access_token(
    user_id: str,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a new access token."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload = TokenPayload(
        sub=user_id,
        email=email,
        exp=now + expires_delta,
        iat=now,
    )

    token = jwt.encode(payload.to_dict(), settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    logger.debug(f"Created access token for user {user_id}")
    return token


def decode_token(token: str) -> Optional[TokenPayload]:
    """Decode a token and return the payload, None when invalid or expired."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return TokenPayload.from_dict(payload)
    except ExpiredSignatureError:
        logger.debug("Token has expired")
        return None
    except (InvalidTokenError, KeyError) as e:
        logger.warning(f"Failed to decode token: {e}")
        return None
