"""FastAPI authentication dependencies."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from printtrack.auth.jwt import decode_token
from printtrack.utils import get_logger

logger = get_logger("auth.dependencies")

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_owner(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> str:
    """Resolve the bearer token to the owning user id.

    Raises HTTPException 401 if the token is missing, invalid or expired.
    """
    payload = decode_token(credentials.credentials) if credentials else None

    if payload is None or payload.type != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload.sub


# Type alias for route signatures
CurrentOwner = Annotated[str, Depends(get_current_owner)]
