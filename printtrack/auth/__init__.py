"""Authentication for PrintTrack.

Password accounts with bcrypt hashes and JWT bearer tokens that identify
the owner of every record.
"""

from printtrack.auth.jwt import (
    create_access_token,
    decode_token,
    TokenPayload,
)
from printtrack.auth.password import (
    hash_password,
    verify_password,
    validate_password_strength,
)
from printtrack.auth.dependencies import CurrentOwner, get_current_owner

__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenPayload",
    # Password
    "hash_password",
    "verify_password",
    "validate_password_strength",
    # FastAPI
    "CurrentOwner",
    "get_current_owner",
]
