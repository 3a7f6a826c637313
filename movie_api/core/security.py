# JWT issuing/verification and password hashing
# movie_api/core/security.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

from movie_api.core.config import settings

logger = logging.getLogger(__name__)

# Scheme for extracting "Bearer <token>" from Authorization header
# auto_error=False means we handle the error manually if token is missing/malformed
token_bearer_scheme = HTTPBearer(auto_error=False)


# --- Custom Exceptions ---
class CredentialsException(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials", status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class TokenExpiredException(CredentialsException):
    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail=detail)

class InvalidTokenException(CredentialsException):
    def __init__(self, detail: str = "Invalid token signature or format"):
        super().__init__(detail=detail)

class InvalidClaimsException(CredentialsException):
    def __init__(self, detail: str = "Invalid token claims"):
        super().__init__(detail=detail)

class MissingTokenException(CredentialsException):
    def __init__(self, detail: str = "Authentication token missing"):
        super().__init__(detail=detail)


# --- Password hashing ---

def hash_password(password: str) -> str:
    """Returns a salted bcrypt hash of the plaintext password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Checks a plaintext password against a stored bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash has an unexpected format.")
        return False


# --- Token issuing ---

def create_access_token(user_id: str, username: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issues a signed JWT for the given user.

    The 'sub' claim carries the database id rather than the Username, so a
    token stays valid after the user renames themselves.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    payload = {
        "sub": user_id,
        "Username": username,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


# --- Core Verification Logic ---

async def verify_token(
    auth_credentials: Optional[HTTPAuthorizationCredentials] = Depends(token_bearer_scheme),
) -> Dict[str, Any]:
    """
    Verifies the JWT from the Authorization header.

    Returns:
        The decoded JWT payload as a dictionary if valid.

    Raises:
        MissingTokenException: If no token is provided or format is wrong.
        TokenExpiredException: If the token signature has expired.
        InvalidClaimsException: If claims are invalid.
        InvalidTokenException: If the token signature or format is invalid.
    """
    if auth_credentials is None or not auth_credentials.credentials:
        logger.warning("Authentication attempt failed: No token provided in Authorization header.")
        raise MissingTokenException()

    token = auth_credentials.credentials
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_signature": True, "verify_exp": True},
        )
        return payload
    except ExpiredSignatureError:
        logger.warning("Authentication attempt failed: Token expired.")
        raise TokenExpiredException()
    except JWTClaimsError as e:
        logger.warning(f"Authentication attempt failed: Invalid claims - {e}")
        raise InvalidClaimsException(detail=f"Invalid token claims: {e}")
    except JWTError as e:
        logger.warning(f"Authentication attempt failed: Invalid token format or signature - {e}")
        raise InvalidTokenException(detail=f"Invalid token: {e}")


async def get_current_user_id(
    payload: Dict[str, Any] = Depends(verify_token)
) -> str:
    """
    FastAPI dependency that verifies the token and returns the user ID ('sub' claim).

    Raises:
        CredentialsException: If the 'sub' claim is missing or malformed.
    """
    user_id = payload.get("sub")
    if user_id is None:
        logger.error("Authentication failed: 'sub' claim (user ID) missing from token payload.")
        raise CredentialsException(detail="User identifier not found in token")
    if not isinstance(user_id, str):
        logger.error(f"Authentication failed: 'sub' claim is not a string (type: {type(user_id)}).")
        raise CredentialsException(detail="Invalid user identifier format in token")
    return user_id
