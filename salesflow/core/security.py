"""
Security utilities for password hashing and JWT token management.

Passwords are hashed with passlib; HTTP sessions are stateless JWT access
tokens carrying the user id as subject. Credential security is deliberately
basic: there is no lockout, refresh or revocation.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from salesflow.core.config import Settings
from salesflow.core.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


class SecurityError(Exception):
    """Base exception for security-related errors."""

    def __init__(self, message: str, code: str, **context):
        super().__init__(message)
        self.code = code
        self.context = context


class TokenError(SecurityError):
    """Exception raised for token-related errors."""


class PasswordError(SecurityError):
    """Exception raised for password-related errors."""


def hash_password(password: str) -> str:
    """
    Hash a password.

    Raises:
        PasswordError: If password is empty

    Example:
        >>> hashed = hash_password("password123")
        >>> verify_password("password123", hashed)
        True
    """
    if not password:
        logger.error("Attempted to hash empty password")
        raise PasswordError("Password cannot be empty", code="EMPTY_PASSWORD")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns:
        True if password matches, False otherwise (including empty values)
    """
    if not plain_password or not hashed_password:
        logger.warning(
            "Password verification attempted with empty values",
            has_plain=bool(plain_password),
            has_hashed=bool(hashed_password),
        )
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.warning("Unrecognized password hash", error=str(e))
        return False


def create_access_token(
    subject: str,
    settings: Settings,
    extra_claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token with expiration.

    Args:
        subject: Token subject (the user id as string)
        settings: Settings holding the signing key and algorithm
        extra_claims: Additional claims to encode
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )

    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update({"sub": subject, "exp": expire, "iat": now, "type": "access"})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )

    logger.info(
        "Access token created",
        subject=subject,
        expires_at=expire.isoformat(),
    )

    return encoded_jwt


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        TokenError: If token is empty, invalid, expired or not an access token
    """
    if not token:
        raise TokenError("Token cannot be empty", code="EMPTY_TOKEN")

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        logger.warning("Token has expired", error=str(e))
        raise TokenError("Token has expired", code="TOKEN_EXPIRED") from e
    except JWTError as e:
        logger.warning("Invalid token", error=str(e), error_type=type(e).__name__)
        raise TokenError("Invalid token", code="TOKEN_INVALID") from e

    if payload.get("type") != "access":
        raise TokenError("Token is not an access token", code="TOKEN_TYPE")

    return payload
