from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import jwt
from jwt import PyJWTError
from fuelai.core.config import settings
import logging
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None, extra_claims: Optional[Dict[str, Any]] = None) -> str:
    """
    Issue a signed access token for a subject.

    Token issuance belongs to the auth collaborator; this helper is what it
    (and local tooling) uses so that tokens match what verify_access_token expects.

    Args:
        subject: Stable identifier of the authenticated principal (the `sub` claim)
        expires_delta: Lifetime of the token, defaults to ACCESS_TOKEN_EXPIRE_MINUTES
        extra_claims: Additional claims such as email or name

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload = dict(extra_claims or {})
    payload.update({
        "sub": subject,
        "iat": now,
        "nbf": now,
        "exp": expire,
    })
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def _decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        leeway=settings.JWT_CLOCK_SKEW_TOLERANCE_SECONDS,
        options={
            "require": ["exp", "sub"],
            "verify_signature": True,
            "verify_exp": True,
            "verify_nbf": True,
            "verify_iat": True,
        }
    )

def read_token_subject(token: str) -> Optional[str]:
    """Subject of a valid token, or None when the token does not verify."""
    if not settings.SECRET_KEY:
        return None
    try:
        return _decode_token(token).get("sub")
    except PyJWTError:
        return None

async def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token signed with the application secret.

    Args:
        token: The JWT token to verify

    Returns:
        Dict containing subject and full payload

    Raises:
        HTTPException: If token is invalid, expired, or verification fails
    """
    if not settings.SECRET_KEY:
        logger.error("SECRET_KEY not configured, cannot verify tokens")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service unavailable"
        )

    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"}
        )
    except PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return {"subject": subject, "payload": payload}
