"""
Startup checks for the FuelAI backend.

Each check returns ``(is_valid, issues)``. Problems that would break token
signing, slot upserts or audit logging are issues; anything else is only
logged as a warning.
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Tuple
from fuelai.core.config import settings

logger = logging.getLogger(__name__)

# 32 bytes = 256 bits, the HS256 digest size
MIN_SECRET_KEY_BYTES = 32
UPSERT_DIALECT_PREFIXES = ("postgresql", "sqlite")
PLACEHOLDER_SECRET_KEYS = {"changeme", "your-secret-key-here"}

class StartupValidationError(Exception):
    """Raised when startup validation fails"""
    pass

def validate_secret_key() -> Tuple[bool, List[str]]:
    """The access-token signing key is set, not a placeholder, and long enough."""
    if not settings.SECRET_KEY:
        return False, ["SECRET_KEY is not set; access tokens cannot be verified"]

    if settings.SECRET_KEY in PLACEHOLDER_SECRET_KEYS:
        return False, ["SECRET_KEY is a placeholder value"]

    if len(settings.SECRET_KEY.encode('utf-8')) < MIN_SECRET_KEY_BYTES:
        return False, [f"SECRET_KEY must be at least {MIN_SECRET_KEY_BYTES} bytes for {settings.JWT_ALGORITHM}"]

    return True, []

def validate_database_url() -> Tuple[bool, List[str]]:
    """Slot writes use INSERT ... ON CONFLICT, which only some backends support."""
    if not settings.DATABASE_URL:
        return False, ["DATABASE_URL is not set"]

    if not settings.DATABASE_URL.startswith(UPSERT_DIALECT_PREFIXES):
        backend = settings.DATABASE_URL.split(":", 1)[0]
        return False, [f"'{backend}' cannot run slot upserts; use PostgreSQL or SQLite"]

    if settings.DATABASE_URL.startswith("sqlite"):
        logger.warning("Using SQLite database; suitable for development and tests only")

    return True, []

def validate_audit_log_dir() -> Tuple[bool, List[str]]:
    """The audit log directory exists or can be created, and is writable."""
    if not settings.LOG_AUDIT_EVENTS:
        logger.info("Audit logging is disabled")
        return True, []

    log_dir = Path(settings.AUDIT_LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return False, [f"Cannot create audit log directory {log_dir}: {e}"]

    if not os.access(log_dir, os.W_OK):
        return False, [f"Audit log directory {log_dir} is not writable"]

    return True, []

def validate_cors_origins() -> Tuple[bool, List[str]]:
    """Never fails; an empty or localhost-only list is only worth a warning."""
    if not settings.ALLOWED_ORIGINS:
        logger.warning("ALLOWED_ORIGINS is not set; browser clients will be rejected")
    elif all("localhost" in origin for origin in settings.ALLOWED_ORIGINS):
        logger.warning("All CORS origins are localhost. Update for production deployment.")

    return True, []

VALIDATIONS = [
    ("Secret Key", validate_secret_key),
    ("Database URL", validate_database_url),
    ("Audit Log", validate_audit_log_dir),
    ("CORS Origins", validate_cors_origins),
]

def perform_startup_validation(strict: bool = False) -> bool:
    """
    Run every startup check.

    Args:
        strict: Raise when any check fails instead of only logging

    Returns:
        True if all checks pass

    Raises:
        StartupValidationError: If a check fails in strict mode
    """
    all_issues = []

    for name, validator in VALIDATIONS:
        is_valid, issues = validator()
        if is_valid:
            logger.debug(f"{name} validation passed")
            continue
        all_issues.extend(f"{name}: {issue}" for issue in issues)

    if not all_issues:
        logger.info("All startup validations passed")
        return True

    for issue in all_issues:
        logger.error(f"Startup validation: {issue}")

    if strict:
        raise StartupValidationError("; ".join(all_issues))
    return False

async def startup_event():
    """Lifespan hook; a misconfigured server still starts but logs why it will misbehave."""
    perform_startup_validation(strict=False)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        perform_startup_validation(strict=True)
    except StartupValidationError as e:
        print(f"Critical validation error: {str(e)}")
        sys.exit(1)
