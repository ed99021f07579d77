"""CSRF protection and host configuration for Student Records.

CSRF tokens are stateless: ``<issued_at>.<nonce>.<signature>`` where the
signature is an HMAC-SHA256 of ``<issued_at>.<nonce>`` keyed with the
configured secret.
"""

import hashlib
import hmac
import secrets
import time

from fastapi import Depends, Request

from student_records.config import Settings, get_settings
from student_records.exceptions import CSRFException, ErrorCode
from student_records.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

CSRF_FIELD_NAME = "_token"


def _sign(secret_key: str, payload: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_csrf_token(settings: Settings, now: float | None = None) -> str:
    """Issue a new signed CSRF token.

    Args:
        settings: Settings instance with the signing secret
        now: Issue time as a UNIX timestamp (defaults to the current time)

    Returns:
        Token string to embed in a hidden form field
    """
    issued_at = int(time.time() if now is None else now)
    payload = f"{issued_at}.{secrets.token_urlsafe(16)}"
    return f"{payload}.{_sign(settings.secret_key, payload)}"


def verify_csrf_token(token: str | None, settings: Settings, now: float | None = None) -> None:
    """Verify a CSRF token's signature and age.

    Args:
        token: Token taken from the submitted form
        settings: Settings instance with the signing secret and max age
        now: Verification time as a UNIX timestamp (defaults to the current time)

    Raises:
        CSRFException: If the token is missing, malformed, tampered with or expired
    """
    if not token:
        raise CSRFException("Missing CSRF token", code=ErrorCode.CSRF_TOKEN_MISSING)

    parts = token.split(".")
    if len(parts) != 3 or not parts[0].isdigit():
        raise CSRFException("Malformed CSRF token")

    issued_at, nonce, signature = parts
    expected = _sign(settings.secret_key, f"{issued_at}.{nonce}")
    if not hmac.compare_digest(signature, expected):
        raise CSRFException("Invalid CSRF token")

    current = time.time() if now is None else now
    if current - int(issued_at) > settings.csrf_max_age_seconds:
        raise CSRFException(
            "CSRF token expired",
            code=ErrorCode.CSRF_TOKEN_EXPIRED,
            details={"max_age_seconds": settings.csrf_max_age_seconds},
        )


async def verify_csrf(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """FastAPI dependency that checks the CSRF token of a submitted form.

    Raises:
        CSRFException: If the form's token does not verify
    """
    form = await request.form()
    token = form.get(CSRF_FIELD_NAME)
    try:
        verify_csrf_token(token if isinstance(token, str) else None, settings)
    except CSRFException as e:
        log_with_context(
            logger,
            "warning",
            "CSRF check failed",
            error_code=e.code.value,
            path=str(request.url),
            ip=request.client.host if request.client else "unknown",
            event_type="csrf_rejected",
        )
        raise


def get_trusted_hosts(settings: Settings) -> list[str]:
    """Get trusted host patterns from settings.

    Args:
        settings: Settings instance with trusted hosts configuration

    Returns:
        List of trusted host patterns
    """
    return [host.strip() for host in settings.trusted_hosts.split(",") if host.strip()]
