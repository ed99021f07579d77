"""One-shot flash messages carried across a redirect in a cookie."""

from urllib.parse import quote, unquote

from fastapi import Request
from fastapi.responses import Response

FLASH_COOKIE_NAME = "flash_success"


def set_flash(response: Response, message: str) -> None:
    """Attach a flash message to a (redirect) response."""
    response.set_cookie(
        FLASH_COOKIE_NAME,
        quote(message),
        max_age=60,
        httponly=True,
        samesite="lax",
    )


def read_flash(request: Request) -> str | None:
    """Get the pending flash message, if any."""
    raw = request.cookies.get(FLASH_COOKIE_NAME)
    return unquote(raw) if raw else None


def clear_flash(response: Response) -> None:
    """Discard the flash message once it has been shown."""
    response.delete_cookie(FLASH_COOKIE_NAME, httponly=True, samesite="lax")
