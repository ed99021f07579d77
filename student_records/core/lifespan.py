"""Application lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from student_records import __version__
from student_records.logging_config import get_logger, log_with_context
from student_records.state_managers import StudentRecordStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events.

    Exceptions after yield are re-raised so cleanup always runs.
    """
    log_with_context(
        logger,
        "info",
        "Starting Student Records application",
        version=__version__,
        event_type="app_startup",
    )

    # Store in app state instead of a global variable
    app.state.student_store = StudentRecordStore()
    await app.state.student_store.initialize()
    log_with_context(
        logger,
        "info",
        "Student record store initialized",
        event_type="state_managers_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down Student Records application",
            event_type="app_shutdown",
        )

        await app.state.student_store.cleanup()
        log_with_context(
            logger,
            "info",
            "Student record store cleaned up",
            event_type="state_managers_cleanup",
        )
