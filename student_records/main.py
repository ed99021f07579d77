"""Main FastAPI application entry point."""

import os
from pathlib import Path

from dotenv import load_dotenv

from student_records.core.app_factory import create_app
from student_records.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
log_level = os.getenv("LOG_LEVEL", "INFO")
setup_logging(log_level)

# Create application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    from student_records.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "student_records.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
