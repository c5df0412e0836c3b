"""Root test configuration."""

import logging

import pytest
import structlog
from dnicheck.config import Settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings that never read the environment or .env."""
    return Settings(
        _env_file=None,
        consultasperu_api_url="https://consultas.example.com/api/v1/query",
        consultasperu_token="cp-token",
        decolecta_api_url="https://decolecta.example.com/v1/reniec/dni",
        decolecta_token="dc-token",
        google_sheet_id="sheet-1",
        google_sheet_range="Hoja1!A:B",
    )
