"""Root conftest: test environment and structlog wiring shared by every suite."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import configure_structlog

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Same processor chain as the server, minus handlers, so caplog sees enum
# values and the bound slot exactly as they are logged in production.
configure_structlog()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """SessionManager.attach binds ``slot``; drop it so tests start unbound."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
