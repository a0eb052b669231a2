"""
Pytest configuration for joplin-export tests.

Configures structured logging once per session so that warnings emitted by
the pipeline reach pytest's log capture.
"""

import pytest

from joplin_export.utils.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def auto_configure_logging():
    """Route structlog through stdlib logging at debug level."""
    configure_logging(service_name="joplin-export-tests", log_level="DEBUG", enable_json=False)
    yield
