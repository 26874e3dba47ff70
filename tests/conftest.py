import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """CLI tests configure structlog against CliRunner's streams; undo that."""
    yield
    structlog.reset_defaults()
