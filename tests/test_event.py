import pytest
from unittest.mock import AsyncMock, Mock, patch
from fastapi import FastAPI

from registration_service.core.events import create_start_app_handler, create_stop_app_handler


@pytest.fixture
def mock_fastapi_app():
    """Provides a mock FastAPI application instance for testing."""
    return Mock(spec=FastAPI)


@pytest.fixture
def mock_dispatcher():
    dispatcher = Mock()
    dispatcher.start = AsyncMock()
    dispatcher.stop = AsyncMock()
    with patch("registration_service.core.events.notification_dispatcher", new=dispatcher):
        yield dispatcher


@pytest.fixture
def mock_engine():
    engine = Mock()
    engine.dispose = AsyncMock()
    with patch("registration_service.core.events.engine", new=engine):
        yield engine


@pytest.mark.asyncio
async def test_start_app_creates_tables_and_starts_dispatcher(mock_fastapi_app, mock_dispatcher):
    with patch("registration_service.core.events.CREATE_TABLES_ON_STARTUP", True), \
            patch("registration_service.core.events.create_tables", new_callable=AsyncMock) as mock_create_tables:
        startup_handler = create_start_app_handler(mock_fastapi_app)
        assert callable(startup_handler)

        await startup_handler()

        mock_create_tables.assert_awaited_once_with()
        mock_dispatcher.start.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_start_app_skips_tables_when_disabled(mock_fastapi_app, mock_dispatcher):
    with patch("registration_service.core.events.CREATE_TABLES_ON_STARTUP", False), \
            patch("registration_service.core.events.create_tables", new_callable=AsyncMock) as mock_create_tables:
        await create_start_app_handler(mock_fastapi_app)()

        mock_create_tables.assert_not_awaited()
        mock_dispatcher.start.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_start_app_with_logging_dispatcher(mock_fastapi_app):
    """A dispatcher without start/stop (Kafka disabled) is simply skipped."""
    dispatcher = Mock(spec=["send"])
    with patch("registration_service.core.events.notification_dispatcher", new=dispatcher), \
            patch("registration_service.core.events.CREATE_TABLES_ON_STARTUP", False):
        await create_start_app_handler(mock_fastapi_app)()


@pytest.mark.asyncio
async def test_stop_app_stops_dispatcher_and_disposes_engine(mock_fastapi_app, mock_dispatcher, mock_engine):
    shutdown_handler = create_stop_app_handler(mock_fastapi_app)

    await shutdown_handler()

    mock_dispatcher.stop.assert_awaited_once_with()
    mock_engine.dispose.assert_awaited_once_with()
