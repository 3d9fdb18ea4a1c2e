# tests/conftest.py
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import AsyncMock

from registration_service.api.v1.clients.event import EventClient
from registration_service.api.v1.clients.notification import KafkaNotificationDispatcher
from registration_service.api.v1.clients.user import UserClient
from registration_service.api.v1.dependencies import (
    get_event_client,
    get_notification_dispatcher,
    get_registration_password_scheme,
    get_user_client,
)
from registration_service.api.v1.models.registration import Registration, RegistrationStatus
from registration_service.api.v1.schemas.directory import EventDto, UserDto
from registration_service.api.v1.security.passwords import PlainCodeScheme
from registration_service.api.v1.services.registration import RegistrationService
from registration_service.core.db import Base
from registration_service.core.db.session import get_db
from registration_service.main import app

EVENT_ID = 1
EVENT_OWNER_ID = 100
AUTHOR_ID = 5


@pytest.fixture
async def async_session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    AsyncSessionMaker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield AsyncSessionMaker
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_session_maker):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def event_client():
    client = AsyncMock(spec=EventClient)
    client.get_event.return_value = EventDto(id=EVENT_ID, name="Python Meetup", owner_id=EVENT_OWNER_ID)
    client.get_team.return_value = []
    return client


@pytest.fixture
def user_client():
    client = AsyncMock(spec=UserClient)
    client.find_user_by_id.return_value = UserDto(id=AUTHOR_ID, name="author", email="author@mail.com")
    return client


@pytest.fixture
def notifier():
    return AsyncMock(spec=KafkaNotificationDispatcher)


@pytest.fixture
def service(db_session, event_client, user_client, notifier):
    return RegistrationService(
        db=db_session,
        event_client=event_client,
        user_client=user_client,
        notifier=notifier,
        password_scheme=PlainCodeScheme(),
    )


@pytest.fixture
async def async_client(async_session_maker, event_client, user_client, notifier):
    async def override_get_db():
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_client] = lambda: event_client
    app.dependency_overrides[get_user_client] = lambda: user_client
    app.dependency_overrides[get_notification_dispatcher] = lambda: notifier
    app.dependency_overrides[get_registration_password_scheme] = PlainCodeScheme

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def seed(async_session_maker):
    """Inserts registrations directly, committed and visible to other sessions."""

    async def _seed(*registrations: Registration):
        async with async_session_maker() as session:
            session.add_all(registrations)
            await session.commit()
            for registration in registrations:
                await session.refresh(registration)
        return registrations

    return _seed


def registration_stub(**kwargs) -> Registration:
    return Registration(
        id=kwargs.get("id"),
        username=kwargs.get("username", "user1"),
        email=kwargs.get("email", "email@mail.com"),
        phone=kwargs.get("phone", "78005553535"),
        event_id=kwargs.get("event_id", EVENT_ID),
        author_id=kwargs.get("author_id"),
        password=kwargs.get("password", "1234"),
        status=kwargs.get("status", RegistrationStatus.PENDING),
        created_at=kwargs.get("created_at", datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)),
    )


@pytest.fixture
def make_registration():
    return registration_stub
