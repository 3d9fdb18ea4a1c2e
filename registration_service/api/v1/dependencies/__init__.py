# registration_service/api/v1/dependencies/__init__.py

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from registration_service.api.v1.clients.event import EventClient
from registration_service.api.v1.clients.notification import (
    KafkaNotificationDispatcher,
    LoggingNotificationDispatcher,
    NotificationDispatcher,
)
from registration_service.api.v1.clients.user import UserClient
from registration_service.api.v1.security.passwords import PasswordScheme, get_password_scheme
from registration_service.api.v1.services.registration import RegistrationService
from registration_service.core.config import (
    DIRECTORY_TIMEOUT_SECONDS,
    EVENT_SERVICE_URL,
    KAFKA_BOOTSTRAP_SERVERS,
    KAFKA_ENABLED,
    KAFKA_TOPIC,
    USER_SERVICE_URL,
)
from registration_service.core.db.session import get_db

# One dispatcher per process, started and stopped with the application
notification_dispatcher = (
    KafkaNotificationDispatcher(KAFKA_BOOTSTRAP_SERVERS, KAFKA_TOPIC)
    if KAFKA_ENABLED
    else LoggingNotificationDispatcher()
)


def get_event_client() -> EventClient:
    return EventClient(EVENT_SERVICE_URL, timeout=DIRECTORY_TIMEOUT_SECONDS)


def get_user_client() -> UserClient:
    return UserClient(USER_SERVICE_URL, timeout=DIRECTORY_TIMEOUT_SECONDS)


def get_notification_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher


def get_registration_password_scheme() -> PasswordScheme:
    return get_password_scheme()


async def get_registration_service(
    db: AsyncSession = Depends(get_db),
    event_client: EventClient = Depends(get_event_client),
    user_client: UserClient = Depends(get_user_client),
    notifier: NotificationDispatcher = Depends(get_notification_dispatcher),
    password_scheme: PasswordScheme = Depends(get_registration_password_scheme),
) -> RegistrationService:
    return RegistrationService(
        db=db,
        event_client=event_client,
        user_client=user_client,
        notifier=notifier,
        password_scheme=password_scheme,
    )
