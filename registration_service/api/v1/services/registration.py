from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from registration_service.api.v1.clients.event import EventClient
from registration_service.api.v1.clients.notification import NotificationDispatcher
from registration_service.api.v1.clients.user import UserClient
from registration_service.api.v1.models.registration import Registration, RegistrationStatus
from registration_service.api.v1.repositories.registration import RegistrationRepository
from registration_service.api.v1.schemas.directory import EventDto, TeamMemberRole
from registration_service.api.v1.schemas.registration import (
    CreatedRegistration,
    NewRegistration,
    RegistrationCount,
    RegistrationCredentials,
    RegistrationNotification,
    RegistrationResponse,
    RegistrationUpdate,
    UpdatedRegistration,
)
from registration_service.api.v1.security.passwords import PasswordScheme
from registration_service.core.exceptions import (
    ConflictingStateError,
    NotAuthorizedError,
    NotFoundError,
    PasswordIncorrectError,
)


class RegistrationService:
    """
    Registration lifecycle: create, partial update, delete and status changes.

    Every mutating call locks the row, verifies the registration password and
    only then touches the record, all in one transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        event_client: EventClient,
        user_client: UserClient,
        notifier: NotificationDispatcher,
        password_scheme: PasswordScheme,
    ):
        if db is None:
            raise ValueError("Database session cannot be None")
        self.db = db
        self.event_client = event_client
        self.user_client = user_client
        self.notifier = notifier
        self.password_scheme = password_scheme

    async def create(self, new_registration: NewRegistration, author_id: Optional[int] = None) -> CreatedRegistration:
        logger.info(
            f"Creating registration: username={new_registration.username}, email={new_registration.email}, "
            f"phone={new_registration.phone}, eventId={new_registration.event_id}, authorId={author_id}"
        )
        if author_id is not None:
            await self.user_client.find_user_by_id(author_id, author_id)

        password = self.password_scheme.generate()
        registration = Registration(
            username=new_registration.username,
            email=new_registration.email,
            phone=new_registration.phone,
            event_id=new_registration.event_id,
            author_id=author_id,
            password=self.password_scheme.encode(password),
            status=RegistrationStatus.PENDING,
        )
        try:
            registration = await RegistrationRepository.save(self.db, registration)
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictingStateError(f"Registration violates data integrity: {e.orig}")
        await self._commit()
        logger.info(f"Created registration id={registration.id} for eventId={registration.event_id}")
        return CreatedRegistration(id=registration.id, password=password)

    async def update(self, update_request: RegistrationUpdate) -> UpdatedRegistration:
        changes = update_request.changes()
        logger.info(f"Updating registration id={update_request.id}, fields={sorted(changes)}")
        registration = await self._find_for_update_or_throw(update_request.id)
        self._check_password_or_throw(registration, update_request.password)

        for field, value in changes.items():
            setattr(registration, field, value)
        await self._commit()
        return UpdatedRegistration.model_validate(registration)

    async def find_by_id(self, registration_id: int) -> RegistrationResponse:
        logger.debug(f"Looking up registration id={registration_id}")
        registration = await RegistrationRepository.find_by_id(self.db, registration_id)
        if registration is None:
            raise NotFoundError(f"Registration with id={registration_id} was not found")
        return RegistrationResponse.model_validate(registration)

    async def find_all_by_event(self, page: int, size: int, event_id: int) -> List[RegistrationResponse]:
        logger.debug(f"Listing registrations page={page}, size={size}, eventId={event_id}")
        registrations = await RegistrationRepository.find_all_by_event(self.db, event_id, page, size)
        return [RegistrationResponse.model_validate(reg) for reg in registrations]

    async def delete(self, credentials: RegistrationCredentials) -> None:
        logger.info(f"Deleting registration id={credentials.id}")
        registration = await self._find_for_update_or_throw(credentials.id)
        self._check_password_or_throw(registration, credentials.password)

        freed_place = registration.status == RegistrationStatus.APPROVED
        event_id = registration.event_id
        await RegistrationRepository.delete_by_id(self.db, registration.id)
        if freed_place:
            await self._reconsider_earliest_waiting(event_id)
        await self._commit()

    async def update_status(
        self,
        user_id: int,
        registration_id: int,
        new_status: RegistrationStatus,
        credentials: RegistrationCredentials,
    ) -> RegistrationStatus:
        registration = await self._find_for_update_or_throw(registration_id)
        self._check_password_or_throw(registration, credentials.password)
        await self._check_owner_or_manager(user_id, registration.event_id)

        registration.status = new_status
        await self._commit()
        logger.info(f"New status '{new_status.value}' for registration with id '{registration_id}'")
        return registration.status

    async def decline(
        self,
        user_id: int,
        registration_id: int,
        reason: str,
        credentials: RegistrationCredentials,
    ) -> RegistrationStatus:
        registration = await self._find_for_update_or_throw(registration_id)
        self._check_password_or_throw(registration, credentials.password)
        event = await self._check_owner_or_manager(user_id, registration.event_id)

        registration.status = RegistrationStatus.DECLINED
        await RegistrationRepository.save_decline_reason(self.db, registration.id, reason)
        await self._commit()
        logger.debug(f"Registration with id '{registration_id}' was declined. Reason: {reason}")

        await self._notify(RegistrationNotification(
            event_owner_id=event.owner_id,
            event_name=event.name,
            participant_email=registration.email,
        ))
        return registration.status

    async def search_registrations(
        self,
        statuses: Iterable[RegistrationStatus],
        event_id: int,
    ) -> List[RegistrationResponse]:
        statuses = list(statuses)
        registrations = await RegistrationRepository.search_by_statuses_and_event(self.db, statuses, event_id)
        logger.debug(
            f"Found '{len(registrations)}' registrations for event with id '{event_id}' "
            f"and statuses in {[status.value for status in statuses]}"
        )
        return [RegistrationResponse.model_validate(reg) for reg in registrations]

    async def get_registrations_count(self, event_id: int) -> RegistrationCount:
        counts = await RegistrationRepository.count_by_status_for_event(self.db, event_id)
        logger.debug(f"Retrieved registrations count for event with id '{event_id}': {counts}")
        return RegistrationCount(
            pending=counts.get(RegistrationStatus.PENDING.value, 0),
            waiting=counts.get(RegistrationStatus.WAITING.value, 0),
            approved=counts.get(RegistrationStatus.APPROVED.value, 0),
            declined=counts.get(RegistrationStatus.DECLINED.value, 0),
        )

    async def _find_for_update_or_throw(self, registration_id: int) -> Registration:
        registration = await RegistrationRepository.find_by_id_for_update(self.db, registration_id)
        if registration is None:
            raise NotFoundError(f"Registration with id={registration_id} was not found")
        return registration

    def _check_password_or_throw(self, registration: Registration, password: str) -> None:
        if not self.password_scheme.verify(registration.password, password):
            raise PasswordIncorrectError(
                f"Password for registration id={registration.id} is not correct"
            )

    async def _check_owner_or_manager(self, user_id: int, event_id: int) -> EventDto:
        event = await self.event_client.get_event(user_id, event_id)
        if event.owner_id == user_id:
            return event
        team = await self.event_client.get_team(user_id, event_id)
        if any(member.user_id == user_id and member.role == TeamMemberRole.MANAGER for member in team):
            return event
        raise NotAuthorizedError(
            f"User id={user_id} has no rights to change registration status for event id={event_id}"
        )

    async def _reconsider_earliest_waiting(self, event_id: int) -> None:
        waiting = await RegistrationRepository.find_earliest_waiting(self.db, event_id)
        if waiting is not None:
            waiting.status = RegistrationStatus.PENDING
            logger.info(f"Registration id={waiting.id} moved from WAITING to PENDING for eventId={event_id}")

    async def _notify(self, notification: RegistrationNotification) -> None:
        # The status change is already committed at this point
        try:
            await self.notifier.send(notification)
        except Exception as e:
            logger.error(f"Notification {notification} was not sent: {e!r}")

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictingStateError(f"Registration violates data integrity: {e.orig}")
