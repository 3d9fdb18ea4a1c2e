from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from registration_service.api.v1.models.registration import (
    DeclinedRegistration,
    Registration,
    RegistrationStatus,
)


class RegistrationRepository:
    """
    Queries over registrations and their decline reasons.

    Methods flush but never commit: the caller owns the transaction.
    """

    @staticmethod
    async def save(db: AsyncSession, registration: Registration) -> Registration:
        db.add(registration)
        await db.flush()
        await db.refresh(registration)
        return registration

    @staticmethod
    async def find_by_id(db: AsyncSession, registration_id: int) -> Optional[Registration]:
        result = await db.execute(select(Registration).where(Registration.id == registration_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def find_by_id_for_update(db: AsyncSession, registration_id: int) -> Optional[Registration]:
        # Row stays locked until the surrounding transaction ends
        result = await db.execute(
            select(Registration)
            .where(Registration.id == registration_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_all_by_event(db: AsyncSession, event_id: int, page: int, size: int) -> List[Registration]:
        result = await db.execute(
            select(Registration)
            .where(Registration.event_id == event_id)
            .order_by(Registration.id)
            .offset(page * size)
            .limit(size)
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete_by_id(db: AsyncSession, registration_id: int) -> None:
        await db.execute(
            delete(DeclinedRegistration).where(DeclinedRegistration.registration_id == registration_id)
        )
        await db.execute(delete(Registration).where(Registration.id == registration_id))

    @staticmethod
    async def search_by_statuses_and_event(
        db: AsyncSession,
        statuses: Iterable[RegistrationStatus],
        event_id: int,
    ) -> List[Registration]:
        result = await db.execute(
            select(Registration)
            .where(Registration.status.in_(list(statuses)), Registration.event_id == event_id)
            .order_by(Registration.created_at.asc(), Registration.id.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_earliest_waiting(db: AsyncSession, event_id: int) -> Optional[Registration]:
        result = await db.execute(
            select(Registration)
            .where(
                Registration.status == RegistrationStatus.WAITING,
                Registration.event_id == event_id,
            )
            .order_by(Registration.created_at.asc(), Registration.id.asc())
            .limit(1)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def count_by_status_for_event(db: AsyncSession, event_id: int) -> Dict[str, int]:
        """
        SELECT status, COUNT(*) FROM registrations WHERE event_id = :event_id GROUP BY status

        Statuses without registrations are absent from the result.
        """
        result = await db.execute(
            select(Registration.status, func.count(Registration.id))
            .where(Registration.event_id == event_id)
            .group_by(Registration.status)
        )
        return {
            (status.value if isinstance(status, RegistrationStatus) else str(status)): count
            for status, count in result.all()
        }

    @staticmethod
    async def save_decline_reason(db: AsyncSession, registration_id: int, reason: str) -> DeclinedRegistration:
        declined = DeclinedRegistration(registration_id=registration_id, reason=reason)
        db.add(declined)
        await db.flush()
        return declined
