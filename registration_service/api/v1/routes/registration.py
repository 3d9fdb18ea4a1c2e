from fastapi import APIRouter, Depends, Header, Path, Query, status
from typing import List, Optional
from loguru import logger

from registration_service.api.v1.dependencies import get_registration_service
from registration_service.api.v1.models.registration import RegistrationStatus
from registration_service.api.v1.schemas.registration import (
    CreatedRegistration,
    NewRegistration,
    RegistrationCount,
    RegistrationCredentials,
    RegistrationResponse,
    RegistrationUpdate,
    UpdatedRegistration,
)
from registration_service.api.v1.services.registration import RegistrationService
from registration_service.api.v1.validators.registration import (
    ensure_matching_registration_id,
    ensure_reason_not_blank,
    ensure_status_change_allowed,
)

router = APIRouter(prefix="", tags=["Registrations"])


@router.post("", response_model=CreatedRegistration, status_code=status.HTTP_201_CREATED)
async def create_registration(
    registration_in: NewRegistration,
    user_id: Optional[int] = Header(None, alias="X-User-Id", gt=0),
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug("POST /registrations")
    return await service.create(registration_in, author_id=user_id)


@router.patch("", response_model=UpdatedRegistration)
async def update_registration(
    registration_in: RegistrationUpdate,
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug("PATCH /registrations")
    return await service.update(registration_in)


@router.get("", response_model=List[RegistrationResponse])
async def read_registrations(
    event_id: int = Query(..., alias="eventId", gt=0, description="Event id"),
    page: int = Query(0, ge=0, description="Page number"),
    size: int = Query(10, gt=0, description="Number of registrations per page"),
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug(f"GET /registrations, params page={page}, size={size}, eventId={event_id}")
    return await service.find_all_by_event(page, size, event_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_registration(
    credentials: RegistrationCredentials,
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug("DELETE /registrations")
    await service.delete(credentials)
    return None


@router.get("/search", response_model=List[RegistrationResponse])
async def search_registrations(
    statuses: List[RegistrationStatus] = Query(..., description="List of statuses"),
    event_id: int = Query(..., alias="eventId", gt=0, description="Event id"),
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug(f"Requesting registrations for event with id '{event_id}', statuses: {statuses}")
    return await service.search_registrations(statuses, event_id)


@router.get("/count", response_model=RegistrationCount)
async def count_registrations(
    event_id: int = Query(..., alias="eventId", gt=0, description="Event id"),
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug(f"Requesting registrations count for event with id '{event_id}'")
    return await service.get_registrations_count(event_id)


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def read_registration(
    registration_id: int = Path(..., gt=0),
    service: RegistrationService = Depends(get_registration_service),
):
    logger.debug(f"GET /registrations/{registration_id}")
    return await service.find_by_id(registration_id)


@router.patch("/{registration_id}/status", response_model=RegistrationStatus)
async def update_registration_status(
    credentials: RegistrationCredentials,
    registration_id: int = Path(..., gt=0),
    new_status: RegistrationStatus = Query(..., alias="newStatus"),
    user_id: int = Header(..., alias="X-User-Id", gt=0),
    service: RegistrationService = Depends(get_registration_service),
):
    ensure_status_change_allowed(new_status)
    ensure_matching_registration_id(registration_id, credentials.id)
    logger.debug(f"Updating status for registration with id '{registration_id}'")
    return await service.update_status(user_id, registration_id, new_status, credentials)


@router.patch("/{registration_id}/status/decline", response_model=RegistrationStatus)
async def decline_registration(
    credentials: RegistrationCredentials,
    registration_id: int = Path(..., gt=0),
    reason: str = Query(..., description="Decline reason"),
    user_id: int = Header(..., alias="X-User-Id", gt=0),
    service: RegistrationService = Depends(get_registration_service),
):
    ensure_reason_not_blank(reason)
    ensure_matching_registration_id(registration_id, credentials.id)
    logger.debug(f"Declining registration with id '{registration_id}'")
    return await service.decline(user_id, registration_id, reason, credentials)
