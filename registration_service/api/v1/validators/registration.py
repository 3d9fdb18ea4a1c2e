from registration_service.api.v1.models.registration import RegistrationStatus
from registration_service.core.exceptions import ValidationFailedError


def ensure_status_change_allowed(new_status: RegistrationStatus) -> None:
    """
    Declining needs a reason, so it has its own endpoint.
    """
    if new_status == RegistrationStatus.DECLINED:
        raise ValidationFailedError(
            f"Illegal status. To decline registration use different endpoint. Status: {new_status.value}"
        )


def ensure_matching_registration_id(registration_id: int, credentials_id: int) -> None:
    if registration_id != credentials_id:
        raise ValidationFailedError(
            f"Registration id in path ({registration_id}) does not match credentials id ({credentials_id})"
        )


def ensure_reason_not_blank(reason: str) -> None:
    if not reason or not reason.strip():
        raise ValidationFailedError("Reason must be specified")
