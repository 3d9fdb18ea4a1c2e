from pydantic import AfterValidator, BaseModel, ConfigDict, Field, constr
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from typing import Annotated, Optional, Dict, Any
from datetime import datetime

from registration_service.api.v1.models.registration import RegistrationStatus
from registration_service.api.v1.security.passwords import PASSWORD_LENGTH

PHONE_PATTERN = r"^7[0-9]{10}$"
EMAIL_MIN_LENGTH = 6
EMAIL_MAX_LENGTH = 254

Phone = constr(pattern=PHONE_PATTERN)
RegistrationPassword = constr(min_length=PASSWORD_LENGTH, max_length=PASSWORD_LENGTH)


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_username(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("Username cannot be blank")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    # Stored as supplied, the normalized form is only used for the format check
    _, normalized = validate_email(value)
    if normalized.lower() != value.lower():
        raise ValueError("value is not a valid email address")
    if not EMAIL_MIN_LENGTH <= len(value) <= EMAIL_MAX_LENGTH:
        raise ValueError(
            f"Email's length cannot be less than {EMAIL_MIN_LENGTH} "
            f"and more than {EMAIL_MAX_LENGTH} symbols"
        )
    return value


Username = Annotated[str, AfterValidator(_check_username)]
EmailAddress = Annotated[str, AfterValidator(_check_email)]


class NewRegistration(CamelModel):
    username: Username
    email: EmailAddress
    phone: Phone
    event_id: int = Field(gt=0)


class RegistrationCredentials(CamelModel):
    id: int = Field(gt=0)
    password: RegistrationPassword


class RegistrationUpdate(RegistrationCredentials):
    """
    Partial update. Each of username, email and phone is optional:
    absent or null means the stored value is kept.
    """

    username: Optional[Username] = None
    email: Optional[EmailAddress] = None
    phone: Optional[Phone] = None

    def changes(self) -> Dict[str, Any]:
        changed = {}
        if self.username is not None:
            changed["username"] = self.username
        if self.email is not None:
            changed["email"] = self.email
        if self.phone is not None:
            changed["phone"] = self.phone
        return changed


class CreatedRegistration(CamelModel):
    id: int
    password: str


class UpdatedRegistration(CamelModel):
    id: int
    username: str
    email: str
    phone: str
    status: RegistrationStatus


# Used in responses to the client
class RegistrationResponse(CamelModel):
    id: int
    username: str
    email: str
    phone: str
    event_id: int
    author_id: Optional[int] = None
    status: RegistrationStatus
    created_at: Optional[datetime] = None


class RegistrationCount(CamelModel):
    pending: int = 0
    waiting: int = 0
    approved: int = 0
    declined: int = 0


class RegistrationNotification(CamelModel):
    event_owner_id: int
    event_name: str
    participant_email: str
