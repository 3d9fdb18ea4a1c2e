import enum
from typing import Optional

from registration_service.api.v1.schemas.registration import CamelModel


class TeamMemberRole(str, enum.Enum):
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


class EventDto(CamelModel):
    id: int
    name: str
    owner_id: int


class TeamMemberDto(CamelModel):
    event_id: int
    user_id: int
    role: TeamMemberRole


class UserDto(CamelModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    about_me: Optional[str] = None

