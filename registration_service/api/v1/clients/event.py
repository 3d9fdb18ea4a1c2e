from typing import List, Optional

import httpx

from registration_service.api.v1.clients.base import DirectoryClient
from registration_service.api.v1.schemas.directory import EventDto, TeamMemberDto
from registration_service.core.exceptions import NotFoundError, ServiceError


class EventClient(DirectoryClient):
    service_name = "event"

    def error_for_status(self, response: httpx.Response) -> Optional[ServiceError]:
        if response.status_code == 404:
            return NotFoundError("Event was not found")
        return None

    async def get_event(self, user_id: int, event_id: int) -> EventDto:
        response = await self.request(
            "GET", f"/events/{event_id}", headers={"X-User-Id": str(user_id)}
        )
        return EventDto.model_validate(response.json())

    async def get_team(self, user_id: int, event_id: int) -> List[TeamMemberDto]:
        response = await self.request(
            "GET", f"/events/teams/{event_id}", headers={"X-User-Id": str(user_id)}
        )
        return [TeamMemberDto.model_validate(member) for member in response.json() or []]
