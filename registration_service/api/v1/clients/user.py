from typing import Optional

import httpx

from registration_service.api.v1.clients.base import DirectoryClient
from registration_service.api.v1.schemas.directory import UserDto
from registration_service.core.exceptions import NotFoundError, ServiceError


class UserClient(DirectoryClient):
    service_name = "user"

    def error_for_status(self, response: httpx.Response) -> Optional[ServiceError]:
        if response.status_code == 404:
            return NotFoundError("User was not found")
        return None

    async def find_user_by_id(self, user_id: int, id: int) -> UserDto:
        response = await self.request(
            "GET", f"/users/{id}", headers={"X-User-Id": str(user_id)}
        )
        return UserDto.model_validate(response.json())
