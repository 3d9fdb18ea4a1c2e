from typing import Any, Dict, Optional

import httpx
from loguru import logger

from registration_service.core.exceptions import ServiceError, UpstreamUnavailableError


class DirectoryClient:
    """
    Thin JSON-over-HTTP client for a neighbouring service.

    Every call opens its own httpx.AsyncClient; nothing is retried. Subclasses
    map interesting status codes to service errors in `error_for_status`.
    """

    service_name = "directory"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def error_for_status(self, response: httpx.Response) -> Optional[ServiceError]:
        return None

    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        logger.debug(f"{self.service_name} -> {method} {path}")
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{self.service_name} call {method} {path} failed: {e!r}")
            raise UpstreamUnavailableError(f"{self.service_name} service is unavailable")

        logger.debug(f"{self.service_name} <- {response.status_code} {method} {path}")
        if response.is_success:
            return response

        error = self.error_for_status(response)
        if error is not None:
            raise error
        logger.error(f"{self.service_name} call {method} {path} returned {response.status_code}: {response.text}")
        raise UpstreamUnavailableError(
            f"{self.service_name} service responded with status {response.status_code}"
        )
