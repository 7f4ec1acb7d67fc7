"""HTTP client for the studio operations API."""
from datetime import date

import httpx

from studio_planner.config.settings import get_settings
from studio_planner.core.exceptions import CollaboratorError
from studio_planner.core.logging import get_logger
from studio_planner.integrations.base import AttendanceProvider, SlotRegistry

logger = get_logger(__name__)

SERVICE_NAME = "studio_ops"


class StudioOpsClient(AttendanceProvider, SlotRegistry):
    """
    Attendance and slot registry backed by the studio operations API.

    Endpoints:
        GET {base}/attendance/present?slot_id=...&date=YYYY-MM-DD -> {"member_ids": [...]}
        GET {base}/slots/active -> {"slot_ids": [...]}
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.studio_ops_base_url).rstrip('/')
        self.api_token = api_token if api_token is not None else settings.studio_ops_api_token
        self.timeout = timeout or settings.studio_ops_timeout
        self._transport = transport

        if not self.api_token:
            logger.warning("studio_ops_token_missing", base_url=self.base_url)

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def get_present_members(self, slot_id: str, on_date: date) -> list[str]:
        data = await self._get_json(
            "/attendance/present",
            params={"slot_id": slot_id, "date": on_date.isoformat()},
        )
        return self._string_list(data, "member_ids")

    async def get_active_slots(self) -> list[str]:
        data = await self._get_json("/slots/active")
        return self._string_list(data, "slot_ids")

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/slots/active")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("studio_ops_health_check_failed", error=str(e))
            return False

    async def _get_json(self, path: str, params: dict | None = None) -> dict:
        client = await self._get_client()
        url = f"{self.base_url}{path}"
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "studio_ops_request_failed",
                path=path,
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise CollaboratorError(
                SERVICE_NAME,
                f"Studio operations API returned {e.response.status_code} for {path}",
                {"service": SERVICE_NAME, "path": path, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error("studio_ops_unreachable", path=path, error=str(e))
            raise CollaboratorError(
                SERVICE_NAME,
                f"Studio operations API unreachable: {e}",
                {"service": SERVICE_NAME, "path": path},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError(SERVICE_NAME, f"Invalid JSON from {path}", {"path": path}) from e

    @staticmethod
    def _string_list(data: dict, key: str) -> list[str]:
        values = data.get(key) if isinstance(data, dict) else None
        if not isinstance(values, list):
            raise CollaboratorError(
                SERVICE_NAME,
                f"Expected a list under '{key}'",
                {"service": SERVICE_NAME, "key": key},
            )
        return [str(value) for value in values]
