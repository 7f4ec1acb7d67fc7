"""Studio operations collaborators."""
from studio_planner.integrations.base import AttendanceProvider, SlotRegistry, dedupe_members
from studio_planner.integrations.studio_ops import StudioOpsClient

__all__ = [
    "AttendanceProvider",
    "SlotRegistry",
    "StudioOpsClient",
    "dedupe_members",
    "get_studio_ops_client",
    "cleanup_studio_ops_client",
]


# Module-level singleton instance
_client_instance: StudioOpsClient | None = None


def get_studio_ops_client() -> StudioOpsClient:
    """
    Get the singleton studio operations client.

    Reuses one HTTP connection pool for attendance and slot lookups.
    """
    global _client_instance

    if _client_instance is None:
        _client_instance = StudioOpsClient()

    return _client_instance


async def cleanup_studio_ops_client():
    """
    Close the studio operations client.

    Should be called during application shutdown.
    """
    global _client_instance

    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
