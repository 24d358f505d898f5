from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    CONFIG_FETCH_ERROR = "CONFIG_FETCH_ERROR"


class ConfigFetchError(Exception):
    """A required document could not be fetched or parsed.

    Fatal to the whole load: no groups are rendered when this is raised.
    """

    def __init__(self, resource: str, status: int | None = None, detail: str = "") -> None:
        self.resource = resource
        self.status = status
        self.detail = detail
        reason = str(status) if status is not None else (detail or "unavailable")
        super().__init__(f"{resource} ({reason})")

    def to_details(self) -> dict[str, Any]:
        return {"resource": self.resource, "status": self.status, "detail": self.detail}
