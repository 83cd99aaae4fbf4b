from __future__ import annotations

from typing import Any, Dict, Optional


class ReportIssueError(Exception):
    """Base class for service errors."""


class FormSchemaError(ReportIssueError):
    """The form schema is inconsistent (unknown `requires` keys, cycles, bad actions)."""


class DisplayError(ReportIssueError):
    """A command sent to the display surface failed."""


class TransportError(ReportIssueError):
    """The webhook POST failed (network error or non-2xx status)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": type(self).__name__, "message": str(self)}
        if self.status_code is not None:
            out["status"] = self.status_code
        if self.body:
            out["body"] = self.body
        return out
