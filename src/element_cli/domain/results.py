"""Outcome envelope for one block lifecycle command.

Services return a ``CommandResult`` rather than raising, and the CLI turns it
into console output and a process exit code.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class CommandResult:
    """Result of publish/update/new-major-version/release/rollback/details.

    ``data`` holds the resulting block state on success, or the error
    context on failure. A failure whose ``data`` has ``remote_applied`` set
    means the registry kept the change while local settings or branches did
    not follow (skew).
    """

    success: bool
    code: str = "ok"
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def remote_applied(self) -> bool:
        return bool(self.data.get("remote_applied"))

    @property
    def skewed(self) -> bool:
        """Failed after the registry accepted the change"""
        return not self.success and self.remote_applied

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def as_json_dict(self) -> dict[str, Any]:
        """Serialize for ``--json`` output, flagging skew at the top level."""
        return {
            "success": self.success,
            "code": self.code,
            "message": self.message,
            "skewed": self.skewed,
            "data": self.data,
        }
