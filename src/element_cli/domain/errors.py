"""Unified domain error taxonomy for block lifecycle operations."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ElementDomainError(Exception):
    """Base class for application/domain-level failures."""

    message: str
    code: str
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class PreconditionError(ElementDomainError):
    """Raised when local state does not allow the requested operation.

    Covers a missing build artifact, a block that is already (or not yet)
    published, and invalid identity inputs. Raised before any network call.
    """


class VersionConflictError(ElementDomainError):
    """Raised when the next major version is already claimed."""


@dataclass(slots=True)
class RegistryError(ElementDomainError):
    """Raised when a remote registry call fails.

    ``status_code`` is None for transport failures (DNS, refused, timeout).
    """

    status_code: int | None = None

    @property
    def category(self) -> str:
        """Classify the failure for presentation and retry decisions."""
        if self.status_code is None:
            return "network"
        if self.status_code in (401, 403):
            return "auth"
        if self.status_code == 404:
            return "not_found"
        if self.status_code == 409:
            return "conflict"
        if self.status_code in (400, 422):
            return "validation"
        if self.status_code >= 500:
            return "server"
        return "unknown"


class LocalPersistenceError(ElementDomainError):
    """Raised when the settings write fails after the registry accepted a change."""


class BranchError(ElementDomainError):
    """Raised when a git branch step fails after the registry accepted a change."""
