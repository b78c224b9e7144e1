"""Domain types and contracts for block lifecycle workflows."""

from .errors import (
    BranchError,
    ElementDomainError,
    LocalPersistenceError,
    PreconditionError,
    RegistryError,
    VersionConflictError,
)
from .results import CommandResult

__all__ = [
    "CommandResult",
    "ElementDomainError",
    "PreconditionError",
    "VersionConflictError",
    "RegistryError",
    "LocalPersistenceError",
    "BranchError",
]
