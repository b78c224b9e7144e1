"""
element-cli

Python library and CLI for publishing blocks to the Element block registry.
"""

__version__ = "2.1.0"

from .config import ElementConfig
from .domain import (
    BranchError,
    CommandResult,
    ElementDomainError,
    LocalPersistenceError,
    PreconditionError,
    RegistryError,
    VersionConflictError,
)
from .lifecycle import BlockDetails, LifecycleEngine, LifecycleOutcome
from .models import BlockIdentity, BlockSettings, ProductionState, RegistryResponse

__all__ = [
    "__version__",
    "ElementConfig",
    "BlockIdentity",
    "BlockSettings",
    "ProductionState",
    "RegistryResponse",
    "LifecycleEngine",
    "LifecycleOutcome",
    "BlockDetails",
    "CommandResult",
    "ElementDomainError",
    "PreconditionError",
    "VersionConflictError",
    "RegistryError",
    "LocalPersistenceError",
    "BranchError",
]
