"""
Pydantic models for block settings and registry payloads.

Field aliases keep the on-disk ``.blocksettings`` file and the registry JSON
in camelCase while Python code uses snake_case attributes.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProductionState(str, Enum):
    """Production state of one remote block version"""

    UNRELEASED = "unreleased"
    RELEASED = "released"
    ROLLED_BACK = "rolledBack"


class BlockIdentity(BaseModel):
    """Names a block is published under"""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(..., alias="displayName")
    published_name: str = Field(..., alias="publishedName")


class BlockSettings(BaseModel):
    """Local block record persisted in the workspace settings file"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    display_name: str | None = Field(None, alias="displayName")
    published_name: str | None = Field(None, alias="publishedName")
    category: str | None = None
    active_version: int | None = Field(None, alias="activeVersion", ge=1)
    is_public: bool = Field(False, alias="isPublic")
    uses_version_control: bool = Field(False, alias="git")

    @property
    def is_published(self) -> bool:
        return bool(self.id)

    @property
    def version(self) -> int:
        """Active version, defaulting to 1 when unset"""
        return self.active_version or 1

    @property
    def identity(self) -> BlockIdentity:
        return BlockIdentity(
            display_name=self.display_name or "",
            published_name=self.published_name or "",
        )

    def to_file_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True)


class RegistryResponse(BaseModel):
    """Subset of a registry response the lifecycle depends on"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    version: int | None = None
    production_state: ProductionState | None = Field(None, alias="productionState")


def version_label(version: int) -> str:
    """Branch/display label for a major version (e.g. ``v3``)"""
    return f"v{version}"
