"""Registry client contract consumed by the lifecycle engine."""

from typing import Protocol

from element_cli.models import BlockIdentity, RegistryResponse


class RegistryClient(Protocol):
    """Remote block registry operations.

    Every method raises ``RegistryError`` on failure.
    """

    def create(
        self, identity: BlockIdentity, code: str, category: str
    ) -> RegistryResponse: ...

    def update(
        self,
        identity: BlockIdentity,
        code: str,
        block_id: str,
        is_public: bool,
        version: int,
    ) -> RegistryResponse: ...

    def release(self, block_id: str, note: str, version: int) -> RegistryResponse: ...

    def rollback(self, block_id: str, version: int) -> RegistryResponse: ...

    def create_major_version(self, code: str, block_id: str, version: int) -> RegistryResponse: ...

    def version_exists(self, block_id: str, version: int) -> bool: ...
