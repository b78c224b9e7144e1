"""
Lifecycle Engine

Drives a block through publish, update, major version, release and rollback
while keeping three stores in step: the local settings file, the remote
registry and (optionally) the git version branches.

Every remote-then-local operation follows the same ordering: preconditions
and conflict checks first, then the registry call, then local settings and
branch updates. A failure after the registry accepted a change is reported as
``LocalPersistenceError`` or ``BranchError`` with ``remote_applied`` set, and
the registry change is not compensated.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from element_cli.core.artifact import ArtifactSource, minify
from element_cli.core.branches import BranchController, GitCommandError
from element_cli.core.identity import validate_inputs
from element_cli.core.settings_store import SettingsStore
from element_cli.domain.errors import (
    BranchError,
    LocalPersistenceError,
    PreconditionError,
    VersionConflictError,
)
from element_cli.models import BlockSettings, RegistryResponse, version_label
from element_cli.registry.contracts import RegistryClient

logger = logging.getLogger(__name__)


@dataclass
class LifecycleOutcome:
    """Terminal state after a successful lifecycle operation"""

    operation: str
    block_id: str
    display_name: str
    version: int
    is_public: bool
    remote: RegistryResponse | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "operation": self.operation,
            "id": self.block_id,
            "displayName": self.display_name,
            "version": self.version,
            "isPublic": self.is_public,
        }
        if self.remote is not None:
            payload["remote"] = self.remote.model_dump(by_alias=True, exclude_none=True)
        return payload


@dataclass(frozen=True)
class BlockDetails:
    """Read-only view of the workspace's current block"""

    current: int
    name: str


class LifecycleEngine:
    """State machine over settings, registry and branches for one workspace."""

    def __init__(
        self,
        workspace_path: Path,
        settings: SettingsStore,
        registry: RegistryClient,
        branches: BranchController,
        artifact: ArtifactSource | None = None,
    ) -> None:
        self.workspace_path = workspace_path
        self.settings = settings
        self.registry = registry
        self.branches = branches
        self.artifact = artifact or ArtifactSource(workspace_path)

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def _require_published(self) -> tuple[BlockSettings, str]:
        settings = self.settings.load()
        if not settings.id:
            raise PreconditionError(
                message="Block has not been published yet. Run publish first.",
                code="not_published",
            )
        return settings, settings.id

    def _read_code(self, unminified: bool = False) -> str:
        code = self.artifact.read()
        return code if unminified else minify(code)

    # ------------------------------------------------------------------
    # Post-remote steps
    # ------------------------------------------------------------------

    def _persist(self, operation: str, remote: RegistryResponse, **fields: Any) -> BlockSettings:
        try:
            return self.settings.save(**fields)
        except OSError as exc:
            logger.error("%s: registry accepted change but settings write failed", operation)
            raise LocalPersistenceError(
                message=(
                    f"{operation} succeeded remotely (ID {remote.id}) but writing "
                    f"{self.settings.path} failed: {exc}. Update the settings file manually "
                    "before running another command."
                ),
                code="local_write_failed",
                data={"remote_applied": True, "id": remote.id, "pending": _jsonable(fields)},
            ) from exc

    def _branch_step(
        self, operation: str, remote: RegistryResponse, step: str, label: str
    ) -> None:
        try:
            if step == "create":
                self.branches.create(label)
            else:
                self.branches.advance(label, f"{operation} {label}")
        except GitCommandError as exc:
            logger.error(
                "%s: registry accepted change but branch %s %s failed", operation, step, label
            )
            raise BranchError(
                message=(
                    f"{operation} succeeded remotely (ID {remote.id}) but git branch "
                    f"{step} for {label} failed: {exc}"
                ),
                code=f"branch_{step}_failed",
                data={"remote_applied": True, "id": remote.id, "branch": label},
            ) from exc

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def publish(
        self,
        name: str | None,
        category: str,
        categories: Sequence[str] | None = None,
    ) -> LifecycleOutcome:
        """Create the block in the registry and stage version 1

        Raises:
            PreconditionError: Artifact missing, already published, or invalid identity
            RegistryError: The registry rejected the create
            LocalPersistenceError / BranchError: Registry succeeded, local step failed
        """
        self.artifact.ensure_exists()
        current = self.settings.load_or_default()
        if current.is_published:
            raise PreconditionError(
                message=(
                    f"Block is already published (ID {current.id}). "
                    "Use update or new-major-version instead."
                ),
                code="already_published",
            )

        identity, category = validate_inputs(name, category, categories, self.workspace_path)
        code = self._read_code()

        remote = self.registry.create(identity, code, category)
        version = 1
        logger.info("Created block %s (%s)", remote.id, identity.published_name)

        saved = self._persist(
            "Publish",
            remote,
            id=remote.id,
            display_name=identity.display_name,
            published_name=identity.published_name,
            category=category,
            active_version=version,
            is_public=False,
        )
        if saved.uses_version_control:
            self._branch_step("Publish", remote, "create", version_label(version))

        return LifecycleOutcome(
            operation="publish",
            block_id=remote.id,
            display_name=identity.display_name,
            version=version,
            is_public=False,
            remote=remote,
        )

    def new_major_version(self) -> LifecycleOutcome:
        """Claim ``activeVersion + 1`` and stage the current build under it

        The conflict check runs before any remote mutation. With version
        control it looks for the ``v<next>`` branch, otherwise it asks the
        registry. Either check is best-effort and does not lock.

        Raises:
            VersionConflictError: The next version is already claimed
            PreconditionError: The branch lookup itself failed (nothing was sent)
        """
        self.artifact.ensure_exists()
        settings, block_id = self._require_published()
        next_version = settings.version + 1
        label = version_label(next_version)

        if settings.uses_version_control:
            try:
                claimed = self.branches.exists(label)
            except GitCommandError as exc:
                raise PreconditionError(
                    message=f"Could not check whether branch {label} exists: {exc}",
                    code="branch_lookup_failed",
                    data={"branch": label},
                ) from exc
        else:
            claimed = self.registry.version_exists(block_id, next_version)
        if claimed:
            raise VersionConflictError(
                message=(
                    f"{label} already exists, please checkout the {label} branch "
                    "to publish a new major version"
                ),
                code="version_conflict",
                data={"version": next_version},
            )

        code = self._read_code()
        remote = self.registry.create_major_version(code, block_id, next_version)
        logger.info("Registry created %s %s", block_id, label)

        if settings.uses_version_control:
            self._branch_step("New major version", remote, "create", label)
        saved = self._persist("New major version", remote, active_version=next_version)
        if settings.uses_version_control:
            self._branch_step("New major version", remote, "advance", label)

        return LifecycleOutcome(
            operation="new_major_version",
            block_id=block_id,
            display_name=settings.display_name or "",
            version=next_version,
            is_public=saved.is_public,
            remote=remote,
        )

    def update(self, toggle_public: bool = False, unminified: bool = False) -> LifecycleOutcome:
        """Push the current build to the active staging version

        Safe to retry: the version never changes and no conflict check runs.
        """
        self.artifact.ensure_exists()
        settings, block_id = self._require_published()
        is_public = not settings.is_public if toggle_public else settings.is_public
        version = settings.version
        code = self._read_code(unminified=unminified)

        remote = self.registry.update(settings.identity, code, block_id, is_public, version)
        logger.info("Updated %s %s (public=%s)", block_id, version_label(version), is_public)

        self._persist("Update", remote, active_version=version, is_public=is_public)
        if settings.uses_version_control:
            self._branch_step("Update", remote, "advance", version_label(version))

        return LifecycleOutcome(
            operation="update",
            block_id=block_id,
            display_name=settings.display_name or "",
            version=version,
            is_public=is_public,
            remote=remote,
        )

    def release(self, note: str) -> LifecycleOutcome:
        """Promote the active version to production"""
        settings, block_id = self._require_published()
        version = settings.version

        remote = self.registry.release(block_id, note, version)
        logger.info("Released %s %s", block_id, version_label(version))

        self._persist("Release", remote, active_version=version)

        return LifecycleOutcome(
            operation="release",
            block_id=block_id,
            display_name=settings.display_name or "",
            version=version,
            is_public=settings.is_public,
            remote=remote,
        )

    def rollback(self) -> LifecycleOutcome:
        """Roll production back from the active version; no local changes"""
        settings, block_id = self._require_published()
        version = settings.version

        remote = self.registry.rollback(block_id, version)
        logger.info("Rolled back %s %s", block_id, version_label(version))

        return LifecycleOutcome(
            operation="rollback",
            block_id=block_id,
            display_name=settings.display_name or "",
            version=version,
            is_public=settings.is_public,
            remote=remote,
        )

    def block_details(self) -> BlockDetails:
        """Current version and display name, read from settings only"""
        settings, _ = self._require_published()
        return BlockDetails(current=settings.version, name=settings.display_name or "")


def _jsonable(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if isinstance(value, (str, int, bool))}
