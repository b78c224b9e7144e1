"""Application service layer over the lifecycle engine.

This module provides a stable orchestration surface for CLI and SDK callers:
each operation returns a ``CommandResult`` instead of raising, so the
boundary decides exit codes and rendering.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from element_cli.config import ElementConfig
from element_cli.core.artifact import ArtifactSource
from element_cli.core.branches import BranchController, GitBranchController
from element_cli.core.settings_store import SettingsStore
from element_cli.domain.errors import ElementDomainError, RegistryError
from element_cli.domain.results import CommandResult
from element_cli.lifecycle.engine import LifecycleEngine, LifecycleOutcome
from element_cli.models import version_label
from element_cli.registry.contracts import RegistryClient
from element_cli.registry.http import HttpRegistryClient

RegistryFactory = Callable[[ElementConfig], RegistryClient]
BranchFactory = Callable[[Path, ElementConfig], BranchController]
T = TypeVar("T")


def _default_branches(workspace: Path, config: ElementConfig) -> BranchController:
    return GitBranchController(workspace, remote=config.git_remote)


def build_engine(
    workspace: Path,
    config: ElementConfig,
    registry: RegistryClient,
    branches: BranchController,
) -> LifecycleEngine:
    """Wire a LifecycleEngine for one workspace."""
    return LifecycleEngine(
        workspace_path=workspace,
        settings=SettingsStore(workspace, config.settings_file),
        registry=registry,
        branches=branches,
        artifact=ArtifactSource(workspace, config.built_file),
    )


def error_result(error: ElementDomainError) -> CommandResult:
    """Translate a domain error into a failed CommandResult."""
    data = dict(error.data)
    data["error_type"] = type(error).__name__
    if isinstance(error, RegistryError):
        data["status_code"] = error.status_code
        data["category"] = error.category
    return CommandResult(success=False, code=error.code, message=error.message, data=data)


@dataclass(slots=True)
class LifecycleService:
    """Run one lifecycle operation and report it as a CommandResult."""

    config: ElementConfig = field(default_factory=ElementConfig.from_env)
    registry_factory: RegistryFactory = HttpRegistryClient
    branch_factory: BranchFactory = _default_branches

    def _call(self, workspace: Path, action: Callable[[LifecycleEngine], T]) -> T:
        registry = self.registry_factory(self.config)
        try:
            engine = build_engine(
                workspace, self.config, registry, self.branch_factory(workspace, self.config)
            )
            return action(engine)
        finally:
            close = getattr(registry, "close", None)
            if callable(close):
                close()

    def _run(
        self,
        workspace: Path,
        action: Callable[[LifecycleEngine], LifecycleOutcome],
        code: str,
        describe: Callable[[LifecycleOutcome], str],
    ) -> CommandResult:
        try:
            outcome = self._call(workspace, action)
        except ElementDomainError as error:
            return error_result(error)
        return CommandResult(
            success=True, code=code, message=describe(outcome), data=outcome.as_dict()
        )

    def publish(
        self,
        *,
        workspace: Path,
        name: str | None,
        category: str,
        categories: Sequence[str] | None = None,
    ) -> CommandResult:
        return self._run(
            workspace,
            lambda engine: engine.publish(name, category, categories),
            "published",
            lambda o: (
                f"Published {o.display_name} {version_label(o.version)} for staging\n"
                f"ID {o.block_id}"
            ),
        )

    def new_major_version(self, *, workspace: Path) -> CommandResult:
        return self._run(
            workspace,
            lambda engine: engine.new_major_version(),
            "major_version_created",
            lambda o: (
                f"Published {o.display_name} {version_label(o.version)} for staging\n"
                f"ID {o.block_id}"
            ),
        )

    def update(
        self, *, workspace: Path, toggle_public: bool = False, unminified: bool = False
    ) -> CommandResult:
        return self._run(
            workspace,
            lambda engine: engine.update(toggle_public=toggle_public, unminified=unminified),
            "updated",
            lambda o: (
                f"Updated {o.display_name} {version_label(o.version)} for staging\n"
                f"ID {o.block_id}"
            ),
        )

    def release(self, *, workspace: Path, note: str) -> CommandResult:
        return self._run(
            workspace,
            lambda engine: engine.release(note),
            "released",
            lambda o: (
                f"Released {o.display_name} {version_label(o.version)} for production\n"
                f"ID {o.block_id}"
            ),
        )

    def rollback(self, *, workspace: Path) -> CommandResult:
        return self._run(
            workspace,
            lambda engine: engine.rollback(),
            "rolled_back",
            lambda o: f"Rolled back {o.display_name} {version_label(o.version)}\nID {o.block_id}",
        )

    def details(self, *, workspace: Path) -> CommandResult:
        """Read block details without touching the registry or git."""
        try:
            details = self._call(workspace, lambda engine: engine.block_details())
        except ElementDomainError as error:
            return error_result(error)
        return CommandResult(
            success=True,
            code="details",
            message=f"{details.name} {version_label(details.current)}",
            data={"current": details.current, "name": details.name},
        )
