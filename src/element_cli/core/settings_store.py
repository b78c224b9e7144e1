"""
Settings Store

Loads and persists the workspace ``.blocksettings`` record. Every save is a
whole-record upsert written through a temp file and ``os.replace`` so a
concurrent reader never observes a torn file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from element_cli.config import BLOCK_SETTINGS_FILE
from element_cli.domain.errors import PreconditionError
from element_cli.models import BlockSettings

logger = logging.getLogger(__name__)


class SettingsNotFoundError(PreconditionError):
    """Raised when the workspace has no settings file"""


def _write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Atomically write JSON payload to file with deterministic formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    file_descriptor, temp_path = tempfile.mkstemp(
        prefix=f"{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(file_descriptor, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


class SettingsStore:
    """File-backed store for one workspace's block settings."""

    def __init__(self, workspace_path: Path, filename: str = BLOCK_SETTINGS_FILE) -> None:
        self._workspace_path = workspace_path
        self._path = workspace_path / filename

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> BlockSettings:
        """Read and validate the settings file.

        Raises:
            SettingsNotFoundError: If the file does not exist
            PreconditionError: If the file is not valid JSON or fails validation
        """
        if not self.exists():
            raise SettingsNotFoundError(
                message=f"Block settings not found: {self._path}",
                code="settings_not_found",
            )
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PreconditionError(
                message=f"Block settings file is not valid JSON: {self._path} ({exc})",
                code="invalid_settings",
            ) from exc
        if not isinstance(raw, dict):
            raise PreconditionError(
                message=f"Block settings must be a JSON object: {self._path}",
                code="invalid_settings",
            )
        try:
            return BlockSettings.model_validate(raw)
        except ValidationError as exc:
            raise PreconditionError(
                message=f"Invalid block settings in {self._path}: {exc}",
                code="invalid_settings",
            ) from exc

    def load_or_default(self) -> BlockSettings:
        """Load settings, or an empty unpublished record if none exist yet"""
        try:
            return self.load()
        except SettingsNotFoundError:
            return BlockSettings()

    def save(self, **fields: Any) -> BlockSettings:
        """Merge ``fields`` into the stored record and persist it atomically.

        Fields use Python attribute names (``active_version``, ``is_public``).
        Raises OSError if the file cannot be written.
        """
        current = self.load_or_default()
        updates = BlockSettings(**fields).model_dump(by_alias=True, exclude_unset=True)
        merged = BlockSettings.model_validate({**current.to_file_dict(), **updates})
        _write_json_atomic(self._path, merged.to_file_dict())
        logger.debug("Saved block settings to %s: %s", self._path, sorted(fields))
        return merged
