"""
Core workspace collaborators: settings persistence, git branches, build
artifact access and identity validation.
"""

from .artifact import ArtifactSource, minify
from .branches import BranchController, GitBranchController, GitCommandError
from .identity import published_name_from, validate_inputs
from .settings_store import SettingsNotFoundError, SettingsStore

__all__ = [
    "ArtifactSource",
    "minify",
    "BranchController",
    "GitBranchController",
    "GitCommandError",
    "published_name_from",
    "validate_inputs",
    "SettingsNotFoundError",
    "SettingsStore",
]
