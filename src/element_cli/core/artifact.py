"""
Build artifact access

Reads the built block bundle from the workspace and minifies it before upload.
"""

from pathlib import Path

import rjsmin

from element_cli.config import BUILT_FILE_PATH
from element_cli.domain.errors import PreconditionError


class ArtifactSource:
    """Built block code located inside a workspace"""

    def __init__(self, workspace_path: Path, relative_path: str = BUILT_FILE_PATH) -> None:
        self.path = (workspace_path / relative_path).resolve()

    def exists(self) -> bool:
        return self.path.is_file()

    def ensure_exists(self) -> None:
        if not self.exists():
            raise PreconditionError(
                message=f"Built block not found at {self.path}. Run the block build first.",
                code="artifact_missing",
            )

    def read(self) -> str:
        self.ensure_exists()
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PreconditionError(
                message=f"Built block at {self.path} is not valid UTF-8 text: {exc}",
                code="artifact_unreadable",
            ) from exc


def minify(code: str) -> str:
    """Minify JavaScript source.

    Raises:
        PreconditionError: If the minifier rejects the input; there is no
            fallback to unminified code.
    """
    try:
        return rjsmin.jsmin(code)
    except Exception as exc:
        raise PreconditionError(
            message=f"Failed to minify block code: {exc}",
            code="minify_failed",
        ) from exc
