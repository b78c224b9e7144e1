"""
Branch Controller

Git branches named by major version (``v1``, ``v2``...) mirror what was pushed
to the registry. The lifecycle engine only calls into this module when the
block settings enable version control.
"""

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

GitRunner = Callable[[Sequence[str], Path], subprocess.CompletedProcess[str]]


class GitCommandError(Exception):
    """Raised when a git command exits non-zero"""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(f"`{' '.join(self.cmd)}` failed ({returncode}): {self.stderr}")


class BranchController(Protocol):
    def exists(self, label: str) -> bool: ...

    def create(self, label: str) -> None: ...

    def advance(self, label: str, message: str) -> None: ...


def run_git_command(cmd: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run one git command without raising on non-zero exit."""
    return subprocess.run(list(cmd), cwd=cwd, capture_output=True, text=True, check=False)


class GitBranchController:
    """Branch primitives backed by the ``git`` executable.

    Attributes:
        workspace_path: Repository working directory
        remote: Remote the version branches are pushed to
    """

    def __init__(
        self,
        workspace_path: Path,
        remote: str = "origin",
        runner: GitRunner = run_git_command,
    ) -> None:
        self.workspace_path = workspace_path
        self.remote = remote
        self._runner = runner

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        cmd = ["git", *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.workspace_path)
        try:
            result = self._runner(cmd, self.workspace_path)
        except OSError as exc:
            # git missing from PATH or not executable
            raise GitCommandError(cmd, 127, str(exc)) from exc
        if check and result.returncode != 0:
            raise GitCommandError(cmd, result.returncode, result.stderr or "")
        return result

    def _local_exists(self, label: str) -> bool:
        result = self._git("rev-parse", "--verify", "--quiet", f"refs/heads/{label}", check=False)
        return result.returncode == 0

    def _remote_exists(self, label: str) -> bool:
        # ls-remote --exit-code returns 2 when no matching ref exists
        result = self._git(
            "ls-remote", "--exit-code", "--heads", self.remote, label, check=False
        )
        if result.returncode == 0:
            return True
        if result.returncode == 2:
            return False
        raise GitCommandError(
            ["git", "ls-remote", "--exit-code", "--heads", self.remote, label],
            result.returncode,
            result.stderr or "",
        )

    def exists(self, label: str) -> bool:
        """Whether the branch exists locally or on the remote"""
        return self._local_exists(label) or self._remote_exists(label)

    def create(self, label: str) -> None:
        """Create ``label`` from HEAD, check it out and push it upstream

        Raises:
            GitCommandError: If the branch already exists locally or on the
                remote, or a git step fails
        """
        if self.exists(label):
            raise GitCommandError(
                ["git", "checkout", "-b", label], 128, f"branch '{label}' already exists"
            )
        self._git("checkout", "-b", label)
        self._git("push", "-u", self.remote, label)

    def advance(self, label: str, message: str) -> None:
        """Commit the working tree onto ``label`` and push it

        Raises:
            GitCommandError: If the branch is missing or a git step fails
        """
        if not self._local_exists(label):
            raise GitCommandError(
                ["git", "checkout", label], 1, f"branch '{label}' does not exist"
            )
        self._git("checkout", label)
        self._git("add", "-A")
        self._git("commit", "--allow-empty", "-m", message)
        self._git("push", self.remote, label)
