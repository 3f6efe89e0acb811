"""Version control helpers built on top of git."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from .logging import get_logger

logger = get_logger("vcs")


class GitError(RuntimeError):
    """Raised when a git command exits with a non-zero status."""


class Git:
    """
    Lightweight wrapper around git CLI commands.

    ``run_checked`` raises ``GitError`` on a non-zero exit code, while
    ``run_logged`` only logs whatever git wrote to stderr and carries on.
    Status, commit and push go through the former; bootstrapping uses the
    latter.
    """

    def __init__(self, worktree: Path | None = None, *, timeout: float | None = None) -> None:
        """
        Initialize the Git wrapper.

        Args:
            worktree: Path to git repository (defaults to current directory)
            timeout: Default timeout in seconds for every command (None waits forever)
        """
        self.worktree = Path(worktree or Path.cwd())
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        *,
        check: bool = True,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """
        Run a git command and optionally raise on failure.

        Args:
            args: Git command arguments (without 'git' prefix)
            check: If True, raise GitError on non-zero exit
            timeout: Override the default timeout for this command

        Returns:
            CompletedProcess with stdout/stderr/returncode

        Raises:
            GitError: If git cannot be launched, times out, or check=True and it fails
        """
        command = ["git", *args]
        try:
            result = subprocess.run(
                command,
                cwd=self.worktree,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise GitError(f"git {' '.join(args)} timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise GitError(f"Could not run git: {exc}") from exc
        if check and result.returncode != 0:
            raise GitError(result.stderr.strip() or f"git {' '.join(args)} failed")
        return result

    def run_checked(self, args: Sequence[str], *, strip: bool = True) -> str:
        """Return stdout of a git command, raising GitError on a non-zero exit."""
        output = self.run(args, check=True).stdout
        return output.strip() if strip else output

    def run_logged(self, args: Sequence[str]) -> str:
        """Run a git command, logging stderr instead of raising. Returns stdout."""
        try:
            result = self.run(args, check=False)
        except GitError as exc:
            logger.error("❌ Git command failed: %s", exc)
            return ""
        error = result.stderr.strip()
        if error:
            logger.error("❌ Git command failed: %s", error)
        else:
            logger.info("✅ Git command succeeded: git %s", " ".join(args))
        return result.stdout.strip()

    # Query helpers -----------------------------------------------------------------

    def is_repository(self) -> bool:
        """Return True if the worktree has a ``.git`` directory."""
        return (self.worktree / ".git").is_dir()

    def status_lines(self) -> list[str]:
        """Return porcelain status entries in the order git reports them."""
        output = self.run_checked(["status", "--porcelain"], strip=False)
        return [line for line in output.splitlines() if line.strip()]

    def remotes(self) -> str:
        """Return the ``remote -v`` listing."""
        return self.run(["remote", "-v"], check=False).stdout

    # Mutation helpers --------------------------------------------------------------

    def stage_all(self) -> None:
        """Stage every change in the worktree."""
        self.run_checked(["add", "."])

    def commit(self, message: str) -> None:
        """Create a commit with the provided message."""
        self.run_checked(["commit", "-m", message])

    def push(
        self,
        remote: str | None = None,
        branch: str | None = None,
        *,
        set_upstream: bool = False,
        timeout: float | None = None,
    ) -> str:
        """Push the current branch, or ``branch`` to ``remote`` when given."""
        args = ["push"]
        if set_upstream:
            args.append("-u")
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        return self.run(args, check=True, timeout=timeout).stdout.strip()
