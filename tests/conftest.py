"""Pytest fixtures for GitPanel tests."""

import logging
import subprocess
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from gitpanel.logging import LOGGER_NAME
from gitpanel.vcs import Git, GitError


class FakeGit(Git):
    """Git wrapper that records invocations instead of launching processes.

    Responses are keyed by git subcommand and hold ``(returncode, stdout,
    stderr)``. Subcommands listed in ``gates`` block until their event is set.
    """

    def __init__(self, worktree: Path, responses: dict[str, tuple[int, str, str]] | None = None) -> None:
        super().__init__(worktree)
        self.calls: list[list[str]] = []
        self.responses = responses or {}
        self.gates: dict[str, threading.Event] = {}

    def run(
        self,
        args: Sequence[str],
        *,
        check: bool = True,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(args))
        gate = self.gates.get(args[0])
        if gate is not None:
            gate.wait(5)
        returncode, stdout, stderr = self.responses.get(args[0], (0, "", ""))
        if check and returncode != 0:
            raise GitError(stderr.strip() or f"git {' '.join(args)} failed")
        return subprocess.CompletedProcess(["git", *args], returncode, stdout, stderr)

    def subcommands(self) -> list[str]:
        return [call[0] for call in self.calls]


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging so closed streams are not reused."""
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.fixture
def fake_git(tmp_path: Path) -> FakeGit:
    return FakeGit(tmp_path)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Initialize a real repository with a committer identity."""
    for args in (
        ["init"],
        ["config", "user.name", "GitPanel Tests"],
        ["config", "user.email", "tests@example.com"],
        ["config", "commit.gpgsign", "false"],
    ):
        subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)
    return tmp_path
