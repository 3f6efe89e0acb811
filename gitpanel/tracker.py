"""Working-tree status polling and background push tracking."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .bootstrap import has_github_remote
from .config import GitPanelConfig
from .logging import get_logger
from .vcs import Git, GitError

logger = get_logger("tracker")

PUSH_SUCCESS_MESSAGE = "✅ Changes pushed to GitHub."


class PushState(str, Enum):
    IDLE = "idle"
    PUSHING = "pushing"
    SUCCESS = "success"
    ERROR = "error"


PUSH_LABELS = {
    PushState.IDLE: "Push",
    PushState.PUSHING: "Pushing...",
    PushState.SUCCESS: "✓ Pushed",
    PushState.ERROR: "Retry",
}


@dataclass(frozen=True)
class PushStatus:
    state: PushState = PushState.IDLE
    message: str = ""
    # Clock reading of the last transition into SUCCESS or ERROR.
    changed_at: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (PushState.SUCCESS, PushState.ERROR)

    @property
    def label(self) -> str:
        """Caption for the push control in the current state."""
        return PUSH_LABELS[self.state]

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state.value, "label": self.label, "message": self.message}


@dataclass
class SessionContext:
    """State shared between the tracker and whatever renders it."""

    commit_message: str = ""
    changed_files: List[str] = field(default_factory=list)
    push_status: PushStatus = field(default_factory=PushStatus)
    last_refresh: Optional[float] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class PushHandle:
    """Handle on a single background push."""

    def __init__(self) -> None:
        self._done = threading.Event()
        self._cancelled = threading.Event()
        self._result: PushStatus | None = None

    def wait(self, timeout: float | None = None) -> PushStatus | None:
        """Block until the push finishes; returns its final status (None on timeout)."""
        self._done.wait(timeout)
        return self._result

    def done(self) -> bool:
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Detach the push from the session; its outcome will not be recorded."""
        self._cancelled.set()

    def _finish(self, status: PushStatus | None) -> None:
        self._result = status
        self._done.set()


class SyncTracker:
    """
    Poll working-tree status and track the outcome of the last push.

    The push state machine runs IDLE -> PUSHING -> SUCCESS | ERROR -> IDLE,
    the terminal state reverting to IDLE once the grace period has elapsed.
    All polling happens in ``tick``; only the push itself runs on a
    background thread.
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        config: GitPanelConfig | None = None,
        git: Git | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_change: Callable[[SessionContext], None] | None = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            root: Repository directory (defaults to current directory)
            config: GitPanel configuration supplying intervals and host
            git: Git wrapper to use (defaults to one rooted at ``root``)
            clock: Monotonic time source in seconds
            on_change: Called whenever the session should be redrawn
        """
        self.root = Path(root or Path.cwd())
        self.config = config or GitPanelConfig()
        self.git = git or Git(self.root)
        self.context = SessionContext()
        self._clock = clock
        self._on_change = on_change
        self._refresh_interval = self.config.refresh_interval_duration.total_seconds()
        self._grace_period = self.config.grace_period_duration.total_seconds()
        self._push_timeout = self.config.push_timeout_seconds
        self._push_handle: PushHandle | None = None

    @property
    def push_status(self) -> PushStatus:
        with self.context.lock:
            return self.context.push_status

    def enable(self) -> None:
        """Load the initial status and start the polling timer."""
        self.refresh_status()
        self.context.last_refresh = self._clock()

    def refresh_status(self) -> List[str]:
        """Replace the changed-file list with the current porcelain status."""
        try:
            files = self.git.status_lines()
        except GitError as exc:
            logger.error("❌ Git status failed: %s", exc)
            files = []
        self.context.changed_files = files
        return files

    def commit(self, message: str | None = None) -> bool:
        """
        Stage everything and commit with ``message``.

        Falls back to the session's commit message. Staging and committing
        are separate git calls: if staging fails the commit is still tried,
        and nothing is rolled back.

        Returns:
            True if the commit was created
        """
        text = self.context.commit_message if message is None else message
        if not text or not text.strip():
            logger.warning("⚠️ Commit message cannot be empty.")
            return False

        try:
            self.git.stage_all()
        except GitError as exc:
            logger.error("❌ Staging failed: %s", exc)

        committed = False
        try:
            self.git.commit(text)
        except GitError as exc:
            logger.error("❌ Commit failed: %s", exc)
        else:
            committed = True
            self.context.commit_message = ""
            logger.info("✅ Committed: %s", text)

        self.refresh_status()
        return committed

    def can_push(self) -> bool:
        """Return True when a hosted remote exists and no push is running."""
        if self.push_status.state is PushState.PUSHING:
            return False
        return has_github_remote(self.root, host=self.config.host, git=self.git)

    def push(self) -> PushHandle:
        """
        Start pushing in the background and return immediately.

        While a push is already running its handle is returned instead of
        starting another one.
        """
        with self.context.lock:
            if self._push_handle is not None and self.context.push_status.state is PushState.PUSHING:
                return self._push_handle
            handle = PushHandle()
            self._push_handle = handle
            self.context.push_status = PushStatus(PushState.PUSHING)
        self._notify()

        thread = threading.Thread(target=self._run_push, args=(handle,), name="gitpanel-push", daemon=True)
        thread.start()
        return handle

    def tick(self) -> None:
        """Refresh on the polling interval and expire finished push states."""
        now = self._clock()
        last = self.context.last_refresh
        if last is None or now - last > self._refresh_interval:
            self.refresh_status()
            self.context.last_refresh = now
            self._notify()

        expired = False
        with self.context.lock:
            status = self.context.push_status
            if status.is_terminal and status.changed_at is not None and now - status.changed_at > self._grace_period:
                self.context.push_status = PushStatus()
                expired = True
        if expired:
            self._notify()

    def close(self, timeout: float | None = 0) -> None:
        """
        Tear down the session.

        Waits for a running push, then cancels it so its outcome is no longer
        recorded. ``timeout`` follows ``PushHandle.wait``: ``None`` waits until
        the push finishes, a number waits at most that many seconds and ``0``
        cancels right away.
        """
        handle = self._push_handle
        if handle is None or handle.done():
            return
        if timeout is None or timeout > 0:
            handle.wait(timeout)
        with self.context.lock:
            if self.context.push_status.state is not PushState.PUSHING:
                return
            handle.cancel()
            self.context.push_status = PushStatus()
        logger.info("Push detached from closed session.")

    def snapshot(self) -> Dict[str, Any]:
        """Return a JSON-ready view of the session."""
        with self.context.lock:
            push = self.context.push_status
        return {
            "changed_files": list(self.context.changed_files),
            "commit_message": self.context.commit_message,
            "push": push.to_dict(),
        }

    # Internal ---------------------------------------------------------------------

    def _run_push(self, handle: PushHandle) -> None:
        status: PushStatus | None = None
        try:
            try:
                self.git.push(timeout=self._push_timeout)
            except Exception as exc:
                status = PushStatus(PushState.ERROR, f"❌ Push failed: {exc}", self._clock())
            else:
                status = PushStatus(PushState.SUCCESS, PUSH_SUCCESS_MESSAGE, self._clock())

            with self.context.lock:
                if handle.cancelled:
                    return
                self.context.push_status = status
            if status.state is PushState.ERROR:
                logger.error(status.message)
            else:
                logger.info(status.message)
            self._notify()
        finally:
            handle._finish(status)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.context)
