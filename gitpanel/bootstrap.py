"""Repository bootstrap helpers."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .config import GitPanelConfig
from .hosting import DEFAULT_HOST, HostingClient, remote_url
from .ignore import GITIGNORE_FILENAME, UNITY_IGNORE_PATTERNS, merge_ignore_patterns
from .logging import get_logger
from .vcs import Git, GitError

logger = get_logger("bootstrap")

BOOTSTRAP_COMMIT_MESSAGE = "Ensure .gitignore is present and updated"


def is_git_repository(path: Path | None = None) -> bool:
    """Return True if ``path`` (default: cwd) contains a ``.git`` directory."""
    root = Path(path or Path.cwd())
    return (root / ".git").is_dir()


def has_github_remote(path: Path | None = None, host: str = DEFAULT_HOST, git: Git | None = None) -> bool:
    """
    Return True if the repository at ``path`` has a remote on ``host``.

    Never raises: a missing repository or a git failure reads as False.
    """
    root = Path(path or Path.cwd())
    if not is_git_repository(root):
        return False
    try:
        return host in (git or Git(root)).remotes()
    except GitError as exc:
        logger.debug("Remote lookup failed: %s", exc)
        return False


def get_username(token: str, client: HostingClient | None = None) -> str | None:
    """Return the hosting account name for ``token``."""
    return (client or HostingClient()).get_username(token)


class Bootstrapper:
    """
    Create a hosted repository and wire the local project to it.

    Every step is best effort: failures are logged and turned into a None
    return or skipped, never raised.
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        config: GitPanelConfig | None = None,
        git: Git | None = None,
        client: HostingClient | None = None,
    ) -> None:
        self.root = Path(root or Path.cwd())
        self.config = config or GitPanelConfig()
        self.git = git or Git(self.root)
        self.client = client or HostingClient(api_url=self.config.api_url, user_agent=self.config.user_agent)

    @property
    def ignore_patterns(self) -> List[str]:
        return [*UNITY_IGNORE_PATTERNS, *self.config.ignore_patterns]

    def ensure_gitignore(self) -> List[str]:
        """Merge the required ignore patterns into the project's ``.gitignore``."""
        added = merge_ignore_patterns(self.root / GITIGNORE_FILENAME, self.ignore_patterns)
        if added:
            logger.info("Added %d pattern(s) to %s", len(added), GITIGNORE_FILENAME)
        return added

    def create_repository(self, repo_name: str, token: str) -> str | None:
        """
        Create ``repo_name`` on the hosting service and push a first commit.

        Steps:
        1. Create the hosted repository (abort on failure, nothing local is touched)
        2. Resolve the account name for the clone URL
        3. Merge required patterns into ``.gitignore``
        4. ``git init`` when the project is not a repository yet
        5. Add the remote, commit ``.gitignore``, rename the branch and push

        The remote is added unconditionally, so re-running on a project that
        already has one logs a failure for that step and continues.

        Args:
            repo_name: Name of the repository to create
            token: Access token for the hosting API

        Returns:
            The remote URL once the push was issued (not a confirmation that it
            succeeded), or None if the hosted repository could not be set up
        """
        if not self.client.create_repository(repo_name, token):
            return None

        username = self.client.get_username(token)
        if not username:
            logger.error("❌ Could not fetch GitHub username.")
            return None

        url = remote_url(username, repo_name, host=self.config.host)
        self.ensure_gitignore()

        if not self.git.is_repository():
            self.git.run_logged(["init"])

        remote = self.config.remote
        branch = self.config.branch
        self.git.run_logged(["remote", "add", remote, url])
        self.git.run_logged(["add", GITIGNORE_FILENAME])
        self.git.run_logged(["commit", "-m", BOOTSTRAP_COMMIT_MESSAGE])
        self.git.run_logged(["branch", "-M", branch])
        self.git.run_logged(["push", "-u", remote, branch])

        return url
