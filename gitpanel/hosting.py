"""GitHub REST API client."""

from __future__ import annotations

from typing import Any

import requests
from requests import Response

from .logging import get_logger

logger = get_logger("hosting")

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HOST = "github.com"
DEFAULT_USER_AGENT = "GitPanel"


class HostingError(RuntimeError):
    """Raised when the hosting API cannot be reached."""


def remote_url(username: str, repo_name: str, host: str = DEFAULT_HOST) -> str:
    """Return the HTTPS clone URL for ``username/repo_name``."""
    return f"https://{host}/{username}/{repo_name}.git"


class HostingClient:
    """Talk to the hosting service's REST API with a bearer token."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
        }

    def _request(self, method: str, path: str, token: str, **kwargs: Any) -> Response:
        try:
            return requests.request(
                method,
                f"{self.api_url}{path}",
                headers=self._headers(token),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise HostingError(f"{method} {path} failed: {exc}") from exc

    def get_username(self, token: str) -> str | None:
        """Return the login of the account owning ``token``, or None."""
        try:
            response = self._request("GET", "/user", token)
        except HostingError as exc:
            logger.error("❌ Failed to fetch username: %s", exc)
            return None

        if not response.ok:
            logger.error("❌ Failed to fetch username: %s", response.status_code)
            return None

        try:
            data = response.json()
        except ValueError:
            logger.error("❌ User response was not valid JSON.")
            return None

        login = data.get("login") if isinstance(data, dict) else None
        if not isinstance(login, str) or not login:
            logger.error("❌ User response has no 'login' field.")
            return None
        return login

    def create_repository(self, name: str, token: str) -> bool:
        """Create a public repository named ``name``. Returns True on a 2xx response."""
        payload = {"name": name, "private": False}
        try:
            response = self._request("POST", "/user/repos", token, json=payload)
        except HostingError as exc:
            logger.error("❌ Failed to create repo: %s", exc)
            return False

        if not response.ok:
            logger.error("❌ Failed to create repo: %s - %s", response.status_code, response.text)
            return False
        logger.info("✅ Created repository %s", name)
        return True
