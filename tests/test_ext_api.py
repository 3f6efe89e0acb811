"""Tests for the status HTTP endpoint."""

from collections.abc import Iterator

import pytest
import requests

from gitpanel.ext_api import StatusServer, StatusStore, serve_status


@pytest.fixture
def http() -> Iterator[requests.Session]:
    session = requests.Session()
    session.trust_env = False
    yield session
    session.close()


@pytest.fixture
def server() -> Iterator[StatusServer]:
    status_server = serve_status(port=0)
    yield status_server
    status_server.stop()


class TestStatusServer:
    """Tests for the status server."""

    def test_idle_before_first_update(self, server: StatusServer, http: requests.Session) -> None:
        """Test the placeholder body served before any snapshot."""
        response = http.get(f"http://127.0.0.1:{server.port}/status", timeout=5)
        assert response.status_code == 200
        assert response.json() == {"status": "idle"}

    def test_serves_latest_snapshot(self, server: StatusServer, http: requests.Session) -> None:
        """Test that updates are visible to clients."""
        server.store.update({"changed_files": ["?? a.txt"], "push": {"state": "pushing"}})
        response = http.get(f"http://127.0.0.1:{server.port}/", timeout=5)
        assert response.json()["changed_files"] == ["?? a.txt"]

    def test_unknown_path(self, server: StatusServer, http: requests.Session) -> None:
        """Test that other paths are not found."""
        response = http.get(f"http://127.0.0.1:{server.port}/nope", timeout=5)
        assert response.status_code == 404


def test_store_returns_copies() -> None:
    """Test that snapshots cannot mutate the store."""
    store = StatusStore()
    store.update({"a": 1})
    store.snapshot()["a"] = 2
    assert store.snapshot() == {"a": 1}
