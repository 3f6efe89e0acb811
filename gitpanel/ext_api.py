"""Lightweight status API server for editor integrations."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict


@dataclass
class StatusStore:
    """Thread-safe store for the latest tracker snapshot."""

    _data: Dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def update(self, snapshot: Dict[str, Any]) -> None:
        with self._lock:
            self._data = dict(snapshot)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._data)


class StatusRequestHandler(BaseHTTPRequestHandler):
    """HTTP handler serving the latest tracker status."""

    server_version = "GitPanelStatus/1.0"

    def do_GET(self) -> None:
        if self.path not in {"/", "/status"}:
            self.send_response(404)
            self.end_headers()
            return

        payload = self.server.store.snapshot()  # type: ignore[attr-defined]
        body = json.dumps(payload or {"status": "idle"}).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A003 - inherited signature
        return


class GitPanelStatusHTTPServer(ThreadingHTTPServer):
    """HTTP server carrying the shared status store."""

    def __init__(self, server_address, RequestHandlerClass, store: StatusStore):
        super().__init__(server_address, RequestHandlerClass)
        self.store = store


class StatusServer:
    """Lifecycle manager for the threaded HTTP server."""

    def __init__(self, port: int, store: StatusStore, host: str = "127.0.0.1") -> None:
        self.store = store
        self._server = GitPanelStatusHTTPServer((host, port), StatusRequestHandler, store)
        self.port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=2)


def serve_status(store: StatusStore | None = None, port: int = 0) -> StatusServer:
    """Start a status server that editor panels can poll."""
    status_store = store or StatusStore()
    server = StatusServer(port=port, store=status_store)
    server.start()
    return server
