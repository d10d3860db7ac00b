from __future__ import annotations

import json
import sys
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class JsonEndpoint:
    """Serve one canned response from a background HTTP server and record requests."""

    def __init__(
        self,
        payload: Any = None,
        *,
        status: int = 200,
        body: bytes | None = None,
        delay: float = 0.0,
        headers: dict[str, str] | None = None,
        content_length: int | None = None,
    ) -> None:
        if body is None:
            body = json.dumps([] if payload is None else payload).encode("utf-8")
        self.status = status
        self.body = body
        self.delay = delay
        self.content_length = len(body) if content_length is None else content_length
        self.headers = dict(headers or {})
        self.requests: list[dict[str, Any]] = []
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def port(self) -> int:
        return self._server.server_address[1]

    def url(self, path: str = "/api/v1.0/storage/volume/") -> str:
        return f"http://127.0.0.1:{self.port}{path}"

    def __enter__(self) -> "JsonEndpoint":
        self._thread.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self._server.shutdown()
        self._server.server_close()

    def _handler_class(self) -> type[BaseHTTPRequestHandler]:
        endpoint = self

        class Handler(BaseHTTPRequestHandler):
            def _handle(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                endpoint.requests.append(
                    {
                        "method": self.command,
                        "path": self.path,
                        "headers": self.headers,
                        "body": self.rfile.read(length) if length else b"",
                    }
                )
                if endpoint.delay:
                    time.sleep(endpoint.delay)
                try:
                    self.send_response(endpoint.status)
                    self.send_header("Content-Type", "application/json")
                    self.send_header("Content-Length", str(endpoint.content_length))
                    for key, value in endpoint.headers.items():
                        self.send_header(key, value)
                    self.end_headers()
                    self.wfile.write(endpoint.body)
                except (BrokenPipeError, ConnectionResetError):
                    pass

            do_GET = _handle
            do_POST = _handle

            def log_message(self, format: str, *args: Any) -> None:
                pass

        return Handler


def volumes(*records: tuple[str, str, str]) -> list[dict[str, str]]:
    return [{"vol_name": name, "status": status, "used_pct": used} for name, status, used in records]


def services(*records: tuple[str, Any]) -> list[dict[str, Any]]:
    return [{"srv_service": name, "srv_enable": enabled} for name, enabled in records]
