from __future__ import annotations

import base64
import http.client
import logging
import threading
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .status import CheckError, Status
from .target import Target

logger = logging.getLogger(__name__)

USER_AGENT = "freenas-checks"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status_code: int
    body: bytes
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class _NoRedirect(urllib.request.HTTPRedirectHandler):
    # 3xx answers are reported as-is instead of being followed.
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[no-untyped-def]
        return None


_opener = urllib.request.build_opener(_NoRedirect)


def parse_header_string(raw: str) -> dict[str, str]:
    """Split ``"Name: value,Other: value"`` into a header mapping."""

    out: dict[str, str] = {}
    for item in raw.split(","):
        if not item.strip():
            continue
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise CheckError(Status.UNKNOWN, f"Invalid header: {item.strip()}")
        out[name.strip()] = value.lstrip()
    return out


def basic_auth_header(username: str | None, password: str | None) -> str:
    token = f"{username or ''}:{password or ''}".encode("utf-8")
    return "Basic " + base64.b64encode(token).decode("ascii")


def read_post_body(path: str | Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise CheckError(Status.UNKNOWN, f"Cannot read post body: {exc}") from exc


def build_request(
    target: Target,
    *,
    method: str = "GET",
    postbody: str | Path | None = None,
    header: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> HttpRequest:
    headers = {"User-Agent": USER_AGENT}
    if username is not None or password is not None:
        headers["Authorization"] = basic_auth_header(username, password)
    if header:
        headers.update(parse_header_string(header))

    body = read_post_body(postbody) if postbody else None
    return HttpRequest(
        method="POST" if method.upper() == "POST" else "GET",
        url=target.url,
        headers=headers,
        body=body,
    )


def _read_error_body(exc: urllib.error.HTTPError) -> bytes:
    # The status code alone decides the verdict; a broken body must not mask it.
    if exc.fp is None:
        return b""
    try:
        return exc.read()
    except (OSError, http.client.HTTPException) as read_exc:
        logger.debug("could not read body of %s response: %s", exc.code, read_exc)
        return b""


def _exchange(request: HttpRequest, timeout: float) -> HttpResponse:
    req = urllib.request.Request(url=request.url, data=request.body, method=request.method)
    for key, value in request.headers.items():
        req.add_header(key, value)

    try:
        with _opener.open(req, timeout=timeout) as response:
            status = response.getcode()
            raw = response.read()
            url = response.url or request.url
    except urllib.error.HTTPError as exc:
        status = exc.code
        raw = _read_error_body(exc)
        url = exc.filename or request.url
    except urllib.error.URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise CheckError(Status.CRITICAL, "Connection timed out") from exc
        raise CheckError(Status.CRITICAL, f"Connection error: {exc.reason}") from exc
    except TimeoutError as exc:
        raise CheckError(Status.CRITICAL, "Connection timed out") from exc
    except (OSError, http.client.HTTPException) as exc:
        raise CheckError(Status.CRITICAL, f"Connection error: {exc}") from exc

    return HttpResponse(status_code=status, body=raw, url=url)


def send(request: HttpRequest, *, timeout: float) -> HttpResponse:
    """
    Perform the exchange with ``timeout`` bounding the whole round trip.

    The socket timeout only limits individual reads, so the exchange runs in a
    daemon thread that is abandoned once the deadline passes.
    """

    logger.debug("%s %s (timeout=%ss)", request.method, request.url, timeout)
    outcome: dict[str, Any] = {}

    def _worker() -> None:
        try:
            outcome["response"] = _exchange(request, timeout)
        except Exception as exc:  # noqa: BLE001 - re-raised in the calling thread
            outcome["error"] = exc

    worker = threading.Thread(target=_worker, name="freenas-check-request", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise CheckError(Status.CRITICAL, "Connection timed out")
    if "error" in outcome:
        raise outcome["error"]

    response: HttpResponse = outcome["response"]
    logger.debug("response status=%s bytes=%d", response.status_code, len(response.body))
    return response
