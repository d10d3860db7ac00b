from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass

from .status import CheckError, Status

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class Target:
    scheme: str
    host: str
    port: int
    path: str
    query: str | None = None

    @property
    def request_path(self) -> str:
        path = self.path or "/"
        if self.query:
            return f"{path}?{self.query}"
        return path

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.request_path}"


def resolve_target(
    *,
    url: str | None = None,
    host: str | None = None,
    path: str | None = None,
    query: str | None = None,
    port: int | None = None,
    scheme: str = "http",
) -> Target:
    """
    Build the request target from either a full URL or discrete parts.

    A URL wins over the discrete options. Without one, host and path are required.
    """

    if url:
        parsed = urllib.parse.urlsplit(url)
        scheme = (parsed.scheme or "http").lower()
        if scheme not in DEFAULT_PORTS:
            raise CheckError(Status.UNKNOWN, f"Unsupported URL scheme: {parsed.scheme}")
        if not parsed.hostname:
            raise CheckError(Status.UNKNOWN, f"No host in URL: {url}")
        try:
            url_port = parsed.port
        except ValueError as exc:
            raise CheckError(Status.UNKNOWN, f"Invalid port in URL: {url}") from exc
        target = Target(
            scheme=scheme,
            host=parsed.hostname,
            port=url_port if url_port is not None else DEFAULT_PORTS[scheme],
            path=parsed.path,
            query=parsed.query or None,
        )
    else:
        if not host or not path:
            raise CheckError(Status.UNKNOWN, "No URL specified")
        scheme = scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise CheckError(Status.UNKNOWN, f"Unsupported scheme: {scheme}")
        target = Target(
            scheme=scheme,
            host=host,
            port=port if port is not None else DEFAULT_PORTS[scheme],
            path=path,
            query=query or None,
        )

    logger.debug("resolved target %s", target.url)
    return target
