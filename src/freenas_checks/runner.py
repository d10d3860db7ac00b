from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .http import build_request, send
from .response import parse_response
from .status import CheckError, Verdict
from .target import resolve_target

logger = logging.getLogger(__name__)

Evaluator = Callable[[Any], Verdict]


@dataclass(frozen=True)
class CheckOptions:
    url: str | None = None
    host: str | None = None
    path: str | None = None
    query: str | None = None
    port: int | None = None
    scheme: str = "http"
    method: str = "GET"
    postbody: str | None = None
    header: str | None = None
    timeout_s: float = 15.0
    whole_response: bool = False
    username: str | None = None
    password: str | None = None


def run_check(options: CheckOptions, evaluate: Evaluator) -> Verdict:
    """
    Run one check: resolve the target, fetch it once, validate the response and
    hand the decoded JSON to ``evaluate``.

    Any ``CheckError`` raised along the way becomes the verdict.
    """

    try:
        target = resolve_target(
            url=options.url,
            host=options.host,
            path=options.path,
            query=options.query,
            port=options.port,
            scheme=options.scheme,
        )
        request = build_request(
            target,
            method=options.method,
            postbody=options.postbody,
            header=options.header,
            username=options.username,
            password=options.password,
        )
        response = send(request, timeout=options.timeout_s)
        payload = parse_response(response, whole_response=options.whole_response)
        verdict = evaluate(payload)
    except CheckError as exc:
        verdict = exc.verdict()

    logger.info("verdict status=%s message=%s", verdict.status.value, verdict.message)
    return verdict
