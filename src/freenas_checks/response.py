from __future__ import annotations

import json
import logging
from typing import Any

from .http import HttpResponse
from .schemas import SchemaRegistry, registry
from .status import CheckError, Status

logger = logging.getLogger(__name__)


def expect_success(response: HttpResponse, *, whole_response: bool = False) -> None:
    if response.ok:
        return
    if whole_response:
        raise CheckError(Status.CRITICAL, f"http code: {response.status_code}: body: {response.text}")
    raise CheckError(Status.CRITICAL, str(response.status_code))


def expect_json(response: HttpResponse) -> Any:
    try:
        return json.loads(response.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.debug("response body is not JSON: %s", exc)
        raise CheckError(Status.CRITICAL, "invalid JSON from request") from exc


def expect_shape(payload: Any, *, schema_name: str, schemas: SchemaRegistry = registry) -> list[dict[str, Any]]:
    errors = schemas.validate(payload, schema_name=schema_name)
    if errors:
        for err in errors:
            logger.debug("schema %s: %s", schema_name, err)
        raise CheckError(Status.CRITICAL, f"unexpected JSON shape: {errors[0]}")
    return payload


def parse_response(response: HttpResponse, *, whole_response: bool = False) -> Any:
    """Check the status code and decode the JSON body, in that order."""

    expect_success(response, whole_response=whole_response)
    return expect_json(response)
