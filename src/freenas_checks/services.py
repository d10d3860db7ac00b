from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterable

from .response import expect_shape
from .status import CheckError, Findings, Status, Verdict


@dataclass(frozen=True, slots=True)
class ServiceRecord:
    srv_service: str
    srv_enable: bool

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ServiceRecord":
        return ServiceRecord(srv_service=data["srv_service"], srv_enable=data["srv_enable"])


def normalize_service_names(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated and comma separated names, keeping first-seen order."""

    out: list[str] = []
    for value in values or []:
        for name in value.split(","):
            name = name.strip()
            if name and name not in out:
                out.append(name)
    return out


def evaluate_services(payload: Any, *, services: Iterable[str] | None) -> Verdict:
    requested = normalize_service_names(services)
    if not requested:
        raise CheckError(Status.UNKNOWN, "No services specified")

    records = [ServiceRecord.from_dict(item) for item in expect_shape(payload, schema_name="services")]

    findings = Findings()
    found: list[str] = []
    for record in records:
        if record.srv_service not in requested:
            continue
        found.append(record.srv_service)
        if record.srv_enable is not True:
            findings.critical(f"{record.srv_service} is not enabled")

    for name in requested:
        if name not in found:
            findings.critical(f"{name} not found")

    return findings.verdict(f"{', '.join(requested)} services are enabled")


def services_rule(*, services: Iterable[str] | None) -> Callable[[Any], Verdict]:
    requested = normalize_service_names(services)
    if not requested:
        raise CheckError(Status.UNKNOWN, "No services specified")
    return partial(evaluate_services, services=requested)
