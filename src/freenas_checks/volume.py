from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from .response import expect_shape
from .status import CheckError, Findings, Status, Verdict

HEALTHY = "HEALTHY"
DEFAULT_WARNING = 85.0
DEFAULT_CRITICAL = 95.0


@dataclass(frozen=True, slots=True)
class VolumeRecord:
    vol_name: str
    status: str
    used_pct: str

    @property
    def usage(self) -> float:
        return float(self.used_pct.strip().rstrip("%"))

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VolumeRecord":
        return VolumeRecord(
            vol_name=data["vol_name"],
            status=data["status"],
            used_pct=data["used_pct"],
        )


def find_volume(volumes: list[VolumeRecord], name: str) -> VolumeRecord:
    for volume in volumes:
        if volume.vol_name == name:
            return volume
    raise CheckError(Status.CRITICAL, f"Could not find {name}")


def validate_volume_options(volume_name: str | None, warning: float, critical: float) -> str:
    if not volume_name:
        raise CheckError(Status.UNKNOWN, "No volume name specified")
    if warning > critical:
        raise CheckError(Status.UNKNOWN, f"Warning threshold {warning} is above critical threshold {critical}")
    return volume_name


def evaluate_volume(
    payload: Any,
    *,
    volume_name: str | None,
    warning: float = DEFAULT_WARNING,
    critical: float = DEFAULT_CRITICAL,
) -> Verdict:
    volume_name = validate_volume_options(volume_name, warning, critical)

    records = [VolumeRecord.from_dict(item) for item in expect_shape(payload, schema_name="volumes")]
    volume = find_volume(records, volume_name)

    findings = Findings()
    if volume.status != HEALTHY:
        findings.critical(f"{volume.vol_name} status is {volume.status}")

    usage = volume.usage
    if usage >= critical:
        findings.critical(f"{volume.vol_name} usage is {volume.used_pct}")
    elif usage >= warning:
        findings.warning(f"{volume.vol_name} usage is {volume.used_pct}")

    return findings.verdict(f"Volume {volume.vol_name} status is HEALTHY and disk usage is under {warning}%")


def volume_rule(
    *,
    volume_name: str | None,
    warning: float = DEFAULT_WARNING,
    critical: float = DEFAULT_CRITICAL,
) -> Callable[[Any], Verdict]:
    """Validate options up front and return an evaluator for the fetched payload."""

    validate_volume_options(volume_name, warning, critical)
    return partial(evaluate_volume, volume_name=volume_name, warning=warning, critical=critical)
