from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Status(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]


_EXIT_CODES = {
    Status.OK: 0,
    Status.WARNING: 1,
    Status.CRITICAL: 2,
    Status.UNKNOWN: 3,
}


@dataclass(frozen=True, slots=True)
class Verdict:
    status: Status
    message: str

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def render(self, check_name: str) -> str:
        return f"{check_name} {self.status.value}: {self.message}"


class CheckError(Exception):
    """Ends a check run early with the given status and message."""

    def __init__(self, status: Status, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message)

    def verdict(self) -> Verdict:
        return Verdict(self.status, self.message)


@dataclass
class Findings:
    """Critical and warning observations gathered during one evaluation pass."""

    criticals: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def critical(self, message: str) -> None:
        self.criticals.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def verdict(self, ok_message: str) -> Verdict:
        # Critical findings suppress warnings entirely.
        if self.criticals:
            return Verdict(Status.CRITICAL, ", ".join(self.criticals))
        if self.warnings:
            return Verdict(Status.WARNING, ", ".join(self.warnings))
        return Verdict(Status.OK, ok_message)
