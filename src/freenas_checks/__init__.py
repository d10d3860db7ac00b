from __future__ import annotations

__all__ = [
    "__version__",
    "CheckError",
    "CheckOptions",
    "Status",
    "Verdict",
    "run_check",
]

__version__ = "0.1.0"

from .runner import CheckOptions, run_check  # noqa: E402
from .status import CheckError, Status, Verdict  # noqa: E402
