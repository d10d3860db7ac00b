from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from typing import Callable, NoReturn

from freenas_checks import __version__
from freenas_checks.logging_setup import setup_logging
from freenas_checks.runner import CheckOptions, Evaluator, run_check
from freenas_checks.services import services_rule
from freenas_checks.status import CheckError, Status, Verdict
from freenas_checks.volume import DEFAULT_CRITICAL, DEFAULT_WARNING, volume_rule

logger = logging.getLogger(__name__)

VOLUME_CHECK = "CheckFreenasVolume"
SERVICES_CHECK = "CheckFreenasServices"

RuleFactory = Callable[[argparse.Namespace], Evaluator]


class _Parser(argparse.ArgumentParser):
    # Usage mistakes are UNKNOWN to a monitoring supervisor, not CRITICAL.
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(Status.UNKNOWN.exit_code, f"{self.prog}: error: {message}\n")


def _positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a number, got {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {raw!r}")
    return value


def _percent(raw: str) -> float:
    try:
        value = float(raw.rstrip("%"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a percentage, got {raw!r}") from exc
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"expected a percentage, got {raw!r}")
    return value


def add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--help", action="help", help="Show this help message and exit")
    p.add_argument("--version", action="version", version=f"freenas-checks {__version__}")
    p.add_argument("-u", "--url", help="Full URL to query; overrides host/path/query/port")
    p.add_argument("-h", "--host", help="Host to query when no URL is given")
    p.add_argument("-p", "--path", help="Path to query when no URL is given")
    p.add_argument("-q", "--query", help="Query string (without '?')")
    p.add_argument("-P", "--port", type=int, help="Port (default: 80, or 443 with --scheme https)")
    p.add_argument("--scheme", default="http", choices=["http", "https"], type=str.lower)
    p.add_argument("-m", "--method", default="GET", choices=["GET", "POST"], type=str.upper)
    p.add_argument("-b", "--postbody", metavar="FILE", help="File whose contents become the request body")
    p.add_argument("-H", "--header", help="Comma separated 'Name: value' headers")
    p.add_argument("-t", "--timeout", type=_positive_float, default=15.0, metavar="SECS")
    p.add_argument(
        "-W",
        "--whole-response",
        action="store_true",
        help="Include the response body in the message for non-2xx responses",
    )
    p.add_argument("-U", "--username", default=os.environ.get("FREENAS_CHECK_USERNAME"))
    p.add_argument("-a", "--password", default=os.environ.get("FREENAS_CHECK_PASSWORD"))


def add_volume_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("-v", "--volume-name", metavar="VOLUME", help="Volume to check")
    p.add_argument(
        "-w",
        "--warning",
        type=_percent,
        default=DEFAULT_WARNING,
        metavar="PERCENT",
        help="Warn if PERCENT or more of disk full",
    )
    p.add_argument(
        "-c",
        "--critical",
        type=_percent,
        default=DEFAULT_CRITICAL,
        metavar="PERCENT",
        help="Critical if PERCENT or more of disk full",
    )


def add_services_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-s",
        "--service",
        action="append",
        default=[],
        metavar="NAME",
        help="Service expected to be enabled (repeatable, or comma separated)",
    )
    # Accepted for compatibility; they do not change the verdict.
    p.add_argument("-w", "--include-warnings", action=argparse.BooleanOptionalAction, default=True)
    p.add_argument("-c", "--include-criticals", action=argparse.BooleanOptionalAction, default=True)
    p.add_argument("-o", "--include-oks", action=argparse.BooleanOptionalAction, default=False)


def _volume_rule(args: argparse.Namespace) -> Evaluator:
    return volume_rule(volume_name=args.volume_name, warning=args.warning, critical=args.critical)


def _services_rule(args: argparse.Namespace) -> Evaluator:
    return services_rule(services=args.service)


CHECKS: dict[str, tuple[str, Callable[[argparse.ArgumentParser], None], RuleFactory]] = {
    "volume": (VOLUME_CHECK, add_volume_flags, _volume_rule),
    "services": (SERVICES_CHECK, add_services_flags, _services_rule),
}


def _options(args: argparse.Namespace) -> CheckOptions:
    return CheckOptions(
        url=args.url,
        host=args.host,
        path=args.path,
        query=args.query,
        port=args.port,
        scheme=args.scheme,
        method=args.method,
        postbody=args.postbody,
        header=args.header,
        timeout_s=args.timeout,
        whole_response=args.whole_response,
        username=args.username,
        password=args.password,
    )


def execute(check: str, args: argparse.Namespace) -> Verdict:
    _, _, rule_factory = CHECKS[check]
    try:
        evaluate = rule_factory(args)
        return run_check(_options(args), evaluate)
    except CheckError as exc:
        return exc.verdict()
    except Exception as exc:  # noqa: BLE001 - every run must end in a verdict
        logger.exception("check %s failed to run", check)
        return Verdict(Status.UNKNOWN, f"Check failed to run: {exc}")


def _report(check: str, verdict: Verdict) -> int:
    check_name = CHECKS[check][0]
    sys.stdout.write(verdict.render(check_name) + "\n")
    return verdict.exit_code


def build_check_parser(check: str, *, prog: str | None = None) -> argparse.ArgumentParser:
    _, add_flags, _ = CHECKS[check]
    parser = _Parser(prog=prog, add_help=False)
    add_common_flags(parser)
    add_flags(parser)
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="freenas-check", add_help=False)
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("--version", action="version", version=f"freenas-checks {__version__}")
    sub = parser.add_subparsers(dest="check", required=True)
    for check, summary in [
        ("volume", "Check volume health and disk usage"),
        ("services", "Check that services are enabled"),
    ]:
        _, add_flags, _ = CHECKS[check]
        check_parser = sub.add_parser(check, add_help=False, help=summary)
        add_common_flags(check_parser)
        add_flags(check_parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    return _report(args.check, execute(args.check, args))


def _run_single(check: str, prog: str, argv: list[str] | None) -> int:
    args = build_check_parser(check, prog=prog).parse_args(argv)
    setup_logging()
    return _report(check, execute(check, args))


def volume_main(argv: list[str] | None = None) -> int:
    return _run_single("volume", "check-freenas-volume", argv)


def services_main(argv: list[str] | None = None) -> int:
    return _run_single("services", "check-freenas-services", argv)


if __name__ == "__main__":
    raise SystemExit(main())
