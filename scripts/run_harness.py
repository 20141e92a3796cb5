"""Command line harness measuring range-mapping bias on uint16 samples."""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_LOG_PATH = PROJECT_ROOT / "harness_logs" / "latest_report.json"

if PROJECT_ROOT.as_posix() not in sys.path:
    sys.path.insert(0, PROJECT_ROOT.as_posix())

from qrng_mapper import HarnessConfig, InvalidArgument, measure_distribution_bias, run_comprehensive_suite
from qrng_mapper.harness import format_frequency_table, format_suite_summary


def _parse_bool(value: str) -> bool:
    """Accept a variety of truthy / falsy CLI inputs."""

    if isinstance(value, bool):  # argparse may pass in already parsed bools
        return value

    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise argparse.ArgumentTypeError(
        "Expected a boolean value (true/false). Received: %s" % value
    )


def _parse_int(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, received '{value}'.") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Measure modulo vs rejection-sampling bias when mapping uint16 samples to a range"
    )
    parser.add_argument("--min", dest="min_value", type=_parse_int, default=1, help="Inclusive lower bound")
    parser.add_argument("--max", dest="max_value", type=_parse_int, default=6, help="Inclusive upper bound")
    parser.add_argument(
        "--samples",
        type=int,
        default=10000,
        help="Number of mapped values to collect",
    )
    parser.add_argument(
        "--rejection",
        type=_parse_bool,
        default=False,
        help="Use rejection sampling (true) or plain modulo mapping (false)",
    )
    parser.add_argument(
        "--seed",
        type=_parse_int,
        default=42,
        help="PCG32 seed for the mock sample stream (accepts decimal or 0x-prefixed hex)",
    )
    parser.add_argument(
        "--local-entropy",
        dest="local_entropy",
        action="store_true",
        help="Draw samples from os.urandom instead of the seeded stream",
    )
    parser.add_argument(
        "--suite",
        action="store_true",
        help="Run the standard cases (coin, dice, d20, percent, byte) under both policies",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Print a human readable table instead of JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument(
        "--log",
        nargs="?",
        type=Path,
        const=DEFAULT_LOG_PATH,
        help=(
            "Persist the JSON report to disk. Provide a path or pass the flag alone to use "
            "harness_logs/latest_report.json under the repository root."
        ),
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    # warnings still reach stderr through logging's last-resort handler
    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        if args.suite:
            result = run_comprehensive_suite(seed=args.seed, use_local_entropy=args.local_entropy)
        else:
            cfg = HarnessConfig(
                min_value=args.min_value,
                max_value=args.max_value,
                sample_size=args.samples,
                use_rejection_sampling=args.rejection,
                seed=args.seed,
                use_local_entropy=args.local_entropy,
            )
            result = measure_distribution_bias(cfg)
    except InvalidArgument as exc:
        parser.error(str(exc))

    log_path: Path | None = args.log
    if log_path is not None:
        if not log_path.is_absolute():
            log_path = (PROJECT_ROOT / log_path).resolve()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.write_text(json.dumps(result, indent=2))

    if args.table:
        print(format_suite_summary(result) if args.suite else format_frequency_table(result))
    else:
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
