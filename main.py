import argparse
import argcomplete
import logging
import sys
from pathlib import Path

from qdacoverage.cli import run_analyze
from qdacoverage.conf.config import settings
from qdacoverage.core.matching import STRATEGIES
from qdacoverage.errors import CoverageError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="QDA Coverage: share of document sentences covered by coded segments."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging for troubleshooting.",
    )

    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Command to execute"
    )

    # Analyze Command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Compute sentence coverage for one or more documents."
    )
    analyze_parser.add_argument(
        "documents",
        nargs="+",
        type=Path,
        help="Document text file(s) to analyze.",
    )
    analyze_parser.add_argument(
        "--annotations",
        "-a",
        required=True,
        type=Path,
        help="Semicolon-delimited coded segment export.",
    )
    analyze_parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=settings.STRATEGY,
        help="How segments are located: literal text or page positions (default: %(default)s).",
    )
    analyze_parser.add_argument(
        "--track-repeats",
        action="store_true",
        help="Match repeated identical segments to successive occurrences.",
    )
    analyze_parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on malformed rows and inconsistent positions instead of skipping them.",
    )
    analyze_parser.add_argument(
        "--output-csv",
        type=Path,
        default=None,
        help=f"Write per-document results to a CSV file (e.g. {settings.DEFAULT_OUTPUT_CSV}).",
    )

    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.name = f"\033[34m{record.name}{self.RESET}"  # Blue for logger name
        return super().format(record)


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter("%(levelname)s %(name)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(handler)

    # SegmentNotFoundWarning and friends go through the same handler
    logging.captureWarnings(True)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger("qdacoverage")

    if args.command == "analyze":
        try:
            reports = run_analyze(
                documents=args.documents,
                annotations=args.annotations,
                strategy=args.strategy,
                track_repeats=args.track_repeats,
                strict=args.strict,
                output_csv=args.output_csv,
            )
        except CoverageError as exc:
            logger.error("%s", exc)
            return 1
        if len(reports) < len(args.documents):
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
