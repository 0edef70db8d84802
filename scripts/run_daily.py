#!/usr/bin/env python3
"""Daily paddle conditions runner.

Builds today's and tomorrow's forecast for the configured route and prints
a digest.

Usage:
    # Print digest to console (default)
    python scripts/run_daily.py

    # Output as SMS format
    python scripts/run_daily.py --format sms

    # Forecast starting on a specific date
    python scripts/run_daily.py --date 2024-08-17

    # Synthetic sources only (no API keys needed)
    python scripts/run_daily.py --offline

    # Current conditions only
    python scripts/run_daily.py --current

    # Save to file
    python scripts/run_daily.py --output report.txt
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import load_config
from src.core.planner import PaddlePlanner
from src.digests.formatter import DigestFormatter, format_current_lines


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Quiet down noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD argument."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}") from None


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate the paddle conditions digest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--format",
        choices=["text", "sms"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write output to file instead of stdout",
    )

    parser.add_argument(
        "--date",
        type=parse_date,
        help="First forecast day, YYYY-MM-DD (default: today)",
    )

    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use synthetic weather and tides only",
    )

    parser.add_argument(
        "--current",
        action="store_true",
        help="Show current conditions only",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to paddle.yaml (default: config/paddle.yaml)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.config, offline=True if args.offline else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    planner = PaddlePlanner(config)

    print("Generating paddle conditions digest...", file=sys.stderr)
    print(f"Timestamp: {planner.now().strftime('%Y-%m-%d %H:%M:%S %Z')}", file=sys.stderr)
    print(file=sys.stderr)

    current = planner.get_current_conditions()
    current_assessment = planner.assess(current)

    if args.current:
        output = "\n".join(format_current_lines(current, current_assessment))
        forecast = None
    else:
        forecast = planner.get_extended_forecast(args.date)
        formatter = DigestFormatter(
            forecast,
            current=current,
            current_assessment=current_assessment,
            display_start_hour=config.forecast.display_start_hour,
            display_end_hour=config.forecast.display_end_hour,
        )
        output = formatter.format_sms() if args.format == "sms" else formatter.format_text()

    # Write or print output
    if args.output:
        output_path = Path(args.output)
        output_path.write_text(output)
        print(f"Output written to: {output_path}", file=sys.stderr)
    else:
        print(output)

    if forecast is None:
        return 0

    # Summary (always to stderr so it doesn't pollute piped output)
    errors = forecast.today.errors + forecast.tomorrow.errors
    print(file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    print("SUMMARY", file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    for day in forecast.days:
        print(
            f"  {day.date}: avg {day.summary.average_difficulty}/10, "
            f"{day.easy_hours} easy hour(s), weather: {day.weather_source}, tides: {day.tide_source}",
            file=sys.stderr,
        )
    if errors:
        print(f"  Source warnings: {len(errors)}", file=sys.stderr)
    print("=" * 50, file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
