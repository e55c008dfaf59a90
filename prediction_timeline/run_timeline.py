#!/usr/bin/env python3
"""
Prediction Timeline - Command Line Runner

Submit one date prediction per session and see everyone's predictions
placed on the timeline.

Usage:
    python -m prediction_timeline.run_timeline list
    python -m prediction_timeline.run_timeline submit --name Ada --date 2025-07-02
    python -m prediction_timeline.run_timeline --new-session list

Requires SUPABASE_URL and SUPABASE_ANON_KEY in the environment.
"""

import argparse
import logging
import sys

from prediction_timeline.config import load_service_config, load_timeline_settings, ConfigError
from prediction_timeline.model.timeline import Timeline
from prediction_timeline.paths import setup_file_logging, log_startup_diagnostics
from prediction_timeline.services.controller import PredictionController, SubmissionStatus
from prediction_timeline.services.session_store import load_or_create_session, clear_session
from prediction_timeline.storage.db import PredictionStore
from prediction_timeline.utils.dates import parse_date, format_date, format_timestamp


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ALREADY_SUBMITTED = 2


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Prediction Timeline - submit and view date predictions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m prediction_timeline.run_timeline list
  python -m prediction_timeline.run_timeline submit --name Ada --date 2025-07-02
        """
    )

    parser.add_argument(
        "--new-session",
        action="store_true",
        help="Discard the stored session id and start a new session"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also log to the console"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="Show all predictions on the timeline")

    submit = subparsers.add_parser("submit", help="Submit this session's prediction")
    submit.add_argument("--name", required=True, help="Your name")
    submit.add_argument("--date", required=True, type=parse_date,
                        help="Predicted date (YYYY-MM-DD)")

    return parser.parse_args(argv)


def print_predictions(controller: PredictionController) -> None:
    """Print predictions in timeline order with their pixel positions."""
    markers = controller.markers()
    own = controller.own_prediction()
    timeline = controller.timeline

    print(f"\nTimeline: {format_date(timeline.start_date)} - "
          f"{format_date(timeline.end_date)} ({timeline.width:g}px)")
    print("-" * 60)

    if not markers:
        print("  No predictions yet.")
        return

    for marker in markers:
        p = marker.prediction
        flag = " (you)" if own is not None and p.id == own.id else ""
        where = f"{marker.position:7.1f}px" if marker.in_range else "  off-range"
        print(f"  {where}  {format_date(p.prediction_date):<14} {p.name}{flag}")

    print(f"\n{len(markers)} prediction(s)")
    if own is not None and own.created_at is not None:
        print(f"Your prediction was saved {format_timestamp(own.created_at)}")


def main(argv=None) -> int:
    args = parse_args(argv)

    setup_file_logging()
    if args.verbose:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter('%(levelname)s | %(message)s'))
        logging.getLogger().addHandler(console)
    log_startup_diagnostics()

    try:
        config = load_service_config()
        settings = load_timeline_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED

    if args.new_session:
        clear_session()
    session_id = load_or_create_session()

    timeline = Timeline(settings.start_date, settings.end_date, settings.width)
    controller = PredictionController(PredictionStore(config), timeline=timeline)
    if not controller.start(session_id):
        print("Error: could not load predictions (see log for details)", file=sys.stderr)
        if args.command == "list":
            return EXIT_FAILED

    if args.command == "list":
        print_predictions(controller)
        return EXIT_OK

    result = controller.submit(args.name, args.date)
    if result.status is SubmissionStatus.SUBMITTED:
        print(f"Saved: {result.prediction.name} predicts "
              f"{format_date(result.prediction.prediction_date)}")
        print_predictions(controller)
        return EXIT_OK
    if result.status is SubmissionStatus.ALREADY_SUBMITTED:
        print(f"Already submitted: {result.message}")
        return EXIT_ALREADY_SUBMITTED

    print(f"Error: {result.message}", file=sys.stderr)
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
