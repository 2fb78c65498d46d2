"""
Main CLI entry point for TremorSense

This module provides the command-line interface: it records a session from a
window source, builds the session summary and requests the analysis report.
"""

import argparse
import logging
import sys
from typing import Iterable, Optional

from ..core.config import (BACKEND_URL, ANALYSIS_TIMEOUT_SEC, ANALYSIS_MAX_RETRIES,
                           HISTORY_PATH, MAX_HISTORY_ENTRIES, FREQ_BANDS)
from ..core.data_types import CalibrationEvent
from ..core.errors import (AnalysisUnavailable, InsufficientData, InvalidInput,
                           SessionStateError)
from ..acquisition.aggregator import SessionAggregator
from ..acquisition.sources import FakeTremorSource, ReplaySource
from ..history.store import SessionHistoryStore, JsonFilePersistence, MemoryPersistence
from ..communication.analysis_client import AnalysisClient
from ..communication.report_generator import ReportGenerator

STATUS_EVERY_WINDOWS = 10


def record_session(aggregator: SessionAggregator, events: Iterable, reporter: ReportGenerator) -> int:
    """
    Feed a window stream into a fresh recording

    Calibration events update the noise floor used for the summary. Returns
    the number of windows recorded.
    """
    aggregator.start()
    try:
        for event in events:
            if isinstance(event, CalibrationEvent):
                reporter.noise_floor = event.baseline
                logging.info(f"Calibrated - noise floor: {event.baseline:.4f}")
                continue

            if aggregator.push(event) and aggregator.count % STATUS_EVERY_WINDOWS == 0:
                live = aggregator.live_stats()
                print(f"Windows: {live.count:>4} | Avg: {live.mean:.2f} | Peak: {live.peak:.2f} | "
                      f"Dominant: {live.dominant_band.label} | Type: {live.dominant_type}")
    finally:
        aggregator.stop()
    return aggregator.count


def show_history(history: SessionHistoryStore) -> int:
    entries = history.entries()
    if not entries:
        print("No sessions recorded yet")
        return 0
    for entry in entries:
        print(f"{entry.timestamp:>15} | {entry.dominant_band.label:>8} | mean score {entry.mean_score:.2f}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="TremorSense - Tremor session analysis and reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summarise a synthetic session without contacting the backend
  python -m tremor_sense --simulate --windows 60 --no-analysis

  # Replay a recorded device log and request a report
  python -m tremor_sense --replay recordings/session.jsonl --backend http://localhost:8000

  # List stored sessions
  python -m tremor_sense --show-history
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument("--simulate", action="store_true",
                            help="Record a session of synthetic windows")
    mode_group.add_argument("--replay", metavar="FILE",
                            help="Record a session from a JSON-lines device event log")
    mode_group.add_argument("--show-history", action="store_true",
                            help="Print the stored session history")

    # Synthetic data options
    parser.add_argument("--windows", type=int, default=60,
                        help="Number of synthetic windows (default: 60)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for synthetic data")
    parser.add_argument("--band", choices=list(FREQ_BANDS), default="hz_4_6",
                        help="Tremor band for synthetic data (default: hz_4_6)")

    # History options
    parser.add_argument("--history", default=HISTORY_PATH,
                        help=f"Session history file (default: {HISTORY_PATH})")
    parser.add_argument("--no-persist", action="store_true",
                        help="Keep session history in memory only")

    # Analysis options
    parser.add_argument("--backend", default=BACKEND_URL,
                        help=f"Analysis backend URL (default: {BACKEND_URL})")
    parser.add_argument("--timeout", type=float, default=ANALYSIS_TIMEOUT_SEC,
                        help=f"Analysis request timeout in seconds (default: {ANALYSIS_TIMEOUT_SEC})")
    parser.add_argument("--retries", type=int, default=ANALYSIS_MAX_RETRIES,
                        help=f"Retries on gateway errors (default: {ANALYSIS_MAX_RETRIES})")
    parser.add_argument("--noise-floor", type=float, default=None,
                        help="Calibrated noise floor (overridden by calibration events)")
    parser.add_argument("--no-analysis", action="store_true",
                        help="Print the session summary without requesting a report")
    parser.add_argument("--output", metavar="FILE",
                        help="Also write the session summary JSON to FILE")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    persistence = MemoryPersistence() if args.no_persist else JsonFilePersistence(args.history)
    history = SessionHistoryStore(persistence, MAX_HISTORY_ENTRIES)

    if args.show_history:
        return show_history(history)

    aggregator = SessionAggregator()
    client = AnalysisClient(args.backend, timeout=args.timeout, max_retries=args.retries)
    reporter = ReportGenerator(aggregator, history, client)
    reporter.noise_floor = args.noise_floor

    try:
        if args.simulate:
            logging.info("Using synthetic tremor data")
            events = FakeTremorSource(args.band, seed=args.seed).stream(args.windows)
        else:
            events = ReplaySource(args.replay)

        n_windows = record_session(aggregator, events, reporter)
        logging.info(f"Recorded {n_windows} windows")

        summary = reporter.build_summary()
        summary_json = summary.to_json(indent=2)
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(summary_json + "\n")
            logging.info(f"Summary written to {args.output}")

        if args.no_analysis:
            print(summary_json)
            return 0

        report = reporter.retry(summary)
        print("=" * 60)
        print(f"Confidence: {report.confidence_level}")
        print("=" * 60)
        print(report.clinical_summary)
        print()
        print(f"Note: {report.advisory_note}")
        return 0

    except InsufficientData as e:
        logging.error(f"Insufficient data: {e}")
        return 1
    except InvalidInput as e:
        logging.error(f"Invalid input: {e}")
        return 1
    except AnalysisUnavailable as e:
        logging.error(f"{e} - session history left unchanged")
        return 1
    except SessionStateError as e:
        logging.error(f"Session error: {e}")
        return 1
    except OSError as e:
        logging.error(f"File error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
