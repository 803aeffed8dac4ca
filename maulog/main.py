#!/usr/bin/env python3
"""MAU Log Monitor entry point.

Loads the newest MAU log (or a given file), prints records as they arrive
and prints an analytics summary on shutdown.
"""

import argparse
import logging
import signal
import sys
import time

from maulog.analytics import compute_analytics, summarize
from maulog.config import load_config, load_yaml_config
from maulog.monitor import MonitorSnapshot, TailMonitor

logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, frame):
    global _running
    logger.info("Shutdown signal received, stopping...")
    _running = False


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MAU Log Monitor")
    parser.add_argument(
        "--file", default=None,
        help="Log file to monitor (default: newest .log in the MAU log folder)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file",
    )
    return parser


class RecordPrinter:
    """Prints records not yet shown from each published snapshot."""

    def __init__(self, stream=sys.stdout):
        self._stream = stream
        self._shown: set[str] = set()

    def __call__(self, snapshot: MonitorSnapshot):
        for record in snapshot.records:
            if record.raw_line in self._shown:
                continue
            self._shown.add(record.raw_line)
            print(
                f"{record.timestamp_raw} [{record.classified_app.value}] "
                f"<{record.severity}> {record.explanation}",
                file=self._stream,
            )


def print_report(snapshot: MonitorSnapshot, stream=sys.stdout):
    summary = summarize(snapshot.records)
    report = compute_analytics(snapshot.records)

    print(f"\nStatus: {snapshot.status}", file=stream)
    print(
        f"Total: {summary.total}  Errors: {summary.errors}  Warnings: {summary.warnings}  "
        f"Error rate: {summary.error_rate:.1f}%",
        file=stream,
    )
    if report.patterns:
        print("Patterns:", file=stream)
        for p in report.patterns:
            print(f"  {p.label:20s} {p.occurrence_count:5d}  {p.severity_band.value}", file=stream)
    if report.app_errors:
        print("Errors by app:", file=stream)
        for app, count in report.app_errors:
            print(f"  {app:20s} {count:5d}", file=stream)
    if report.timeline:
        print("Records per hour:", file=stream)
        for hour, count in report.timeline:
            print(f"  {hour}  {count}", file=stream)


def main():
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    args = build_cli_parser().parse_args()
    config = load_config(load_yaml_config(args.config))

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [MAULOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger.info("Config: log_dir=%s, log_suffix=%s", config.log_dir, config.log_suffix)

    with TailMonitor(config) as monitor:
        monitor.subscribe(RecordPrinter())
        if args.file:
            monitor.load_explicit(args.file)
        else:
            monitor.load_most_recent()

        logger.info("MAU Log Monitor running. Press Ctrl+C to stop.")
        try:
            while _running:
                time.sleep(1)
        except KeyboardInterrupt:
            pass

        logger.info("Shutting down...")
        monitor.stop_monitoring()
        monitor.wait_until_idle(timeout=config.stop_timeout)
        print_report(monitor.snapshot())

    logger.info("MAU Log Monitor stopped.")


if __name__ == "__main__":
    main()
