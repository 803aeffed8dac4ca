"""Analytics: error patterns, per-app error counts, hourly timeline, summary.

All functions are pure: they take a record collection and return fresh values.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from maulog.models import ErrorPattern, LogRecord, SeverityBand

HIGH_BAND_THRESHOLD = 5

# Ordered (label, trigger) pairs; a message may hit several.
PATTERN_TRIGGERS: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("Failed Operation", lambda msg: "failed" in msg),
    ("Error Code", lambda msg: "error" in msg or "error code" in msg),
    ("Download Failure", lambda msg: "download" in msg and ("failed" in msg or "error" in msg)),
    ("Cache Issue", lambda msg: "cache" in msg),
    ("Network/URL Issue", lambda msg: "network" in msg or "url" in msg),
    ("Permission Issue", lambda msg: "permission" in msg),
)


@dataclass(frozen=True)
class AnalyticsReport:
    patterns: list[ErrorPattern]
    app_errors: list[tuple[str, int]]
    timeline: list[tuple[str, int]]


@dataclass(frozen=True)
class RecordSummary:
    total: int = 0
    errors: int = 0
    warnings: int = 0
    debug: int = 0
    info: int = 0
    error_rate: float = 0.0   # percent


def detect_patterns(records: Iterable[LogRecord]) -> list[ErrorPattern]:
    """Count pattern categories across error and warning records, busiest first."""
    counts = Counter()
    for record in records:
        if not (record.is_error or record.is_warning):
            continue
        msg = record.message.lower()
        for label, trigger in PATTERN_TRIGGERS:
            if trigger(msg):
                counts[label] += 1

    patterns = [
        ErrorPattern(
            label=label,
            occurrence_count=counts[label],
            severity_band=SeverityBand.HIGH if counts[label] > HIGH_BAND_THRESHOLD else SeverityBand.MEDIUM,
        )
        for label, _ in PATTERN_TRIGGERS
        if counts[label]
    ]
    return sorted(patterns, key=lambda p: p.occurrence_count, reverse=True)


def app_error_summary(records: Iterable[LogRecord]) -> list[tuple[str, int]]:
    """(source_app, error count) pairs, most errors first."""
    counter = Counter(r.source_app for r in records if r.is_error)
    return counter.most_common()


def hourly_timeline(records: Iterable[LogRecord]) -> list[tuple[str, int]]:
    """("HH:00", count) pairs for every hour that has records, in hour order."""
    counter = Counter(f"{r.timestamp.hour:02d}:00" for r in records)
    return sorted(counter.items())


def compute_analytics(records: Sequence[LogRecord]) -> AnalyticsReport:
    return AnalyticsReport(
        patterns=detect_patterns(records),
        app_errors=app_error_summary(records),
        timeline=hourly_timeline(records),
    )


def summarize(records: Sequence[LogRecord]) -> RecordSummary:
    """Headline counts for a dashboard."""
    total = len(records)
    errors = sum(1 for r in records if r.is_error)
    return RecordSummary(
        total=total,
        errors=errors,
        warnings=sum(1 for r in records if r.is_warning),
        debug=sum(1 for r in records if r.severity.lower() == "debug"),
        info=sum(1 for r in records if r.severity.lower() == "info"),
        error_rate=errors / total * 100 if total else 0.0,
    )


def top_apps(records: Iterable[LogRecord], limit: int = 5) -> list[tuple[str, int]]:
    """Most active source apps by record count."""
    return Counter(r.source_app for r in records).most_common(limit)
