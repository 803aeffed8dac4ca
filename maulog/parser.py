"""Log line parser: compiled regex + payload dispatch on LOG_TYPE.

Expected format:
    2024-01-15 10:30:00 [MSau04.0] <Info> ErrorsAndWarnings: {"Error": "timeout", ...}
"""

import logging
import re
from datetime import datetime
from typing import Iterable

from maulog.explainer import explain
from maulog.models import LogRecord
from maulog.payloads import decode_payload

logger = logging.getLogger(__name__)

LOG_PATTERN = re.compile(
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\s+"
    r"\[(?P<app>[^\]]+)\]\s+"
    r"<(?P<level>[^>]+)>\s+"
    r"(?P<log_type>[^:]+):\s+"
    r"(?P<payload>.+)$"
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.now()


def parse_line(line: str) -> LogRecord | None:
    """Parse one raw line. Returns None for blank or non-conforming lines."""
    if not line:
        return None

    m = LOG_PATTERN.match(line)
    if not m:
        logger.debug("Skipping unrecognised line: %.80s", line)
        return None

    timestamp_raw = m.group("timestamp")
    app = m.group("app")
    level = m.group("level")
    log_type = m.group("log_type")
    payload = m.group("payload")

    message = decode_payload(log_type, payload).to_message() or payload

    return LogRecord(
        timestamp=_parse_timestamp(timestamp_raw),
        timestamp_raw=timestamp_raw,
        source_app=app,
        severity=level,
        log_type=log_type,
        message=message,
        explanation=explain(message, app, level),
        raw_line=line,
    )


def parse_lines(lines: Iterable[str]) -> list[LogRecord]:
    """Parse every line, dropping the ones that don't match."""
    records = []
    for line in lines:
        record = parse_line(line)
        if record is not None:
            records.append(record)
    return records
