"""Filter predicates for log records: level group, application, search text."""

from enum import Enum
from typing import Callable

from maulog.classifier import AppTag
from maulog.models import LogRecord


class LevelFilter(str, Enum):
    ALL = "all"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def filter_by_level(record: LogRecord, level: LevelFilter) -> bool:
    """True if the record belongs to the level group.

    INFO means "neither error nor warning".
    """
    if level is LevelFilter.ALL:
        return True
    if level is LevelFilter.ERROR:
        return record.is_error
    if level is LevelFilter.WARNING:
        return record.is_warning
    return not record.is_error and not record.is_warning


def filter_by_app(record: LogRecord, app: AppTag) -> bool:
    return record.classified_app is app


def filter_by_search(record: LogRecord, text: str) -> bool:
    """True if text appears in the message or source app (case-insensitive)."""
    needle = text.lower()
    return needle in record.message.lower() or needle in record.source_app.lower()


def build_filter_chain(
    level: LevelFilter | str | None = None,
    app: AppTag | None = None,
    search: str | None = None,
) -> Callable[[LogRecord], bool]:
    """Combine the active filters into a single callable that ANDs them."""
    predicates = []

    if level is not None:
        level = LevelFilter(level)
        if level is not LevelFilter.ALL:
            predicates.append(lambda record, l=level: filter_by_level(record, l))

    if app is not None:
        predicates.append(lambda record, a=app: filter_by_app(record, a))

    if search:
        predicates.append(lambda record, s=search: filter_by_search(record, s))

    if not predicates:
        return lambda record: True

    def combined(record: LogRecord) -> bool:
        return all(p(record) for p in predicates)

    return combined
