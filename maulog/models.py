"""Record model: one immutable LogRecord per parsed log line."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from maulog.classifier import AppTag, classify_record


@dataclass(frozen=True)
class LogRecord:
    timestamp: datetime      # falls back to ingestion time if unparseable
    timestamp_raw: str       # exact source string
    source_app: str          # bracketed token, as written
    severity: str            # angle-bracketed token, not normalized
    log_type: str            # payload discriminator
    message: str             # flattened payload, never empty
    explanation: str
    raw_line: str            # dedup key

    @property
    def is_error(self) -> bool:
        level = self.severity.lower()
        return "e" in level or level == "error"

    @property
    def is_warning(self) -> bool:
        return "warning" in self.severity.lower()

    @property
    def classified_app(self) -> AppTag:
        return classify_record(self.message, self.source_app)


class SeverityBand(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class ErrorPattern:
    label: str
    occurrence_count: int
    severity_band: SeverityBand
