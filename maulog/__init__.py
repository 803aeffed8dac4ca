"""mau-log-monitor: tail, parse, explain and analyse Microsoft AutoUpdate logs."""

from maulog.analytics import compute_analytics
from maulog.classifier import AppTag, classify
from maulog.models import ErrorPattern, LogRecord, SeverityBand
from maulog.monitor import MonitorSnapshot, MonitorState, TailMonitor
from maulog.parser import parse_line

__all__ = [
    "AppTag",
    "ErrorPattern",
    "LogRecord",
    "MonitorSnapshot",
    "MonitorState",
    "SeverityBand",
    "TailMonitor",
    "classify",
    "compute_analytics",
    "parse_line",
]
