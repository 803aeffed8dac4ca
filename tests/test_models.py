"""Tests for maulog/models.py"""

import dataclasses
from datetime import datetime

import pytest

from maulog.classifier import AppTag
from maulog.models import LogRecord


def _record(severity="Info", message="hello", source_app="MSau04.0") -> LogRecord:
    return LogRecord(
        timestamp=datetime(2024, 1, 15, 10, 30),
        timestamp_raw="2024-01-15 10:30:00",
        source_app=source_app,
        severity=severity,
        log_type="NOT.COLLECTED",
        message=message,
        explanation=message,
        raw_line="raw",
    )


class TestDerivedFlags:
    @pytest.mark.parametrize("severity", ["Error", "ERROR", "error", "Debug", "Severe"])
    def test_is_error(self, severity):
        assert _record(severity=severity).is_error

    @pytest.mark.parametrize("severity", ["Info", "Warning", "Fault"])
    def test_is_not_error(self, severity):
        assert not _record(severity=severity).is_error

    def test_is_warning(self):
        assert _record(severity="Warning").is_warning
        assert _record(severity="WARNING").is_warning
        assert not _record(severity="Warn").is_warning

    def test_classified_app(self):
        assert _record(message="ONDR18 ready").classified_app is AppTag.ONEDRIVE
        assert _record(message="ready", source_app="Foo").classified_app is AppTag.OTHER


class TestImmutability:
    def test_frozen(self):
        record = _record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.message = "changed"
