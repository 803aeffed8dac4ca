"""Tests for maulog/main.py output helpers."""

import io

from maulog.main import RecordPrinter, build_cli_parser, print_report
from maulog.monitor import MonitorSnapshot, MonitorState
from maulog.parser import parse_lines


def _snapshot(lines):
    return MonitorSnapshot(
        state=MonitorState.MONITORING,
        records=tuple(parse_lines(lines)),
        path="/tmp/install.log",
        status="Loaded: install.log",
        error=None,
        last_update=None,
        is_monitoring=True,
    )


LINES = [
    '2024-01-15 10:30:00 [MSau04.0] <Error> NOT.COLLECTED: {"Payload": "download failed"}',
    '2024-01-15 11:00:00 [MSWD2019] <Info> NOT.COLLECTED: {"Payload": "Launch Agent started"}',
]


class TestRecordPrinter:
    def test_prints_each_record_once(self):
        out = io.StringIO()
        printer = RecordPrinter(stream=out)
        printer(_snapshot(LINES[:1]))
        printer(_snapshot(LINES))
        lines = out.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("2024-01-15 10:30:00 [MAU] <Error>")
        assert lines[1] == "2024-01-15 11:00:00 [Word] <Info> Launch Agent started"


class TestPrintReport:
    def test_report_sections(self):
        out = io.StringIO()
        print_report(_snapshot(LINES), stream=out)
        text = out.getvalue()
        assert "Status: Loaded: install.log" in text
        assert "Total: 2  Errors: 1  Warnings: 0  Error rate: 50.0%" in text
        assert "Download Failure" in text
        assert "10:00  1" in text


class TestCliParser:
    def test_defaults(self):
        args = build_cli_parser().parse_args([])
        assert args.file is None
        assert args.config is None

    def test_file(self):
        args = build_cli_parser().parse_args(["--file", "x.log"])
        assert args.file == "x.log"
