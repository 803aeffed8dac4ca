"""TailMonitor: owns one log file, its record store and the watch lifecycle.

State machine:

    IDLE ──load──▶ LOADING ──ok──▶ MONITORING ◀──▶ RELOADING
      ▲               │                 │
      └────failed─────┘                 └──stop──▶ STOPPED

All file reads and parsing run on a single worker thread, which is the only
writer of the record store. Callers never block on I/O: they enqueue a job
and observe results through snapshot() or subscribe().
"""

import logging
import os
import queue
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Callable, Iterable, Sequence

from maulog.config import Config
from maulog.models import LogRecord
from maulog.parser import parse_lines
from maulog.reader import LogFolderNotFound, NoLogFilesFound, find_latest_log, read_log_lines
from maulog.watcher import FileWatch

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    MONITORING = "monitoring"
    RELOADING = "reloading"
    STOPPED = "stopped"


@dataclass(frozen=True)
class MonitorSnapshot:
    state: MonitorState
    records: tuple[LogRecord, ...]
    path: str | None
    status: str
    error: str | None
    last_update: datetime | None
    is_monitoring: bool


@dataclass(frozen=True)
class _Job:
    kind: str          # "load_recent", "load_path", "reload", "shutdown"
    generation: int
    path: str | None = None


def sort_records(records: Iterable[LogRecord]) -> list[LogRecord]:
    """Ascending by timestamp; stable, so ties keep their existing order."""
    return sorted(records, key=lambda r: r.timestamp)


def merge_new_records(
    existing: Sequence[LogRecord], parsed: Iterable[LogRecord]
) -> tuple[list[LogRecord], list[LogRecord]]:
    """Append records whose raw_line is not already present.

    Returns (merged store sorted by timestamp, genuinely new records).
    """
    seen = {r.raw_line for r in existing}
    new = []
    for record in parsed:
        if record.raw_line in seen:
            continue
        seen.add(record.raw_line)
        new.append(record)
    return sort_records([*existing, *new]), new


class TailMonitor:
    def __init__(self, config: Config | None = None, watch_factory=FileWatch):
        self._config = config or Config()
        self._watch_factory = watch_factory

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._jobs: queue.Queue[_Job] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._pending = 0
        self._generation = 0
        self._reload_queued = False
        self._loaded = False
        self._closed = False
        self._watch = None
        self._listeners: list[Callable[[MonitorSnapshot], None]] = []

        self._state = MonitorState.IDLE
        self._records: tuple[LogRecord, ...] = ()
        self._path: str | None = None
        self._status = "No file loaded"
        self._error: str | None = None
        self._last_update: datetime | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> MonitorSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            state=self._state,
            records=self._records,
            path=self._path,
            status=self._status,
            error=self._error,
            last_update=self._last_update,
            is_monitoring=self._watch is not None,
        )

    @property
    def records(self) -> tuple[LogRecord, ...]:
        return self.snapshot().records

    @property
    def state(self) -> MonitorState:
        return self.snapshot().state

    @property
    def status(self) -> str:
        return self.snapshot().status

    @property
    def error(self) -> str | None:
        return self.snapshot().error

    @property
    def last_update(self) -> datetime | None:
        return self.snapshot().last_update

    @property
    def is_monitoring(self) -> bool:
        return self.snapshot().is_monitoring

    def subscribe(self, callback: Callable[[MonitorSnapshot], None]) -> Callable[[], None]:
        """Register *callback* for every published snapshot. Returns an unsubscribe function.

        Callbacks run on the worker thread (or the caller's thread for stop).
        """
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until all queued work has finished. False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    # ------------------------------------------------------------------
    # Control side
    # ------------------------------------------------------------------

    def load_most_recent(self):
        """Load the newest log in the configured directory, then tail it."""
        self._start_session("load_recent", None)

    def load_explicit(self, path: str):
        """Load *path*, then tail it."""
        self._start_session("load_path", path)

    def reload(self) -> bool:
        """Queue an incremental reload of the current file.

        Returns False if nothing is loaded. A reload already waiting in the
        queue absorbs this request.
        """
        with self._lock:
            if self._closed or not self._loaded:
                return False
            self._queue_reload_locked(self._generation)
            return True

    def stop_monitoring(self):
        """Cancel the watch and any queued work. Safe to call repeatedly."""
        with self._lock:
            self._generation += 1
            self._reload_queued = False
            self._loaded = False
            watch, self._watch = self._watch, None
            changed = self._state not in (MonitorState.IDLE, MonitorState.STOPPED)
            if changed:
                self._state = MonitorState.STOPPED
        if watch is not None:
            watch.cancel()
        if changed:
            logger.info("Monitoring stopped")
            self._publish()

    def close(self):
        """Stop monitoring and shut down the worker thread."""
        self.stop_monitoring()
        with self._lock:
            if self._closed:
                return
            self._closed = True
            worker = self._worker
            if worker is not None:
                self._pending += 1
                self._jobs.put(_Job("shutdown", self._generation))
        if worker is not None:
            worker.join(timeout=self._config.stop_timeout)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_session(self, kind: str, path: str | None):
        with self._lock:
            if self._closed:
                logger.warning("Ignoring load request on a closed monitor")
                return
            self._generation += 1
            self._reload_queued = False
            self._loaded = False
            watch, self._watch = self._watch, None

        # The old watch must be gone before the new session can start one.
        if watch is not None:
            watch.cancel()

        with self._lock:
            self._state = MonitorState.LOADING
            self._status = "Loading"
            self._submit_locked(_Job(kind, self._generation, path))
        self._publish()

    def _submit_locked(self, job: _Job):
        self._pending += 1
        self._jobs.put(job)
        if self._worker is None:
            self._worker = threading.Thread(target=self._run, name="tail-monitor", daemon=True)
            self._worker.start()

    def _queue_reload_locked(self, generation: int):
        if self._reload_queued:
            return
        self._reload_queued = True
        self._submit_locked(_Job("reload", generation))

    def _on_file_changed(self, generation: int):
        """Watch callback; runs on the observer thread.

        Events that arrive while the initial load is still reading are queued
        and handled once the load has committed.
        """
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._queue_reload_locked(generation)

    def _run(self):
        while True:
            job = self._jobs.get()
            try:
                if job.kind == "shutdown":
                    return
                if job.kind == "reload":
                    self._handle_reload(job)
                else:
                    self._handle_load(job)
            except Exception:
                logger.exception("Unexpected failure while handling %s job", job.kind)
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending == 0:
                        self._idle.notify_all()

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _handle_load(self, job: _Job):
        if not self._is_current(job.generation):
            return

        path = job.path
        if path is None:
            log_dir = self._config.log_dir
            try:
                path = find_latest_log(log_dir, self._config.log_suffix)
            except LogFolderNotFound as e:
                self._fail(job.generation, "Log folder not found", str(e))
                return
            except NoLogFilesFound as e:
                self._fail(job.generation, "No log files found", str(e))
                return
            except OSError as e:
                self._fail(job.generation, "Error reading logs folder", f"Error reading logs folder: {e}")
                return

        watch = self._start_watch(path, job.generation)
        try:
            lines = read_log_lines(path)
        except (OSError, UnicodeDecodeError) as e:
            if watch is not None:
                watch.cancel()
            self._fail(job.generation, "Cannot read file", f"Error reading file: {e}", path)
            return

        try:
            records, _ = merge_new_records((), parse_lines(lines))
        except Exception as e:
            logger.exception("Failed to parse %s", path)
            if watch is not None:
                watch.cancel()
            self._fail(job.generation, "Cannot read file", f"Error parsing file: {e}", path)
            return

        with self._lock:
            current = job.generation == self._generation
            if current:
                self._records = tuple(records)
                self._path = path
                self._status = f"Loaded: {os.path.basename(path)}"
                self._error = None
                self._last_update = datetime.now()
                self._loaded = True
                self._watch = watch
                self._state = MonitorState.MONITORING if watch is not None else MonitorState.STOPPED

        if not current:
            # Superseded by a stop or another load while reading.
            if watch is not None:
                watch.cancel()
            return

        logger.info("Loaded %d records from %s", len(records), path)
        self._publish()

    def _start_watch(self, path: str, generation: int):
        watch = self._watch_factory(
            path,
            partial(self._on_file_changed, generation),
            stop_timeout=self._config.stop_timeout,
        )
        try:
            watch.start()
        except OSError as e:
            logger.warning("Live monitoring unavailable for %s: %s", path, e)
            return None
        return watch

    def _fail(self, generation: int, status: str, error: str, path: str | None = None):
        with self._lock:
            if generation != self._generation:
                return
            self._records = ()
            self._status = status
            self._error = error
            self._state = MonitorState.IDLE
            if path is not None:
                self._path = path
        logger.error("%s: %s", status, error)
        self._publish()

    def _handle_reload(self, job: _Job):
        with self._lock:
            if job.generation != self._generation:
                return
            self._reload_queued = False
            if not self._loaded:
                return
            path = self._path
            existing = self._records
            resting = self._state
            self._state = MonitorState.RELOADING

        try:
            lines = read_log_lines(path)
            merged, new = merge_new_records(existing, parse_lines(lines))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error reloading %s: %s", path, e)
            self._reload_failed(job.generation, resting, f"Error reloading file: {e}")
            return
        except Exception as e:
            logger.exception("Failed to parse %s on reload", path)
            self._reload_failed(job.generation, resting, f"Error reloading file: {e}")
            return

        with self._lock:
            if job.generation != self._generation:
                return
            self._state = resting
            if new:
                self._records = tuple(merged)
                self._error = None
                self._last_update = datetime.now()

        if new:
            logger.info("Detected %d new records", len(new))
            self._publish()

    def _reload_failed(self, generation: int, resting: MonitorState, error: str):
        """Keep records and watch; report the error and return to the resting state."""
        with self._lock:
            if generation != self._generation:
                return
            self._error = error
            self._state = resting
        self._publish()

    def _publish(self):
        with self._lock:
            snap = self._snapshot_locked()
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(snap)
            except Exception:
                logger.exception("Snapshot subscriber failed")
