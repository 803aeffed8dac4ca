"""File watch: a cancellable watchdog subscription for a single file."""

import logging
import os
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class FileGrowthHandler(FileSystemEventHandler):
    """Calls *on_change* whenever the watched file is written to."""

    def __init__(self, path: str, on_change: Callable[[], None]):
        super().__init__()
        self._path = os.path.abspath(path)
        self._on_change = on_change

    def _is_target(self, event) -> bool:
        return not event.is_directory and os.path.abspath(event.src_path) == self._path

    def on_modified(self, event):
        if self._is_target(event):
            self._on_change()

    def on_created(self, event):
        if self._is_target(event):
            self._on_change()


class FileWatch:
    """Watches one file's parent directory and reports changes to that file.

    Notifications arrive on the watchdog observer thread. cancel() is
    idempotent and waits for the observer thread to exit.
    """

    def __init__(self, path: str, on_change: Callable[[], None], stop_timeout: float = 5.0):
        self._path = os.path.abspath(path)
        self._handler = FileGrowthHandler(self._path, on_change)
        self._stop_timeout = stop_timeout
        self._observer = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def active(self) -> bool:
        return self._observer is not None

    def start(self):
        """Begin watching. Raises OSError if the watch cannot be set up."""
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self._handler, os.path.dirname(self._path), recursive=False)
        try:
            observer.start()
        except OSError:
            observer.unschedule_all()
            raise
        self._observer = observer
        logger.info("Watching %s", self._path)

    def cancel(self):
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=self._stop_timeout)
        logger.info("Stopped watching %s", self._path)
