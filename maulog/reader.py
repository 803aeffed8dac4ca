"""Log file discovery and whole-file reading."""

import os


class LogFolderNotFound(FileNotFoundError):
    """The log directory does not exist."""


class NoLogFilesFound(FileNotFoundError):
    """The log directory has no files with the expected suffix."""


def find_latest_log(directory: str, suffix: str = ".log") -> str:
    """Return the path of the most recently modified *suffix* file in *directory*.

    Ties on modification time go to the lexicographically greatest name.
    Raises LogFolderNotFound / NoLogFilesFound (both FileNotFoundError).
    """
    if not os.path.isdir(directory):
        raise LogFolderNotFound(f"Log folder not found: {directory}")

    candidates = []
    for name in os.listdir(directory):
        if not name.endswith(suffix):
            continue
        path = os.path.join(directory, name)
        try:
            mtime = os.stat(path).st_mtime
        except OSError:
            continue
        if os.path.isfile(path):
            candidates.append((mtime, name, path))

    if not candidates:
        raise NoLogFilesFound(f"No log files found in {directory}")

    return max(candidates)[2]


def read_log_lines(path: str) -> list[str]:
    """Read the whole file as UTF-8 and split into lines (terminators dropped).

    Raises OSError if unreadable, UnicodeDecodeError if not valid UTF-8.
    """
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()
