import logging
import os
from pathlib import Path
from typing import List, Optional

from Dir_Backup.core.errors import LogWriteError
from Dir_Backup.core.models import LogEntry, parse_line

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILENAME = "backup_log.txt"


class BackupLog:
    """
    Append-only text log of backup attempts.

    The file is the only persisted state. A missing or unreadable
    file reads as an empty log, so it can never block a first backup.
    """

    def __init__(self, path: Path | str = DEFAULT_LOG_FILENAME):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"BackupLog({str(self.path)!r})"

    # ----------------------------
    # Reading
    # ----------------------------

    def _read_lines(self) -> List[str]:
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.debug("No backup log at %s", self.path)
            return []
        except OSError as e:
            logger.warning("Error reading backup log %s: %s", self.path, e)
            return []

        return text.splitlines()

    def read_last_recorded(self) -> Optional[LogEntry]:
        """
        Newest entry carrying a HASH or LISTING field, or None.
        """
        for line in reversed(self._read_lines()):
            entry = parse_line(line)
            if entry is not None and (entry.hash or entry.listing):
                return entry
        return None

    def read_last_hash(self) -> Optional[str]:
        """
        Content hash of the newest entry that carries one, or None.
        """
        for line in reversed(self._read_lines()):
            entry = parse_line(line)
            if entry is not None and entry.hash:
                return entry.hash.strip()
        return None

    # ----------------------------
    # Writing
    # ----------------------------

    def _needs_leading_newline(self) -> bool:
        # a previous run may have died halfway through a line
        try:
            if self.path.stat().st_size == 0:
                return False
            with open(self.path, "rb") as f:
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False

    def append(self, entry: LogEntry | str) -> None:
        """
        Append one entry as a single write, flushed to disk.
        Raises LogWriteError if the entry could not be written.
        """
        line = entry.to_line() if isinstance(entry, LogEntry) else str(entry)
        if not line.endswith("\n"):
            line += "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self._needs_leading_newline():
                line = "\n" + line
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise LogWriteError(f"Could not write to backup log {self.path}: {e}") from e

        logger.debug("Appended to %s: %s", self.path, line.strip())
