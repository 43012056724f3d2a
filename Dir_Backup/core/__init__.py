# Auto-generated __init__.py

from . import archiver
from .archiver import build_archive_path
from .archiver import create_archive
from .archiver import normalize_path
from . import errors
from .errors import ArchiveError
from .errors import BackupError
from .errors import LogWriteError
from . import fingerprint
from .fingerprint import content_fingerprint
from .fingerprint import listing_fingerprint
from . import log_store
from .log_store import BackupLog
from . import models
from .models import BackupResult
from .models import LogEntry
from .models import Outcome
from .models import RunOutcome
from .models import parse_line
from . import scanner
from .scanner import IgnoreRules
from .scanner import list_entry_names
from .scanner import list_files

__all__ = [
    "archiver",
    "errors",
    "fingerprint",
    "log_store",
    "models",
    "scanner",
    "ArchiveError",
    "BackupError",
    "BackupLog",
    "BackupResult",
    "IgnoreRules",
    "LogEntry",
    "LogWriteError",
    "Outcome",
    "RunOutcome",
    "build_archive_path",
    "content_fingerprint",
    "create_archive",
    "list_entry_names",
    "list_files",
    "listing_fingerprint",
    "normalize_path",
    "parse_line",
]
