from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
import re
from typing import Optional


class Outcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class RunOutcome(str, Enum):
    SKIPPED = "SKIPPED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


# ============================================================
# Log line grammar
# ============================================================

LINE_PATTERN = re.compile(
    r"^(?P<timestamp>\S+): "
    r"(?P<outcome>SUCCESS|FAILED): "
    r"(?P<message>.*?)"
    r"(?:, LISTING: (?P<listing>[0-9a-fA-F]{64}))?"
    r"(?:, HASH: (?P<hash>[0-9a-fA-F]{64}))?"
    r"\s*$"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    ISO8601 in UTC with millisecond precision and a 'Z' suffix,
    e.g. 2024-05-01T10:20:30.123Z
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class LogEntry:
    """
    One line of the backup log.

    `hash` is the content fingerprint of a successful backup and
    `listing` the pre-check fingerprint that was current at the time.
    """
    timestamp: str
    outcome: Outcome
    message: str
    hash: Optional[str] = None
    listing: Optional[str] = None

    @classmethod
    def success(
        cls,
        archive_path: str,
        content_hash: str,
        listing: Optional[str] = None,
        *,
        moment: Optional[datetime] = None,
    ) -> "LogEntry":
        return cls(
            timestamp=format_timestamp(moment or utc_now()),
            outcome=Outcome.SUCCESS,
            message=f"Backup created at {archive_path}",
            hash=content_hash,
            listing=listing,
        )

    @classmethod
    def failure(cls, message: str, *, moment: Optional[datetime] = None) -> "LogEntry":
        # a newline inside the message would split the entry in two
        message = " ".join(str(message).split()) or "unknown error"
        return cls(
            timestamp=format_timestamp(moment or utc_now()),
            outcome=Outcome.FAILED,
            message=message,
        )

    def to_line(self) -> str:
        line = f"{self.timestamp}: {self.outcome.value}: {self.message}"
        if self.listing:
            line += f", LISTING: {self.listing}"
        # HASH is always the last field
        if self.hash:
            line += f", HASH: {self.hash}"
        return line + "\n"


def parse_line(line: str) -> Optional[LogEntry]:
    """
    Match a single log line against the grammar.
    Returns None for anything that does not match.
    """
    m = LINE_PATTERN.match(line.strip())
    if not m:
        return None

    return LogEntry(
        timestamp=m.group("timestamp"),
        outcome=Outcome(m.group("outcome")),
        message=m.group("message"),
        hash=m.group("hash"),
        listing=m.group("listing"),
    )


# ============================================================
# Run result
# ============================================================

@dataclass
class BackupResult:
    """
    What a single backup run reports back to its caller.
    """
    outcome: RunOutcome
    fingerprint: Optional[str] = None
    archive_path: Optional[Path] = None
    content_hash: Optional[str] = None
    error: Optional[str] = None
    log_written: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome is not RunOutcome.FAILED
