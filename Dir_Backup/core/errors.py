class BackupError(Exception):
    """Base class for backup failures that carry an operator-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArchiveError(BackupError):
    """The archiver could not produce an archive."""


class LogWriteError(BackupError):
    """
    Appending to the backup log failed.

    Nothing further can be recorded for the run, so the audit trail
    is incomplete.
    """
