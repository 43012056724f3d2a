from pathlib import Path

import pytest

from Dir_Backup.core.errors import ArchiveError
from Dir_Backup.core.log_store import BackupLog


def write_files(directory: Path, files: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    return write_files(tmp_path / "source", {"a.txt": "foo", "b.txt": "bar"})


@pytest.fixture
def backup_log(tmp_path: Path) -> BackupLog:
    return BackupLog(tmp_path / "backup_log.txt")


class FakeArchiver:
    """
    Stands in for tar: records calls and either writes a dummy
    archive or raises ArchiveError(fail_with).
    """

    def __init__(self, fail_with: str | None = None):
        self.fail_with = fail_with
        self.calls = []

    async def __call__(self, source_dir: Path, destination_dir: Path, exclude=()) -> Path:
        self.calls.append((source_dir, destination_dir, list(exclude)))
        if self.fail_with:
            raise ArchiveError(self.fail_with)

        archive = destination_dir / f"backup-{len(self.calls)}.tar.gz"
        archive.write_bytes(b"archive")
        return archive


@pytest.fixture
def fake_archiver() -> FakeArchiver:
    return FakeArchiver()


@pytest.fixture
def failing_archiver() -> FakeArchiver:
    return FakeArchiver(fail_with="disk full")
