import shutil
import tarfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from Dir_Backup.core.archiver import build_archive_path, create_archive, normalize_path
from Dir_Backup.core.errors import ArchiveError

MOMENT = datetime(2024, 5, 1, 10, 20, 30, 123000, tzinfo=timezone.utc)

needs_tar = pytest.mark.skipif(shutil.which("tar") is None, reason="tar not installed")


def test_archive_name_replaces_colons_and_dots(tmp_path: Path):
    path = build_archive_path(tmp_path, MOMENT)

    assert path == tmp_path / "backup-2024-05-01T10-20-30-123Z.tar.gz"


def test_archive_name_collision_gets_suffix(tmp_path: Path):
    (tmp_path / "backup-2024-05-01T10-20-30-123Z.tar.gz").write_bytes(b"")

    path = build_archive_path(tmp_path, MOMENT)

    assert path.name == "backup-2024-05-01T10-20-30-123Z-1.tar.gz"


def test_normalize_path():
    assert normalize_path("C:\\data\\src") == "C:/data/src"


@needs_tar
@pytest.mark.asyncio
async def test_create_archive_with_tar(source_dir: Path, tmp_path: Path):
    dest = tmp_path / "dest"
    dest.mkdir()

    archive = await create_archive(source_dir, dest, moment=MOMENT)

    assert archive.exists()
    with tarfile.open(archive, "r:gz") as tar:
        names = {Path(n).name for n in tar.getnames()}
    assert {"a.txt", "b.txt"} <= names


@needs_tar
@pytest.mark.asyncio
async def test_create_archive_failure_leaves_nothing(tmp_path: Path):
    dest = tmp_path / "dest"
    dest.mkdir()

    with pytest.raises(ArchiveError) as exc:
        await create_archive(tmp_path / "missing", dest, moment=MOMENT)

    assert exc.value.message
    assert list(dest.iterdir()) == []


@pytest.mark.asyncio
async def test_missing_tar_binary(source_dir: Path, tmp_path: Path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path / "empty-bin"))

    with pytest.raises(ArchiveError, match="tar executable not found"):
        await create_archive(source_dir, tmp_path)


@needs_tar
@pytest.mark.asyncio
async def test_create_archive_excludes_top_level_patterns(source_dir: Path, tmp_path: Path):
    (source_dir / "junk.tmp").write_text("scratch")
    (source_dir / "backups").mkdir()
    (source_dir / "backups" / "old.tar.gz").write_bytes(b"old")
    dest = tmp_path / "dest"
    dest.mkdir()

    archive = await create_archive(source_dir, dest, exclude=["*.tmp", "backups"], moment=MOMENT)

    with tarfile.open(archive, "r:gz") as tar:
        names = {n.removeprefix("./") for n in tar.getnames()}
    assert {"a.txt", "b.txt"} <= names
    assert "junk.tmp" not in names
    assert not any(n.startswith("backups") for n in names)
