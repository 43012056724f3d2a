import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional

from Dir_Backup.core.errors import ArchiveError
from Dir_Backup.core.models import format_timestamp, utc_now

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "backup-"
ARCHIVE_SUFFIX = ".tar.gz"

# (source_dir, destination_dir, exclude=patterns) -> archive path; raises ArchiveError
Archiver = Callable[..., Awaitable[Path]]


def normalize_path(path: Path | str) -> str:
    return str(path).replace("\\", "/")


def build_archive_path(destination_dir: Path, moment: Optional[datetime] = None) -> Path:
    """
    backup-<timestamp>.tar.gz inside destination_dir, with ':' and '.'
    in the timestamp replaced by '-'. A numeric suffix is added if
    the name is already taken.
    """
    stamp = format_timestamp(moment or utc_now())
    stamp = stamp.replace(":", "-").replace(".", "-")

    dest_path = destination_dir / f"{ARCHIVE_PREFIX}{stamp}{ARCHIVE_SUFFIX}"

    # Handle name collisions
    counter = 1
    while dest_path.exists():
        dest_path = destination_dir / f"{ARCHIVE_PREFIX}{stamp}-{counter}{ARCHIVE_SUFFIX}"
        counter += 1

    return dest_path


async def create_archive(
    source_dir: Path,
    destination_dir: Path,
    *,
    exclude: Iterable[str] = (),
    moment: Optional[datetime] = None,
) -> Path:
    """
    Compress the contents of source_dir into a new .tar.gz under
    destination_dir using the system `tar`. Top-level entries matching
    an `exclude` pattern are left out.

    Returns the archive path. Raises ArchiveError on any failure;
    a partially written archive is removed first.
    """
    archive_path = build_archive_path(Path(destination_dir), moment)
    cmd = [
        "tar",
        "-czf",
        normalize_path(archive_path),
        *(f"--exclude=./{pattern}" for pattern in exclude),
        "-C",
        normalize_path(source_dir),
        ".",
    ]
    logger.debug("Running tar command: %s", " ".join(cmd))

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise ArchiveError(f"tar executable not found: {e}") from e

    _, stderr = await proc.communicate()

    if proc.returncode != 0:
        archive_path.unlink(missing_ok=True)
        detail = stderr.decode("utf-8", errors="replace").strip()
        raise ArchiveError(detail or f"tar exited with status {proc.returncode}")

    return archive_path
