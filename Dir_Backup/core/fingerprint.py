import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Iterable

from Dir_Backup.core.scanner import IgnoreRules, list_files

logger = logging.getLogger(__name__)


# ============================================================
# Fingerprint utilities
# ============================================================

def fingerprint(data: bytes | str) -> str:
    """
    SHA-256 hex digest of `data`. Strings are hashed as UTF-8.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def listing_fingerprint(names: Iterable[str]) -> str:
    """
    Pre-check fingerprint over entry names only, one per line.

    Cheap, but blind to files edited in place: the same set of
    names always gives the same fingerprint.
    """
    return fingerprint("\n".join(names))


async def content_fingerprint(
    directory: Path,
    *,
    ignore: IgnoreRules | None = None,
) -> str:
    """
    Fingerprint over the concatenated bytes of every regular file
    directly inside `directory`, in sorted-name order.

    Files are read concurrently; results are joined in listing order
    so the digest does not depend on which read finishes first.
    """
    files = list_files(directory, ignore)
    logger.debug("Hashing %d file(s) in %s", len(files), directory)

    contents = await asyncio.gather(
        *(asyncio.to_thread(p.read_bytes) for p in files)
    )
    return fingerprint(b"".join(contents))
