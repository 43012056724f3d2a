import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from Dir_Backup.core.archiver import Archiver, create_archive, normalize_path
from Dir_Backup.core.errors import BackupError, LogWriteError
from Dir_Backup.core.fingerprint import content_fingerprint, listing_fingerprint
from Dir_Backup.core.log_store import DEFAULT_LOG_FILENAME, BackupLog
from Dir_Backup.core.models import BackupResult, LogEntry, RunOutcome
from Dir_Backup.core.scanner import IgnoreRules, list_entry_names

logger = logging.getLogger(__name__)


# ----------------------------
# Settings
# ----------------------------

DEFAULT_SETTINGS = {
    "backup": {
        "log_path": DEFAULT_LOG_FILENAME,
        "destination": "backups",
        "ignore": [],
    },
}


def load_settings(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    DEFAULT_SETTINGS merged with <project_root>/data/settings.json.
    Relative paths in the "backup" section resolve against project_root.

    Raises ValueError for a malformed settings file.
    """
    root = Path(project_root or Path.cwd())
    settings_path = root / "data" / "settings.json"

    merged = json.loads(json.dumps(DEFAULT_SETTINGS))

    if settings_path.exists():
        with open(settings_path, "r", encoding="utf-8") as f:
            user_settings = json.load(f)

        if not isinstance(user_settings, dict):
            raise ValueError(f"{settings_path}: expected a JSON object")
        if not isinstance(user_settings.get("backup", {}), dict):
            raise ValueError(f"{settings_path}: \"backup\" must be an object")

        for k, v in user_settings.items():
            if isinstance(v, dict) and k in merged:
                merged[k].update(v)
            else:
                merged[k] = v

    backup = merged["backup"]
    for key in ("log_path", "destination"):
        if not isinstance(backup.get(key), str) or not backup[key]:
            raise ValueError(f"settings: backup.{key} must be a non-empty string")
        backup[key] = str(root / backup[key])

    ignore = backup.get("ignore") or []
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ValueError("settings: backup.ignore must be a list of strings")
    backup["ignore"] = list(ignore)

    return merged


def _inside(path: Path, directory: Path) -> Optional[Path]:
    """
    The direct child of `directory` that contains `path`, if any.
    """
    try:
        rel = path.resolve().relative_to(directory.resolve())
    except ValueError:
        return None
    if not rel.parts:
        return None
    return directory / rel.parts[0]


def _self_ignore(source_dir: Path, destination_dir: Path, log: BackupLog) -> List[str]:
    # our own outputs must not count as changes to the source
    names = []
    for own in (destination_dir, log.path):
        child = _inside(own, source_dir)
        if child is not None:
            names.append(child.name)
    return names


# ----------------------------
# Orchestrator
# ----------------------------

async def run_backup(
    source_dir: Path,
    destination_dir: Path,
    *,
    log: BackupLog,
    archiver: Archiver = create_archive,
    ignore: IgnoreRules | None = None,
) -> BackupResult:
    """
    Back up source_dir into destination_dir unless nothing changed
    since the last recorded backup.

    - Skips when the entry listing fingerprint matches the log
    - Records every attempt (SUCCESS or FAILED) in the log
    - NEVER raises; failures come back in the BackupResult
    """
    source_dir = Path(source_dir)
    destination_dir = Path(destination_dir)
    rules = (ignore or IgnoreRules()).extend(_self_ignore(source_dir, destination_dir, log))

    # --- CHECK ---
    try:
        names = list_entry_names(source_dir, rules)
    except OSError as e:
        logger.error("Cannot read source directory %s: %s", source_dir, e)
        return _record_failure(log, str(e))

    current = listing_fingerprint(names)
    # logs written before LISTING existed only carry HASH
    recorded = log.read_last_recorded()
    last = (recorded.listing or recorded.hash).strip() if recorded else None
    logger.debug("Pre-check fingerprint %s (last recorded: %s)", current, last)

    # --- DECISION ---
    if last == current:
        logger.info("No changes detected since last backup")
        return BackupResult(outcome=RunOutcome.SKIPPED, fingerprint=current)

    # --- ARCHIVE ---
    archive_path = None
    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
        archive_path = await archiver(source_dir, destination_dir, exclude=rules.patterns)
        checksum = await content_fingerprint(source_dir, ignore=rules)
    except Exception as e:
        message = e.message if isinstance(e, BackupError) else str(e)
        logger.error("Error occurred during backup: %s", message)
        result = _record_failure(log, message)
        result.fingerprint = current
        result.archive_path = archive_path
        return result

    entry = LogEntry.success(normalize_path(archive_path), checksum, current)
    result = BackupResult(
        outcome=RunOutcome.SUCCESS,
        fingerprint=current,
        archive_path=Path(archive_path),
        content_hash=checksum,
    )

    try:
        log.append(entry)
        result.log_written = True
    except LogWriteError as e:
        logger.critical("Backup created but not recorded: %s", e.message)
        result.outcome = RunOutcome.FAILED
        result.error = e.message
        return result

    logger.info("Backup created at %s", normalize_path(archive_path))
    return result


def _record_failure(log: BackupLog, message: str) -> BackupResult:
    result = BackupResult(outcome=RunOutcome.FAILED, error=message)
    try:
        log.append(LogEntry.failure(message))
        result.log_written = True
    except LogWriteError as e:
        logger.critical("Could not record failed backup: %s", e.message)
    return result


async def run(
    source_dir: Path,
    destination_dir: Optional[Path] = None,
    *,
    project_root: Optional[Path] = None,
    log_path: Optional[Path] = None,
    ignore_patterns: Optional[List[str]] = None,
    archiver: Archiver = create_archive,
) -> BackupResult:
    """
    Settings-aware entry point: explicit arguments win over
    data/settings.json, which wins over DEFAULT_SETTINGS.
    """
    settings = load_settings(project_root)["backup"]

    destination = Path(destination_dir or settings["destination"])
    log = BackupLog(log_path or settings["log_path"])
    ignore = IgnoreRules(settings["ignore"] + list(ignore_patterns or []))

    return await run_backup(
        Path(source_dir),
        destination,
        log=log,
        archiver=archiver,
        ignore=ignore,
    )
