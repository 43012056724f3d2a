# Auto-generated __init__.py

from . import backup
from .backup import load_settings
from .backup import run
from .backup import run_backup

__all__ = [
    "backup",
    "load_settings",
    "run",
    "run_backup",
]
