# Auto-generated __init__.py

from . import conftest
from .conftest import FakeArchiver
from .conftest import write_files
from . import test_archiver
from . import test_backup
from . import test_cli
from . import test_fingerprint
from . import test_log_store
from . import test_models
from . import test_scanner

__all__ = [
    "conftest",
    "test_archiver",
    "test_backup",
    "test_cli",
    "test_fingerprint",
    "test_log_store",
    "test_models",
    "test_scanner",
    "FakeArchiver",
    "write_files",
]
