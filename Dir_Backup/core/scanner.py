from pathlib import Path
from typing import List


# ============================================================
# Ignore rules
# ============================================================

class IgnoreRules:
    def __init__(self, patterns: List[str] | None = None):
        self.patterns = list(patterns or [])

    def should_ignore(self, path: Path) -> bool:
        name = path.name
        for pat in self.patterns:
            if path.match(pat) or name == pat:
                return True
        return False

    def extend(self, patterns: List[str]) -> "IgnoreRules":
        return IgnoreRules(self.patterns + [p for p in patterns if p not in self.patterns])


# ============================================================
# Directory listing
# ============================================================

def list_entries(directory: Path, ignore: IgnoreRules | None = None) -> List[Path]:
    """
    Direct children of `directory`, sorted by name.
    Raises OSError when the directory cannot be read.
    """
    entries = []
    for child in directory.iterdir():
        if ignore and ignore.should_ignore(child):
            continue
        entries.append(child)
    return sorted(entries, key=lambda p: p.name)


def list_entry_names(directory: Path, ignore: IgnoreRules | None = None) -> List[str]:
    return [p.name for p in list_entries(directory, ignore)]


def list_files(directory: Path, ignore: IgnoreRules | None = None) -> List[Path]:
    """
    Regular files directly inside `directory` (no recursion).
    """
    return [p for p in list_entries(directory, ignore) if p.is_file()]
