""".gitignore maintenance helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

GITIGNORE_FILENAME = ".gitignore"

# Patterns every Unity project needs ignored before its first push.
UNITY_IGNORE_PATTERNS = [
    "[Ll]ibrary/",
    "[Tt]emp/",
    "[Oo]bj/",
    "[Bb]uild/",
    "[Bb]uilds/",
    "[Ll]ogs/",
    "[Mm]emoryCaptures/",
    "sysinfo.txt",
    "*.userprefs",
    "*.csproj",
    "*.unityproj",
    "*.sln",
    "*.suo",
    "*.tmp",
    "*.user",
    "*.booproj",
    "*.pidb",
    "*.svd",
    "*.pdb",
    "*.mdb",
    "*.opendb",
    "*.VC.db",
    ".vscode/",
    ".idea/",
    ".DS_Store",
    "*.apk",
    "*.aab",
]


def missing_patterns(existing: Iterable[str], patterns: Iterable[str]) -> List[str]:
    """Return patterns not present in ``existing`` lines, in order, without repeats."""
    present = {line.strip() for line in existing}
    missing: List[str] = []
    for pattern in patterns:
        if pattern not in present:
            missing.append(pattern)
            present.add(pattern)
    return missing


def merge_ignore_patterns(path: Path, patterns: Iterable[str] = UNITY_IGNORE_PATTERNS) -> List[str]:
    """
    Append required patterns to an ignore file, keeping existing lines intact.

    Lines already in the file (compared after trimming whitespace) are never
    duplicated, reordered or removed. The file is not touched when nothing
    is missing.

    Args:
        path: Path to the ``.gitignore`` file (created when absent)
        patterns: Ordered required patterns

    Returns:
        Patterns that were appended
    """
    content = path.read_text(encoding="utf-8") if path.exists() else ""
    missing = missing_patterns(content.splitlines(), patterns)
    if not missing:
        return missing

    prefix = "\n" if content and not content.endswith("\n") else ""
    with path.open("a", encoding="utf-8") as handle:
        handle.write(prefix + "".join(f"{pattern}\n" for pattern in missing))
    return missing
