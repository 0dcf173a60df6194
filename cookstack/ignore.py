"""Exclude patterns loaded from a chefignore file."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Tuple

IGNORE_FILENAME = "chefignore"


def _parse_ignore_file(path: Path) -> List[str]:
    patterns: List[str] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


class IgnoreFilter:
    """Decides whether a cookbook-relative path is excluded.

    Patterns are shell globs matched case-sensitively against the whole
    relative path, so ``*`` also spans directory separators.
    """

    def __init__(self, patterns: Iterable[str] = (), *, source: Path | None = None) -> None:
        self._patterns: Tuple[str, ...] = tuple(pattern for pattern in patterns if pattern)
        self.source = source

    @classmethod
    def loaded(cls, spec_file: Path | str) -> "IgnoreFilter":
        """Load patterns from ``spec_file``; a missing file ignores nothing."""
        path = Path(spec_file)
        if not path.is_file():
            return cls(source=path)
        return cls(_parse_ignore_file(path), source=path)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "IgnoreFilter":
        return cls(pattern.strip() for pattern in patterns)

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def with_patterns(self, extra: Iterable[str]) -> "IgnoreFilter":
        additions = [pattern.strip() for pattern in extra]
        if not any(additions):
            return self
        return IgnoreFilter((*self._patterns, *additions), source=self.source)

    def is_ignored(self, relative_path: str) -> bool:
        normalized = relative_path.replace("\\", "/")
        return any(fnmatchcase(normalized, pattern) for pattern in self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __repr__(self) -> str:
        return f"IgnoreFilter(source={self.source!s}, patterns={len(self._patterns)})"


def ignore_file_for(root: Path, filename: str = IGNORE_FILENAME) -> Path:
    """Return where the ignore file for ``root`` lives: beside the cookbook directory."""
    return root.parent / filename


def load_ignore_filter(root: Path, filename: str = IGNORE_FILENAME) -> IgnoreFilter:
    """Read the ignore file for ``root`` from disk; callers own any caching."""
    return IgnoreFilter.loaded(ignore_file_for(root, filename))


__all__ = ["IGNORE_FILENAME", "IgnoreFilter", "ignore_file_for", "load_ignore_filter"]
