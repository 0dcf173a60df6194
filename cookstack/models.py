"""Core data models shared across cookstack components."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .metadata.base import Metadata, MetadataSource


class Category(str, enum.Enum):
    """Role a cookbook file plays, decided by where it lives in the tree."""

    ATTRIBUTE = "attribute"
    DEFINITION = "definition"
    RECIPE = "recipe"
    TEMPLATE = "template"
    FILE = "file"
    LIBRARY = "library"
    RESOURCE = "resource"
    PROVIDER = "provider"
    ROOT = "root"

    @property
    def settings_key(self) -> str:
        return f"{self.value}_filenames"


FILETYPES_SUBJECT_TO_IGNORE: Tuple[Category, ...] = tuple(
    category for category in Category if category is not Category.ROOT
)


class CategorySet:
    """Immutable mapping of category -> {relative path: absolute path}."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[Category, Mapping[str, str]]] = None) -> None:
        source = entries or {}
        self._entries: Dict[Category, Mapping[str, str]] = {
            category: MappingProxyType(dict(source.get(category, {}))) for category in Category
        }

    @classmethod
    def empty(cls) -> "CategorySet":
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[Any, Mapping[str, str]]) -> "CategorySet":
        """Build a set keyed by Category members, their values, or settings keys."""
        entries: Dict[Category, Mapping[str, str]] = {}
        for key, files in data.items():
            entries[_coerce_category(key)] = files
        return cls(entries)

    def files(self, category: Category) -> Mapping[str, str]:
        return self._entries[category]

    __getitem__ = files

    def __iter__(self) -> Iterator[Category]:
        return iter(self._entries)

    def items(self) -> Iterator[Tuple[Category, Mapping[str, str]]]:
        return iter(self._entries.items())

    def is_empty(self) -> bool:
        return all(not files for files in self._entries.values())

    def total(self) -> int:
        return sum(len(files) for files in self._entries.values())

    def without(self, predicate: Callable[[str], bool]) -> "CategorySet":
        """Return a copy with every relative path matching ``predicate`` removed."""
        return CategorySet(
            {
                category: {rel: full for rel, full in files.items() if not predicate(rel)}
                for category, files in self._entries.items()
            }
        )

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {category.settings_key: dict(files) for category, files in self._entries.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategorySet):
            return NotImplemented
        return all(dict(self._entries[c]) == dict(other._entries[c]) for c in Category)

    def __repr__(self) -> str:
        counts = ", ".join(f"{c.value}={len(files)}" for c, files in self._entries.items() if files)
        return f"CategorySet({counts})"


def _coerce_category(key: Any) -> Category:
    if isinstance(key, Category):
        return key
    text = str(key)
    if text.endswith("_filenames"):
        text = text[: -len("_filenames")]
    return Category(text)


@dataclass(frozen=True)
class OverlayScan:
    """Everything discovered under one or more overlay roots of a cookbook."""

    name: str
    roots: Tuple[Path, ...]
    categories: CategorySet
    metadata_candidates: Tuple[MetadataSource, ...] = ()
    descriptor_path: Optional[Path] = None
    descriptors: Mapping[Path, Mapping[str, Any]] = field(default_factory=dict)
    frozen: bool = False

    def is_empty(self) -> bool:
        return self.categories.is_empty() and not self.metadata_candidates


class Empty(enum.Enum):
    """Sentinel for a cookbook directory that holds no cookbook files."""

    EMPTY = "empty"

    def __bool__(self) -> bool:
        return False


EMPTY = Empty.EMPTY


@dataclass(frozen=True)
class CookbookVersion:
    """A fully resolved cookbook assembled from its overlay roots."""

    name: str
    root_paths: Tuple[Path, ...]
    files: Mapping[Category, Tuple[str, ...]]
    metadata_filenames: Tuple[str, ...]
    metadata: Metadata
    frozen: bool = False

    def filenames(self, category: Category) -> Tuple[str, ...]:
        return self.files.get(category, ())

    def all_files(self) -> List[str]:
        return [path for category in Category for path in self.filenames(category)]

    def freeze(self) -> "CookbookVersion":
        """Return a frozen copy; freezing is one-way."""
        if self.frozen:
            return self
        return replace(self, frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.metadata.version,
            "frozen": self.frozen,
            "root_paths": [str(path) for path in self.root_paths],
            "metadata_filenames": list(self.metadata_filenames),
            "metadata": self.metadata.to_dict(),
            "files": {c.settings_key: list(self.filenames(c)) for c in Category},
        }
