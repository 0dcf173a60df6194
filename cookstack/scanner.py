"""Cookbook directory scanning and file categorisation."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .config import CookstackConfig
from .ignore import IGNORE_FILENAME, IgnoreFilter, load_ignore_filter
from .logging import for_cookbook, get_logger
from .metadata import (
    METADATA_DOCUMENT_FILE,
    METADATA_SCRIPT_FILE,
    UPLOADED_COOKBOOK_VERSION_FILE,
    MetadataParseError,
    MetadataSource,
    descriptor_frozen,
    read_descriptor,
)
from .models import Category, CategorySet, OverlayScan

_SCRIPT_GLOB = "*.rb"

# Direct children of the directory only.
_FLAT_CATEGORIES: Tuple[Tuple[Category, str, str], ...] = (
    (Category.ATTRIBUTE, "attributes", _SCRIPT_GLOB),
    (Category.DEFINITION, "definitions", _SCRIPT_GLOB),
    (Category.RECIPE, "recipes", _SCRIPT_GLOB),
    (Category.LIBRARY, "libraries", _SCRIPT_GLOB),
)

_RECURSIVE_CATEGORIES: Tuple[Tuple[Category, str, str], ...] = (
    (Category.TEMPLATE, "templates", "*"),
    (Category.FILE, "files", "*"),
    (Category.RESOURCE, "resources", _SCRIPT_GLOB),
    (Category.PROVIDER, "providers", _SCRIPT_GLOB),
)


def _iter_children(directory: Path, glob: str) -> Iterator[Path]:
    if not directory.is_dir():
        return
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            continue
        if fnmatchcase(entry.name, glob):
            yield entry


def _iter_descendants(directory: Path, glob: str) -> Iterator[Path]:
    if not directory.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if fnmatchcase(filename, glob):
                yield current_dir / filename


def _iter_root_files(root: Path) -> Iterator[Path]:
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            continue
        if entry.name == UPLOADED_COOKBOOK_VERSION_FILE:
            continue
        yield entry


def _discover_metadata(root: Path, descriptor: Optional[Path]) -> List[MetadataSource]:
    script = root / METADATA_SCRIPT_FILE
    if script.is_file():
        return [MetadataSource.classify(script)]
    document = root / METADATA_DOCUMENT_FILE
    if document.is_file():
        return [MetadataSource.classify(document)]
    if descriptor is not None:
        return [MetadataSource.classify(descriptor)]
    return []


class PathScanner:
    """Walks one cookbook overlay root and classifies its files."""

    def __init__(
        self,
        ignore_filter: IgnoreFilter | None = None,
        *,
        config: CookstackConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._ignore_filter = ignore_filter
        self._config = config
        self.logger = logger or get_logger("scanner")
        self._ignore_filters: Dict[Tuple[Path, str], IgnoreFilter] = {}

    def ignore_filter_for(self, root: Path) -> IgnoreFilter:
        """Return the filter applied to ``root``: the injected one, or the chefignore beside it."""
        if self._ignore_filter is not None:
            base = self._ignore_filter
        else:
            filename = self._config.ignore_file if self._config else IGNORE_FILENAME
            base = self._ignore_filters.get((root, filename))
            if base is None:
                base = load_ignore_filter(root, filename)
                self._ignore_filters[(root, filename)] = base
        if self._config and self._config.exclude_paths:
            return base.with_patterns(self._config.exclude_paths)
        return base

    def scan(self, root: str | Path, *, name: str | None = None) -> OverlayScan:
        """Return the categorised files and metadata candidates found under ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Cookbook path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Cookbook path is not a directory: {root}")
        cookbook_name = name or root_path.name
        log = for_cookbook(self.logger, cookbook_name)

        entries: Dict[Category, Dict[str, str]] = {category: {} for category in Category}

        def _record(category: Category, path: Path) -> None:
            entries[category][path.relative_to(root_path).as_posix()] = str(path)

        for category, dirname, glob in _FLAT_CATEGORIES:
            for path in _iter_children(root_path / dirname, glob):
                _record(category, path)
        for category, dirname, glob in _RECURSIVE_CATEGORIES:
            for path in _iter_descendants(root_path / dirname, glob):
                _record(category, path)
        for path in _iter_root_files(root_path):
            _record(Category.ROOT, path)

        ignore_filter = self.ignore_filter_for(root_path)
        categories = CategorySet(entries).without(ignore_filter.is_ignored)

        descriptor = root_path / UPLOADED_COOKBOOK_VERSION_FILE
        descriptor_path = descriptor if descriptor.is_file() else None
        candidates = _discover_metadata(root_path, descriptor_path)

        descriptors = {}
        frozen = False
        if descriptor_path is not None:
            try:
                document = read_descriptor(descriptor_path)
            except MetadataParseError:
                log.error(
                    "Couldn't parse cookbook metadata JSON for %s in %s",
                    cookbook_name,
                    descriptor_path,
                )
                raise
            descriptors[descriptor_path] = document
            frozen = descriptor_frozen(document)

        log.debug(
            "Scanned %s: %d files, %d metadata candidates, %d ignore patterns",
            root_path,
            categories.total(),
            len(candidates),
            len(ignore_filter),
        )
        return OverlayScan(
            name=cookbook_name,
            roots=(root_path,),
            categories=categories,
            metadata_candidates=tuple(candidates),
            descriptor_path=descriptor_path,
            descriptors=descriptors,
            frozen=frozen,
        )


__all__ = ["PathScanner"]
