"""Loading cookbooks from overlay roots and cookbook repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .assembler import assemble_scan
from .config import CookstackConfig
from .ignore import IgnoreFilter
from .logging import for_cookbook, get_logger
from .merge import merge
from .metadata import MetadataResolver
from .models import EMPTY, CategorySet, CookbookVersion, Empty, OverlayScan
from .scanner import PathScanner


class CookbookVersionLoader:
    """Loads one cookbook directory and folds further overlays into it."""

    def __init__(
        self,
        path: str | Path,
        ignore_filter: IgnoreFilter | None = None,
        *,
        name: str | None = None,
        config: CookstackConfig | None = None,
        resolver: MetadataResolver | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cookbook_path = Path(path).expanduser().resolve()
        self.cookbook_name = name or self.cookbook_path.name
        self.logger = logger or get_logger("loader")
        self._scanner = PathScanner(ignore_filter, config=config, logger=self.logger)
        self._resolver = resolver or MetadataResolver(logger=self.logger)
        self._scan: Optional[OverlayScan] = None

    def load(self) -> CategorySet:
        """Scan the cookbook directory and return its categorised files."""
        return self._load_scan().categories

    def _load_scan(self) -> OverlayScan:
        scan = self._scanner.scan(self.cookbook_path, name=self.cookbook_name)
        self._scan = scan
        return scan

    @property
    def scan(self) -> OverlayScan:
        if self._scan is None:
            return self._load_scan()
        return self._scan

    @property
    def cookbook_settings(self) -> CategorySet:
        return self.scan.categories

    @property
    def cookbook_paths(self) -> List[Path]:
        return list(self.scan.roots)

    @property
    def metadata_filenames(self) -> List[Path]:
        return [candidate.path for candidate in self.scan.metadata_candidates]

    @property
    def uploaded_cookbook_version_file(self) -> Optional[Path]:
        return self.scan.descriptor_path

    @property
    def frozen(self) -> bool:
        return self.scan.frozen

    def empty(self) -> bool:
        return self.scan.is_empty()

    def merge(self, other: "CookbookVersionLoader") -> None:
        """Layer ``other`` over this cookbook; its files win on name clashes."""
        self._scan = merge(self.scan, other.scan)

    def cookbook_version(self) -> Optional[CookbookVersion]:
        """Return the assembled cookbook, or ``None`` when it holds no files."""
        result = assemble_scan(self.scan, self._resolver)
        if result is EMPTY:
            for_cookbook(self.logger, self.cookbook_name).warning(
                "found a directory %s in the cookbook path, but it contains no cookbook files. skipping.",
                self.cookbook_name,
            )
            return None
        return result


def load_cookbook(
    name: str,
    overlay_roots: Sequence[str | Path],
    *,
    config: CookstackConfig | None = None,
    ignore_filter: IgnoreFilter | None = None,
    logger: logging.Logger | None = None,
) -> Union[CookbookVersion, Empty]:
    """Resolve cookbook ``name`` from ``overlay_roots``, later roots overriding earlier ones."""
    if not overlay_roots:
        raise ValueError(f"No overlay roots given for cookbook {name}")
    loaders = [
        CookbookVersionLoader(root, ignore_filter, name=name, config=config, logger=logger)
        for root in overlay_roots
    ]
    primary = loaders[0]
    for loader in loaders:
        loader.load()
    for other in loaders[1:]:
        primary.merge(other)
    version = primary.cookbook_version()
    return EMPTY if version is None else version


class CookbookRepository:
    """A search path of directories that each hold many cookbooks."""

    def __init__(
        self,
        repo_paths: Iterable[str | Path],
        *,
        config: CookstackConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repo_paths = [Path(path).expanduser().resolve() for path in repo_paths]
        self._config = config
        self.logger = logger or get_logger("repository")

    def cookbook_roots(self) -> Dict[str, List[Path]]:
        """Map each cookbook name to its directories, in search path order."""
        roots: Dict[str, List[Path]] = {}
        for repo_path in self.repo_paths:
            if not repo_path.is_dir():
                self.logger.debug("Skipping missing cookbook path %s", repo_path)
                continue
            for child in sorted(repo_path.iterdir()):
                if not child.is_dir() or child.name.startswith("."):
                    continue
                roots.setdefault(child.name, []).append(child)
        return roots

    def names(self) -> List[str]:
        return sorted(self.cookbook_roots())

    def load(self, name: str) -> Union[CookbookVersion, Empty]:
        roots = self.cookbook_roots().get(name)
        if not roots:
            searched = ", ".join(str(path) for path in self.repo_paths)
            raise KeyError(f"Cookbook {name} not found in {searched}")
        return load_cookbook(name, roots, config=self._config, logger=self.logger)

    def load_all(self) -> Dict[str, CookbookVersion]:
        cookbooks: Dict[str, CookbookVersion] = {}
        for name, roots in sorted(self.cookbook_roots().items()):
            version = load_cookbook(name, roots, config=self._config, logger=self.logger)
            if version is EMPTY:
                continue
            cookbooks[name] = version
        return cookbooks


__all__ = ["CookbookRepository", "CookbookVersionLoader", "load_cookbook"]
