"""Turn merged scan results into a CookbookVersion."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence, Tuple, Union

from .metadata import Metadata, MetadataResolver, MetadataSource
from .models import EMPTY, Category, CategorySet, CookbookVersion, Empty, OverlayScan


def assemble(
    categories: CategorySet,
    overlay_roots: Sequence[Path],
    metadata_candidates: Sequence[MetadataSource],
    metadata: Metadata,
    frozen: bool = False,
    *,
    name: str | None = None,
) -> Union[CookbookVersion, Empty]:
    """Build the cookbook, or return ``EMPTY`` when nothing was found."""
    if categories.is_empty() and not metadata_candidates:
        return EMPTY
    if not overlay_roots:
        raise ValueError("assemble() requires at least one overlay root")

    files: Dict[Category, Tuple[str, ...]] = {}
    for category, entries in categories.items():
        files[category] = tuple(entries[key] for key in sorted(entries))

    version = CookbookVersion(
        name=name or Path(overlay_roots[0]).name,
        root_paths=tuple(Path(root) for root in overlay_roots),
        files=files,
        metadata_filenames=tuple(str(candidate.path) for candidate in metadata_candidates),
        metadata=metadata,
    )
    if frozen:
        version = version.freeze()
    return version


def assemble_scan(
    scan: OverlayScan, resolver: MetadataResolver | None = None
) -> Union[CookbookVersion, Empty]:
    """Resolve metadata for ``scan`` and assemble it."""
    if scan.is_empty():
        return EMPTY
    resolver = resolver or MetadataResolver()
    metadata = resolver.resolve_all(
        scan.metadata_candidates, scan.name, descriptors=scan.descriptors
    )
    return assemble(
        scan.categories,
        scan.roots,
        scan.metadata_candidates,
        metadata,
        scan.frozen,
        name=scan.name,
    )


__all__ = ["assemble", "assemble_scan"]
