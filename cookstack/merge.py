"""Folding scanned overlays of one cookbook into a single view."""

from __future__ import annotations

from functools import reduce
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from .models import Category, CategorySet, OverlayScan


def merge_categories(base: CategorySet, incoming: CategorySet) -> CategorySet:
    """Union both sets; when a relative path exists in both, ``incoming`` wins."""
    merged: Dict[Category, Dict[str, str]] = {}
    for category in Category:
        combined = dict(base.files(category))
        combined.update(incoming.files(category))
        merged[category] = combined
    return CategorySet(merged)


def merge(base: OverlayScan, incoming: OverlayScan) -> OverlayScan:
    """Return a new scan with ``incoming`` layered over ``base``."""
    descriptors: Dict[Path, Mapping[str, Any]] = dict(base.descriptors)
    descriptors.update(incoming.descriptors)
    return OverlayScan(
        name=base.name,
        roots=base.roots + incoming.roots,
        categories=merge_categories(base.categories, incoming.categories),
        metadata_candidates=base.metadata_candidates + incoming.metadata_candidates,
        descriptor_path=base.descriptor_path or incoming.descriptor_path,
        descriptors=descriptors,
        # Once any overlay is frozen the cookbook stays frozen.
        frozen=base.frozen or incoming.frozen,
    )


def merge_all(scans: Iterable[OverlayScan]) -> OverlayScan:
    ordered = list(scans)
    if not ordered:
        raise ValueError("merge_all() requires at least one scan")
    return reduce(merge, ordered)


__all__ = ["merge", "merge_all", "merge_categories"]
