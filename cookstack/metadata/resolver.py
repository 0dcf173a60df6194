"""Resolve a cookbook's metadata record from its candidate files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..logging import for_cookbook, get_logger
from .base import (
    Metadata,
    MetadataKind,
    MetadataParseError,
    MetadataSource,
    read_metadata_text,
)

DescriptorDocuments = Mapping[Path, Mapping[str, Any]]


def read_descriptor(path: Path) -> Dict[str, Any]:
    """Parse an uploaded cookbook version document."""
    text = read_metadata_text(path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataParseError(
            f"invalid cookbook version JSON at line {exc.lineno} column {exc.colno}: {exc.msg}",
            path=path,
        ) from exc
    if not isinstance(data, dict):
        raise MetadataParseError("cookbook version document must be a JSON object", path=path)
    return data


def descriptor_frozen(document: Mapping[str, Any]) -> bool:
    return document.get("frozen?") is True


class MetadataResolver:
    """Applies metadata candidates to a record, one parsing strategy per kind."""

    def __init__(
        self,
        factory: Callable[[str], Metadata] = Metadata,
        logger: logging.Logger | None = None,
    ) -> None:
        self._factory = factory
        self.logger = logger or get_logger("metadata")

    def resolve(
        self,
        candidate: MetadataSource,
        cookbook_name: str,
        *,
        metadata: Metadata | None = None,
        descriptors: Optional[DescriptorDocuments] = None,
    ) -> Metadata:
        """Apply a single candidate and return the updated metadata record."""
        record = metadata if metadata is not None else self._factory(cookbook_name)
        try:
            if candidate.kind is MetadataKind.SCRIPT:
                record.from_file(candidate.path)
            elif candidate.kind is MetadataKind.DOCUMENT:
                text = read_metadata_text(candidate.path)
                record.from_json(text, path=candidate.path)
            else:
                document = (descriptors or {}).get(candidate.path)
                if document is None:
                    document = read_descriptor(candidate.path)
                if "metadata" not in document:
                    raise MetadataParseError(
                        "cookbook version document has no metadata field", path=candidate.path
                    )
                record.from_hash(document["metadata"], path=candidate.path)
        except MetadataParseError:
            log = for_cookbook(self.logger, cookbook_name)
            if candidate.kind is MetadataKind.SCRIPT:
                log.error(
                    "Error evaluating metadata.rb for %s in %s", cookbook_name, candidate.path
                )
            else:
                log.error(
                    "Couldn't parse cookbook metadata JSON for %s in %s",
                    cookbook_name,
                    candidate.path,
                )
            raise
        return record

    def resolve_all(
        self,
        candidates: Iterable[MetadataSource | Path | str],
        cookbook_name: str,
        *,
        descriptors: Optional[DescriptorDocuments] = None,
    ) -> Metadata:
        """Apply every candidate in order; no candidates yields an empty record."""
        record = self._factory(cookbook_name)
        for candidate in candidates:
            if not isinstance(candidate, MetadataSource):
                candidate = MetadataSource.classify(candidate, cookbook_name)
            self.resolve(candidate, cookbook_name, metadata=record, descriptors=descriptors)
        return record


__all__ = ["DescriptorDocuments", "MetadataResolver", "descriptor_frozen", "read_descriptor"]
