"""Metadata records and the resolver that loads them from candidate files."""

from .base import (
    InvalidMetadataSource,
    METADATA_DOCUMENT_FILE,
    METADATA_SCRIPT_FILE,
    Metadata,
    MetadataKind,
    MetadataParseError,
    MetadataSource,
    UPLOADED_COOKBOOK_VERSION_FILE,
)
from .resolver import MetadataResolver, descriptor_frozen, read_descriptor

__all__ = [
    "InvalidMetadataSource",
    "METADATA_DOCUMENT_FILE",
    "METADATA_SCRIPT_FILE",
    "Metadata",
    "MetadataKind",
    "MetadataParseError",
    "MetadataResolver",
    "MetadataSource",
    "UPLOADED_COOKBOOK_VERSION_FILE",
    "descriptor_frozen",
    "read_descriptor",
]
