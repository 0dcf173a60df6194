"""Metadata records, candidate sources, and the errors raised while loading them."""

from __future__ import annotations

import enum
import json
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

METADATA_SCRIPT_FILE = "metadata.rb"
METADATA_DOCUMENT_FILE = "metadata.json"
UPLOADED_COOKBOOK_VERSION_FILE = ".uploaded-cookbook-version.json"

_DEFAULT_VERSION = "0.0.0"
_DEFAULT_CONSTRAINT = ">= 0.0.0"
_KEY_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

# Script keywords that accumulate into a name -> constraint mapping.
_SCRIPT_COLLECTIONS = {
    "depends": "dependencies",
    "recommends": "recommendations",
    "suggests": "suggestions",
    "conflicts": "conflicting",
    "provides": "providing",
    "replaces": "replacing",
    "supports": "platforms",
}
_COLLECTION_KEYS = frozenset(_SCRIPT_COLLECTIONS.values())


class MetadataParseError(ValueError):
    """Raised when a metadata file or document cannot be parsed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidMetadataSource(RuntimeError):
    """Raised when a metadata candidate matches none of the known kinds."""

    def __init__(self, path: Path, cookbook_name: str | None = None) -> None:
        target = cookbook_name or "<unknown>"
        super().__init__(f"Invalid metadata file: {path} for cookbook: {target}")
        self.path = path
        self.cookbook_name = cookbook_name


def read_metadata_text(path: Path) -> str:
    """Read a metadata file as UTF-8; undecodable bytes are a parse error."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MetadataParseError(
            f"metadata is not valid UTF-8 at byte {exc.start}: {exc.reason}", path=path
        ) from exc


class MetadataKind(str, enum.Enum):
    SCRIPT = "script"
    DOCUMENT = "document"
    DESCRIPTOR = "descriptor"


@dataclass(frozen=True)
class MetadataSource:
    """A metadata candidate file tagged with how it must be parsed."""

    path: Path
    kind: MetadataKind

    @classmethod
    def classify(cls, path: Path | str, cookbook_name: str | None = None) -> "MetadataSource":
        candidate = Path(path)
        if candidate.name == UPLOADED_COOKBOOK_VERSION_FILE:
            return cls(candidate, MetadataKind.DESCRIPTOR)
        if candidate.suffix == ".rb":
            return cls(candidate, MetadataKind.SCRIPT)
        if candidate.suffix == ".json":
            return cls(candidate, MetadataKind.DOCUMENT)
        raise InvalidMetadataSource(candidate, cookbook_name)


class Metadata:
    """Accumulates key/value declarations describing a cookbook.

    Declarations may come from a script file (``from_file``), a JSON text
    (``from_json``) or an already parsed mapping (``from_hash``). Later
    declarations override earlier ones; dependency-style collections merge.
    """

    def __init__(self, name: str | None = None) -> None:
        self._attributes: Dict[str, Any] = {}
        if name:
            self._attributes["name"] = name

    @property
    def name(self) -> Optional[str]:
        value = self._attributes.get("name")
        return str(value) if value is not None else None

    @property
    def version(self) -> str:
        value = self._attributes.get("version")
        return str(value) if value is not None else _DEFAULT_VERSION

    @property
    def dependencies(self) -> Dict[str, str]:
        return dict(self._attributes.get("dependencies", {}))

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        payload = {key: _copy_value(value) for key, value in self._attributes.items()}
        payload.setdefault("version", _DEFAULT_VERSION)
        return payload

    def from_hash(self, data: Any, *, path: Path | None = None) -> "Metadata":
        if not isinstance(data, Mapping):
            raise MetadataParseError("metadata must be a JSON object", path=path)
        for key, value in data.items():
            if key in _COLLECTION_KEYS:
                if not isinstance(value, Mapping):
                    raise MetadataParseError(f"metadata field {key!r} must be an object", path=path)
                self._collection(key).update(
                    {str(name): str(constraint) for name, constraint in value.items()}
                )
            else:
                self._attributes[str(key)] = _copy_value(value)
        return self

    def from_json(self, text: str, *, path: Path | None = None) -> "Metadata":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MetadataParseError(
                f"invalid metadata JSON at line {exc.lineno} column {exc.colno}: {exc.msg}",
                path=path,
            ) from exc
        return self.from_hash(data, path=path)

    def from_file(self, path: Path | str) -> "Metadata":
        source = Path(path)
        text = read_metadata_text(source)
        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            try:
                tokens = shlex.split(raw_line, comments=True)
            except ValueError as exc:
                raise MetadataParseError(f"line {lineno}: {exc}", path=source) from exc
            if not tokens:
                continue
            key = tokens[0]
            if not _KEY_PATTERN.match(key):
                raise MetadataParseError(f"line {lineno}: unexpected token {key!r}", path=source)
            args = [token.rstrip(",") for token in tokens[1:]]
            args = [arg for arg in args if arg]
            if key in _SCRIPT_COLLECTIONS and not args:
                raise MetadataParseError(f"line {lineno}: {key} needs a name", path=source)
            self._declare(key, args)
        return self

    def _declare(self, key: str, args: List[str]) -> None:
        collection = _SCRIPT_COLLECTIONS.get(key)
        if collection is not None:
            constraint = " ".join(args[1:]) or _DEFAULT_CONSTRAINT
            self._collection(collection)[args[0]] = constraint
        elif not args:
            self._attributes[key] = None
        elif len(args) == 1:
            self._attributes[key] = args[0]
        else:
            self._attributes[key] = list(args)

    def _collection(self, key: str) -> Dict[str, str]:
        current = self._attributes.get(key)
        if not isinstance(current, dict):
            current = {}
            self._attributes[key] = current
        return current

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Metadata(name={self.name!r}, version={self.version!r})"


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


__all__ = [
    "InvalidMetadataSource",
    "METADATA_DOCUMENT_FILE",
    "METADATA_SCRIPT_FILE",
    "Metadata",
    "MetadataKind",
    "MetadataParseError",
    "MetadataSource",
    "UPLOADED_COOKBOOK_VERSION_FILE",
    "read_metadata_text",
]
