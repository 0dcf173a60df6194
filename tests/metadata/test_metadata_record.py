"""Tests for cookstack.metadata.base."""

from __future__ import annotations

from pathlib import Path

import pytest

from cookstack.metadata import (
    InvalidMetadataSource,
    Metadata,
    MetadataKind,
    MetadataParseError,
    MetadataSource,
)


def test_from_file_reads_simple_declarations(tmp_path: Path) -> None:
    script = tmp_path / "metadata.rb"
    script.write_text(
        """# cookbook metadata
name             'mycookbook'
maintainer       "Ops Team"
version          '1.2.3'
depends 'apt'
depends "nginx", "~> 2.7"
supports 'ubuntu', '>= 20.04'
chef_version '>= 16', '< 19'
""",
        encoding="utf-8",
    )

    metadata = Metadata().from_file(script)

    assert metadata.name == "mycookbook"
    assert metadata.version == "1.2.3"
    assert metadata.get("maintainer") == "Ops Team"
    assert metadata.dependencies == {"apt": ">= 0.0.0", "nginx": "~> 2.7"}
    assert metadata.get("platforms") == {"ubuntu": ">= 20.04"}
    assert metadata.get("chef_version") == [">= 16", "< 19"]


def test_from_file_rejects_unterminated_string(tmp_path: Path) -> None:
    script = tmp_path / "metadata.rb"
    script.write_text("name 'broken\n", encoding="utf-8")

    with pytest.raises(MetadataParseError) as excinfo:
        Metadata().from_file(script)

    assert excinfo.value.path == script
    assert "line 1" in str(excinfo.value)


def test_from_file_rejects_undecodable_bytes(tmp_path: Path) -> None:
    script = tmp_path / "metadata.rb"
    script.write_bytes(b"name 'caf\xe9'\n")

    with pytest.raises(MetadataParseError) as excinfo:
        Metadata().from_file(script)

    assert excinfo.value.path == script


def test_from_file_rejects_non_declaration_lines(tmp_path: Path) -> None:
    script = tmp_path / "metadata.rb"
    script.write_text("name 'ok'\n{ :oops => 1 }\n", encoding="utf-8")

    with pytest.raises(MetadataParseError, match="line 2"):
        Metadata().from_file(script)


@pytest.mark.parametrize("keyword", ["depends", "supports"])
def test_from_file_rejects_collection_keyword_without_name(tmp_path: Path, keyword: str) -> None:
    script = tmp_path / "metadata.rb"
    script.write_text(f"name 'ok'\n{keyword}\n", encoding="utf-8")

    with pytest.raises(MetadataParseError, match=f"line 2: {keyword}"):
        Metadata().from_file(script)


def test_from_json_parses_document() -> None:
    metadata = Metadata("fallback").from_json(
        '{"name": "mycookbook", "version": "0.4.0", "dependencies": {"apt": ">= 1.0"}}'
    )

    assert metadata.name == "mycookbook"
    assert metadata.version == "0.4.0"
    assert metadata.dependencies == {"apt": ">= 1.0"}


def test_from_json_wraps_decode_errors() -> None:
    with pytest.raises(MetadataParseError) as excinfo:
        Metadata().from_json("{", path=Path("metadata.json"))

    assert excinfo.value.path == Path("metadata.json")


def test_from_hash_requires_mapping() -> None:
    with pytest.raises(MetadataParseError):
        Metadata().from_hash(["not", "a", "mapping"])


def test_empty_record_carries_cookbook_name() -> None:
    metadata = Metadata("mycookbook")

    assert metadata.to_dict() == {"name": "mycookbook", "version": "0.0.0"}


def test_later_declarations_override_and_collections_merge() -> None:
    metadata = Metadata().from_hash({"version": "1.0.0", "dependencies": {"apt": ">= 1.0"}})
    metadata.from_hash({"version": "2.0.0", "dependencies": {"yum": ">= 3.0"}})

    assert metadata.version == "2.0.0"
    assert metadata.dependencies == {"apt": ">= 1.0", "yum": ">= 3.0"}


@pytest.mark.parametrize(
    "filename,kind",
    [
        ("metadata.rb", MetadataKind.SCRIPT),
        ("metadata.json", MetadataKind.DOCUMENT),
        (".uploaded-cookbook-version.json", MetadataKind.DESCRIPTOR),
    ],
)
def test_classify_by_filename(filename: str, kind: MetadataKind) -> None:
    assert MetadataSource.classify(Path("/u/mycookbook") / filename).kind is kind


def test_classify_rejects_unknown_files() -> None:
    with pytest.raises(InvalidMetadataSource) as excinfo:
        MetadataSource.classify(Path("/u/mycookbook/metadata.yml"), "mycookbook")

    assert "mycookbook" in str(excinfo.value)
    assert "metadata.yml" in str(excinfo.value)
