"""Tests for cookstack.merge."""

from __future__ import annotations

from pathlib import Path

import pytest

from cookstack.merge import merge, merge_all, merge_categories
from cookstack.metadata import MetadataSource
from cookstack.models import Category, CategorySet, OverlayScan


def _scan(root: str, recipes: dict[str, str], *, frozen: bool = False, metadata: str | None = None) -> OverlayScan:
    candidates = (MetadataSource.classify(Path(root) / metadata),) if metadata else ()
    return OverlayScan(
        name="mycookbook",
        roots=(Path(root),),
        categories=CategorySet({Category.RECIPE: recipes}),
        metadata_candidates=candidates,
        frozen=frozen,
    )


def test_incoming_overlay_wins_on_conflict() -> None:
    base = _scan("/base/mycookbook", {"recipes/default.rb": "/base/mycookbook/recipes/default.rb"})
    incoming = _scan("/site/mycookbook", {"recipes/default.rb": "/site/mycookbook/recipes/default.rb"})

    merged = merge(base, incoming)

    assert merged.categories.files(Category.RECIPE)["recipes/default.rb"] == (
        "/site/mycookbook/recipes/default.rb"
    )


def test_merge_is_a_union_of_keys() -> None:
    base = _scan("/base/mycookbook", {"recipes/a.rb": "/base/mycookbook/recipes/a.rb"})
    incoming = _scan("/site/mycookbook", {"recipes/b.rb": "/site/mycookbook/recipes/b.rb"})

    merged = merge(base, incoming)

    assert dict(merged.categories.files(Category.RECIPE)) == {
        "recipes/a.rb": "/base/mycookbook/recipes/a.rb",
        "recipes/b.rb": "/site/mycookbook/recipes/b.rb",
    }


def test_merge_does_not_mutate_inputs() -> None:
    base = _scan("/base/mycookbook", {"recipes/a.rb": "/base/mycookbook/recipes/a.rb"})
    incoming = _scan("/site/mycookbook", {"recipes/a.rb": "/site/mycookbook/recipes/a.rb"})

    merge(base, incoming)

    assert base.categories.files(Category.RECIPE)["recipes/a.rb"] == "/base/mycookbook/recipes/a.rb"
    assert base.roots == (Path("/base/mycookbook"),)


def test_merge_appends_roots_and_candidates_in_order() -> None:
    base = _scan("/base/mycookbook", {}, metadata="metadata.rb")
    incoming = _scan("/site/mycookbook", {}, metadata="metadata.json")

    merged = merge(base, incoming)

    assert merged.roots == (Path("/base/mycookbook"), Path("/site/mycookbook"))
    assert [candidate.path.name for candidate in merged.metadata_candidates] == [
        "metadata.rb",
        "metadata.json",
    ]
    assert merged.name == "mycookbook"


@pytest.mark.parametrize("base_frozen,incoming_frozen", [(True, False), (False, True), (True, True)])
def test_frozen_is_monotonic(base_frozen: bool, incoming_frozen: bool) -> None:
    merged = merge(
        _scan("/a/mycookbook", {}, frozen=base_frozen),
        _scan("/b/mycookbook", {}, frozen=incoming_frozen),
    )

    assert merged.frozen is True


def test_merge_all_folds_left_to_right() -> None:
    scans = [
        _scan("/one/mycookbook", {"recipes/default.rb": "/one/recipes/default.rb"}, frozen=True),
        _scan("/two/mycookbook", {"recipes/default.rb": "/two/recipes/default.rb"}),
        _scan("/three/mycookbook", {"recipes/extra.rb": "/three/recipes/extra.rb"}),
    ]

    merged = merge_all(scans)

    assert dict(merged.categories.files(Category.RECIPE)) == {
        "recipes/default.rb": "/two/recipes/default.rb",
        "recipes/extra.rb": "/three/recipes/extra.rb",
    }
    assert len(merged.roots) == 3
    assert merged.frozen is True


def test_merge_all_requires_a_scan() -> None:
    with pytest.raises(ValueError):
        merge_all([])


def test_merge_categories_covers_every_category() -> None:
    base = CategorySet({Category.TEMPLATE: {"templates/a.erb": "/a/templates/a.erb"}})
    incoming = CategorySet({Category.ROOT: {"README.md": "/b/README.md"}})

    merged = merge_categories(base, incoming)

    assert merged.total() == 2
    assert merged == CategorySet(
        {
            Category.TEMPLATE: {"templates/a.erb": "/a/templates/a.erb"},
            Category.ROOT: {"README.md": "/b/README.md"},
        }
    )
