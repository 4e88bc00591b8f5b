"""Tests for template lookup and accent color selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from aiaiai_pages.template_selector import (
    TemplateSelector,
    normalize_page_name,
    select_accent_color,
)

RESERVED = ("oefening", "inspired-by", "made-by")


@pytest.fixture
def selector(templates_dir: Path) -> TemplateSelector:
    return TemplateSelector(templates_dir, assignment_tag="category-oefening")


def test_assignment_template_wins_over_specific(
    selector: TemplateSelector, templates_dir: Path
) -> None:
    (templates_dir / "opdracht-1.html").write_text("<html></html>", encoding="utf-8")

    chosen = selector.select("opdracht-1", ("page", "category-oefening"))

    assert chosen == templates_dir / "assignment.html", f"got {chosen}"


def test_specific_template_used_for_regular_page(
    selector: TemplateSelector, templates_dir: Path
) -> None:
    (templates_dir / "over-ons.html").write_text("<html></html>", encoding="utf-8")

    chosen = selector.select("Over Ons", ("page",))

    assert chosen == templates_dir / "over-ons.html", f"got {chosen}"


def test_base_template_is_the_fallback(
    selector: TemplateSelector, templates_dir: Path
) -> None:
    chosen = selector.select("colofon", ())

    assert chosen == templates_dir / "template.html", f"got {chosen}"


def test_missing_assignment_template_falls_through(tmp_path: Path) -> None:
    (tmp_path / "opdracht-2.html").write_text("<html></html>", encoding="utf-8")
    selector = TemplateSelector(tmp_path, assignment_tag="category-oefening")

    chosen = selector.select("opdracht-2", ("category-oefening",))

    assert chosen == tmp_path / "opdracht-2.html", f"got {chosen}"


def test_unreadable_candidate_is_treated_as_absent(
    selector: TemplateSelector, templates_dir: Path
) -> None:
    # A directory with a template's name exists but cannot be read as text.
    (templates_dir / "archief.html").mkdir()

    chosen = selector.select("archief", ())

    assert chosen == templates_dir / "template.html", f"got {chosen}"


def test_normalize_page_name() -> None:
    assert normalize_page_name("Over Ons Team") == "over-ons-team"


def test_accent_color_skips_reserved_categories() -> None:
    color = select_accent_color(
        ["category-oefening", "category-lilia", "category-made-by"],
        reserved=RESERVED,
        default="purple",
    )

    assert color == "lilia", f"expected lilia, got {color!r}"


def test_accent_color_takes_first_candidate_and_lowercases() -> None:
    color = select_accent_color(
        ["page", "category-Mint", "category-lilia"],
        reserved=RESERVED,
        default="purple",
    )

    assert color == "mint", f"expected mint, got {color!r}"


def test_accent_color_reserved_comparison_ignores_case() -> None:
    color = select_accent_color(
        ["category-Oefening", "category-Made-By"],
        reserved=RESERVED,
        default="Purple",
    )

    assert color == "purple", f"expected the lowercased default, got {color!r}"


def test_accent_color_default_without_category_tags() -> None:
    assert select_accent_color(["page"], reserved=RESERVED, default="lilia") == "lilia"
