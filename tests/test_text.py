"""Tests for entity decoding and CMS link rewriting."""

from __future__ import annotations

import pytest

from aiaiai_pages.generator.text import (
    ContentUrlRewriter,
    capitalize_first,
    decode_entities,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("A &amp; B", "A & B"),
        ("&#8220;Quote&#8221; &#8216;x&#8217;", "\"Quote\" 'x'"),
        ("Een &#8211; twee &#8212; drie", "Een — twee — drie"),
        ("&lt;b&gt; &quot;x&quot;", '<b> "x"'),
        ("non&nbsp;breaking", "non breaking"),
        ("&amp;lt;", "&lt;"),
        ("Plain title", "Plain title"),
        ("", ""),
        (None, ""),
    ],
)
def test_decode_entities(raw: str | None, expected: str) -> None:
    assert decode_entities(raw) == expected


def test_decode_entities_is_stable_on_decoded_text() -> None:
    once = decode_entities("Lees &#8220;dit&#8221; &#8211; nu")

    assert decode_entities(once) == once, "decoded text must not change again"


def test_capitalize_first_keeps_the_rest() -> None:
    assert capitalize_first("opdracht eEn") == "Opdracht eEn"
    assert capitalize_first("") == ""


@pytest.fixture
def rewriter() -> ContentUrlRewriter:
    return ContentUrlRewriter("aiaiai.art", "homepage")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (
            '<a href="https://wordpress.aiaiai.art/homepage/">home</a>',
            '<a href="./">home</a>',
        ),
        (
            '<a href="https://wordpress.aiaiai.art/homepage/foo">foo</a>',
            '<a href="./foo">foo</a>',
        ),
        (
            '<a href="http://aiaiai.art/homepage/opdracht-1/">x</a>',
            '<a href="./opdracht-1">x</a>',
        ),
        ("see https://aiaiai.art/homepage", "see ./"),
        (
            '<a href="https://other.example/homepage/foo">x</a>',
            '<a href="https://other.example/homepage/foo">x</a>',
        ),
        (
            '<a href="https://aiaiai.art/homepage/foo/bar">x</a>',
            '<a href="./foo/bar">x</a>',
        ),
        (
            "<a href='https://aiaiai.art/homepage/foo/bar/'>x</a>",
            "<a href='./foo/bar'>x</a>",
        ),
        (
            '<img src="https://wordpress.aiaiai.art/wp-content/a.png">',
            '<img src="https://wordpress.aiaiai.art/wp-content/a.png">',
        ),
    ],
)
def test_rewrite_content_links(
    rewriter: ContentUrlRewriter, raw: str, expected: str
) -> None:
    assert rewriter.rewrite(raw) == expected


def test_rewrite_handles_empty_content(rewriter: ContentUrlRewriter) -> None:
    assert rewriter.rewrite(None) == ""
    assert rewriter.rewrite("") == ""


def test_rewrite_strips_slashes_from_root() -> None:
    rewriter = ContentUrlRewriter("aiaiai.art", "/homepage/")

    assert rewriter.rewrite("https://aiaiai.art/homepage/foo") == "./foo"
