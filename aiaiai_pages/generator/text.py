"""Helpers for cleaning CMS markup: host-agnostic links and title entities."""

from __future__ import annotations

import re

ENTITY_TABLE: dict[str, str] = {
    "&#8211;": "—",
    "&#8212;": "—",
    "&#8220;": '"',
    "&#8221;": '"',
    "&#8217;": "'",
    "&#8216;": "'",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&nbsp;": " ",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(key) for key in ENTITY_TABLE))


def decode_entities(text: str | None) -> str:
    """Decode the entities WordPress emits in rendered titles.

    All replacements happen in a single pass, so ``&amp;lt;`` becomes the
    literal ``&lt;`` rather than ``<``; text without tracked entities is
    returned unchanged.

    Examples
    --------
    >>> decode_entities("A &amp; B")
    'A & B'
    >>> decode_entities("Lees &#8220;dit&#8221; &#8211; nu")
    'Lees "dit" — nu'
    """
    if not text:
        return ""
    return _ENTITY_PATTERN.sub(lambda match: ENTITY_TABLE[match.group(0)], text)


def capitalize_first(text: str) -> str:
    """Upper-case the first character of ``text`` and leave the rest alone."""
    return text[:1].upper() + text[1:]


class ContentUrlRewriter:
    """Rewrite absolute CMS links into paths relative to the site root.

    Links to the content root (``https://wordpress.<host>/<root>/``) become
    ``./`` and links below it become ``./<subpath>``. The ``wordpress.``
    subdomain is optional so both the CMS host and the public host match.
    Any other URL is left untouched.
    """

    def __init__(self, host: str, root: str) -> None:
        self.host = host
        self.root = root.strip("/")
        base = rf"https?://(?:wordpress\.)?{re.escape(self.host)}/{re.escape(self.root)}"
        self._root_pattern = re.compile(base + r"/?(?=[\"'\s>]|\Z)")
        self._subpath_pattern = re.compile(base + r"/([^\"'\s>]+?)/?(?=[\"'\s>]|\Z)")

    def rewrite(self, content: str | None) -> str:
        """Return ``content`` with every content-root URL made relative.

        Examples
        --------
        >>> rewriter = ContentUrlRewriter("example", "homepage")
        >>> rewriter.rewrite("https://wordpress.example/homepage/foo")
        './foo'
        >>> rewriter.rewrite("https://example/homepage/")
        './'
        >>> rewriter.rewrite("https://example/homepage/foo/bar/")
        './foo/bar'
        >>> rewriter.rewrite("https://other.example/homepage/foo")
        'https://other.example/homepage/foo'
        """
        if not content:
            return ""
        relative = self._root_pattern.sub("./", content)
        return self._subpath_pattern.sub(r"./\1", relative)


__all__ = [
    "ENTITY_TABLE",
    "ContentUrlRewriter",
    "capitalize_first",
    "decode_entities",
]
