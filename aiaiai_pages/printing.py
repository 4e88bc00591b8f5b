"""Selective printing of generated assignment pages.

The print flow collects the ``<main>`` region of one or more built pages,
joins them in request order, and wraps them in an isolated document that only
loads the print stylesheets. :class:`PrintController` owns the single piece of
state in the flow: the most recently loaded print content, cached per
selection so repeated requests for the same selection do not refetch.

Pages are read either from a build directory on disk or from the deployed
site over HTTP, and the finished document goes to a printer sink; the default
sink writes ``print-<label>.html`` and can open it in the browser.

Example
-------
>>> from pathlib import Path
>>> controller = PrintController.for_directory(Path("build"))  # doctest: +SKIP
>>> controller.print_selection(PrintSelection.all())  # doctest: +SKIP
PosixPath('build/print-all.html')
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import threading
import typing as typ
import webbrowser
from pathlib import Path

import requests
from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader

from ._constants import DEFAULT_TIMEOUT, MANIFEST_PATH_PARTS, PAGE_FILENAME_TEMPLATE
from .manifest import ManifestError, load_manifest

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

MAIN_SELECTOR = "main#main"
PRINT_CONTAINER_SELECTOR = ".print-all"
NO_PRINT_CLASS = "no-print"
MANIFEST_URL = "./" + "/".join(MANIFEST_PATH_PARTS)


class PrintAggregationError(RuntimeError):
    """Raised when print content cannot be collected."""


class SelectionKind(enum.StrEnum):
    """Shapes of a print request."""

    ALL = "all"
    SLUGS = "slugs"
    SINGLE = "single"


@dc.dataclass(slots=True, frozen=True)
class PrintSelection:
    """Which pages a print request covers."""

    kind: SelectionKind
    slugs: tuple[str, ...] = ()

    @classmethod
    def all(cls) -> PrintSelection:
        return cls(SelectionKind.ALL)

    @classmethod
    def single(cls, slug: str) -> PrintSelection:
        return cls(SelectionKind.SINGLE, (slug,))

    @classmethod
    def of(cls, slugs: cabc.Iterable[str]) -> PrintSelection:
        """Return a selection of several slugs, keeping the requested order."""
        ordered: list[str] = []
        for slug in slugs:
            if slug and slug not in ordered:
                ordered.append(slug)
        if not ordered:
            msg = "A print selection needs at least one slug."
            raise ValueError(msg)
        return cls(SelectionKind.SLUGS, tuple(ordered))

    @classmethod
    def parse(cls, value: str | cabc.Sequence[str] | None) -> PrintSelection:
        """Interpret ``None``/``"all"``, a single slug, or a list of slugs.

        Examples
        --------
        >>> PrintSelection.parse(None).kind
        <SelectionKind.ALL: 'all'>
        >>> PrintSelection.parse("opdracht-1").slugs
        ('opdracht-1',)
        >>> PrintSelection.parse(["b", "a"]).key
        ('slugs', 'a', 'b')
        """
        if value is None or value == SelectionKind.ALL:
            return cls.all()
        if isinstance(value, str):
            return cls.single(value)
        return cls.of(value)

    @property
    def key(self) -> tuple[str, ...]:
        """Return the cache key: a sentinel, the single slug, or sorted slugs."""
        match self.kind:
            case SelectionKind.ALL:
                return (SelectionKind.ALL.value,)
            case SelectionKind.SINGLE:
                return (SelectionKind.SINGLE.value, *self.slugs)
            case _:
                return (SelectionKind.SLUGS.value, *sorted(self.slugs))

    @property
    def label(self) -> str:
        """Return a filename-friendly name for the selection."""
        if self.kind is SelectionKind.ALL:
            return SelectionKind.ALL.value
        return "-".join(self.slugs)


@dc.dataclass(slots=True)
class PrintContentCache:
    """The currently loaded print content and the selection it belongs to."""

    key: tuple[str, ...] | None = None
    html: str | None = None

    def lookup(self, selection: PrintSelection) -> str | None:
        """Return cached content when it was loaded for an equal selection."""
        if self.key is not None and self.key == selection.key:
            return self.html
        return None

    def store(self, selection: PrintSelection, html: str) -> None:
        self.key = selection.key
        self.html = html

    def invalidate(self) -> None:
        self.key = None
        self.html = None


class PageSource(typ.Protocol):
    """Anything that can return the text of a site-relative path.

    ``base_href`` is the absolute URL that site-relative links in the
    returned pages resolve against, ending in ``/``.
    """

    @property
    def base_href(self) -> str: ...

    def read(self, path: str) -> str: ...


class DirectoryPageSource:
    """Read built pages from a build directory on disk."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def base_href(self) -> str:
        return f"{self.root.resolve().as_uri()}/"

    def read(self, path: str) -> str:
        target = self.root / path.removeprefix("./")
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read {target}: {exc}"
            raise PrintAggregationError(msg) from exc


class HttpPageSource:
    """Fetch pages from a deployed site."""

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self.timeout = timeout

    @property
    def base_href(self) -> str:
        return f"{self.base_url}/"

    def read(self, path: str) -> str:
        url = f"{self.base_url}/{path.removeprefix('./')}"
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Failed to fetch {url}: {exc}"
            raise PrintAggregationError(msg) from exc
        return response.text


def extract_main(html: str, slug: str) -> str:
    """Return the ``<main>`` element of ``html`` tagged with ``slug`` as a class."""
    soup = BeautifulSoup(html, "html.parser")
    main = soup.find("main")
    if main is None:
        return ""
    classes = list(main.get("class") or [])
    if slug not in classes:
        classes.append(slug)
    main["class"] = classes
    return str(main)


class ContentAggregator:
    """Collect and concatenate the main regions of the requested pages."""

    def __init__(self, source: PageSource) -> None:
        self.source = source

    def targets(self, selection: PrintSelection) -> list[tuple[str, str]]:
        """Return ``(slug, path)`` pairs for ``selection`` in print order."""
        if selection.kind is not SelectionKind.ALL:
            return [
                (slug, f"./{PAGE_FILENAME_TEMPLATE.format(slug=slug)}")
                for slug in selection.slugs
            ]
        try:
            entries = load_manifest(self.source.read(MANIFEST_URL))
        except ManifestError as exc:
            raise PrintAggregationError(str(exc)) from exc
        return [(entry.slug, entry.path) for entry in entries]

    def aggregate(self, selection: PrintSelection) -> str:
        """Fetch each page in turn and join their main regions.

        Raises
        ------
        PrintAggregationError
            If the manifest or any page cannot be read.
        """
        parts = [
            extract_main(self.source.read(path), slug)
            for slug, path in self.targets(selection)
        ]
        return "".join(parts)


class IsolatedRenderer:
    """Wrap print content in a standalone document with only print styles."""

    def __init__(
        self,
        stylesheets: cabc.Sequence[str],
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.stylesheets = tuple(stylesheets)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("print_document.jinja")

    def render(self, content: str, *, title: str, base_href: str | None = None) -> str:
        """Return the print document for ``content``.

        With ``base_href`` set, the document carries a ``<base>`` element so
        the stylesheets and the links inside ``content`` resolve against the
        site the pages came from, wherever the document is written.
        """
        return self.template.render(
            title=title,
            base_href=base_href,
            stylesheets=self.stylesheets,
            content=content,
        )


class Printer(typ.Protocol):
    """Sink that receives a finished print document."""

    def print_document(self, html: str, *, label: str) -> Path | None: ...


class FilePrinter:
    """Write print documents to disk and optionally open them in a browser."""

    def __init__(self, output_dir: Path, *, open_browser: bool = False) -> None:
        self.output_dir = output_dir
        self.open_browser = open_browser

    def print_document(self, html: str, *, label: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"print-{label}.html"
        path.write_text(html, encoding="utf-8")
        if self.open_browser:
            webbrowser.open(path.resolve().as_uri())
        return path


class PrintController:
    """Serve print requests, reusing loaded content when the selection repeats.

    Loading runs under a lock: a request that arrives while another is
    aggregating waits for it and then reads the cache, so two triggers never
    fetch in parallel or overwrite each other's result.
    """

    def __init__(
        self,
        aggregator: ContentAggregator,
        renderer: IsolatedRenderer,
        printer: Printer,
        *,
        cache: PrintContentCache | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.renderer = renderer
        self.printer = printer
        self.cache = cache or PrintContentCache()
        self._lock = threading.Lock()

    @classmethod
    def for_directory(
        cls,
        build_dir: Path,
        *,
        stylesheets: cabc.Sequence[str] = ("./styles/print.css",),
        output_dir: Path | None = None,
        open_browser: bool = False,
    ) -> PrintController:
        """Return a controller reading pages from ``build_dir``."""
        return cls(
            ContentAggregator(DirectoryPageSource(build_dir)),
            IsolatedRenderer(stylesheets),
            FilePrinter(output_dir or build_dir, open_browser=open_browser),
        )

    def load(self, selection: PrintSelection) -> str:
        """Return print content for ``selection``, fetching only on a cache miss."""
        with self._lock:
            cached = self.cache.lookup(selection)
            if cached is not None:
                logger.debug("Reusing loaded print content for %s", selection.label)
                return cached
            html = self.aggregator.aggregate(selection)
            self.cache.store(selection, html)
            return html

    def print_selection(self, selection: PrintSelection) -> Path | None:
        """Render ``selection`` in an isolated document and send it to print.

        Returns the printer's result, or ``None`` when aggregation failed.
        """
        try:
            content = self.load(selection)
        except PrintAggregationError as exc:
            logger.error(
                "Could not collect print content for %s: %s", selection.label, exc
            )
            return None
        document = self.renderer.render(
            content,
            title=selection.label,
            base_href=self.aggregator.source.base_href,
        )
        return self.printer.print_document(document, label=selection.label)

    def print_current(self, slug: str) -> Path | None:
        """Print page ``slug`` as-is, hiding its aggregate print container."""
        path = f"./{PAGE_FILENAME_TEMPLATE.format(slug=slug)}"
        try:
            html = self.aggregator.source.read(path)
        except PrintAggregationError as exc:
            logger.error("Could not load page %s for printing: %s", slug, exc)
            return None
        soup = BeautifulSoup(html, "html.parser")
        main = soup.select_one(MAIN_SELECTOR)
        if main is not None:
            main["class"] = [c for c in main.get("class") or [] if c != NO_PRINT_CLASS]
        container = soup.select_one(PRINT_CONTAINER_SELECTOR)
        if container is not None:
            classes = list(container.get("class") or [])
            if NO_PRINT_CLASS not in classes:
                classes.append(NO_PRINT_CLASS)
            container["class"] = classes
        if soup.head is not None and soup.head.find("base") is None:
            base = soup.new_tag("base", href=self.aggregator.source.base_href)
            soup.head.insert(0, base)
        return self.printer.print_document(str(soup), label=slug)


__all__ = [
    "ContentAggregator",
    "DirectoryPageSource",
    "FilePrinter",
    "HttpPageSource",
    "IsolatedRenderer",
    "PageSource",
    "PrintAggregationError",
    "PrintContentCache",
    "PrintController",
    "PrintSelection",
    "Printer",
    "SelectionKind",
    "extract_main",
]
