"""Featured-image metadata lookup and variant downloads."""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from pathlib import Path

import requests

from .content import RemoteFetchError, WordPressClient

logger = logging.getLogger(__name__)

MEDIA_FIELDS = ("id", "slug", "alt_text", "media_details", "source_url", "mime_type")
EXTENSION_PATTERN = re.compile(r"\.(png|jpg|jpeg|gif|webp)$", re.IGNORECASE)
DEFAULT_EXTENSION = ".png"
FULL_SIZE_LABEL = "full"
_UNSAFE_SLUG_CHARS = re.compile(r"[^a-z0-9_-]+")


@dc.dataclass(slots=True, frozen=True)
class Variant:
    """One resampled rendition of a media asset.

    Attributes
    ----------
    url : str
        Remote source URL.
    filename : str
        Target filename: size label plus an extension inferred from ``url``.
    size : str
        WordPress size label (``thumbnail``, ``medium_large``, ``full``...).
    width, height : int | None
        Pixel dimensions when WordPress reports them.
    local_path : Path | None
        Where the bytes were written, once downloaded.
    """

    url: str
    filename: str
    size: str
    width: int | None = None
    height: int | None = None
    local_path: Path | None = None

    @property
    def has_dimensions(self) -> bool:
        """Return True when both width and height are known."""
        return bool(self.width and self.height)


@dc.dataclass(slots=True, frozen=True)
class MediaAsset:
    """A featured image and its variants."""

    id: int | None
    slug: str
    alt_text: str = ""
    mime_type: str | None = None
    variants: tuple[Variant, ...] = ()


def file_extension(url: str) -> str:
    """Return the lower-cased image extension of ``url`` or ``DEFAULT_EXTENSION``.

    Examples
    --------
    >>> file_extension("https://cms.example/uploads/cat-300x200.JPG")
    '.jpg'
    >>> file_extension("https://cms.example/uploads/cat.svg")
    '.png'
    """
    match = EXTENSION_PATTERN.search(url)
    return f".{match.group(1).lower()}" if match else DEFAULT_EXTENSION


def safe_folder_name(slug: str, fallback: str) -> str:
    """Return ``slug`` reduced to characters safe for a folder name."""
    cleaned = _UNSAFE_SLUG_CHARS.sub("-", slug.lower()).strip("-.")
    return cleaned or fallback


def _dimension(value: object) -> int | None:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number or None


def build_variants(payload: typ.Mapping[str, typ.Any]) -> tuple[Variant, ...]:
    """Return the download list for a media payload.

    The ``full`` variant comes first, built from the top-level ``source_url``
    and the ``media_details`` dimensions; every entry of
    ``media_details.sizes`` follows in payload order.
    """
    details = payload.get("media_details")
    if not isinstance(details, dict):
        details = {}
    variants: list[Variant] = []
    source_url = payload.get("source_url")
    if source_url and isinstance(source_url, str):
        variants.append(
            Variant(
                url=source_url,
                filename=f"{FULL_SIZE_LABEL}{file_extension(source_url)}",
                size=FULL_SIZE_LABEL,
                width=_dimension(details.get("width")),
                height=_dimension(details.get("height")),
            )
        )
    sizes = details.get("sizes")
    if not isinstance(sizes, dict):
        sizes = {}
    for label, size in sizes.items():
        url = size.get("source_url") if isinstance(size, dict) else None
        if not url or not isinstance(url, str):
            continue
        variants.append(
            Variant(
                url=url,
                filename=f"{label}{file_extension(url)}",
                size=label,
                width=_dimension(size.get("width")),
                height=_dimension(size.get("height")),
            )
        )
    return tuple(variants)


class MediaDownloader:
    """Resolve featured media through the API and re-host its variants."""

    def __init__(self, client: WordPressClient) -> None:
        self.client = client

    def fetch_asset(self, media_id: int) -> MediaAsset:
        """Return the MediaAsset described by ``/media/<media_id>``.

        Raises
        ------
        RemoteFetchError
            If the metadata request fails or returns something other than a
            JSON object.
        """
        endpoint = f"media/{media_id}"
        payload = self.client.get_json(
            endpoint, params={"_fields": ",".join(MEDIA_FIELDS)}
        )
        if not isinstance(payload, dict):
            raise RemoteFetchError(endpoint, None, "expected a JSON object")
        return MediaAsset(
            id=payload.get("id", media_id),
            slug=safe_folder_name(str(payload.get("slug") or ""), f"media-{media_id}"),
            alt_text=str(payload.get("alt_text") or ""),
            mime_type=payload.get("mime_type"),
            variants=build_variants(payload),
        )

    def download(self, asset: MediaAsset, media_root: Path) -> MediaAsset:
        """Write every variant of ``asset`` below ``media_root/<slug>``.

        A variant that fails to download or write is logged and skipped; the
        returned asset records ``local_path`` for the variants that landed.
        """
        folder = media_root / asset.slug
        folder.mkdir(parents=True, exist_ok=True)
        session = self.client.session
        variants: list[Variant] = []
        for variant in asset.variants:
            destination = folder / variant.filename
            try:
                resp = session.get(variant.url, timeout=self.client.timeout)
                resp.raise_for_status()
                destination.write_bytes(resp.content)
            except (requests.RequestException, OSError) as exc:
                logger.warning("Failed to download %s: %s", variant.url, exc)
                variants.append(variant)
                continue
            logger.info("Downloaded %s/%s", asset.slug, variant.filename)
            variants.append(dc.replace(variant, local_path=destination))
        return dc.replace(asset, variants=tuple(variants))

    def collect(self, media_id: int, media_root: Path) -> MediaAsset:
        """Fetch metadata for ``media_id`` and download all of its variants."""
        asset = self.fetch_asset(media_id)
        logger.debug(
            "Media %s sizes: %s",
            asset.slug,
            ", ".join(f"{v.size}: {v.width}x{v.height}" for v in asset.variants),
        )
        return self.download(asset, media_root)


__all__ = [
    "DEFAULT_EXTENSION",
    "MediaAsset",
    "MediaDownloader",
    "Variant",
    "build_variants",
    "file_extension",
    "safe_folder_name",
]
