"""Utilities for assembling CMS content into static HTML pages."""

from .images import ResponsiveImageRenderer
from .models import AssignmentCard, BuildReport, PageResult, PageStatus, RenderedPage
from .page_assembler import PageAssembler
from .site_builder import SiteBuilder
from .text import ContentUrlRewriter, decode_entities

__all__ = [
    "AssignmentCard",
    "BuildReport",
    "ContentUrlRewriter",
    "PageAssembler",
    "PageResult",
    "PageStatus",
    "RenderedPage",
    "ResponsiveImageRenderer",
    "SiteBuilder",
    "decode_entities",
]
