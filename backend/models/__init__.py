"""Data models for the Stapler document service."""
from .layout import (
    PageGeometry,
    Paragraph,
    Document,
    TextRun,
    Page,
    LayoutCursor,
    ConfigurationError,
)
from .api import (
    ConvertResponse,
    LayoutRequest,
    LayoutResponse,
    FormatRequest,
    FormatResponse,
)

__all__ = [
    "PageGeometry",
    "Paragraph",
    "Document",
    "TextRun",
    "Page",
    "LayoutCursor",
    "ConfigurationError",
    "ConvertResponse",
    "LayoutRequest",
    "LayoutResponse",
    "FormatRequest",
    "FormatResponse",
]
