"""
Paginated text layout engine.

Turns plain text into letter-size pages of left-aligned, word-wrapped lines.
The pass is streaming: lines are placed one at a time and a new page is
started only when the cursor has dropped below the bottom margin, so a
paragraph may continue on the next page. Footers ("Page i of N") are
stamped in a separate pass once the page count is known.
"""
import logging
import re
from typing import Callable, Iterable, List, Optional

from models.layout import (
    PageGeometry, Paragraph, Document, TextRun, Page, LayoutCursor,
    TITLE, HEADING, BODY, FOOTER, REGULAR, BOLD, BLACK, GRAY,
)
from services.text_metrics import text_width
from config import (
    PAGE_WIDTH, PAGE_HEIGHT, PAGE_MARGIN, FONT_SIZE, TITLE_FONT_SIZE,
    FOOTER_FONT_SIZE, LINE_HEIGHT_FACTOR,
)

logger = logging.getLogger(__name__)

# (text, font, size) -> width in points
Measure = Callable[[str, str, float], float]

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
EXTENSION = re.compile(r"\.\w+$")
DEFAULT_TITLE = "Document"


def default_geometry() -> PageGeometry:
    """Page geometry built from the configured defaults."""
    return PageGeometry(
        page_width=PAGE_WIDTH,
        page_height=PAGE_HEIGHT,
        margin=PAGE_MARGIN,
        font_size=FONT_SIZE,
        heading_font_size=FONT_SIZE * 1.2,
        title_font_size=TITLE_FONT_SIZE,
        line_height_factor=LINE_HEIGHT_FACTOR,
        footer_font_size=FOOTER_FONT_SIZE,
    )


def derive_title(filename: str) -> str:
    """Strip directories and one trailing extension from a filename."""
    basename = re.split(r"[\\/]", filename or "")[-1]
    return EXTENSION.sub("", basename) or DEFAULT_TITLE


def split_paragraphs(text: str) -> List[Paragraph]:
    """Split text on blank lines, dropping paragraphs that are only whitespace."""
    return [Paragraph(chunk) for chunk in PARAGRAPH_BREAK.split(text or "") if chunk.strip()]


def build_document(text: str, filename_for_title: str) -> Document:
    return Document(
        title=derive_title(filename_for_title),
        paragraphs=tuple(split_paragraphs(text)),
    )


def wrap_words(
    words: Iterable[str],
    font: str,
    size: float,
    max_width: float,
    measure: Measure = text_width
) -> List[str]:
    """
    Greedily pack words into lines no wider than max_width.

    A word that is wider than max_width on its own gets a line to itself;
    words are never split.

    Args:
        words: Words in reading order
        font: Face key used for measuring
        size: Font size used for measuring
        max_width: Usable line width in points
        measure: Width function

    Returns:
        Lines of space-joined words
    """
    lines: List[str] = []
    current = ""

    for word in words:
        candidate = f"{current} {word}" if current else word
        if not current or measure(candidate, font, size) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word

    if current:
        lines.append(current)

    return lines


def layout(
    text: str,
    filename_for_title: str,
    geometry: Optional[PageGeometry] = None,
    measure: Optional[Measure] = None
) -> List[Page]:
    """
    Lay out a text document as a sequence of pages.

    Args:
        text: Raw text content, possibly empty
        filename_for_title: Original filename; its stem becomes the page-1 title
        geometry: Page geometry (defaults to letter size, 50pt margins)
        measure: Width function (defaults to Helvetica metrics)

    Returns:
        Pages in order, each with its title/heading/body/footer runs

    Raises:
        ConfigurationError: If the geometry leaves no usable area
    """
    geometry = geometry or default_geometry()
    geometry.validate()
    measure = measure or text_width

    document = build_document(text, filename_for_title)

    pages = [_new_page(geometry, 1)]
    cursor = LayoutCursor(
        page_index=0,
        y=geometry.page_height - geometry.margin - geometry.title_font_size
    )

    pages[0].runs.append(TextRun(
        kind=TITLE,
        text=document.title,
        x=geometry.margin,
        y=cursor.y,
        font=BOLD,
        size=geometry.title_font_size,
        color=BLACK
    ))
    cursor = cursor.advance(geometry.title_font_size * 1.5)

    for paragraph in document.paragraphs:
        if paragraph.is_heading:
            kind, font, size = HEADING, BOLD, geometry.heading_font_size
        else:
            kind, font, size = BODY, REGULAR, geometry.font_size

        lines = wrap_words(paragraph.words, font, size, geometry.max_line_width, measure)

        for line in lines:
            if cursor.y < geometry.margin:
                pages.append(_new_page(geometry, len(pages) + 1))
                cursor = LayoutCursor(
                    page_index=len(pages) - 1,
                    y=geometry.page_height - geometry.margin - geometry.font_size
                )

            pages[cursor.page_index].runs.append(TextRun(
                kind=kind,
                text=line,
                x=geometry.margin,
                y=cursor.y,
                font=font,
                size=size,
                color=BLACK
            ))
            # Fixed pitch from the body size, headings included
            cursor = cursor.advance(geometry.line_height)

        cursor = cursor.advance(geometry.font_size)

    stamp_footers(pages, geometry)

    logger.debug(
        f"Laid out '{document.title}': {len(document.paragraphs)} paragraphs, "
        f"{len(pages)} pages"
    )
    return pages


def stamp_footers(pages: List[Page], geometry: PageGeometry) -> None:
    """Add a "Page i of N" footer to every page."""
    total = len(pages)
    for index, page in enumerate(pages):
        page.runs.append(TextRun(
            kind=FOOTER,
            text=f"Page {index + 1} of {total}",
            x=geometry.margin,
            y=geometry.margin / 2,
            font=REGULAR,
            size=geometry.footer_font_size,
            color=GRAY
        ))


def _new_page(geometry: PageGeometry, number: int) -> Page:
    return Page(number=number, width=geometry.page_width, height=geometry.page_height)
