"""PDF serialization of laid-out pages."""
import logging
from typing import List, Optional
import fitz  # PyMuPDF

from models.layout import Page, PageGeometry
from services.layout_engine import layout
from services.text_metrics import FONT_NAMES

logger = logging.getLogger(__name__)

PRODUCER = "Stapler"


def render_pdf(pages: List[Page], title: Optional[str] = None) -> bytes:
    """
    Write each page's runs to one PDF page.

    Args:
        pages: Pages from the layout engine
        title: Document title for the PDF metadata (defaults to the page-1 title)

    Returns:
        PDF file contents
    """
    if title is None and pages and pages[0].title:
        title = pages[0].title.text

    pdf_document = fitz.open()
    try:
        for page in pages:
            pdf_page = pdf_document.new_page(width=page.width, height=page.height)

            for run in page.runs:
                # Layout y is from the bottom edge; PyMuPDF measures from the top
                pdf_page.insert_text(
                    fitz.Point(run.x, page.height - run.y),
                    run.text,
                    fontsize=run.size,
                    fontname=FONT_NAMES[run.font],
                    color=run.color
                )

        pdf_document.set_metadata({
            "title": title or "",
            "producer": PRODUCER,
            "creator": PRODUCER,
        })
        data = pdf_document.tobytes(garbage=3, deflate=True)
    finally:
        pdf_document.close()

    logger.info(f"Rendered PDF: {len(pages)} pages, {len(data)} bytes")
    return data


def text_to_pdf(text: str, filename: str, geometry: Optional[PageGeometry] = None) -> bytes:
    """Lay out text and render it as a PDF."""
    return render_pdf(layout(text, filename, geometry))
