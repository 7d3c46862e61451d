"""Image-to-PDF, photo album, merge and placeholder PDF utilities."""
import logging
from datetime import date
from typing import List, Tuple
import fitz  # PyMuPDF

from config import PAGE_WIDTH, PAGE_HEIGHT, IMAGE_MARGIN, PHOTO_MARGIN, PAGE_MARGIN

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png"}


class PdfToolError(Exception):
    """Raised when an input cannot be turned into PDF pages."""


class UnsupportedFileError(PdfToolError):
    """Raised for file types the converter does not handle."""


def image_size(data: bytes) -> Tuple[int, int]:
    """
    Read the pixel dimensions of an encoded image.

    Raises:
        PdfToolError: If the bytes are not a decodable image
    """
    try:
        pixmap = fitz.Pixmap(data)
    except Exception as e:
        raise PdfToolError(f"Could not decode image: {e}") from e
    return pixmap.width, pixmap.height


def fit_rect(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    margin: float
) -> fitz.Rect:
    """
    Scale an image to fill the area inside the margins and center it.

    The scale factor may exceed 1, so small images are enlarged.
    """
    scale = min(
        (page_width - margin * 2) / image_width,
        (page_height - margin * 2) / image_height
    )
    width = image_width * scale
    height = image_height * scale
    x = (page_width - width) / 2
    y = (page_height - height) / 2
    return fitz.Rect(x, y, x + width, y + height)


def image_to_pdf(data: bytes, extension: str) -> bytes:
    """
    Place a single JPEG or PNG image on a letter page.

    Args:
        data: Encoded image
        extension: File extension without the dot

    Returns:
        PDF file contents

    Raises:
        UnsupportedFileError: If the extension is not an image type
        PdfToolError: If the image cannot be decoded
    """
    extension = extension.lower()
    if extension not in IMAGE_EXTENSIONS:
        raise UnsupportedFileError(f"Unsupported image format: .{extension}")

    width, height = image_size(data)

    pdf_document = fitz.open()
    try:
        page = pdf_document.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        page.insert_image(
            fit_rect(width, height, PAGE_WIDTH, PAGE_HEIGHT, IMAGE_MARGIN),
            stream=data
        )
        return pdf_document.tobytes(deflate=True)
    finally:
        pdf_document.close()


def photos_to_pdf(images: List[Tuple[str, bytes]]) -> bytes:
    """
    Build a PDF with one photo per letter page.

    Photos that cannot be decoded are logged and skipped.

    Args:
        images: (name, encoded image) pairs in page order

    Returns:
        PDF file contents

    Raises:
        PdfToolError: If no photo could be placed
    """
    pdf_document = fitz.open()
    try:
        for index, (name, data) in enumerate(images, start=1):
            try:
                width, height = image_size(data)
            except PdfToolError as e:
                logger.error(f"Error processing image {index} ({name}): {e}")
                continue

            page = pdf_document.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            page.insert_image(
                fit_rect(width, height, PAGE_WIDTH, PAGE_HEIGHT, PHOTO_MARGIN),
                stream=data
            )
            logger.debug(f"Added image {index} of {len(images)}")

        if pdf_document.page_count == 0:
            raise PdfToolError("None of the photos could be processed")

        logger.info(f"Built photo PDF: {pdf_document.page_count} of {len(images)} photos")
        return pdf_document.tobytes(deflate=True)
    finally:
        pdf_document.close()


def merge_pdfs(files: List[Tuple[str, bytes]]) -> bytes:
    """
    Concatenate every page of each PDF, in the given order.

    Args:
        files: (name, PDF bytes) pairs

    Returns:
        Merged PDF file contents

    Raises:
        PdfToolError: If no files are given or one is not a valid PDF
    """
    if not files:
        raise PdfToolError("At least one PDF file is required")

    merged = fitz.open()
    try:
        for name, data in files:
            try:
                source = fitz.open(stream=data, filetype="pdf")
            except Exception as e:
                logger.error(f"Error processing file {name}: {e}")
                raise PdfToolError(f"Failed to process {name}. Make sure it's a valid PDF.") from e

            with source:
                if source.needs_pass or source.is_encrypted or source.page_count == 0:
                    logger.error(f"Error processing file {name}: encrypted or empty")
                    raise PdfToolError(f"Failed to process {name}. Make sure it's a valid PDF.")
                logger.debug(f"File {name} has {source.page_count} pages")
                try:
                    merged.insert_pdf(source)
                except Exception as e:
                    logger.error(f"Error processing file {name}: {e}")
                    raise PdfToolError(f"Failed to process {name}. Make sure it's a valid PDF.") from e

        logger.info(f"Merged {len(files)} files into {merged.page_count} pages")
        return merged.tobytes(garbage=3, deflate=True)
    finally:
        merged.close()


def placeholder_pdf(filename: str) -> bytes:
    """
    Build the notice page returned for word-processor uploads.

    Args:
        filename: Original upload name, shown on the page

    Returns:
        PDF file contents
    """
    width, height, margin = PAGE_WIDTH, PAGE_HEIGHT, PAGE_MARGIN
    light_gray = (0.7, 0.7, 0.7)

    pdf_document = fitz.open()
    try:
        page = pdf_document.new_page(width=width, height=height)

        # Header band
        page.draw_rect(fitz.Rect(0, 0, width, 120), color=None, fill=(0.95, 0.95, 0.95))
        page.insert_text((margin, 70), "Document Conversion", fontsize=28,
                         fontname="hebo", color=(0.2, 0.2, 0.6))
        page.draw_line((margin, 90), (width - margin, 90), color=light_gray, width=1)

        page.insert_text((margin, 150), f"Original file: {filename}", fontsize=14,
                         fontname="helv", color=(0, 0, 0))

        # Information box
        page.draw_rect(
            fitz.Rect(margin, 170, width - margin, 350),
            color=(0.7, 0.8, 0.9),
            fill=(0.9, 0.95, 1),
            width=1,
            fill_opacity=0.8
        )
        page.insert_text((margin + 10, 180), "Conversion Information", fontsize=16,
                         fontname="hebo", color=(0.2, 0.4, 0.6))

        messages = [
            "This file type requires server-side conversion with specialized libraries.",
            "Upload the document as text, HTML or an image to convert it directly,",
            "or export it to PDF from your word processor.",
            "",
            "A full conversion would preserve:",
            "- Document structure and formatting",
            "- Images and tables",
            "- Headers and footers",
            "- Text styles and fonts",
            "- Page layout and margins",
        ]

        y = 210
        for message in messages:
            if not message:
                y += 15
                continue

            fontname = "heit" if message.startswith("-") else "helv"
            page.insert_text((margin + 15, y), message, fontsize=12,
                             fontname=fontname, color=(0.2, 0.2, 0.2))
            y += 20

        # Footer
        page.draw_line((margin, height - margin - 30), (width - margin, height - margin - 30),
                       color=light_gray, width=1)
        page.insert_text((width / 2, height - margin - 15),
                         f"Stapler | {date.today().isoformat()}",
                         fontsize=10, fontname="helv", color=(0.5, 0.5, 0.5))

        pdf_document.set_metadata({"title": filename, "producer": "Stapler"})
        return pdf_document.tobytes(deflate=True)
    finally:
        pdf_document.close()
