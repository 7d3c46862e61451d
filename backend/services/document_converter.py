"""Upload conversion service: stores uploads and the PDFs made from them."""
import logging
import re
import uuid
from pathlib import Path
from typing import Optional

from config import CONVERT_WORK_DIR, MAX_UPLOAD_SIZE, SUPPORTED_EXTENSIONS
from models.layout import PageGeometry
from services.pdf_tools import (
    IMAGE_EXTENSIONS, PdfToolError, UnsupportedFileError, image_to_pdf, placeholder_pdf,
)
from services.pdf_writer import text_to_pdf

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {"txt", "html", "rtf"}
FILE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class FileTooLargeError(PdfToolError):
    """Raised when an upload exceeds the size limit."""


def file_extension(filename: str) -> str:
    """Lower-cased text after the last dot, or an empty string."""
    if "." not in (filename or ""):
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class DocumentConverter:
    """Converts uploaded images, text files and word-processor documents to PDF."""

    def __init__(
        self,
        work_dir: str = CONVERT_WORK_DIR,
        max_file_size: int = MAX_UPLOAD_SIZE,
        geometry: Optional[PageGeometry] = None
    ):
        """
        Initialize DocumentConverter.

        Args:
            work_dir: Directory holding uploads and converted PDFs
            max_file_size: Largest accepted upload in bytes
            geometry: Page geometry for text conversions (configured default if None)
        """
        self.work_dir = Path(work_dir)
        self.max_file_size = max_file_size
        self.geometry = geometry
        self.work_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"DocumentConverter using work directory {self.work_dir}")

    def check_size(self, size: Optional[int]):
        """Raise FileTooLargeError if an upload of this many bytes is over the limit."""
        if size is not None and size > self.max_file_size:
            raise FileTooLargeError(
                f"File size exceeds the {self.max_file_size // (1024 * 1024)}MB limit"
            )

    def convert(self, filename: str, data: bytes) -> str:
        """
        Convert an upload to PDF and store it.

        Args:
            filename: Original upload name
            data: Upload contents

        Returns:
            File id for get_pdf_path

        Raises:
            FileTooLargeError: If the upload exceeds max_file_size
            UnsupportedFileError: If the extension is not supported
            PdfToolError: If an image cannot be decoded
        """
        self.check_size(len(data))

        extension = file_extension(filename)
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileError(f"File type .{extension} is not supported")

        file_id = uuid.uuid4().hex
        input_path = self.work_dir / f"{file_id}.{extension}"
        output_path = self.work_dir / f"{file_id}.pdf"

        if extension in IMAGE_EXTENSIONS:
            pdf_bytes = image_to_pdf(data, extension)
        elif extension in TEXT_EXTENSIONS:
            text = data.decode("utf-8", errors="replace")
            pdf_bytes = text_to_pdf(text, filename, self.geometry)
        else:
            pdf_bytes = placeholder_pdf(filename)

        input_path.write_bytes(data)
        output_path.write_bytes(pdf_bytes)
        logger.info(f"Converted {filename} ({len(data)} bytes) to {output_path.name}")
        return file_id

    def get_pdf_path(self, file_id: str) -> Path:
        """
        Locate a converted PDF.

        Raises:
            FileNotFoundError: If the id is malformed or nothing was converted under it
        """
        if not FILE_ID_PATTERN.match(file_id or ""):
            raise FileNotFoundError(f"Unknown file id: {file_id}")

        pdf_path = self.work_dir / f"{file_id}.pdf"
        if not pdf_path.exists():
            raise FileNotFoundError(f"Unknown file id: {file_id}")

        return pdf_path
