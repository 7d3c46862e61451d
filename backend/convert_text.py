"""
Text-to-PDF conversion script.

Lays out a local text file with the page layout engine and writes the PDF.

Usage:
    python convert_text.py notes.txt
    python convert_text.py notes.txt -o build/notes.pdf
"""
import argparse
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from models.layout import ConfigurationError
from services.pdf_writer import text_to_pdf

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Convert one text file; returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Convert a plain text file to a paginated PDF"
    )
    parser.add_argument("input", help="Path to the text file")
    parser.add_argument(
        "-o", "--output",
        help="Output PDF path (default: input path with a .pdf extension)"
    )
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_suffix(".pdf")

    try:
        text = input_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error(f"Could not read {input_path}: {e}")
        return 1

    try:
        pdf_bytes = text_to_pdf(text, input_path.name)
    except ConfigurationError as e:
        logger.error(f"Invalid page geometry: {e}")
        return 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(pdf_bytes)
    logger.info(f"Wrote {output_path} ({len(pdf_bytes)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
