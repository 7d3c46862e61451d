"""Text width measurement with the base-14 Helvetica faces."""
import fitz  # PyMuPDF

from models.layout import REGULAR, BOLD

# PyMuPDF names for the built-in Helvetica faces
FONT_NAMES = {
    REGULAR: "helv",
    BOLD: "hebo",
}


def text_width(text: str, font: str, size: float) -> float:
    """
    Measure the rendered width of a single line of text.

    Args:
        text: Line content
        font: Face key (REGULAR or BOLD)
        size: Font size in points

    Returns:
        Width in points
    """
    return fitz.get_text_length(text, fontname=FONT_NAMES[font], fontsize=size)
