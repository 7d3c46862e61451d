"""Page layout data models."""
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

# Run kinds
TITLE = "title"
HEADING = "heading"
BODY = "body"
FOOTER = "footer"

# Font faces
REGULAR = "regular"
BOLD = "bold"

BLACK = (0.0, 0.0, 0.0)
GRAY = (0.5, 0.5, 0.5)

HEADING_MAX_LENGTH = 80


class ConfigurationError(ValueError):
    """Raised when page geometry leaves no usable area."""


@dataclass(frozen=True)
class PageGeometry:
    """Page size, margins and type sizes in layout units (points)."""
    page_width: float = 612
    page_height: float = 792
    margin: float = 50
    font_size: float = 12
    heading_font_size: float = 12 * 1.2
    title_font_size: float = 18
    line_height_factor: float = 1.5
    footer_font_size: float = 10

    @property
    def max_line_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def line_height(self) -> float:
        return self.font_size * self.line_height_factor

    def validate(self) -> None:
        """
        Check that the geometry describes a usable page.

        Raises:
            ConfigurationError: If a dimension is non-positive or the margins
                consume the whole page
        """
        for name in ("page_width", "page_height", "margin"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")

        if self.margin >= self.page_width / 2 or self.margin >= self.page_height / 2:
            raise ConfigurationError(
                f"margin {self.margin} leaves no usable area on a "
                f"{self.page_width}x{self.page_height} page"
            )

        for name in ("font_size", "heading_font_size", "title_font_size",
                     "line_height_factor", "footer_font_size"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")


@dataclass(frozen=True)
class Paragraph:
    """A run of text with no internal blank line."""
    text: str

    @property
    def is_heading(self) -> bool:
        # Purely syntactic; short lines ending in ':' count even when they are prose.
        return len(self.text.strip()) < HEADING_MAX_LENGTH and (
            self.text.endswith(":")
            or "." not in self.text
            or self.text.upper() == self.text
        )

    @property
    def words(self) -> List[str]:
        return self.text.split()


@dataclass(frozen=True)
class Document:
    """Title plus the non-blank paragraphs of a text file."""
    title: str
    paragraphs: Tuple[Paragraph, ...]


@dataclass(frozen=True)
class TextRun:
    """A positioned piece of text; y is the baseline measured from the page bottom."""
    kind: str
    text: str
    x: float
    y: float
    font: str
    size: float
    color: Tuple[float, float, float] = BLACK


@dataclass
class Page:
    """Represents a single laid-out page."""
    number: int
    width: float
    height: float
    runs: List[TextRun] = field(default_factory=list)

    @property
    def title(self) -> Optional[TextRun]:
        return next((run for run in self.runs if run.kind == TITLE), None)

    @property
    def lines(self) -> List[TextRun]:
        """Heading and body lines in reading order."""
        return [run for run in self.runs if run.kind in (HEADING, BODY)]

    @property
    def footer(self) -> Optional[TextRun]:
        return next((run for run in self.runs if run.kind == FOOTER), None)


@dataclass(frozen=True)
class LayoutCursor:
    """Position of the next line during a layout pass."""
    page_index: int
    y: float

    def advance(self, distance: float) -> "LayoutCursor":
        return replace(self, y=self.y - distance)
