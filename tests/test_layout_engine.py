"""Unit tests for the paginated text layout engine."""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
from models.layout import (
    PageGeometry, Paragraph, LayoutCursor, ConfigurationError,
    TITLE, HEADING, BODY, FOOTER, REGULAR, BOLD, GRAY,
)
from services.layout_engine import (
    layout, wrap_words, split_paragraphs, derive_title, default_geometry,
)
from services.text_metrics import text_width


def monospace(text, font, size):
    """Six points per character regardless of face and size."""
    return len(text) * 6


def body_words(count):
    # No period keeps the width arithmetic simple; length >= 80 keeps it a body paragraph
    return " ".join(["word"] * count)


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. Duis aute irure "
    "dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur."
)


class TestHeadingClassification:
    """Test suite for the syntactic heading predicate."""

    def test_colon_terminated_is_heading(self):
        assert Paragraph("Introduction:").is_heading is True

    def test_sentence_with_period_is_not_heading(self):
        assert Paragraph("This is a normal sentence with a period.").is_heading is False

    def test_uppercase_without_period_is_heading(self):
        assert Paragraph("SUMMARY").is_heading is True

    def test_uppercase_with_period_is_heading(self):
        assert Paragraph("SEE SECTION 2.1").is_heading is True

    def test_long_colon_terminated_is_not_heading(self):
        paragraph = Paragraph("x" * 119 + ":")
        assert len(paragraph.text) == 120
        assert paragraph.is_heading is False

    def test_short_sentence_ending_in_colon_is_heading(self):
        """Prose that ends with a colon is still classified as a heading."""
        assert Paragraph("Please note the following items.:").is_heading is True

    def test_length_uses_trimmed_text(self):
        padded = "   " + "Quarterly results" + " " * 100
        assert Paragraph(padded).is_heading is True


class TestParagraphSplitting:
    """Test suite for blank-line paragraph splitting."""

    def test_splits_on_blank_lines(self):
        paragraphs = split_paragraphs("First one.\n\nSecond one.\n\n\nThird one.")
        assert [p.text for p in paragraphs] == ["First one.", "Second one.", "Third one."]

    def test_whitespace_only_lines_count_as_blank(self):
        paragraphs = split_paragraphs("a b c\n   \t \nd e f")
        assert [p.text for p in paragraphs] == ["a b c", "d e f"]

    def test_single_newline_does_not_split(self):
        paragraphs = split_paragraphs("line one\nline two")
        assert len(paragraphs) == 1
        assert paragraphs[0].words == ["line", "one", "line", "two"]

    def test_blank_paragraphs_dropped(self):
        assert split_paragraphs("\n\n   \n\n") == []
        assert split_paragraphs("") == []


class TestTitle:
    """Test suite for title derivation."""

    def test_strips_extension(self):
        assert derive_title("report.txt") == "report"

    def test_strips_only_last_extension(self):
        assert derive_title("archive.tar.gz") == "archive.tar"

    def test_strips_directories(self):
        assert derive_title("/tmp/uploads/notes.md") == "notes"
        assert derive_title("C:\\docs\\memo.txt") == "memo"

    def test_without_extension(self):
        assert derive_title("README") == "README"

    def test_empty_falls_back(self):
        assert derive_title("") == "Document"


class TestWordWrap:
    """Test suite for greedy word wrapping."""

    def test_fills_lines_greedily(self):
        # 17 * "word" + 16 spaces = 84 chars = 504pt; one more word is 534pt
        lines = wrap_words(["word"] * 20, REGULAR, 12, 512, monospace)
        assert len(lines) == 2
        assert lines[0] == body_words(17)
        assert lines[1] == body_words(3)

    def test_overlong_word_gets_own_line(self):
        long_word = "x" * 100
        lines = wrap_words(["short", long_word, "tail"], REGULAR, 12, 512, monospace)
        assert lines == ["short", long_word, "tail"]

    def test_overlong_first_word_has_no_empty_line_before_it(self):
        long_word = "y" * 100
        lines = wrap_words([long_word, "next"], REGULAR, 12, 512, monospace)
        assert lines == [long_word, "next"]

    def test_no_words(self):
        assert wrap_words([], REGULAR, 12, 512, monospace) == []

    def test_line_of_exact_width_fits(self):
        lines = wrap_words(["ab", "cd"], REGULAR, 12, 30, monospace)
        assert lines == ["ab cd"]


class TestGeometry:
    """Test suite for page geometry validation."""

    def test_defaults(self):
        geometry = PageGeometry()
        assert geometry.page_width == 612
        assert geometry.page_height == 792
        assert geometry.margin == 50
        assert geometry.font_size == 12
        assert geometry.heading_font_size == pytest.approx(14.4)
        assert geometry.title_font_size == 18
        assert geometry.line_height == 18
        assert geometry.max_line_width == 512

    def test_configured_default_matches(self):
        assert default_geometry() == PageGeometry()

    @pytest.mark.parametrize("overrides", [
        {"page_width": 0},
        {"page_height": -792},
        {"margin": 0},
        {"margin": 306},
        {"page_height": 100, "margin": 60},
        {"font_size": 0},
        {"line_height_factor": -1},
    ])
    def test_invalid_geometry_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            layout("Some text.", "doc.txt", PageGeometry(**overrides))

    def test_validation_happens_before_layout(self):
        def exploding_measure(text, font, size):
            raise AssertionError("measure should not be called")

        with pytest.raises(ConfigurationError):
            layout("Some text here.", "doc.txt", PageGeometry(margin=-5), exploding_measure)


class TestLayoutCursor:
    """Test suite for the layout cursor value."""

    def test_advance_returns_new_cursor(self):
        cursor = LayoutCursor(page_index=2, y=100)
        moved = cursor.advance(18)
        assert moved == LayoutCursor(page_index=2, y=82)
        assert cursor.y == 100


class TestLayout:
    """Test suite for the full layout pass."""

    def test_empty_input_yields_title_only_page(self):
        pages = layout("", "report.txt", PageGeometry())

        assert len(pages) == 1
        page = pages[0]
        assert page.title.text == "report"
        assert page.lines == []
        assert page.footer.text == "Page 1 of 1"

    def test_whitespace_input_yields_title_only_page(self):
        pages = layout("  \n\n \t \n", "notes.txt", PageGeometry(), monospace)
        assert len(pages) == 1
        assert pages[0].lines == []

    def test_title_placement(self):
        pages = layout("Hello there.", "greeting.txt", PageGeometry(), monospace)
        title = pages[0].title

        assert title.kind == TITLE
        assert title.x == 50
        assert title.y == 792 - 50 - 18
        assert title.font == BOLD
        assert title.size == 18

    def test_first_line_below_title(self):
        pages = layout("Hello there.", "greeting.txt", PageGeometry(), monospace)
        line = pages[0].lines[0]

        assert line.y == 792 - 50 - 18 - 27
        assert line.kind == BODY
        assert line.font == REGULAR
        assert line.size == 12

    def test_heading_runs_are_bold_and_larger(self):
        pages = layout("Overview:\n\nThe body text follows here.", "doc.txt", PageGeometry(), monospace)
        heading, body = pages[0].lines

        assert heading.kind == HEADING
        assert heading.font == BOLD
        assert heading.size == pytest.approx(14.4)
        assert body.kind == BODY

    def test_fixed_line_pitch_and_paragraph_gap(self):
        text = "\n\n".join([body_words(20), "Next paragraph is here."])
        pages = layout(text, "doc.txt", PageGeometry(), monospace)
        first, second, third = pages[0].lines

        # Two lines of one paragraph are one line height apart
        assert first.y - second.y == 18
        # Next paragraph adds one font size of spacing
        assert second.y - third.y == 18 + 12

    def test_headings_use_body_line_height(self):
        pages = layout("ONE\n\nTWO", "doc.txt", PageGeometry(), monospace)
        first, second = pages[0].lines
        assert first.size == pytest.approx(14.4)
        assert first.y - second.y == 18 + 12

    def test_pagination_overflow(self):
        # 50 lines of 17 words: 36 fit under the title, the rest continue on page 2
        text = body_words(17 * 50)
        pages = layout(text, "long.txt", PageGeometry(page_height=792, margin=50, font_size=12), monospace)

        assert len(pages) == 2
        assert len(pages[0].lines) == 36
        assert len(pages[1].lines) == 14
        assert pages[0].footer.text == "Page 1 of 2"
        assert pages[1].footer.text == "Page 2 of 2"

        # The paragraph resumes at the top of page 2
        assert pages[1].lines[0].y == 792 - 50 - 12
        assert pages[1].title is None

    def test_lines_never_placed_below_margin(self):
        text = "\n\n".join(body_words(17 * 9) for _ in range(20))
        pages = layout(text, "many.txt", PageGeometry(), monospace)

        assert len(pages) > 2
        for page in pages:
            for line in page.lines:
                assert line.y >= 50

    def test_no_trailing_empty_page(self):
        # Exactly fills page 1: the 36th line lands at y=67 and the cursor ends below the margin
        pages = layout(body_words(17 * 36), "full.txt", PageGeometry(), monospace)
        assert len(pages) == 1

    def test_footers_report_accurate_total(self):
        text = "\n\n".join(body_words(17 * 30) for _ in range(5))
        pages = layout(text, "doc.txt", PageGeometry(), monospace)
        total = len(pages)

        for index, page in enumerate(pages):
            footer = page.footer
            assert footer.kind == FOOTER
            assert footer.text == f"Page {index + 1} of {total}"
            assert footer.x == 50
            assert footer.y == 25
            assert footer.size == 10
            assert footer.color == GRAY
            assert page.number == index + 1

    def test_footer_is_last_run_on_each_page(self):
        pages = layout(body_words(17 * 50), "doc.txt", PageGeometry(), monospace)
        for page in pages:
            assert page.runs[-1].kind == FOOTER

    def test_word_preservation_with_helvetica_metrics(self):
        text = "\n\n".join([
            "Chapter One:",
            LOREM,
            "KEY FINDINGS",
            LOREM * 3,
            "Closing remarks follow. " * 40,
        ])
        pages = layout(text, "essay.txt")

        produced = [word for page in pages for line in page.lines for word in line.text.split()]
        assert produced == text.split()

    def test_line_width_bound_with_helvetica_metrics(self):
        geometry = PageGeometry()
        text = "\n\n".join([LOREM * 4, "Summary:", LOREM])
        pages = layout(text, "essay.txt", geometry)

        for page in pages:
            for line in page.lines:
                if len(line.text.split()) > 1:
                    assert text_width(line.text, line.font, line.size) <= geometry.max_line_width

    def test_overlong_word_is_kept_whole(self):
        long_word = "Pneumonoultramicroscopicsilicovolcanoconiosis" * 4
        pages = layout(f"Before it. {long_word} after it.", "doc.txt")
        texts = [line.text for line in pages[0].lines]

        assert long_word in texts
        assert "" not in texts

    def test_layout_is_deterministic(self):
        text = "\n\n".join(["Intro:", LOREM * 6, "END"])
        assert layout(text, "same.txt") == layout(text, "same.txt")

    def test_calls_do_not_share_pages(self):
        first = layout("Alpha beta gamma.", "one.txt")
        second = layout("Delta epsilon.", "two.txt")

        assert first[0] is not second[0]
        assert first[0].title.text == "one"
        assert second[0].title.text == "two"
        assert len(first[0].runs) == 3
