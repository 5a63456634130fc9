"""
PDF report generator - turns an interview evaluation into a one-glance PDF.

The report has, in order:
1. A colored header band (page 1 only)
2. Candidate information box (two key/value columns)
3. Four score cards (overall, technical, communication, confidence)
4. Executive summary box (only when the evaluation has a summary)
5. The detailed question table, one row per result, paginated
6. A footer on every page: date, confidentiality notice, "Page i of N"

Unlike a Platypus story, this layout is positioned by hand: a running
cursor `y` walks down the page and each block knows its own height.
The only mid-document page break happens in the question table.

Rendering is done in two passes over a retained page model:
    layout()  -> ReportDocument with every Page and its draw operations
    footers   -> stamped onto each Page once the page count is known
    to_pdf()  -> paints the pages onto a ReportLab Canvas

Layout coordinates run top-down (y=0 is the top edge); they are flipped
to ReportLab's bottom-up space only while painting.

Truncation is silent: the summary box keeps 4 lines, each question
keeps 2 lines, and card descriptions keep what fits in the card.

Excluded results keep their row but show "-" in every score cell. Their
exclusion_reason is not printed: rows have a fixed height and the
question column already uses both of its lines.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen.canvas import Canvas

from interview_analyzer.services.scoring import (
    NEUTRAL,
    PLACEHOLDER,
    ScoreCard,
    build_score_cards,
    format_score,
    get_results,
    is_excluded,
    severity_color,
)

logger = logging.getLogger(__name__)


# --- Brand Colors ---
BRAND_PRIMARY = "#1a365d"     # Deep navy - header band, table header
BRAND_LIGHT_BG = "#f7fafc"    # Light gray - boxes, alternating rows
BRAND_BORDER = "#e2e8f0"      # Light gray - borders, row separators
TEXT_DARK = "#1a202c"
TEXT_MEDIUM = "#4a5568"
TEXT_LIGHT = NEUTRAL
WHITE = "#ffffff"

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

# --- Page geometry (points) ---
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_X = 50
MARGIN_Y = 60
CONTENT_WIDTH = PAGE_WIDTH - MARGIN_X * 2

HEADER_HEIGHT = 100
INFO_TOP = 120
INFO_BOX_HEIGHT = 80

CARD_COUNT = 4
CARD_GAP = 10
CARD_HEIGHT = 80
CARD_WIDTH = (CONTENT_WIDTH - CARD_GAP * (CARD_COUNT - 1)) / CARD_COUNT
CARD_DESC_OFFSET = 62
CARD_DESC_LINE_HEIGHT = 10
CARD_DESC_MAX_LINES = int((CARD_HEIGHT - CARD_DESC_OFFSET) // CARD_DESC_LINE_HEIGHT) + 1

SUMMARY_BOX_HEIGHT = 70
SUMMARY_LINE_HEIGHT = 14
SUMMARY_MAX_LINES = 4

TABLE_HEADER_HEIGHT = 25
ROW_HEIGHT = 35
QUESTION_LINE_HEIGHT = 10
QUESTION_MAX_LINES = 2

FOOTER_LINE_OFFSET = 40
FOOTER_TEXT_OFFSET = 25
CONFIDENTIAL_NOTICE = "Confidential - For Internal Use Only"
NOT_SPECIFIED = "Not specified"

# Column anchors: x positions for the table (number/question are left
# aligned, score columns are centered on their anchor).
COLUMNS = {
    "number": MARGIN_X + 15,
    "question": MARGIN_X + 50,
    "technical": PAGE_WIDTH - MARGIN_X - 180,
    "communication": PAGE_WIDTH - MARGIN_X - 130,
    "confidence": PAGE_WIDTH - MARGIN_X - 80,
    "score": PAGE_WIDTH - MARGIN_X - 30,
}
QUESTION_MAX_WIDTH = COLUMNS["technical"] - COLUMNS["question"] - 20
METRIC_COLUMNS = (
    ("technical", "technical_depth"),
    ("communication", "communication"),
    ("confidence", "confidence"),
)


# ----------------------------------------------------------------------
# RETAINED PAGE MODEL
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    tag: str = ""


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 0.5
    tag: str = ""


@dataclass(frozen=True)
class Text:
    x: float
    y: float            # baseline, top-down
    text: str
    font: str = FONT
    size: float = 10
    color: str = TEXT_DARK
    align: str = "left"  # left | center | right
    tag: str = ""
    row: Optional[int] = None


@dataclass
class Page:
    """One page of the report: its draw operations plus table bookkeeping."""
    number: int
    ops: list = field(default_factory=list)
    rows: list[int] = field(default_factory=list)   # result indexes drawn here
    has_table_header: bool = False

    def texts(self, tag: Optional[str] = None) -> list[Text]:
        return [
            op for op in self.ops
            if isinstance(op, Text) and (tag is None or op.tag == tag)
        ]


@dataclass
class ReportDocument:
    """Fully laid-out report, ready to serialize."""
    pages: list[Page]
    score_cards: list[ScoreCard]
    generated_on: str
    title: str = "Interview Evaluation Report"

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def row_order(self) -> list[int]:
        """Result indexes in the order they were drawn across all pages."""
        return [index for page in self.pages for index in page.rows]

    def to_pdf(self) -> bytes:
        """Paint every page onto a ReportLab canvas and return PDF bytes."""
        buffer = BytesIO()
        canvas = Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
        canvas.setTitle(self.title)
        canvas.setAuthor("AI Interview Analyzer")

        for page in self.pages:
            for op in page.ops:
                _paint(canvas, op)
            canvas.showPage()

        canvas.save()
        return buffer.getvalue()


def _paint(canvas: Canvas, op) -> None:
    """Draw one operation, flipping top-down y into PDF space."""
    if isinstance(op, Rect):
        if op.fill:
            canvas.setFillColor(colors.HexColor(op.fill))
        if op.stroke:
            canvas.setStrokeColor(colors.HexColor(op.stroke))
            canvas.setLineWidth(0.5)
        canvas.rect(
            op.x, PAGE_HEIGHT - op.y - op.height, op.width, op.height,
            stroke=1 if op.stroke else 0,
            fill=1 if op.fill else 0,
        )
    elif isinstance(op, Line):
        canvas.setStrokeColor(colors.HexColor(op.color))
        canvas.setLineWidth(op.width)
        canvas.line(op.x1, PAGE_HEIGHT - op.y1, op.x2, PAGE_HEIGHT - op.y2)
    elif isinstance(op, Text):
        canvas.setFont(op.font, op.size)
        canvas.setFillColor(colors.HexColor(op.color))
        y = PAGE_HEIGHT - op.y
        if op.align == "center":
            canvas.drawCentredString(op.x, y, op.text)
        elif op.align == "right":
            canvas.drawRightString(op.x, y, op.text)
        else:
            canvas.drawString(op.x, y, op.text)


def wrap_text(text: str, font: str, size: float, max_width: float) -> list[str]:
    """Word-wrap text to a width using the font's real metrics."""
    if not text:
        return []
    return simpleSplit(str(text), font, size, max_width)


def sanitize_filename(filename, default: str = "interview_evaluation_report") -> str:
    """Make a safe, lower-case .pdf filename.

    Every character outside [a-z0-9_.-] becomes "_":
        "Report #1 (final).pdf" -> "report__1__final_.pdf"
    """
    safe = re.sub(r"[^a-z0-9_.\-]", "_", str(filename or default), flags=re.IGNORECASE)
    safe = safe.lower()
    return safe if safe.endswith(".pdf") else f"{safe}.pdf"


# ----------------------------------------------------------------------
# RENDERER
# ----------------------------------------------------------------------

class InterviewReportRenderer:
    """Lays out and renders interview evaluation reports.

    Usage:
        renderer = InterviewReportRenderer()
        pdf_bytes = renderer.render(
            candidate={"name": "Asha Rao", "college": "IIT Madras"},
            group_label="Technical Interview",
            evaluation={"overall_score": 7.4, "summary": "...", "results": [...]},
        )

    Each call builds fresh state; a renderer instance can be shared.
    """

    def render(
        self,
        candidate: Optional[dict],
        group_label: Optional[str],
        evaluation: Optional[dict],
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """Render the report straight to PDF bytes."""
        return self.layout(candidate, group_label, evaluation, generated_at).to_pdf()

    def layout(
        self,
        candidate: Optional[dict],
        group_label: Optional[str],
        evaluation: Optional[dict],
        generated_at: Optional[datetime] = None,
    ) -> ReportDocument:
        """Build the retained page model without serializing it."""
        generated_on = (generated_at or datetime.now()).strftime("%B %d, %Y")
        state = _LayoutState()

        self._draw_header_band(state.page)
        state.y = INFO_TOP
        self._draw_candidate_info(state, candidate or {}, group_label)

        cards = build_score_cards(evaluation)
        self._draw_score_cards(state, cards)

        summary = (evaluation or {}).get("summary")
        if summary:
            self._draw_summary(state, str(summary))

        results = get_results(evaluation)
        self._draw_results_table(state, results)

        self._draw_footers(state.pages, generated_on)

        logger.debug(
            "Laid out interview report: %d rows across %d pages",
            len(results), len(state.pages),
        )
        return ReportDocument(
            pages=state.pages,
            score_cards=cards,
            generated_on=generated_on,
        )

    # ------------------------------------------------------------------
    # SECTION RENDERERS
    # ------------------------------------------------------------------

    def _draw_header_band(self, page: Page):
        page.ops.extend([
            Rect(0, 0, PAGE_WIDTH, HEADER_HEIGHT, fill=BRAND_PRIMARY, tag="header"),
            Text(PAGE_WIDTH / 2, 40, "INTERVIEW EVALUATION REPORT", FONT_BOLD, 20,
                 WHITE, "center", tag="header"),
            Text(PAGE_WIDTH / 2, 60, "Confidential Assessment Document", FONT, 12,
                 WHITE, "center", tag="header"),
        ])

    def _draw_section_title(self, state: "_LayoutState", title: str, spacing: float):
        state.page.ops.append(
            Text(MARGIN_X, state.y, title, FONT_BOLD, 14, TEXT_DARK, tag="section")
        )
        state.y += spacing

    def _draw_candidate_info(self, state: "_LayoutState", candidate: dict, group_label):
        self._draw_section_title(state, "CANDIDATE INFORMATION", 20)
        y = state.y
        col1 = MARGIN_X + 20
        col2 = PAGE_WIDTH / 2 + 20

        fields = [
            (col1, 25, "Name:", candidate.get("name"), 35),
            (col1, 45, "Group:", group_label, 35),
            (col2, 25, "College:", candidate.get("college"), 50),
            (col2, 45, "Department:", candidate.get("department"), 50),
        ]

        ops = state.page.ops
        ops.append(Rect(MARGIN_X, y, CONTENT_WIDTH, INFO_BOX_HEIGHT,
                        fill=BRAND_LIGHT_BG, stroke=BRAND_BORDER, tag="info"))
        for x, offset, label, value, value_offset in fields:
            ops.append(Text(x, y + offset, label, FONT_BOLD, 10, TEXT_MEDIUM, tag="info_label"))
            ops.append(Text(x + value_offset, y + offset, str(value or NOT_SPECIFIED),
                            FONT, 10, TEXT_DARK, tag="info_value"))

        state.y += INFO_BOX_HEIGHT + 30

    def _draw_score_cards(self, state: "_LayoutState", cards: list[ScoreCard]):
        self._draw_section_title(state, "SCORE OVERVIEW", 25)
        y = state.y
        ops = state.page.ops

        for i, card in enumerate(cards):
            x = MARGIN_X + i * (CARD_WIDTH + CARD_GAP)
            center = x + CARD_WIDTH / 2
            ops.append(Rect(x, y, CARD_WIDTH, CARD_HEIGHT,
                            fill=BRAND_LIGHT_BG, stroke=BRAND_BORDER, tag="card"))
            ops.append(Text(center, y + 30, f"{format_score(card.value)}/{card.max}",
                            FONT_BOLD, 18, card.severity_color, "center", tag="card_value"))
            ops.append(Text(center, y + 48, card.label, FONT_BOLD, 9, TEXT_MEDIUM,
                            "center", tag="card_label"))

            lines = wrap_text(card.description, FONT, 8, CARD_WIDTH - 20)
            for n, line in enumerate(lines[:CARD_DESC_MAX_LINES]):
                ops.append(Text(center, y + CARD_DESC_OFFSET + n * CARD_DESC_LINE_HEIGHT,
                                line, FONT, 8, TEXT_LIGHT, "center", tag="card_description"))

        state.y += CARD_HEIGHT + 35

    def _draw_summary(self, state: "_LayoutState", summary: str):
        self._draw_section_title(state, "EXECUTIVE SUMMARY", 20)
        y = state.y
        ops = state.page.ops
        ops.append(Rect(MARGIN_X, y, CONTENT_WIDTH, SUMMARY_BOX_HEIGHT,
                        fill=BRAND_LIGHT_BG, stroke=BRAND_BORDER, tag="summary"))

        lines = wrap_text(summary, FONT, 10, CONTENT_WIDTH - 20)
        for n, line in enumerate(lines[:SUMMARY_MAX_LINES]):
            ops.append(Text(MARGIN_X + 10, y + 20 + n * SUMMARY_LINE_HEIGHT, line,
                            FONT, 10, TEXT_DARK, tag="summary_text"))

        state.y += SUMMARY_BOX_HEIGHT + 15

    def _draw_results_table(self, state: "_LayoutState", results: list):
        self._draw_section_title(state, "DETAILED QUESTION ANALYSIS", 25)
        self._draw_table_header(state)

        for index, result in enumerate(results):
            if state.y + ROW_HEIGHT > PAGE_HEIGHT - MARGIN_Y:
                state.new_page()
                state.y = MARGIN_Y
                self._draw_table_header(state)
            self._draw_row(state, index, result if isinstance(result, dict) else {})

    def _draw_table_header(self, state: "_LayoutState"):
        y = state.y
        header = [
            ("number", "#", "left"),
            ("question", "QUESTION", "left"),
            ("technical", "TECH", "center"),
            ("communication", "COMM", "center"),
            ("confidence", "CONF", "center"),
            ("score", "SCORE", "center"),
        ]
        state.page.ops.append(Rect(MARGIN_X, y, CONTENT_WIDTH, TABLE_HEADER_HEIGHT,
                                   fill=BRAND_PRIMARY, tag="table_header"))
        for column, label, align in header:
            state.page.ops.append(Text(COLUMNS[column], y + 15, label, FONT_BOLD, 9,
                                       WHITE, align, tag="table_header"))
        state.page.has_table_header = True
        state.y += TABLE_HEADER_HEIGHT

    def _draw_row(self, state: "_LayoutState", index: int, result: dict):
        y = state.y
        ops = state.page.ops
        excluded = is_excluded(result)

        if index % 2 == 0:
            ops.append(Rect(MARGIN_X, y, CONTENT_WIDTH, ROW_HEIGHT,
                            fill=BRAND_LIGHT_BG, tag="row"))
        ops.append(Line(MARGIN_X, y + ROW_HEIGHT, PAGE_WIDTH - MARGIN_X, y + ROW_HEIGHT,
                        BRAND_BORDER, 0.5, tag="row"))

        ops.append(Text(COLUMNS["number"], y + 20, str(index + 1), FONT_BOLD, 9,
                        TEXT_MEDIUM, tag="number", row=index))

        question = result.get("question") or f"Question {index + 1}"
        lines = wrap_text(question, FONT, 9, QUESTION_MAX_WIDTH)
        for n, line in enumerate(lines[:QUESTION_MAX_LINES]):
            ops.append(Text(COLUMNS["question"], y + 13 + n * QUESTION_LINE_HEIGHT, line,
                            FONT, 9, TEXT_DARK, tag="question", row=index))

        cells = [(column, result.get(key), 9) for column, key in METRIC_COLUMNS]
        cells.append(("score", result.get("final_score"), 10))
        for column, value, size in cells:
            ops.append(Text(
                COLUMNS[column], y + 20,
                PLACEHOLDER if excluded else format_score(value),
                FONT_BOLD, size, severity_color(value, excluded), "center",
                tag=column, row=index,
            ))

        state.page.rows.append(index)
        state.y += ROW_HEIGHT

    def _draw_footers(self, pages: list[Page], generated_on: str):
        """Second pass: stamp every page now that the total is known."""
        total = len(pages)
        line_y = PAGE_HEIGHT - FOOTER_LINE_OFFSET
        text_y = PAGE_HEIGHT - FOOTER_TEXT_OFFSET

        for page in pages:
            page.ops.extend([
                Line(MARGIN_X, line_y, PAGE_WIDTH - MARGIN_X, line_y, BRAND_BORDER, 1,
                     tag="footer"),
                Text(MARGIN_X, text_y, f"Generated on {generated_on}", FONT, 8,
                     TEXT_LIGHT, tag="footer"),
                Text(PAGE_WIDTH / 2, text_y, CONFIDENTIAL_NOTICE, FONT, 8,
                     TEXT_LIGHT, "center", tag="footer"),
                Text(PAGE_WIDTH - MARGIN_X, text_y, f"Page {page.number} of {total}",
                     FONT, 8, TEXT_LIGHT, "right", tag="footer"),
            ])


class _LayoutState:
    """Running cursor and page list for a single layout() call."""

    def __init__(self):
        self.pages: list[Page] = [Page(number=1)]
        self.y: float = HEADER_HEIGHT

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def new_page(self):
        self.pages.append(Page(number=len(self.pages) + 1))
