"""
Form Renderer - draws the application form onto a ReportLab canvas.

Two passes over the same layout:
1. draw_form_structure: title, section headers, labels and blank underlines
2. draw_applicant_data: the applicant's values on top of the underlines

Every string is drawn with one embedded multilingual font so Latin and
Devanagari text never fall back to a font without the glyphs.
"""

import logging
from typing import Any, Mapping, Optional

from reportlab.lib.colors import Color
from reportlab.pdfgen.canvas import Canvas

from ats.utils.form_layout import (
    DATA_FONT_SIZE,
    FORM_SUBTITLE,
    FORM_TITLE,
    LABEL_FONT_SIZE,
    REGISTRATION_SLOT,
    SECTION_FONT_SIZE,
    TITLE_FONT_SIZE,
    FormLayout,
    Point,
    build_layout,
)

logger = logging.getLogger(__name__)

BLACK = Color(0, 0, 0)
DARK_GRAY = Color(0.2, 0.2, 0.2)
LIGHT_GRAY = Color(0.7, 0.7, 0.7)


def _text(canvas: Canvas, text: str, at: Point, font_name: str, size: float, color: Color = BLACK) -> None:
    canvas.setFont(font_name, size)
    canvas.setFillColor(color)
    canvas.drawString(at.x, at.y, text)


def _line(canvas: Canvas, start: Point, end: Point, thickness: float, color: Color) -> None:
    canvas.setLineWidth(thickness)
    canvas.setStrokeColor(color)
    canvas.line(start.x, start.y, end.x, end.y)


def _display_value(value: Any) -> str:
    """Stringify a field value; None and blank strings become '', 85.0 becomes '85'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value)
    return text if text.strip() else ""


def draw_form_structure(canvas: Canvas, font_name: str, layout: FormLayout) -> None:
    """Draw everything that does not depend on the applicant."""
    _text(canvas, FORM_TITLE, layout.title_at, font_name, TITLE_FONT_SIZE)
    _text(canvas, FORM_SUBTITLE, layout.subtitle_at, font_name, SECTION_FONT_SIZE, DARK_GRAY)
    _line(canvas, layout.title_rule_start, layout.title_rule_end, 1, BLACK)

    for section in layout.sections:
        _text(canvas, section.title, section.header_at, font_name, SECTION_FONT_SIZE)
        _line(canvas, section.rule_start, section.rule_end, 1, LIGHT_GRAY)

        for placement in section.fields:
            _text(canvas, placement.label, placement.label_at, font_name, LABEL_FONT_SIZE)
            _line(canvas, placement.underline_start, placement.underline_end, 0.5, LIGHT_GRAY)


def draw_applicant_data(
    canvas: Canvas,
    font_name: str,
    data: Mapping[str, Any],
    registration_number: Optional[str],
    layout: FormLayout,
) -> int:
    """
    Draw each non-empty applicant value at its data slot.

    The registration number is drawn at its own slot whenever given,
    independent of the other fields.

    Returns:
        Number of values drawn
    """
    drawn = 0
    for placement in layout.fields():
        if placement.key is None:
            continue
        if placement.key == REGISTRATION_SLOT:
            value = _display_value(registration_number)
        else:
            value = _display_value(data.get(placement.key))
        if not value:
            continue
        _text(canvas, value, placement.data_at, font_name, DATA_FONT_SIZE)
        drawn += 1

    logger.debug("Drew %d applicant values", drawn)
    return drawn


def render_form(
    canvas: Canvas,
    font_name: str,
    formatted_data: Mapping[str, Any],
    registration_number: Optional[str] = None,
    layout: Optional[FormLayout] = None,
) -> int:
    """Structure pass then data pass on the current page."""
    layout = layout or build_layout()
    draw_form_structure(canvas, font_name, layout)
    return draw_applicant_data(canvas, font_name, formatted_data, registration_number, layout)
