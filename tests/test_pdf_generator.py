"""Tests for form rendering and PDF assembly."""

import io
from unittest.mock import MagicMock

import pytest
from PyPDF2 import PdfReader

from ats.core.exceptions import FontAssetError
from ats.services.form_renderer import draw_applicant_data, draw_form_structure, render_form
from ats.services.pdf_generator import (
    create_application_form, normalize_form_data, register_font, resolve_font_path
)
from ats.utils.form_layout import build_layout
from conftest import VERA_FONT


def _drawn_strings(canvas):
    return [c.args[2] for c in canvas.drawString.call_args_list]


def test_structure_pass_draws_all_labels():
    canvas = MagicMock()
    layout = build_layout()
    draw_form_structure(canvas, "Helvetica", layout)

    labels = _drawn_strings(canvas)
    for placement in layout.fields():
        assert placement.label in labels
    for section in layout.sections:
        assert section.title in labels


def test_data_pass_skips_empty_values():
    canvas = MagicMock()
    data = {"name": "Riya Sharma", "email": "", "cpf": None, "age": "21 वर्ष / years", "address": "   "}
    drawn = draw_applicant_data(canvas, "Helvetica", data, None, build_layout())

    assert drawn == 2
    assert _drawn_strings(canvas) == ["Riya Sharma", "21 वर्ष / years"]


def test_data_pass_draws_registration_number_at_its_slot():
    canvas = MagicMock()
    layout = build_layout()
    drawn = draw_applicant_data(canvas, "Helvetica", {}, "SAIL-2025-0007", layout)

    assert drawn == 1
    slot = layout.slot("registrationNumber").data_at
    canvas.drawString.assert_called_once_with(slot.x, slot.y, "SAIL-2025-0007")


def test_render_form_returns_data_count():
    canvas = MagicMock()
    assert render_form(canvas, "Helvetica", {"name": "A", "cpf": "1"}, "SAIL-2025-0001") == 3


def test_normalize_form_data_maps_legacy_keys():
    data = normalize_form_data({"mobile": "999", "college": "DIT", "mobileNo": "", "cgpa": 9.1})
    assert data["mobileNo"] == "999"
    assert data["presentInstitute"] == "DIT"
    assert data["lastSemesterSGPA"] == 9.1


def test_normalize_form_data_prefers_canonical_keys():
    data = normalize_form_data({"mobile": "111", "mobileNo": "222"})
    assert data["mobileNo"] == "222"


def test_create_application_form_single_page_with_embedded_font():
    pdf_bytes = create_application_form(
        {"name": "Riya Sharma", "age": 21, "gender": "female", "category": "SC", "cpf": "123"},
        "SAIL-2025-0001",
        font_path=VERA_FONT,
    )

    assert pdf_bytes.startswith(b"%PDF")
    reader = PdfReader(io.BytesIO(pdf_bytes))
    assert len(reader.pages) == 1
    assert b"/FontFile2" in pdf_bytes


def test_create_application_form_without_data_is_blank_form():
    pdf_bytes = create_application_form(None, None, font_path=VERA_FONT)
    assert len(PdfReader(io.BytesIO(pdf_bytes)).pages) == 1


def test_missing_font_fails_fast(tmp_path):
    with pytest.raises(FontAssetError):
        create_application_form({"name": "Riya"}, "", font_path=str(tmp_path / "missing.ttf"))


def test_font_registered_once():
    name = register_font(resolve_font_path(VERA_FONT))
    assert register_font(VERA_FONT) == name
    assert name.startswith("Form-Vera-")


def test_whole_number_floats_drawn_without_decimal():
    canvas = MagicMock()
    data = {"percentageIn10Plus2": 85.0, "lastSemesterSGPA": 8.25, "age": "20 वर्ष / years"}
    draw_applicant_data(canvas, "Helvetica", data, None, build_layout())

    drawn = _drawn_strings(canvas)
    assert "85" in drawn
    assert "85.0" not in drawn
    assert "8.25" in drawn
