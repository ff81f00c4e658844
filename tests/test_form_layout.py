"""Tests for the declarative form layout."""

import pytest

from ats.core.exceptions import LayoutError
from ats.utils.form_layout import (
    DATA_X_INSET, DATA_Y_DROP, FORM_SECTIONS, MARGIN, PAGE_HEIGHT, PAGE_WIDTH,
    REGISTRATION_SLOT, UNDERLINE_DROP, build_layout
)


def test_every_point_is_on_the_page():
    layout = build_layout()
    for point in layout.points():
        assert 0 <= point.x <= PAGE_WIDTH
        assert 0 <= point.y <= PAGE_HEIGHT


def test_sections_in_order():
    layout = build_layout()
    assert [s.key for s in layout.sections] == ["personal", "parent", "academic", "employee"]
    assert len(list(layout.fields())) == sum(len(s.fields) for s in FORM_SECTIONS)


def test_data_slot_derived_from_label():
    layout = build_layout()
    for placement in layout.fields():
        assert placement.data_at.x == placement.label_at.x + DATA_X_INSET
        assert placement.data_at.y == placement.label_at.y - DATA_Y_DROP
        assert placement.underline_start.y == placement.label_at.y - UNDERLINE_DROP


def test_known_coordinates():
    layout = build_layout()
    top = PAGE_HEIGHT - MARGIN

    name = layout.slot("name")
    assert name.label_at.x == MARGIN
    assert name.label_at.y == pytest.approx(top - 100 - 40)

    institute = layout.slot("presentInstitute")
    assert institute.label_at.y == pytest.approx(top - 350 - 130)
    assert institute.underline_end.x == MARGIN + 200

    assert layout.slot(REGISTRATION_SLOT).label_at.x == MARGIN + 350


def test_parent_mobile_has_no_data_key():
    layout = build_layout()
    parent = next(s for s in layout.sections if s.key == "parent")
    assert parent.fields[-1].key is None
    personal = layout.sections[0]
    assert layout.slot("mobileNo") in personal.fields


def test_page_too_small_raises():
    with pytest.raises(LayoutError):
        build_layout(300, 400)
