"""
Application form layout - one declarative table for labels and data.

Each field is described once (section, column, row, data key). Label,
underline and data coordinates are all derived from that entry, so the
structure pass and the data pass cannot drift apart.

Coordinates are PDF points with the origin at the bottom-left corner.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional, Tuple

from ats.core.exceptions import LayoutError

# A4 page dimensions (in points)
PAGE_WIDTH = 595.28
PAGE_HEIGHT = 841.89
MARGIN = 50

# Font sizes
TITLE_FONT_SIZE = 16
SECTION_FONT_SIZE = 14
LABEL_FONT_SIZE = 12
DATA_FONT_SIZE = 14

# Offsets relative to a label baseline
DATA_X_INSET = 10
DATA_Y_DROP = 15
UNDERLINE_DROP = 5
SECTION_RULE_DROP = 10

FORM_TITLE = "ONGC Internship Application Form"
FORM_SUBTITLE = "ओएनजीसी इंटर्नशिप आवेदन फॉर्म"

# Data key for the registration number slot (not part of the applicant record)
REGISTRATION_SLOT = "registrationNumber"


@dataclass(frozen=True)
class FieldDef:
    label: str
    column: float
    row: float
    key: Optional[str] = None


@dataclass(frozen=True)
class SectionDef:
    key: str
    title: str
    offset: float
    underline_width: float
    fields: Tuple[FieldDef, ...]


FORM_SECTIONS: Tuple[SectionDef, ...] = (
    SectionDef(
        key="personal",
        title="Personal Information / व्यक्तिगत जानकारी",
        offset=100,
        underline_width=150,
        fields=(
            FieldDef("नाम/Name:", 0, 40, "name"),
            FieldDef("उम्र/Age:", 200, 40, "age"),
            FieldDef("पंजीकरण संख्या/Registration No.:", 350, 40, REGISTRATION_SLOT),
            FieldDef("लिंग/Gender:", 0, 70, "gender"),
            FieldDef("श्रेणी/Category:", 200, 70, "category"),
            FieldDef("पता/Address:", 0, 100, "address"),
            FieldDef("मोबाइल नंबर/Mobile No.:", 0, 130, "mobileNo"),
            FieldDef("ई-मेल/E-mail:", 200, 130, "email"),
        ),
    ),
    SectionDef(
        key="parent",
        title="Parent Information / अभिभावक जानकारी",
        offset=200,
        underline_width=200,
        fields=(
            FieldDef("पिता/माता का नाम/Father/Mother's Name:", 0, 40, "fatherMotherName"),
            FieldDef("पिता/माता का व्यवसाय/Father/Mother's Occupation:", 0, 70, "fatherMotherOccupation"),
            # The record has no parent phone; the line is left blank for handwriting.
            FieldDef("मोबाइल नंबर/Mobile No.:", 0, 100),
        ),
    ),
    SectionDef(
        key="academic",
        title="Academic Details / शैक्षणिक विवरण",
        offset=350,
        underline_width=200,
        fields=(
            FieldDef("वर्तमान पाठ्यक्रम का नाम/Name of Present Course:", 0, 40, "areasOfTraining"),
            FieldDef("वर्तमान सेमेस्टर/Present Semester:", 0, 70, "presentSemester"),
            FieldDef("पिछला सेमेस्टर SGPA/Last Semester SGPA:", 0, 100, "lastSemesterSGPA"),
            FieldDef("10+2 में प्रतिशत/%age in 10+2:", 200, 100, "percentageIn10Plus2"),
            FieldDef("संस्थान का नाम/Name of Institute:", 0, 130, "presentInstitute"),
        ),
    ),
    SectionDef(
        key="employee",
        title="ONGC Employee Information (if applicable) / ओएनजीसी कर्मचारी जानकारी",
        offset=500,
        underline_width=150,
        fields=(
            FieldDef("पदनाम/Designation:", 0, 40, "designation"),
            FieldDef("CPF:", 200, 40, "cpf"),
            FieldDef("अनुभाग/Section:", 0, 70, "section"),
            FieldDef("स्थान/Location:", 200, 70, "location"),
        ),
    ),
)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class FieldPlacement:
    label: str
    key: Optional[str]
    label_at: Point
    underline_start: Point
    underline_end: Point
    data_at: Point


@dataclass(frozen=True)
class SectionPlacement:
    key: str
    title: str
    header_at: Point
    rule_start: Point
    rule_end: Point
    fields: Tuple[FieldPlacement, ...]


@dataclass(frozen=True)
class FormLayout:
    page_width: float
    page_height: float
    margin: float
    title_at: Point
    subtitle_at: Point
    title_rule_start: Point
    title_rule_end: Point
    sections: Tuple[SectionPlacement, ...]

    def fields(self) -> Iterator[FieldPlacement]:
        for section in self.sections:
            yield from section.fields

    def slot(self, key: str) -> Optional[FieldPlacement]:
        """Placement of the field holding data key, or None."""
        for placement in self.fields():
            if placement.key == key:
                return placement
        return None

    def points(self) -> Iterator[Point]:
        yield self.title_at
        yield self.subtitle_at
        yield self.title_rule_start
        yield self.title_rule_end
        for section in self.sections:
            yield section.header_at
            yield section.rule_start
            yield section.rule_end
            for placement in section.fields:
                yield placement.label_at
                yield placement.underline_start
                yield placement.underline_end
                yield placement.data_at


def _place_section(section: SectionDef, page_width: float, page_height: float, margin: float) -> SectionPlacement:
    start_y = page_height - margin - section.offset
    fields = []
    for field in section.fields:
        x = margin + field.column
        y = start_y - field.row
        fields.append(FieldPlacement(
            label=field.label,
            key=field.key,
            label_at=Point(x, y),
            underline_start=Point(x, y - UNDERLINE_DROP),
            underline_end=Point(x + section.underline_width, y - UNDERLINE_DROP),
            data_at=Point(x + DATA_X_INSET, y - DATA_Y_DROP),
        ))
    return SectionPlacement(
        key=section.key,
        title=section.title,
        header_at=Point(margin, start_y),
        rule_start=Point(margin, start_y - SECTION_RULE_DROP),
        rule_end=Point(page_width - margin, start_y - SECTION_RULE_DROP),
        fields=tuple(fields),
    )


@lru_cache()
def build_layout(page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT,
                 margin: float = MARGIN) -> FormLayout:
    """
    Compute every coordinate of the form for the given page size.

    Raises:
        LayoutError if any coordinate falls outside the page.
    """
    top = page_height - margin
    layout = FormLayout(
        page_width=page_width,
        page_height=page_height,
        margin=margin,
        title_at=Point(margin, top - 30),
        subtitle_at=Point(margin, top - 50),
        title_rule_start=Point(margin, top - 60),
        title_rule_end=Point(page_width - margin, top - 60),
        sections=tuple(_place_section(s, page_width, page_height, margin) for s in FORM_SECTIONS),
    )

    for point in layout.points():
        if not (0 <= point.x <= page_width and 0 <= point.y <= page_height):
            raise LayoutError(
                f"Point ({point.x}, {point.y}) outside page {page_width}x{page_height}"
            )
    return layout
