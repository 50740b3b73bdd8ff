"""
Style tokens and design configuration for the printed clinical documents.

This module defines the design tokens shared by every layout component: fonts,
sizes, colors, spacing, page geometry, placeholder strings and text styles.

License: MIT
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass


@dataclass
class FontConfig:
    """Standard PDF fonts (WinAnsi encoded, cover Portuguese accents)."""
    body: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"


@dataclass
class FontSizes:
    """Font sizes in points."""
    clinic_name: int = 18
    clinic_detail: int = 10
    legal_name: int = 12
    form_title: int = 18
    document_title: int = 16
    cover_title: int = 18
    cover_body: int = 12
    numbered_heading: int = 14
    section_title: int = 12
    field: int = 10
    hint: int = 8
    body: int = 12
    meta: int = 9
    footer: int = 8
    footer_small: int = 7


@dataclass
class Colors:
    """Color palette in RGB tuples (0-1 range for ReportLab)."""

    # Brand
    brand_navy: Tuple[float, float, float] = (0.098, 0.098, 0.439)  # #191970

    # Text
    text_muted: Tuple[float, float, float] = (0.392, 0.392, 0.392)  # #646464

    # Lines
    rule: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    writing_line: Tuple[float, float, float] = (0.6, 0.6, 0.6)


@dataclass
class Spacing:
    """Spacing values in points."""
    line: float = 17.0  # 6 mm form line
    section_gap: float = 22.7  # 8 mm between form groups
    title_gap: float = 5.7
    grid_gutter: float = 8.0
    inline_gap: str = "   "
    list_indent: float = 14.0
    list_item_gap: float = 1.5
    paragraph_gap: float = 4.0
    title_space_before: float = 8.0
    title_space_after: float = 3.0
    subtitle_space_after: float = 2.0
    header_rule_gap: float = 2.0
    footer_reserve: float = 56.7  # 20 mm reserved above the bottom margin
    cover_line: float = 28.0


@dataclass
class PageConfig:
    """Page size configurations in points (1 pt = 1/72 inch)."""

    # A4: 210 × 297 mm
    a4_width: float = 595.27
    a4_height: float = 841.89

    # LETTER: 8.5 × 11 inches
    letter_width: float = 612.0
    letter_height: float = 792.0

    default_margin_mm: float = 20.0
    continuation_offset_mm: float = 7.0

    @staticmethod
    def mm_to_points(mm: float) -> float:
        """Convert millimeters to points."""
        return mm * 2.83465

    def size_for(self, page_size: str) -> Tuple[float, float]:
        if page_size == "LETTER":
            return self.letter_width, self.letter_height
        return self.a4_width, self.a4_height


@dataclass(frozen=True)
class TextStyle:
    """Font, size and color for a single draw call."""
    font: str
    size: float
    color: Tuple[float, float, float] = (0.0, 0.0, 0.0)


# Placeholders keep the printed form's skeleton when a value is missing
PLACEHOLDER_CHAR = "_"
DATE_PLACEHOLDER = "___/___/___"
FULL_DATE_PLACEHOLDER = "___/___/____"
TIME_PLACEHOLDER = "___:___"
TEXT_AREA_PLACEHOLDER_LENGTH = 80
LABELED_FIELD_LINE_LENGTH = 60


def placeholder(length: int) -> str:
    """Underscore run of a fixed visual length."""
    return PLACEHOLDER_CHAR * length


# Checkbox glyph pair (drawable with the standard fonts)
CHECKBOX_MARKS = {
    True: "(X)",
    False: "( )",
}

# List markers
LIST_MARKERS = {
    "bullet": "•",
}

# Line widths
LINE_WIDTHS = {
    "thin": 0.3,
    "regular": 0.5,
    "thick": 1.0,
}

# Typography presets per generated document type: (body size, line height factor)
DOCUMENT_TYPE_PRESETS: Dict[str, Tuple[int, float]] = {
    "clinical_summary": (11, 1.4),
    "prescription": (12, 1.6),
    "exam_requests": (11, 1.5),
    "specialist_referral": (11, 1.4),
}

DEFAULT_CLINIC_TITLE = "CLÍNICA VETERINÁRIA"
DEFAULT_CLINIC_SUBTITLE = "Medicina Veterinária Especializada"
FORM_TITLE = "FICHA CLÍNICA VETERINÁRIA"
REPORT_TITLE = "RELATÓRIO COMPLETO DA CONSULTA"

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
DATE_FORMAT = "%d/%m/%Y"


# Global style instances (singletons)
fonts = FontConfig()
font_sizes = FontSizes()
colors = Colors()
spacing = Spacing()
page_config = PageConfig()


def text_style(role: str, body_size: Optional[float] = None) -> TextStyle:
    """
    Resolve the text style for a named role.

    Args:
        role: Style role name (e.g. "field", "title", "footer")
        body_size: Body font size for the generated-document roles

    Returns:
        TextStyle for the role
    """
    body = body_size or font_sizes.body
    table = {
        "clinic_name": TextStyle(fonts.bold, font_sizes.clinic_name),
        "legal_name": TextStyle(fonts.body, font_sizes.legal_name),
        "clinic_detail": TextStyle(fonts.body, font_sizes.clinic_detail),
        "clinic_banner": TextStyle(fonts.bold, font_sizes.clinic_name, colors.brand_navy),
        "clinic_subtitle": TextStyle(fonts.body, font_sizes.clinic_detail, colors.text_muted),
        "form_title": TextStyle(fonts.bold, font_sizes.form_title),
        "document_title": TextStyle(fonts.bold, font_sizes.document_title),
        "meta": TextStyle(fonts.body, font_sizes.meta, colors.text_muted),
        "section_title": TextStyle(fonts.bold, font_sizes.section_title),
        "field": TextStyle(fonts.body, font_sizes.field),
        "hint": TextStyle(fonts.italic, font_sizes.hint),
        "title": TextStyle(fonts.bold, body + 2, colors.brand_navy),
        "subtitle": TextStyle(fonts.bold, body),
        "body": TextStyle(fonts.body, body),
        "cover_title": TextStyle(fonts.bold, font_sizes.cover_title),
        "cover_body": TextStyle(fonts.body, font_sizes.cover_body),
        "numbered_heading": TextStyle(fonts.bold, font_sizes.numbered_heading),
        "running_header": TextStyle(fonts.bold, font_sizes.footer, colors.text_muted),
        "footer": TextStyle(fonts.body, font_sizes.footer, colors.text_muted),
        "footer_small": TextStyle(fonts.body, font_sizes.footer_small, colors.text_muted),
    }
    return table[role]
