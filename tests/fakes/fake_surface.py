"""Recording rendering surfaces for layout tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from vetreport.styles import TextStyle

FAKE_PAGE_WIDTH = 595.27
FAKE_PAGE_HEIGHT = 841.89


@dataclass(frozen=True)
class DrawCall:
    page: int
    text: str
    x: float
    y: float
    style: TextStyle


@dataclass(frozen=True)
class LineCall:
    page: int
    x1: float
    y1: float
    x2: float
    y2: float
    width: float


@dataclass
class FakeSurface:
    """In-memory surface: fixed-advance glyphs, every call recorded."""

    page_width: float = FAKE_PAGE_WIDTH
    page_height: float = FAKE_PAGE_HEIGHT
    char_width_factor: float = 0.5
    texts: List[DrawCall] = field(default_factory=list)
    lines: List[LineCall] = field(default_factory=list)
    images: List[Tuple[int, str]] = field(default_factory=list)
    page: int = 1
    saved: bool = False

    def measure_text_width(self, text: str, font: str, size: float) -> float:
        return len(text) * size * self.char_width_factor

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        self.texts.append(DrawCall(self.page, text, x, y, style))

    def draw_line(self, x1, y1, x2, y2, width=0.5, color=(0.0, 0.0, 0.0)) -> None:
        self.lines.append(LineCall(self.page, x1, y1, x2, y2, width))

    def draw_image(self, source: str, x: float, y: float, width: float, height: float) -> None:
        self.images.append((self.page, source))

    def new_page(self) -> None:
        self.page += 1

    def save(self) -> bytes:
        self.saved = True
        return b"%PDF-fake"

    # ── Query helpers ───────────────────────────────────────────────

    @property
    def page_count(self) -> int:
        return self.page

    def text_values(self) -> list[str]:
        return [call.text for call in self.texts]

    def texts_on_page(self, page: int) -> list[DrawCall]:
        return [call for call in self.texts if call.page == page]

    def first_text_on_page(self, page: int, exclude_prefixes: tuple[str, ...] = ()) -> str:
        for call in sorted(self.texts_on_page(page), key=lambda c: (c.y, c.x)):
            if not call.text.startswith(exclude_prefixes):
                return call.text
        raise AssertionError(f"No text drawn on page {page}")


class FailingSurface(FakeSurface):
    """Surface that raises once a number of draw calls have succeeded."""

    def __init__(self, fail_after: int = 0, fail_on_save: bool = False) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.fail_on_save = fail_on_save

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        if not self.fail_on_save and len(self.texts) >= self.fail_after:
            raise OSError("surface write failed")
        super().draw_text(text, x, y, style)

    def save(self) -> bytes:
        if self.fail_on_save:
            raise OSError("surface serialization failed")
        return super().save()
