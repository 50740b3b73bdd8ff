"""Tests for the rendering surface and text sanitization."""

from __future__ import annotations

import pytest

from tests.fakes.fake_surface import FakeSurface
from vetreport.styles import text_style
from vetreport.surface import RenderingSurface, sanitize_text


class TestSanitize:
    @pytest.mark.parametrize("raw, clean", [
        ("Febre ≥ 39 °C", "Febre >= 39 °C"),
        ("piora → internação", "piora -> internação"),
        ("10 mg", "10 mg"),
        ("pós‑operatório", "pós-operatório"),
        ("m⁶", "m6"),
        ("☑ Vacinado ☐ Vermifugado", "(X) Vacinado ( ) Vermifugado"),
        ("sem​espaço", "semespaço"),
    ])
    def test_replacements(self, raw: str, clean: str) -> None:
        assert sanitize_text(raw) == clean

    def test_portuguese_accents_untouched(self) -> None:
        text = "Ação, coração, órgão, vacinação: ÇÃÕÉÍ"
        assert sanitize_text(text) == text


def test_fake_surface_satisfies_protocol() -> None:
    assert isinstance(FakeSurface(), RenderingSurface)


class TestReportLabSurface:
    @pytest.fixture
    def surface(self):
        pytest.importorskip("reportlab")
        from vetreport.surface import ReportLabSurface

        return ReportLabSurface("A4", title="Teste", author="Clínica")

    def test_page_geometry(self, surface) -> None:
        assert surface.page_width == pytest.approx(595.27)
        assert surface.page_height == pytest.approx(841.89)

    def test_measure_matches_sanitized_text(self, surface) -> None:
        style = text_style("body")
        assert surface.measure_text_width("a → b", style.font, style.size) == pytest.approx(
            surface.measure_text_width("a -> b", style.font, style.size)
        )

    def test_save_returns_pdf(self, surface) -> None:
        style = text_style("body")
        surface.draw_text("Página 1", 50, 50, style)
        surface.draw_line(50, 60, 200, 60)
        surface.new_page()
        surface.draw_text("Página 2", 50, 50, style)
        content = surface.save()
        assert content[:5] == b"%PDF-"
