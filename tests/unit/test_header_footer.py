"""Tests for the header and footer blocks."""

from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes.fake_surface import FakeSurface
from vetreport.header_footer import (
    BLANK_LETTERHEAD, draw_footer, draw_running_header, footer_contact_line, render_document_header,
    render_form_title, render_letterhead,
)
from vetreport.layout import break_page, create_context
from vetreport.models import ClinicBranding
from vetreport.styles import DEFAULT_CLINIC_SUBTITLE, DEFAULT_CLINIC_TITLE, FORM_TITLE

GENERATED_AT = datetime(2024, 3, 10, 14, 30, 5)


class TestLetterhead:
    def test_branding_lines(self, ctx, surface: FakeSurface, clinic) -> None:
        render_letterhead(ctx, clinic)
        assert surface.text_values() == [
            "Clínica Vet Amigo",
            "Vet Amigo Serviços Veterinários Ltda",
            "Endereço: Rua das Flores, 123 - São Paulo/SP",
            "Telefone: (11) 3333-4444",
            "E-mail: contato@vetamigo.com.br",
        ]
        assert len(surface.lines) == 1

    def test_legal_name_skipped_when_same_as_name(self, ctx, surface: FakeSurface) -> None:
        render_letterhead(ctx, ClinicBranding(nome="Vet Sul", razaoSocial="Vet Sul"))
        assert surface.text_values() == ["Vet Sul"]

    def test_missing_branding_prints_blank_template(self, ctx, surface: FakeSurface) -> None:
        render_letterhead(ctx, None)
        assert surface.text_values() == [DEFAULT_CLINIC_TITLE, *BLANK_LETTERHEAD]

    def test_logo_drawn_when_configured(self, ctx, surface: FakeSurface) -> None:
        render_letterhead(ctx, ClinicBranding(nome="Vet Sul", logo_path="/srv/logo.png"))
        assert surface.images == [(1, "/srv/logo.png")]

    def test_form_title_centered(self, ctx, surface: FakeSurface) -> None:
        render_form_title(ctx)
        call = surface.texts[0]
        width = surface.measure_text_width(FORM_TITLE, call.style.font, call.style.size)
        assert call.text == FORM_TITLE
        assert call.x == pytest.approx(ctx.left + (ctx.content_width - width) / 2)


class TestDocumentHeader:
    def test_defaults_without_branding(self, ctx, surface: FakeSurface) -> None:
        render_document_header(ctx, "Resumo clínico", GENERATED_AT)
        assert surface.text_values() == [
            DEFAULT_CLINIC_TITLE,
            DEFAULT_CLINIC_SUBTITLE,
            "RESUMO CLÍNICO",
            "Gerado em: 10/03/2024 14:30:05",
        ]
        assert len(surface.lines) == 2

    def test_branding_name_and_legal_name(self, ctx, surface: FakeSurface, clinic) -> None:
        render_document_header(ctx, "Receituário", GENERATED_AT, clinic)
        assert surface.text_values()[:2] == [clinic.name, clinic.legal_name]


class TestFooter:
    def test_footer_content(self, ctx, surface: FakeSurface, clinic) -> None:
        ctx.document_id = "doc-7"
        draw_footer(ctx, GENERATED_AT, clinic)
        texts = surface.text_values()
        assert "Gerado em: 10/03/2024 14:30:05" in texts
        assert "Página 1" in texts
        assert "ID: doc-7" in texts
        assert footer_contact_line(clinic) in texts
        assert len(surface.lines) == 2

    def test_footer_stays_in_reserved_band(self, ctx, surface: FakeSurface) -> None:
        draw_footer(ctx, GENERATED_AT)
        band_bottom = ctx.bottom_limit + ctx.footer_reserve
        for call in surface.texts:
            assert ctx.bottom_limit < call.y <= band_bottom
        for line in surface.lines:
            assert ctx.bottom_limit < line.y1 <= band_bottom

    def test_footer_does_not_move_cursor(self, ctx) -> None:
        before = ctx.cursor_y
        draw_footer(ctx, GENERATED_AT)
        assert ctx.cursor_y == before

    def test_page_number_right_aligned(self, ctx, surface: FakeSurface) -> None:
        break_page(ctx)
        draw_footer(ctx, GENERATED_AT)
        call = next(c for c in surface.texts if c.text == "Página 2")
        width = surface.measure_text_width("Página 2", call.style.font, call.style.size)
        assert call.x + width == pytest.approx(ctx.left + ctx.content_width)

    def test_blank_contact_template_without_branding(self) -> None:
        line = footer_contact_line(None)
        assert line.startswith("Clínica Veterinária")
        assert "____" in line

    def test_contact_line_skips_missing_parts(self) -> None:
        assert footer_contact_line(ClinicBranding(nome="Vet Sul")) == "Vet Sul"


def test_running_header_above_continuation_content(surface: FakeSurface) -> None:
    ctx = create_context(surface, continuation_offset=20.0)
    ctx.on_page_start = lambda c: draw_running_header(c)
    break_page(ctx)
    call = surface.texts[0]
    assert call.page == 2
    assert call.text == DEFAULT_CLINIC_TITLE
    assert call.y < ctx.page_top
