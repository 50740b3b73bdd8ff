"""Tests for the layout cursor and page-break controller."""

from __future__ import annotations

import pytest

from tests.fakes.fake_surface import FakeSurface
from vetreport.errors import LayoutOverflowError, RenderStateError
from vetreport.layout import (
    RenderState, advance, break_page, create_context, draw_text_line, ensure_space, finalize,
)
from vetreport.styles import page_config, spacing, text_style


class TestContext:
    def test_initial_state(self, ctx, surface: FakeSurface) -> None:
        margin = page_config.mm_to_points(20)
        assert ctx.state is RenderState.INITIALIZED
        assert ctx.page_number == 1
        assert ctx.cursor_y == pytest.approx(margin)
        assert ctx.content_width == pytest.approx(surface.page_width - 2 * margin)
        assert ctx.bottom_limit == pytest.approx(surface.page_height - margin - spacing.footer_reserve)

    def test_continuation_offset_applies_after_first_page(self, surface: FakeSurface) -> None:
        ctx = create_context(surface, margin_mm=10, continuation_offset=20.0)
        top = page_config.mm_to_points(10)
        assert ctx.page_top == pytest.approx(top)
        break_page(ctx)
        assert ctx.cursor_y == pytest.approx(top + 20.0)


class TestPageBreaks:
    def test_ensure_space_breaks_when_block_crosses_limit(self, ctx, surface: FakeSurface) -> None:
        ctx.cursor_y = ctx.bottom_limit - 5
        ensure_space(ctx, 10)
        assert surface.page_count == 2
        assert ctx.page_number == 2
        assert ctx.cursor_y == pytest.approx(ctx.page_top)

    def test_ensure_space_no_break_when_block_fits(self, ctx, surface: FakeSurface) -> None:
        ctx.cursor_y = ctx.bottom_limit - 10
        ensure_space(ctx, 10)
        assert surface.page_count == 1

    def test_page_count_matches_new_page_calls(self, ctx, surface: FakeSurface) -> None:
        style = text_style("body")
        for index in range(200):
            draw_text_line(ctx, f"linha {index}", style, 18.0)
        assert ctx.page_number == surface.page_count
        lines_per_page = int(ctx.usable_height // 18.0)
        assert surface.page_count == -(-200 // lines_per_page)

    def test_no_text_below_bottom_limit(self, ctx, surface: FakeSurface) -> None:
        style = text_style("body")
        for index in range(150):
            draw_text_line(ctx, f"linha {index}", style, 18.0)
        for call in surface.texts:
            assert call.y <= ctx.bottom_limit

    def test_block_taller_than_page_raises(self, ctx, surface: FakeSurface) -> None:
        with pytest.raises(LayoutOverflowError) as excinfo:
            ensure_space(ctx, ctx.usable_height + 1)
        assert excinfo.value.available == pytest.approx(ctx.usable_height)
        assert surface.page_count == 1

    def test_hooks_run_around_break(self, ctx) -> None:
        events: list[tuple[str, int]] = []
        ctx.on_page_end = lambda c: events.append(("end", c.page_number))
        ctx.on_page_start = lambda c: events.append(("start", c.page_number))
        break_page(ctx)
        assert events == [("end", 1), ("start", 2)]


class TestDrawTextLine:
    def test_baseline_below_cursor(self, ctx, surface: FakeSurface) -> None:
        top = ctx.cursor_y
        style = text_style("body")
        draw_text_line(ctx, "Paciente estável", style, 18.0)
        assert surface.texts[0].y == pytest.approx(top + style.size)
        assert ctx.cursor_y == pytest.approx(top + 18.0)

    def test_empty_text_advances_without_drawing(self, ctx, surface: FakeSurface) -> None:
        top = ctx.cursor_y
        draw_text_line(ctx, "", text_style("body"), 18.0)
        assert surface.texts == []
        assert ctx.cursor_y == pytest.approx(top + 18.0)

    def test_center_alignment(self, ctx, surface: FakeSurface) -> None:
        style = text_style("form_title")
        draw_text_line(ctx, "TITULO", style, 20.0, align="center")
        width = surface.measure_text_width("TITULO", style.font, style.size)
        assert surface.texts[0].x == pytest.approx(ctx.left + (ctx.content_width - width) / 2)

    def test_right_alignment(self, ctx, surface: FakeSurface) -> None:
        style = text_style("body")
        draw_text_line(ctx, "fim", style, 20.0, align="right")
        width = surface.measure_text_width("fim", style.font, style.size)
        assert surface.texts[0].x == pytest.approx(ctx.left + ctx.content_width - width)


class TestFinalize:
    def test_finalize_serializes_and_closes(self, ctx, surface: FakeSurface) -> None:
        advance(ctx, 10)
        assert ctx.state is RenderState.WRITING
        assert finalize(ctx) == b"%PDF-fake"
        assert ctx.state is RenderState.FINALIZED
        assert surface.saved

    def test_finalize_runs_last_page_end_hook(self, ctx) -> None:
        pages: list[int] = []
        ctx.on_page_end = lambda c: pages.append(c.page_number)
        break_page(ctx)
        finalize(ctx)
        assert pages == [1, 2]

    @pytest.mark.parametrize("write", [
        lambda c: advance(c, 1),
        lambda c: ensure_space(c, 1),
        lambda c: break_page(c),
        lambda c: draw_text_line(c, "x", text_style("body"), 10),
        lambda c: finalize(c),
    ])
    def test_write_after_finalize_raises(self, ctx, write) -> None:
        finalize(ctx)
        with pytest.raises(RenderStateError):
            write(ctx)
