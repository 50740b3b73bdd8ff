"""
Field renderer for the ficha clínica form.

The printed form is described declaratively by ``FICHA_LAYOUT``: a tuple of
sections, each holding blocks (grids, inline rows, text areas, captions) whose
leaves point at record values by dotted path. Empty leaves print as
fixed-length placeholders so the paper form keeps its skeleton, and every
placeholder is recorded in ``ctx.blank_fields``.

License: MIT
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from vetreport.layout import (
    RenderContext, advance, draw_rule, draw_text_line, ensure_space, measure,
)
from vetreport.models import ClinicalRecord, VeterinarianIdentity
from vetreport.styles import (
    CHECKBOX_MARKS, DATE_PLACEHOLDER, FULL_DATE_PLACEHOLDER, LABELED_FIELD_LINE_LENGTH,
    LINE_WIDTHS, TEXT_AREA_PLACEHOLDER_LENGTH, TIME_PLACEHOLDER, TextStyle, colors,
    font_sizes, placeholder, spacing, text_style,
)
from vetreport.wrapping import normalize_whitespace, wrap_text

logger = logging.getLogger(__name__)


# ── Layout elements ─────────────────────────────────────────────────


@dataclass(frozen=True)
class TextLeaf:
    """``label: value`` piece bound to a string leaf."""
    label: str
    path: str
    length: int = 20
    separator: str = ": "
    empty: Optional[str] = None
    suffix: str = ""

    @property
    def placeholder(self) -> str:
        return self.empty if self.empty is not None else placeholder(self.length)


@dataclass(frozen=True)
class CheckLeaf:
    """``Label (X)`` piece bound to a boolean leaf, with an optional date."""
    label: str
    path: str
    date_path: Optional[str] = None


Piece = Union[TextLeaf, CheckLeaf]


@dataclass(frozen=True)
class Grid:
    """Cells laid out row by row in equal-width columns."""
    cells: Tuple[TextLeaf, ...]
    columns: int = 2


@dataclass(frozen=True)
class Row:
    """Pieces flowed left to right across the content width."""
    pieces: Tuple[Piece, ...]


@dataclass(frozen=True)
class TextArea:
    """Multi-line free text with a minimum number of writing lines."""
    path: str
    min_lines: int


@dataclass(frozen=True)
class Caption:
    text: str


Block = Union[Grid, Row, TextArea, Caption]


@dataclass(frozen=True)
class Section:
    title: Optional[str]
    blocks: Tuple[Block, ...]
    hint: Optional[str] = None


def labeled(label: str, path: str) -> Row:
    """One-per-line labeled field sized to the form's fixed line length."""
    return Row((TextLeaf(label, path, LABELED_FIELD_LINE_LENGTH - len(label) - 2),))


def inline(label: str, path: str, length: int = 12) -> TextLeaf:
    return TextLeaf(label, path, length, separator=" ")


# ── Form layout ─────────────────────────────────────────────────────

FICHA_LAYOUT: Tuple[Section, ...] = (
    Section("DADOS BÁSICOS", (
        Grid((
            TextLeaf("Data", "basic_data.consultation_date", 20),
            TextLeaf("Hora", "basic_data.consultation_time", 15),
            TextLeaf("Atendimento", "basic_data.service", 28),
            TextLeaf("RGHV", "basic_data.hospital_registry", 20),
        )),
    )),
    Section("DADOS DO ANIMAL", (
        Grid((
            TextLeaf("Nome", "animal.name", 30),
            TextLeaf("Pelagem", "animal.coat", 28),
            TextLeaf("Espécie", "animal.species", 20),
            TextLeaf("Raça", "animal.breed", 28),
            TextLeaf("Sexo", "animal.sex", 15),
            TextLeaf("Idade", "animal.age", 15),
            TextLeaf("Peso", "animal.weight", 15),
        )),
    )),
    Section("DADOS DO PROPRIETÁRIO", (
        Row((TextLeaf("Proprietário", "owner.name", 60),)),
        Row((TextLeaf("Endereço", "owner.address", 70),)),
        Row((
            TextLeaf("Cidade", "owner.city", 20),
            TextLeaf("Estado", "owner.state", 10),
            TextLeaf("CEP", "owner.postal_code", 15),
        )),
        Row((
            TextLeaf("Fone", "owner.phone", 20),
            TextLeaf("Doc. Identidade", "owner.identity_document", 20),
        )),
        Row((TextLeaf("Local do Exame", "owner.exam_location", 30),)),
    )),
    Section("DIAGNÓSTICO/PROCEDIMENTO", (
        Row((TextLeaf("DIAGNÓSTICO", "diagnosis.diagnosis", 60),)),
        Row((TextLeaf("SISTEMA AFETADO", "diagnosis.affected_system", 50),)),
        Row((
            CheckLeaf("Internado", "diagnosis.hospitalized.marked", "diagnosis.hospitalized.date"),
            CheckLeaf("Tratamento domiciliar", "diagnosis.home_treatment.marked",
                      "diagnosis.home_treatment.date"),
            CheckLeaf("Eutanásia", "diagnosis.euthanasia.marked", "diagnosis.euthanasia.date"),
        )),
        Row((
            TextLeaf("Alta", "diagnosis.discharge", separator=" ", empty=DATE_PLACEHOLDER),
            TextLeaf("Óbito", "diagnosis.death.date", separator=" ", empty=DATE_PLACEHOLDER),
            TextLeaf("", "diagnosis.death.time", separator="", empty=TIME_PLACEHOLDER, suffix=" Horas"),
            TextLeaf("Responsável", "diagnosis.responsible", 20, separator=" "),
        )),
    )),
    Section(None, (
        Row((TextLeaf("Médico Veterinário", "veterinarian.name", 40),)),
        Row((TextLeaf("Assinatura", "veterinarian.signature", 30),)),
    )),
    Section("QUEIXA PRINCIPAL/EVOLUÇÃO", (
        TextArea("chief_complaint.description", 3),
    )),
    Section("ANAMNESE", (
        labeled("Antecedentes Mórbidos", "anamnesis.morbid_history"),
        labeled("Vacinações", "anamnesis.vaccinations"),
        labeled("Vermifugações", "anamnesis.dewormings"),
        labeled("Ectoparasitas", "anamnesis.ectoparasites"),
        labeled("Comportamento", "anamnesis.behavior"),
        labeled("Alimentação", "anamnesis.feeding"),
        labeled("Histórico do Rebanho/Familiar", "anamnesis.herd_family_history"),
        labeled("Acesso à Rua", "anamnesis.street_access"),
        labeled("Habitat", "anamnesis.habitat"),
        labeled("Contactantes", "anamnesis.contacts"),
        labeled("Contato com Roedores", "anamnesis.rodent_contact"),
    ), hint="(antecedentes mórbidos, vacinações, vermifugações, ectoparasitas, comportamento, "
            "alimentação, histórico do rebanho/familiar, acesso à rua, habitat, contactantes, "
            "contato com roedores)"),
    Section("SISTEMA DIGESTÓRIO E GLÂNDULAS ANEXAS", (
        labeled("Alimentação", "digestive.feeding"),
        labeled("Emese", "digestive.emesis"),
        labeled("Regurgitação", "digestive.regurgitation"),
        labeled("Diarréia", "digestive.diarrhea"),
        labeled("Disquesia", "digestive.dyschezia"),
        labeled("Tenesmo", "digestive.tenesmus"),
    ), hint="(alimentação, emese, regurgitação, diarréia, disquesia, tenesmo)"),
    Section("SISTEMA RESPIRATÓRIO E CARDIOVASCULAR", (
        labeled("Tosse", "respiratory_cardiovascular.cough"),
        labeled("Espirro", "respiratory_cardiovascular.sneezing"),
        labeled("Secreções", "respiratory_cardiovascular.secretions"),
        labeled("Dispnéia", "respiratory_cardiovascular.dyspnea"),
        labeled("Taquipnéia", "respiratory_cardiovascular.tachypnea"),
        labeled("Cianose", "respiratory_cardiovascular.cyanosis"),
        labeled("Cansaço Fácil", "respiratory_cardiovascular.easy_fatigue"),
        labeled("Síncope", "respiratory_cardiovascular.syncope"),
        labeled("Emagrecimento", "respiratory_cardiovascular.weight_loss"),
    ), hint="(tosse, espirro, secreções, dispnéia, taquipnéia, cianose, cansaço fácil, "
            "síncope, emagrecimento)"),
    Section("SISTEMA GÊNITO URINÁRIO E GLÂNDULAS MAMÁRIAS", (
        labeled("Ingestão Hídrica", "genitourinary.water_intake"),
        labeled("Urina", "genitourinary.urine"),
        labeled("Último Cio", "genitourinary.last_heat"),
        labeled("Último Parto", "genitourinary.last_birth"),
        labeled("Secreção Vaginal ou Peniana", "genitourinary.genital_discharge"),
        labeled("Castração", "genitourinary.castration"),
    ), hint="(ingestão hídrica, urina, último cio, último parto, secreção vaginal ou peniana, castração)"),
    Section("SISTEMA TEGUMENTAR", (
        labeled("Início da Lesão", "integumentary.lesion_onset"),
        labeled("Evolução da Lesão", "integumentary.lesion_evolution"),
        labeled("Histórico", "integumentary.history"),
        labeled("Prurido", "integumentary.pruritus"),
        labeled("Localização", "integumentary.location"),
        labeled("Características", "integumentary.characteristics"),
        labeled("Pele e Pêlos", "integumentary.skin_and_coat"),
        labeled("Secreção Otológica", "integumentary.ear_discharge"),
        labeled("Meneios Cefálicos", "integumentary.head_shaking"),
        labeled("Banhos", "integumentary.baths"),
    ), hint="(início da lesão e evolução, histórico, prurido, localização, características, "
            "pele e pêlos, secreção otológica, meneios cefálicos, banhos)"),
    Section("SISTEMA NERVOSO", (
        labeled("Estado Mental", "nervous.mental_state"),
        labeled("Comportamento", "nervous.behavior"),
        labeled("Ataxia", "nervous.ataxia"),
        labeled("Paresia", "nervous.paresis"),
        labeled("Paralisia", "nervous.paralysis"),
        labeled("Convulsão", "nervous.seizure"),
        labeled("Audição", "nervous.hearing"),
        labeled("Visão", "nervous.vision"),
        labeled("Evolução", "nervous.evolution"),
    ), hint="(estado mental, comportamento, ataxia, paresia, paralisia, convulsão, audição, visão, evolução)"),
    Section("SISTEMA OFTÁLMICO", (
        labeled("Secreção Ocular", "ophthalmic.ocular_discharge"),
        labeled("Blefaroespasmo", "ophthalmic.blepharospasm"),
    ), hint="(secreção ocular, blefaroespasmo)"),
    Section("SISTEMA MÚSCULO-ESQUELÉTICO", (
        labeled("Claudicação", "musculoskeletal.lameness"),
        labeled("Postura", "musculoskeletal.posture"),
        labeled("Fraturas", "musculoskeletal.fractures"),
        labeled("Atrofia Muscular", "musculoskeletal.muscle_atrophy"),
    ), hint="(claudicação, postura, fraturas, atrofia muscular)"),
    Section("EXAME FÍSICO", (
        Row((
            inline("FC", "physical_exam.heart_rate", 6),
            inline("FR", "physical_exam.respiratory_rate", 6),
            inline("MI", "physical_exam.intestinal_movement", 6),
        )),
        Row((
            inline("T° C", "physical_exam.temperature"),
            inline("Hidratação", "physical_exam.hydration"),
            inline("Linfonodos", "physical_exam.lymph_nodes"),
        )),
        Row((
            inline("Mucosas", "physical_exam.mucous_membranes"),
            inline("TPC", "physical_exam.capillary_refill_time"),
        )),
        Row((
            inline("Pulso", "physical_exam.pulse"),
            inline("Inspeção geral", "physical_exam.general_inspection"),
        )),
        Row((
            inline("Pêlos e pele", "physical_exam.coat_and_skin"),
            inline("Estado Nutricional", "physical_exam.nutritional_status"),
        )),
        Row((inline("Palpação", "physical_exam.palpation"),)),
        Row((inline("Auscultação cardio-pulmonar", "physical_exam.cardiopulmonary_auscultation", 40),)),
        Row((inline("Percussão", "physical_exam.percussion", 40),)),
        Caption("Observações complementares:"),
        TextArea("physical_exam.additional_notes", 6),
    )),
    Section("DIAGNÓSTICOS DIFERENCIAIS", (
        TextArea("differential_diagnoses.diagnoses", 2),
    )),
    Section("EXAME POR IMAGEM", (
        Row((
            CheckLeaf("RX", "imaging.xray"),
            CheckLeaf("US", "imaging.ultrasound"),
            CheckLeaf("Tomografia", "imaging.tomography"),
        )),
        Row((TextLeaf("Região a ser examinada", "imaging.examined_region", 40),)),
        Row((
            inline("Nº da radiografia", "imaging.radiograph_number"),
            inline("Quantidade", "imaging.quantity"),
            TextLeaf("Data", "imaging.date", separator=" ", empty=FULL_DATE_PLACEHOLDER),
        )),
    )),
    Section("TRATAMENTO", (
        TextArea("treatment.prescription", 6),
        Row((TextLeaf("RETORNO", "treatment.follow_up", 30),)),
    )),
)


def iter_leaves(layout: Tuple[Section, ...] = FICHA_LAYOUT) -> Iterator[Tuple[str, type]]:
    """Yield ``(path, kind)`` for every record leaf the layout prints."""
    for section in layout:
        for block in section.blocks:
            if isinstance(block, Grid):
                pieces = block.cells
            elif isinstance(block, Row):
                pieces = block.pieces
            elif isinstance(block, TextArea):
                yield block.path, str
                continue
            else:
                continue
            for piece in pieces:
                if isinstance(piece, CheckLeaf):
                    yield piece.path, bool
                    if piece.date_path:
                        yield piece.date_path, str
                else:
                    yield piece.path, str


# ── Rendering ───────────────────────────────────────────────────────

Lookup = Callable[[str], Any]


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _fill(ctx: RenderContext, lookup: Lookup, path: str, empty: str) -> str:
    value = lookup(path)
    if is_blank(value):
        ctx.blank_fields.append(path)
        return empty
    return normalize_whitespace(str(value))


def piece_text(ctx: RenderContext, piece: Piece, lookup: Lookup) -> str:
    """Text of one form piece, recording any placeholder it emits."""
    if isinstance(piece, CheckLeaf):
        text = f"{piece.label} {CHECKBOX_MARKS[bool(lookup(piece.path))]}"
        if piece.date_path:
            text += " " + _fill(ctx, lookup, piece.date_path, DATE_PLACEHOLDER)
        return text
    value = _fill(ctx, lookup, piece.path, piece.placeholder)
    return f"{piece.label}{piece.separator}{value}{piece.suffix}"


def _wrapper(ctx: RenderContext, style: TextStyle):
    return lambda text, width: wrap_text(text, width, lambda s: measure(ctx, s, style))


def render_grid(ctx: RenderContext, grid: Grid, lookup: Lookup) -> None:
    """Render cells in columns; each cell wraps inside its own column."""
    style = text_style("field")
    wrap = _wrapper(ctx, style)
    gutter = spacing.grid_gutter
    column_width = (ctx.content_width - gutter * (grid.columns - 1)) / grid.columns
    texts = [piece_text(ctx, cell, lookup) for cell in grid.cells]

    for start in range(0, len(texts), grid.columns):
        cells = [wrap(text, column_width) for text in texts[start:start + grid.columns]]
        row_lines = max(len(lines) for lines in cells)
        if row_lines * spacing.line > ctx.usable_height:
            # Row taller than a page: place it one line at a time
            for index in range(row_lines):
                ensure_space(ctx, spacing.line)
                _draw_grid_line(ctx, cells, index, column_width, gutter, style)
                advance(ctx, spacing.line)
            continue

        ensure_space(ctx, row_lines * spacing.line)
        for index in range(row_lines):
            _draw_grid_line(ctx, cells, index, column_width, gutter, style, offset=index * spacing.line)
        advance(ctx, row_lines * spacing.line)


def _draw_grid_line(ctx: RenderContext, cells: List[List[str]], index: int, column_width: float,
                    gutter: float, style: TextStyle, offset: float = 0.0) -> None:
    for column, lines in enumerate(cells):
        if index < len(lines) and lines[index]:
            x = ctx.left + column * (column_width + gutter)
            ctx.surface.draw_text(lines[index], x, ctx.cursor_y + offset + style.size, style)


def flow_pieces(texts: List[str], width: float, wrap, measure_text) -> List[str]:
    """Flow pieces left to right; a piece wider than a line is word-wrapped."""
    lines: List[str] = []
    current = ""
    for text in texts:
        candidate = f"{current}{spacing.inline_gap}{text}" if current else text
        if measure_text(candidate) <= width:
            current = candidate
            continue
        if current:
            lines.append(current)
        parts = wrap(text, width)
        lines.extend(parts[:-1])
        current = parts[-1]
    if current:
        lines.append(current)
    return lines


def render_row(ctx: RenderContext, row: Row, lookup: Lookup) -> None:
    style = text_style("field")
    texts = [piece_text(ctx, piece, lookup) for piece in row.pieces]
    lines = flow_pieces(texts, ctx.content_width, _wrapper(ctx, style), lambda s: measure(ctx, s, style))
    for line in lines:
        draw_text_line(ctx, line, style, spacing.line)


def _writing_line(ctx: RenderContext) -> None:
    ensure_space(ctx, spacing.line)
    draw_rule(ctx, y=ctx.cursor_y + spacing.line * 0.8, width=LINE_WIDTHS["thin"], color=colors.writing_line)
    advance(ctx, spacing.line)


def render_text_area(ctx: RenderContext, area: TextArea, lookup: Lookup) -> None:
    """
    Render free text padded with ruled writing lines to a minimum height.

    Empty: the placeholder run on the first line, ruled lines for the rest.
    Filled: every wrapped line is kept, then ruled lines pad up to the minimum.
    """
    style = text_style("field")
    value = lookup(area.path)

    if is_blank(value):
        ctx.blank_fields.append(area.path)
        draw_text_line(ctx, placeholder(TEXT_AREA_PLACEHOLDER_LENGTH), style, spacing.line)
        written = 1
    else:
        lines = _wrapper(ctx, style)(value.strip(), ctx.content_width)
        for line in lines:
            draw_text_line(ctx, line, style, spacing.line)
        written = len(lines)

    for _ in range(area.min_lines - written):
        _writing_line(ctx)


def render_caption(ctx: RenderContext, caption: Caption) -> None:
    draw_text_line(ctx, caption.text, text_style("field"), spacing.line)


def render_block(ctx: RenderContext, block: Block, lookup: Lookup) -> None:
    """Render a single block based on its type."""
    if isinstance(block, Grid):
        render_grid(ctx, block, lookup)
    elif isinstance(block, Row):
        render_row(ctx, block, lookup)
    elif isinstance(block, TextArea):
        render_text_area(ctx, block, lookup)
    elif isinstance(block, Caption):
        render_caption(ctx, block)


def render_section(ctx: RenderContext, section: Section, lookup: Lookup) -> None:
    """Heading and hint kept on the same page as the first line of content."""
    hint_style = text_style("hint")
    hint_leading = font_sizes.hint * 1.5
    hint_lines = _wrapper(ctx, hint_style)(section.hint, ctx.content_width) if section.hint else []

    if section.title:
        ensure_space(ctx, spacing.line + spacing.title_gap + hint_leading * len(hint_lines) + spacing.line)
        draw_text_line(ctx, section.title, text_style("section_title"), spacing.line + spacing.title_gap)
    for line in hint_lines:
        draw_text_line(ctx, line, hint_style, hint_leading)

    for block in section.blocks:
        render_block(ctx, block, lookup)
    advance(ctx, spacing.section_gap)


def record_lookup(record: ClinicalRecord,
                  veterinarian: Optional[VeterinarianIdentity] = None) -> Lookup:
    """
    Resolve leaf paths against the record.

    A veterinarian identity supplied by the caller takes precedence over the
    veterinarian leaves stored on the record.
    """
    overrides: Dict[str, str] = {}
    if veterinarian is not None:
        if not is_blank(veterinarian.name):
            name = veterinarian.name.strip()
            if not is_blank(veterinarian.registration):
                name += f" - CRMV {veterinarian.registration.strip()}"
            overrides["veterinarian.name"] = name
        if not is_blank(veterinarian.signature):
            overrides["veterinarian.signature"] = veterinarian.signature

    def lookup(path: str) -> Any:
        if path in overrides:
            return overrides[path]
        return record.value_at(path)

    return lookup


def render_ficha(ctx: RenderContext, record: ClinicalRecord,
                 veterinarian: Optional[VeterinarianIdentity] = None,
                 layout: Tuple[Section, ...] = FICHA_LAYOUT) -> None:
    """
    Render every form section of a clinical record.

    Args:
        ctx: Render context positioned below the form title
        record: Clinical record (read only)
        veterinarian: Optional identity overriding the record's veterinarian leaves
        layout: Form layout
    """
    lookup = record_lookup(record, veterinarian)
    for section in layout:
        render_section(ctx, section, lookup)
    logger.debug(f"Form rendered with {len(ctx.blank_fields)} blank field(s)")
