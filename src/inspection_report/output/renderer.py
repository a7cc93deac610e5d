"""
Module: output.renderer

Purpose:
    Render a ReportLayout to PDF using ReportLab.
    Each ReportPage becomes exactly one PDF page; the page list is final
    before drawing starts, so "Página X de N" footers are exact.

Key Functions:
    - render_to_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - PIL: Decoding embedded signature and photo payloads
    - layout.models: ReportLayout, ReportPage

Used By:
    - controller: Report pipeline
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from inspection_report.core.models import StatusColor
from inspection_report.extraction.status import StatusCategory
from inspection_report.layout.config import DEFAULT_PAGE_CAPACITY
from inspection_report.layout.models import (
    PackedItem,
    Page,
    PageKind,
    ReportLayout,
    ReportPage,
)

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH_PT, A4_HEIGHT_PT = A4
MARGIN_PT = 42
HEADER_HEIGHT_PT = 28
FOOTER_HEIGHT_PT = 24

TITLE_FONT_SIZE = 18
HEADING_FONT_SIZE = 12
BODY_FONT_SIZE = 9
SMALL_FONT_SIZE = 7
LINE_HEIGHT_PT = 12

PLACEHOLDER_TEXT = "Nenhum item preenchido neste relatório."

_STATUS_RGB = {
    StatusColor.GREEN: colors.HexColor("#2e7d32"),
    StatusColor.RED: colors.HexColor("#c62828"),
    StatusColor.YELLOW: colors.HexColor("#f9a825"),
    StatusColor.BLUE: colors.HexColor("#1565c0"),
    StatusColor.PURPLE: colors.HexColor("#6a1b9a"),
    StatusColor.GRAY: colors.HexColor("#757575"),
}


def render_to_pdf(
    layout: ReportLayout,
    output_path: Path,
    *,
    show_footer: bool = True,
) -> None:
    """
    Render a report layout to a PDF file.

    Args:
        layout: Final page list from insert_fixed_pages()
        output_path: Path to write PDF
        show_footer: Draw header and "Página X de N" footer on pages after
                     the cover

    Raises:
        IOError: If PDF cannot be written

    Example:
        >>> render_to_pdf(layout, Path("output/relatorio.pdf"))
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(output_path), pagesize=A4)
    if layout.metadata.title:
        c.setTitle(layout.metadata.title)

    for page in layout.pages:
        _render_page(c, page, layout)
        if show_footer and page.number > 1:
            _draw_header(c, layout)
            _draw_footer(c, page.number, layout.total_pages, layout.metadata.file_name)
        c.showPage()

    c.save()

    logger.info(f"Rendered {layout.total_pages} pages to {output_path}")


def _render_page(c: canvas.Canvas, page: ReportPage, layout: ReportLayout) -> None:
    if page.kind is PageKind.COVER:
        _draw_cover(c, layout)
    elif page.kind is PageKind.PROJECT_INFO:
        _draw_project_info(c, page, layout)
    elif page.kind is PageKind.CONTENT:
        _draw_content(c, page.content)
    elif page.kind is PageKind.PLACEHOLDER:
        c.setFont("Helvetica-Oblique", BODY_FONT_SIZE)
        c.drawCentredString(A4_WIDTH_PT / 2, A4_HEIGHT_PT / 2, PLACEHOLDER_TEXT)
    elif page.kind is PageKind.GALLERY:
        _draw_gallery(c, page)
    elif page.kind is PageKind.SIGNATURES:
        _draw_signatures(c, page)


def _content_top() -> float:
    return A4_HEIGHT_PT - MARGIN_PT - HEADER_HEIGHT_PT


def _content_bottom() -> float:
    return MARGIN_PT + FOOTER_HEIGHT_PT


def _content_width() -> float:
    return A4_WIDTH_PT - 2 * MARGIN_PT


def _draw_header(c: canvas.Canvas, layout: ReportLayout) -> None:
    """Title and revision at the top of every page after the cover."""
    meta = layout.metadata
    y = A4_HEIGHT_PT - MARGIN_PT
    c.saveState()
    c.setFont("Helvetica-Bold", SMALL_FONT_SIZE + 1)
    c.drawString(MARGIN_PT, y, meta.title or meta.project_name)
    if meta.revision:
        c.setFont("Helvetica", SMALL_FONT_SIZE + 1)
        c.drawRightString(A4_WIDTH_PT - MARGIN_PT, y, f"Revisão {meta.revision}")
    c.setStrokeColor(colors.lightgrey)
    c.line(MARGIN_PT, y - 6, A4_WIDTH_PT - MARGIN_PT, y - 6)
    c.restoreState()


def _draw_footer(c: canvas.Canvas, number: int, total: int, file_name: str) -> None:
    """Page number and file name, 20pt from the bottom."""
    c.saveState()
    c.setFont("Helvetica", SMALL_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    if file_name:
        c.drawString(MARGIN_PT, 20, file_name)
    c.drawRightString(A4_WIDTH_PT - MARGIN_PT, 20, f"Página {number} de {total}")
    c.restoreState()


def _draw_cover(c: canvas.Canvas, layout: ReportLayout) -> None:
    meta = layout.metadata
    y = A4_HEIGHT_PT * 0.62
    c.setFont("Helvetica-Bold", TITLE_FONT_SIZE)
    for line in simpleSplit(meta.title or "Relatório de Vistoria", "Helvetica-Bold", TITLE_FONT_SIZE, _content_width()):
        c.drawCentredString(A4_WIDTH_PT / 2, y, line)
        y -= TITLE_FONT_SIZE + 6

    c.setFont("Helvetica", HEADING_FONT_SIZE)
    for text in (meta.project_name, meta.unit, meta.client):
        if text:
            y -= LINE_HEIGHT_PT + 4
            c.drawCentredString(A4_WIDTH_PT / 2, y, text)

    c.setFont("Helvetica", BODY_FONT_SIZE)
    y = MARGIN_PT + 4 * LINE_HEIGHT_PT
    for label, value in (
        ("Data da vistoria", meta.inspection_date),
        ("Data do relatório", meta.report_date),
        ("Revisão", meta.revision),
    ):
        if value:
            c.drawCentredString(A4_WIDTH_PT / 2, y, f"{label}: {value}")
            y -= LINE_HEIGHT_PT


def _draw_project_info(c: canvas.Canvas, page: ReportPage, layout: ReportLayout) -> None:
    meta = layout.metadata
    y = _content_top()
    c.setFont("Helvetica-Bold", HEADING_FONT_SIZE)
    c.drawString(MARGIN_PT, y, "Informações do empreendimento")
    y -= LINE_HEIGHT_PT * 2

    fields = (
        ("Empreendimento", meta.project_name),
        ("Cliente", meta.client),
        ("Unidade", meta.unit),
        ("Proprietário", meta.tenant),
        ("Consultor", meta.consultant),
        ("Participantes", ", ".join(meta.participants)),
        ("Contrato", meta.contract_text),
        ("Escopo", meta.scope_text),
    )
    for label, value in fields:
        if not value:
            continue
        y = _draw_wrapped(c, f"{label}: {value}", MARGIN_PT, y, _content_width())
        y -= 4

    summary = page.summary
    if summary is None:
        return

    y -= LINE_HEIGHT_PT
    c.setFont("Helvetica-Bold", HEADING_FONT_SIZE)
    c.drawString(MARGIN_PT, y, "Resumo da vistoria")
    y -= LINE_HEIGHT_PT * 1.5
    c.setFont("Helvetica", BODY_FONT_SIZE)
    for category in StatusCategory:
        c.drawString(MARGIN_PT, y, f"{category.value}: {summary.count(category)}")
        y -= LINE_HEIGHT_PT
    c.drawString(MARGIN_PT, y, f"Itens respondidos: {summary.answered_items}")
    y -= LINE_HEIGHT_PT * 1.5

    for number, tally in enumerate(summary.sections, start=1):
        if tally.total == 0:
            continue
        if y < _content_bottom():
            logger.debug("Section tallies truncated on project information page")
            break
        c.drawString(
            MARGIN_PT, y,
            f"{number}. {tally.section_name}: {tally.conforming} C / "
            f"{tally.non_conforming} NC / {tally.pending} P",
        )
        y -= LINE_HEIGHT_PT


def _draw_content(c: canvas.Canvas, page: Optional[Page]) -> None:
    """
    Draw the section groups of one content page.

    Vertical space is handed out in weight units so that every page fits,
    including over-capacity pages kept together to avoid orphans.
    """
    if page is None:
        return
    available = _content_top() - _content_bottom()
    unit = available / max(page.total_weight + len(page.groups), DEFAULT_PAGE_CAPACITY)
    y = _content_top()

    for group in page.groups:
        section = group.section
        c.setFont("Helvetica-Bold", HEADING_FONT_SIZE)
        c.drawString(MARGIN_PT, y - HEADING_FONT_SIZE, f"{section.ordinal}. {section.name}")
        y -= HEADING_FONT_SIZE + 6
        if page.shows_observation(section.index):
            y = _draw_wrapped(
                c, f"Observação: {section.observation}", MARGIN_PT, y - BODY_FONT_SIZE,
                _content_width(), font="Helvetica-Oblique",
            )

        for item in group.items:
            y = _draw_item(c, item, y, unit)


def _draw_item(c: canvas.Canvas, item: PackedItem, y: float, unit: float) -> float:
    record = item.record
    label = record.question_text
    if item.roman_numeral:
        label = f"{item.roman_numeral}. {label}"
    if item.is_continuation:
        label = f"{label} (continuação {item.part_number}/{item.part_count})"

    top = y
    c.setFillColor(_STATUS_RGB.get(record.color, colors.grey))
    c.circle(MARGIN_PT + 3, y - BODY_FONT_SIZE + 3, 3, stroke=0, fill=1)
    c.setFillColor(colors.black)
    y = _draw_wrapped(c, label, MARGIN_PT + 10, y - BODY_FONT_SIZE, _content_width() - 10, font="Helvetica-Bold")

    if record.has_response and not item.is_continuation:
        y = _draw_wrapped(c, record.display_text, MARGIN_PT + 10, y, _content_width() - 10)
    if item.comment:
        y = _draw_wrapped(c, item.comment, MARGIN_PT + 10, y, _content_width() - 10, font="Helvetica-Oblique")
    if record.signature_image and not item.is_continuation:
        reader = _decode_image(record.signature_image)
        if reader is not None:
            c.drawImage(reader, MARGIN_PT + 10, y - 40, width=120, height=40, preserveAspectRatio=True, mask="auto")
            y -= 44

    if item.photos:
        row_height = 2 * unit
        frame_w = (_content_width() - 10 - 8) / 2
        for i, photo in enumerate(item.photos):
            col = i % 2
            if col == 0 and i > 0:
                y -= row_height
            x = MARGIN_PT + 10 + col * (frame_w + 8)
            _draw_photo_frame(c, photo.url, photo.caption, x, y - row_height + 4, frame_w, row_height - 8)
        y -= row_height

    return min(y, top - unit)


def _draw_photo_frame(
    c: canvas.Canvas,
    url: str,
    caption: str,
    x: float,
    y: float,
    width: float,
    height: float,
) -> None:
    """Photo box with caption; remote URLs are drawn as an empty frame."""
    caption_h = SMALL_FONT_SIZE + 3 if caption else 0
    c.saveState()
    c.setStrokeColor(colors.lightgrey)
    c.rect(x, y + caption_h, width, max(height - caption_h, 1), stroke=1, fill=0)
    reader = _decode_image(url)
    if reader is not None:
        c.drawImage(reader, x, y + caption_h, width=width, height=max(height - caption_h, 1),
                    preserveAspectRatio=True, anchor="c", mask="auto")
    if caption:
        c.setFont("Helvetica", SMALL_FONT_SIZE)
        c.drawCentredString(x + width / 2, y, caption[:120])
    c.restoreState()


def _draw_gallery(c: canvas.Canvas, page: ReportPage) -> None:
    """One line per photo; numbering runs on across gallery pages."""
    y = _content_top()
    heading = "Relação de fotos"
    if page.gallery and page.gallery[0].number > 1:
        heading = f"{heading} (continuação)"
    c.setFont("Helvetica-Bold", HEADING_FONT_SIZE)
    c.drawString(MARGIN_PT, y, heading)
    y -= LINE_HEIGHT_PT * 2
    c.setFont("Helvetica", BODY_FONT_SIZE)
    for drawn, entry in enumerate(page.gallery):
        if y - LINE_HEIGHT_PT < _content_bottom():
            logger.warning(f"Gallery page {page.number} truncated after {drawn} of {len(page.gallery)} photos")
            _draw_truncation_note(c, y, len(page.gallery) - drawn)
            break
        text = f"Foto {entry.number} - {entry.section_name}"
        if entry.caption:
            text = f"{text}: {entry.caption}"
        c.drawString(MARGIN_PT, y, _fit_line(text, "Helvetica", BODY_FONT_SIZE, _content_width()))
        y -= LINE_HEIGHT_PT


def _draw_signatures(c: canvas.Canvas, page: ReportPage) -> None:
    y = _content_top()
    c.setFont("Helvetica-Bold", HEADING_FONT_SIZE)
    c.drawString(MARGIN_PT, y, "Assinaturas")
    y -= LINE_HEIGHT_PT * 3

    box_h = 90
    for drawn, signature in enumerate(page.signatures):
        if y - box_h < _content_bottom():
            logger.warning(f"Signatures page {page.number} is full, remaining entries omitted")
            _draw_truncation_note(c, y, len(page.signatures) - drawn)
            break
        if signature.image:
            reader = _decode_image(signature.image)
            if reader is not None:
                c.drawImage(reader, MARGIN_PT, y - 50, width=180, height=50,
                            preserveAspectRatio=True, mask="auto")
        c.line(MARGIN_PT, y - 54, MARGIN_PT + 220, y - 54)
        c.setFont("Helvetica-Bold", BODY_FONT_SIZE)
        c.drawString(MARGIN_PT, y - 54 - LINE_HEIGHT_PT, signature.name)
        c.setFont("Helvetica", BODY_FONT_SIZE)
        c.drawString(MARGIN_PT, y - 54 - 2 * LINE_HEIGHT_PT, signature.party)
        y -= box_h


def _draw_truncation_note(c: canvas.Canvas, y: float, omitted: int) -> None:
    """Tell the reader that a list did not fit on its page."""
    c.saveState()
    c.setFont("Helvetica-Oblique", SMALL_FONT_SIZE)
    c.drawString(MARGIN_PT, max(y, _content_bottom()), f"Lista truncada: {omitted} item(ns) omitido(s).")
    c.restoreState()


def _fit_line(text: str, font: str, size: int, width: float) -> str:
    """First wrapped line of text, marked with an ellipsis when cut."""
    lines = simpleSplit(text, font, size, width)
    if len(lines) <= 1:
        return text
    return simpleSplit(lines[0], font, size, width - stringWidth("...", font, size))[0] + "..."


def _draw_wrapped(
    c: canvas.Canvas,
    text: str,
    x: float,
    y: float,
    width: float,
    *,
    font: str = "Helvetica",
    size: int = BODY_FONT_SIZE,
) -> float:
    """Draw wrapped text starting at y; return the y below the last line."""
    c.setFont(font, size)
    for paragraph in str(text).splitlines() or [""]:
        for line in simpleSplit(paragraph, font, size, width) or [""]:
            c.drawString(x, y, line)
            y -= LINE_HEIGHT_PT
    return y


def _decode_image(payload: Optional[str]) -> Optional[ImageReader]:
    """
    Decode an embedded data:image payload or a local image path.

    Anything else (remote URLs, broken payloads) yields None and the
    caller draws an empty frame.
    """
    if not payload:
        return None
    try:
        if payload.startswith("data:image"):
            _, _, encoded = payload.partition(",")
            img = Image.open(io.BytesIO(base64.b64decode(encoded)))
        elif Path(payload).is_file():
            img = Image.open(payload)
        else:
            return None
        img.load()
    except (binascii.Error, ValueError, OSError) as e:
        logger.warning(f"Could not decode image payload: {e}")
        return None
    return _pil_to_reader(img)


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    if img.mode not in ("RGB", "RGBA", "L"):
        img = img.convert("RGBA")
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    buf.seek(0)
    return ImageReader(buf)
