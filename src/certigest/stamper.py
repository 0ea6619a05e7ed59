"""
Stamper: writes form values onto the pages of a document handle.

Stamping happens in two steps. ``plan_operations`` turns form values and the
city mapping into a flat list of ``DrawOperation`` records; ``render_overlay``
draws them with reportlab on a transparent overlay that is merged page by
page into the handle. Production and calibration output share this routine;
``RenderMode`` decides colours and whether captions and the grid are drawn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .errors import CertificateError
from .loader import DocumentHandle
from .resolver import DEFAULT_FONT, DEFAULT_FONT_SIZE, ConcretePlacement, resolve
from .schemas.base import FieldKey
from .schemas.form import FormData
from .schemas.template import CityTemplateConfig

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

# Mask origin sits below-left of the text origin so descenders and the first
# glyph's left edge are covered
MASK_OFFSET_X = 2.0
MASK_OFFSET_Y = 3.0
MIN_FONT_SIZE = 5.0
CAPTION_FONT = "Helvetica"
CAPTION_SIZE = 5.0
GRID_STEP = 50
GRID_LABEL_SIZE = 6.0


@dataclass(frozen=True)
class RenderMode:
    """Colours and optional calibration aids of one rendering pass."""

    name: str
    text_color: RGB
    mask_color: RGB
    mask_alpha: float
    draw_captions: bool = False
    draw_grid: bool = False
    caption_color: RGB = (1.0, 0.0, 0.0)
    grid_color: RGB = (0.0, 0.0, 1.0)


# Near-black matches the tone of scanned/printed certificates; white masks
# blend with the paper
PRODUCTION_MODE = RenderMode(
    name="production",
    text_color=(0.1, 0.1, 0.1),
    mask_color=(1.0, 1.0, 1.0),
    mask_alpha=1.0,
)

DEBUG_MODE = RenderMode(
    name="debug",
    text_color=(0.0, 0.0, 1.0),
    mask_color=(1.0, 0.0, 0.0),
    mask_alpha=0.3,
    draw_captions=True,
    draw_grid=True,
)


@dataclass(frozen=True)
class DrawOperation:
    """A single primitive to draw on one page of the overlay."""

    kind: str  # grid | mask | text | caption
    page: int
    key: FieldKey | None = None
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    font: str = DEFAULT_FONT.value
    size: float = DEFAULT_FONT_SIZE
    color: RGB = (0.0, 0.0, 0.0)
    alpha: float = 1.0


def fit_font_size(text: str, font: str, size: float, max_width: float | None) -> float:
    """Shrink ``size`` so ``text`` fits in ``max_width`` (never below MIN_FONT_SIZE)."""
    if max_width is None:
        return size
    width = pdfmetrics.stringWidth(text, font, size)
    if width <= max_width:
        return size
    return max(size * max_width / width, MIN_FONT_SIZE)


def plan_placement(
    placement: ConcretePlacement,
    text: str,
    page: int,
    mode: RenderMode,
) -> List[DrawOperation]:
    operations: List[DrawOperation] = []
    if placement.has_mask:
        operations.append(
            DrawOperation(
                kind="mask",
                page=page,
                key=placement.key,
                x=placement.x - MASK_OFFSET_X,
                y=placement.y - MASK_OFFSET_Y,
                width=placement.box_width,
                height=placement.box_height,
                color=mode.mask_color,
                alpha=mode.mask_alpha,
            )
        )
    font = placement.font.value
    operations.append(
        DrawOperation(
            kind="text",
            page=page,
            key=placement.key,
            x=placement.x,
            y=placement.y,
            text=text,
            font=font,
            size=fit_font_size(text, font, placement.size, placement.max_width),
            color=mode.text_color,
        )
    )
    if mode.draw_captions:
        operations.append(
            DrawOperation(
                kind="caption",
                page=page,
                key=placement.key,
                x=placement.x,
                y=placement.y + placement.size + 1.0,
                text=placement.key.value,
                font=CAPTION_FONT,
                size=CAPTION_SIZE,
                color=mode.caption_color,
            )
        )
    return operations


def plan_operations(
    form_data: FormData,
    city_config: CityTemplateConfig,
    page_count: int,
    mode: RenderMode = PRODUCTION_MODE,
) -> List[DrawOperation]:
    """
    Decide every drawing operation for one document.

    Args:
        form_data: Values typed by the operator
        city_config: Template configuration of the city
        page_count: Pages in the base document
        mode: Production or calibration rendering

    Returns:
        Operations in draw order (grid first, then fields in mapping order)
    """
    operations: List[DrawOperation] = []
    if mode.draw_grid:
        operations.extend(
            DrawOperation(kind="grid", page=page, color=mode.grid_color)
            for page in range(page_count)
        )

    for key in city_config.pdf_mapping:
        value = form_data.value(key)
        if not value:
            continue
        text = value.upper()
        for placement in resolve(key, city_config):
            for page in placement.target_pages(page_count):
                if page >= page_count:
                    logger.warning(
                        "Field %s targets page %d but %s has %d page(s); skipped",
                        key.value,
                        page,
                        city_config.city,
                        page_count,
                    )
                    continue
                operations.extend(plan_placement(placement, text, page, mode))
    logger.debug("Planned %d operations (%s mode)", len(operations), mode.name)
    return operations


def draw_grid(canv: canvas.Canvas, op: DrawOperation, width: float, height: float) -> None:
    """Coordinate grid with axis labels (bottom-left origin, like placements)."""
    canv.saveState()
    canv.setStrokeColorRGB(*op.color, alpha=0.15)
    canv.setLineWidth(0.5)
    for x in range(0, int(width) + 1, GRID_STEP):
        canv.line(x, 0, x, height)
    for y in range(0, int(height) + 1, GRID_STEP):
        canv.line(0, y, width, y)

    canv.setFillColorRGB(*op.color, alpha=0.5)
    canv.setFont(CAPTION_FONT, GRID_LABEL_SIZE)
    for x in range(0, int(width) + 1, GRID_STEP):
        canv.drawString(x + 2, 5, str(x))
    for y in range(GRID_STEP, int(height) + 1, GRID_STEP):
        canv.drawString(2, y + 2, str(y))
    canv.restoreState()


def draw_mask(canv: canvas.Canvas, op: DrawOperation, width: float, height: float) -> None:
    canv.saveState()
    canv.setFillColorRGB(*op.color, alpha=op.alpha)
    canv.rect(op.x, op.y, op.width, op.height, stroke=0, fill=1)
    canv.restoreState()


def draw_text(canv: canvas.Canvas, op: DrawOperation, width: float, height: float) -> None:
    canv.saveState()
    canv.setFont(op.font, op.size)
    canv.setFillColorRGB(*op.color, alpha=op.alpha)
    canv.drawString(op.x, op.y, op.text)
    canv.restoreState()


DRAWERS: Dict[str, Callable[[canvas.Canvas, DrawOperation, float, float], None]] = {
    "grid": draw_grid,
    "mask": draw_mask,
    "text": draw_text,
    "caption": draw_text,
}


def render_overlay(
    operations: Sequence[DrawOperation],
    page_sizes: Sequence[Tuple[float, float]],
) -> bytes:
    """Draw the operations on a transparent overlay with one page per document page."""
    buffer = BytesIO()
    canv = canvas.Canvas(buffer, invariant=1)

    pages_by_index: Dict[int, List[DrawOperation]] = {i: [] for i in range(len(page_sizes))}
    for op in operations:
        pages_by_index[op.page].append(op)

    for page_index, (width, height) in enumerate(page_sizes):
        canv.setPageSize((width, height))
        for op in pages_by_index[page_index]:
            DRAWERS[op.kind](canv, op, width, height)
        canv.showPage()

    canv.save()
    return buffer.getvalue()


def stamp(
    handle: DocumentHandle,
    form_data: FormData | Mapping[str, Any],
    city_config: CityTemplateConfig,
    debug: bool = False,
) -> List[DrawOperation]:
    """
    Stamp the form values onto the handle's pages in place.

    Unmapped fields and empty values are skipped silently. Values are always
    upper-cased.

    Args:
        handle: Loaded base document (mutated)
        form_data: Form values (FormData or a plain mapping)
        city_config: Template configuration of the city
        debug: Calibration mode (translucent masks, captions, grid)

    Returns:
        The operations that were drawn
    """
    if handle is None:
        raise CertificateError("No document handle to stamp", city=city_config.city)
    handle.ensure_open()
    if not isinstance(form_data, FormData):
        form_data = FormData.model_validate(form_data)

    mode = DEBUG_MODE if debug else PRODUCTION_MODE
    operations = plan_operations(form_data, city_config, handle.page_count, mode)
    overlay = render_overlay(operations, handle.page_sizes)
    handle.merge_overlay(overlay, [op.page for op in operations])
    logger.info(
        "Stamped %d operation(s) on %d page(s) for %s",
        len(operations),
        handle.page_count,
        city_config.city,
    )
    return operations
