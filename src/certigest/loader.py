"""
Document loader: acquires the base document of a city as a mutable handle.

Two strategies, picked from the city's source:

* template: open one PDF with PyMuPDF and keep its pages as they are
* images (legacy): build one page per JPEG/PNG image, page size equal to the
  image size in pixels, image drawn at (0, 0). Images that cannot be fetched
  or decoded are skipped; loading fails only when no page is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import fitz  # pymupdf
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import config
from .errors import (
    AssetFetchFailed,
    HandleConsumed,
    InvalidAsset,
    MissingTemplateSource,
    TemplateNotFound,
    UnsupportedImageFormat,
)
from .schemas.template import CityTemplateConfig, ImageSource, TemplateSource
from .utils.assets import fetch_asset
from .utils.image_utils import decode_page_image
from .utils.pdf_utils import open_pdf, overlay_pages, page_sizes

logger = logging.getLogger(__name__)


@dataclass
class DocumentHandle:
    """
    In-memory base document of one generation request.

    Created by ``load``, mutated by the stamper, consumed once by the exporter.
    """

    city: str
    strategy: str  # template | images
    document: fitz.Document
    page_sizes: List[Tuple[float, float]]
    consumed: bool = False

    @property
    def page_count(self) -> int:
        return len(self.page_sizes)

    def ensure_open(self) -> None:
        if self.consumed:
            raise HandleConsumed("Document handle was already exported", city=self.city)

    def merge_overlay(self, overlay_bytes: bytes, pages: Sequence[int]) -> None:
        """Draw overlay page N onto document page N for every page in ``pages``."""
        self.ensure_open()
        overlay = open_pdf(overlay_bytes)
        try:
            overlay_pages(self.document, overlay, sorted(set(pages)))
        finally:
            overlay.close()


def _load_pdf(data: bytes, reference: str) -> fitz.Document:
    try:
        document = open_pdf(data)
    except (RuntimeError, ValueError) as exc:
        raise InvalidAsset(f"Template {reference} is not a readable PDF: {exc}") from exc
    if document.needs_pass and not document.authenticate(""):
        document.close()
        raise InvalidAsset(f"Template {reference} is password protected")
    if document.page_count == 0:
        document.close()
        raise InvalidAsset(f"Template {reference} has no pages")
    return document


def _handle_from_document(document: fitz.Document, city: str, strategy: str) -> DocumentHandle:
    return DocumentHandle(
        city=city,
        strategy=strategy,
        document=document,
        page_sizes=page_sizes(document),
    )


def load_template(
    source: TemplateSource,
    city: str,
    assets_dir: Path,
    timeout: Optional[float] = None,
) -> DocumentHandle:
    """
    Template strategy: parse the configured PDF as-is.

    Raises:
        TemplateNotFound: If the PDF cannot be fetched
        InvalidAsset: If the bytes are not a readable PDF
    """
    try:
        data = fetch_asset(source.path, assets_dir, timeout=timeout)
    except AssetFetchFailed as exc:
        raise TemplateNotFound(
            f"Template not found for {city}: {exc.message}", city=city
        ) from exc
    document = _load_pdf(data, source.path)
    logger.info("Loaded template %s (%d pages)", source.path, document.page_count)
    return _handle_from_document(document, city, "template")


def assemble_from_images(
    images: Sequence[str],
    city: str,
    assets_dir: Path,
    timeout: Optional[float] = None,
) -> DocumentHandle:
    """
    Legacy image strategy: one page per usable image.

    Raises:
        TemplateNotFound: If none of the images could be used
    """
    buffer = BytesIO()
    canv = canvas.Canvas(buffer, invariant=1)
    page_total = 0
    for reference in images:
        try:
            data = fetch_asset(reference, assets_dir, timeout=timeout)
            image = decode_page_image(data, reference)
        except (AssetFetchFailed, UnsupportedImageFormat) as exc:
            logger.warning("Skipping page image %s: %s", reference, exc.message)
            continue
        width, height = image.size
        canv.setPageSize((width, height))
        canv.drawImage(ImageReader(image), 0, 0, width=width, height=height)
        canv.showPage()
        page_total += 1

    if page_total == 0:
        raise TemplateNotFound(
            f"No usable page images for {city} ({len(images)} configured)", city=city
        )
    canv.save()
    logger.info("Assembled %d of %d page images for %s", page_total, len(images), city)
    return _handle_from_document(open_pdf(buffer.getvalue()), city, "images")


def load(
    city_config: CityTemplateConfig,
    assets_dir: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> DocumentHandle:
    """
    Load the base document of a city.

    Args:
        city_config: Template configuration of the city
        assets_dir: Base directory for relative asset references
        timeout: Seconds to wait for remote assets

    Returns:
        A fresh DocumentHandle owned by the caller
    """
    assets_dir = Path(assets_dir or config.ASSETS_DIR)
    timeout = timeout if timeout is not None else config.FETCH_TIMEOUT
    source = city_config.source
    if isinstance(source, TemplateSource):
        return load_template(source, city_config.city, assets_dir, timeout)
    if isinstance(source, ImageSource):
        return assemble_from_images(source.images, city_config.city, assets_dir, timeout)
    raise MissingTemplateSource(
        f"City '{city_config.city}' has no template source", city=city_config.city
    )
