"""
Exporter: serializes a stamped handle and saves it as a download.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from .config import config
from .loader import DocumentHandle
from .utils.pdf_utils import pdf_to_bytes

logger = logging.getLogger(__name__)

FILENAME_PATTERN = "Certificado_{city}_{tax_id}{suffix}.pdf"
DEBUG_SUFFIX = "_DEBUG"
MISSING_TAX_ID = "SIN_NIT"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def sanitize_token(value: str, fallback: str) -> str:
    """Keep letters, digits, '-' and '_' so the value is safe in a file name."""
    sanitized = _UNSAFE_CHARS.sub("_", value.strip()).strip("_")
    return sanitized or fallback


def build_filename(city: str, tax_id: str, debug: bool = False) -> str:
    """``Certificado_{CITY}_{TAXID}.pdf`` (``_DEBUG`` suffix in calibration mode)."""
    return FILENAME_PATTERN.format(
        city=sanitize_token(city.upper(), "CIUDAD"),
        tax_id=sanitize_token(tax_id, MISSING_TAX_ID),
        suffix=DEBUG_SUFFIX if debug else "",
    )


def export(handle: DocumentHandle) -> bytes:
    """
    Serialize the handle. The handle cannot be stamped or exported afterwards.

    Raises:
        HandleConsumed: If the handle was already exported
    """
    handle.ensure_open()
    try:
        pdf_bytes = pdf_to_bytes(handle.document)
    finally:
        handle.document.close()
        handle.consumed = True
    return pdf_bytes


def save_download(pdf_bytes: bytes, filename: str, output_dir: Optional[Path] = None) -> Path:
    """
    Deliver the artifact to the operator by writing it to the output directory.

    Returns:
        Path of the written file
    """
    output_path = Path(output_dir or config.OUTPUT_DIR) / filename
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("wb") as handle:
        handle.write(pdf_bytes)
    logger.info("Saved %s (%d bytes)", output_path, len(pdf_bytes))
    return output_path
