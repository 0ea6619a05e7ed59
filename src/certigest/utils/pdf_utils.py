"""
PDF utility functions for opening, merging and serializing documents.
"""

from pathlib import Path
from typing import List, Tuple

import fitz  # pymupdf


def open_pdf(pdf_input: bytes | str | Path) -> fitz.Document:
    """
    Open a PDF from bytes or a path.

    Args:
        pdf_input: PDF as bytes, file path string, or Path object

    Returns:
        Open fitz.Document (caller closes it)

    Raises:
        RuntimeError, ValueError: If the input is not a readable PDF
    """
    if isinstance(pdf_input, bytes):
        return fitz.open(stream=pdf_input, filetype="pdf")
    return fitz.open(str(pdf_input))


def page_sizes(doc: fitz.Document) -> List[Tuple[float, float]]:
    """(width, height) in points of every page."""
    return [(page.rect.width, page.rect.height) for page in doc]


def overlay_pages(doc: fitz.Document, overlay: fitz.Document, pages: List[int]) -> None:
    """
    Draw page N of ``overlay`` on top of page N of ``doc`` for each N in ``pages``.

    The overlay page is embedded as a form XObject with its own resources, so
    its font names never clash with the base page's.
    """
    for index in pages:
        page = doc[index]
        page.show_pdf_page(page.rect, overlay, index, overlay=True)


def pdf_to_bytes(doc: fitz.Document) -> bytes:
    """Serialize without regenerating the file /ID, so equal input gives equal bytes."""
    return doc.tobytes(garbage=1, deflate=True, no_new_id=True)
