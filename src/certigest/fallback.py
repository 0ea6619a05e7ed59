"""
Fallback reporter: a one-page PDF describing why generation failed.

The operator always gets a downloadable file, even when the certificate
could not be produced.
"""

from __future__ import annotations

import textwrap
from io import BytesIO

from reportlab.pdfgen import canvas

ERROR_FILENAME = "error_log.pdf"
PAGE_SIZE = (600, 400)
TITLE = "ERROR: No se pudo generar el certificado"
HINT = "Revise la plantilla configurada para la ciudad y vuelva a intentarlo."
# reportlab does not wrap drawString output
WRAP_WIDTH = 90
MAX_LINES = 16
LINE_HEIGHT = 13


def wrap_message(message: str, width: int = WRAP_WIDTH, max_lines: int = MAX_LINES) -> list[str]:
    """Split a message into lines of at most ``width`` characters, truncated to ``max_lines``."""
    lines: list[str] = []
    for paragraph in (message or "").splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width=width, break_long_words=True) or [""])
    if len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = lines[-1][: width - 3] + "..."
    return lines


def report_failure(error: BaseException | str) -> bytes:
    """
    Build the diagnostic PDF for a failed generation.

    Args:
        error: The exception (or message) that stopped the pipeline

    Returns:
        PDF bytes of a single 600x400 page
    """
    if isinstance(error, BaseException):
        kind = type(error).__name__
        message = str(error)
    else:
        kind = "Error"
        message = error

    buffer = BytesIO()
    canv = canvas.Canvas(buffer, pagesize=PAGE_SIZE, invariant=1)
    width, height = PAGE_SIZE

    canv.setFillColorRGB(1, 0, 0)
    canv.setFont("Helvetica-Bold", 20)
    canv.drawString(50, height - 50, TITLE)

    canv.setFillColorRGB(0, 0, 0)
    canv.setFont("Helvetica", 12)
    canv.drawString(50, height - 80, HINT)
    canv.setFont("Helvetica-Bold", 10)
    canv.drawString(50, height - 105, f"Detalle ({kind}):")

    canv.setFont("Courier", 9)
    y = height - 122
    for line in wrap_message(message):
        canv.drawString(50, y, line)
        y -= LINE_HEIGHT

    canv.showPage()
    canv.save()
    return buffer.getvalue()
