"""
Pytest fixtures: base documents and page images generated on the fly.
"""

import os
import sys
from pathlib import Path

import fitz  # pymupdf
import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _ensure_src_on_path() -> None:
    """Make ``certigest`` importable when the package is not installed."""
    src_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
    if src_root not in sys.path:
        sys.path.insert(0, src_root)


_ensure_src_on_path()

from certigest.schemas.form import FormData  # noqa: E402
from certigest.schemas.template import CityTemplateConfig  # noqa: E402

# Pre-printed value on the base template, where CALI stamps the tax ID
OLD_TEXT = "OLD OLD OLD OLD OLD OLD"
OLD_TEXT_POSITION = (150, 630)


def make_template_pdf(path: Path, pages: int = 2, pagesize=letter) -> Path:
    """A base certificate with a heading and pre-printed content on every page."""
    path.parent.mkdir(parents=True, exist_ok=True)
    canv = canvas.Canvas(str(path), pagesize=pagesize, invariant=1)
    for index in range(pages):
        canv.setFont("Helvetica-Bold", 14)
        canv.drawString(72, pagesize[1] - 60, f"CERTIFICADO PAGINA {index + 1}")
        canv.setFont("Helvetica", 10)
        canv.drawString(OLD_TEXT_POSITION[0], OLD_TEXT_POSITION[1], OLD_TEXT)
        canv.showPage()
    canv.save()
    return path


def pdf_page_count(pdf_bytes: bytes) -> int:
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    count = len(doc)
    doc.close()
    return count


def extract_page_texts(pdf_bytes: bytes) -> list[str]:
    """Text of every page, one string per page."""
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    texts = [page.get_text() for page in doc]
    doc.close()
    return texts


def extract_text_from_pdf(pdf_bytes: bytes) -> str:
    return "\n\n".join(extract_page_texts(pdf_bytes))


def make_page_image(path: Path, size=(300, 400), image_format: str = "PNG") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.new("RGB", size, (250, 250, 245))
    image.save(path, format=image_format)
    return path


def make_city(pdf_mapping: dict, city: str = "PRUEBA", **source) -> CityTemplateConfig:
    """City config from the JSON shape; defaults to a template source."""
    raw = {"city": city, "pdfMapping": pdf_mapping}
    raw.update(source or {"templatePath": "templates/prueba.pdf"})
    return CityTemplateConfig.from_raw(raw)


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    """Assets laid out the way the bundled city files reference them."""
    root = tmp_path / "public"
    make_template_pdf(root / "templates" / "certificado_cali_base.pdf", pages=2)
    make_template_pdf(root / "templates" / "certificado_bogota_base.pdf", pages=1)
    make_template_pdf(root / "templates" / "prueba.pdf", pages=3)
    make_page_image(root / "templates" / "medellin" / "pagina_1.jpg", size=(1275, 1650), image_format="JPEG")
    make_page_image(root / "templates" / "medellin" / "pagina_2.jpg", size=(1275, 1650), image_format="JPEG")
    return root


@pytest.fixture
def full_form() -> FormData:
    """Every field filled, mixed case on purpose."""
    return FormData(
        legal_name="Cali Volquetas del Valle S.A.S",
        tax_id="900658287-6",
        city="Cali",
        representative="Rodrigo Cano",
        representative_id="19055229",
        date="2025-03-31",
        registration_number="882211",
        niif_group="Grupo 3",
        address="Carrera 24 B 51 70",
        department="Valle",
        email="contingencia@proton.me",
        phone="3151564001",
        receipt_number="0001234567",
        verification_code="ab12cd34e",
    )
