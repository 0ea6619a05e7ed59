import json

import pytest
from conftest import extract_page_texts, extract_text_from_pdf, make_city

from certigest import main as pipeline
from certigest.cli import main as cli_main
from certigest.fallback import ERROR_FILENAME, TITLE
from certigest.main import generate_certificate
from certigest.registry import TemplateRegistry
from certigest.schemas.form import FormData
from certigest.utils import assets


class NotFoundResponse:
    status_code = 404
    ok = False
    content = b""


def test_cali_certificate_end_to_end(assets_dir, full_form, tmp_path):
    output_dir = tmp_path / "generated"
    result = generate_certificate(full_form, assets_dir=assets_dir, output_dir=output_dir)

    assert result.success, result.error
    assert result.city == "CALI"
    assert result.filename == "Certificado_CALI_900658287-6.pdf"
    assert result.output_path == output_dir / result.filename
    assert result.output_path.read_bytes() == result.pdf_bytes
    assert result.page_count == 2

    pages = extract_page_texts(result.pdf_bytes)
    assert len(pages) == 2
    assert "CALI VOLQUETAS DEL VALLE S.A.S" in pages[0]
    assert "RODRIGO CANO" in pages[0] and "RODRIGO CANO" in pages[1]
    assert pages[0].count("3151564001") == 3
    assert pages[1].count("3151564001") == 3
    assert all("AB12CD34E" in page for page in pages)


def test_unknown_city_produces_error_report(tmp_path):
    result = generate_certificate(FormData(city="UNKNOWN_CITY"), output_dir=tmp_path)

    assert not result.success
    assert result.filename == ERROR_FILENAME
    assert result.error.startswith("UnknownCity")
    assert (tmp_path / ERROR_FILENAME).read_bytes() == result.pdf_bytes
    assert TITLE in extract_text_from_pdf(result.pdf_bytes)


def test_remote_template_404_produces_error_report(monkeypatch, tmp_path, full_form):
    monkeypatch.setattr(assets.requests, "get", lambda url, timeout=None: NotFoundResponse())
    registry = TemplateRegistry(
        [make_city({"nit": {"x": 10, "y": 10}}, city="REMOTA", templatePath="https://certs.example.com/base.pdf")]
    )
    result = generate_certificate(full_form, city="remota", registry=registry, save=False)

    assert not result.success
    assert result.output_path is None
    assert result.error.startswith("TemplateNotFound")
    text = extract_text_from_pdf(result.pdf_bytes)
    assert "ERROR" in text
    assert "404" in text


def test_unexpected_errors_also_fall_back(monkeypatch, assets_dir, full_form):
    def explode(*args, **kwargs):
        raise RuntimeError("renderer crashed")

    monkeypatch.setattr(pipeline, "stamp", explode)
    result = generate_certificate(full_form, assets_dir=assets_dir, save=False)
    assert not result.success
    assert result.error == "RuntimeError: renderer crashed"
    assert "renderer crashed" in extract_text_from_pdf(result.pdf_bytes)


@pytest.mark.parametrize("city", ["CALI", "BOGOTA", "MEDELLIN"])
def test_generation_is_deterministic(assets_dir, full_form, city):
    first = generate_certificate(full_form, city=city, assets_dir=assets_dir, save=False)
    second = generate_certificate(full_form, city=city, assets_dir=assets_dir, save=False)
    assert first.success and second.success
    assert first.pdf_bytes == second.pdf_bytes


def test_debug_output_is_named_apart(assets_dir, full_form):
    result = generate_certificate(full_form, debug=True, assets_dir=assets_dir, save=False)
    assert result.success
    assert result.filename == "Certificado_CALI_900658287-6_DEBUG.pdf"
    assert result.debug
    assert "tax_id" in extract_page_texts(result.pdf_bytes)[0]


def test_explicit_city_overrides_form_city(assets_dir, full_form):
    result = generate_certificate(full_form, city=" bogota ", assets_dir=assets_dir, save=False)
    assert result.success
    assert result.filename == "Certificado_BOGOTA_900658287-6.pdf"
    assert result.page_count == 1


def test_mapping_payload_with_legacy_names(assets_dir):
    result = generate_certificate(
        {"ciudad": "Medellin", "razonSocial": "acme", "nit": ""},
        assets_dir=assets_dir,
        save=False,
    )
    assert result.success
    assert result.filename == "Certificado_MEDELLIN_SIN_NIT.pdf"
    assert result.page_count == 2
    assert "ACME" in extract_page_texts(result.pdf_bytes)[0]


def test_cli_lists_cities(capsys):
    assert cli_main(["--list-cities"]) == 0
    assert capsys.readouterr().out.split() == ["BOGOTA", "CALI", "MEDELLIN"]


def test_cli_generates_sample(assets_dir, tmp_path, capsys):
    output_dir = tmp_path / "out"
    code = cli_main(["--assets-dir", str(assets_dir), "--output-dir", str(output_dir), "--fresh-codes"])
    assert code == 0
    assert (output_dir / "Certificado_CALI_900658287-6.pdf").is_file()
    assert "2 pages" in capsys.readouterr().out


def test_cli_reports_failure(tmp_path, capsys):
    code = cli_main(["--city", "lima", "--output-dir", str(tmp_path)])
    assert code == 1
    assert (tmp_path / ERROR_FILENAME).is_file()
    assert "UnknownCity" in capsys.readouterr().out


def test_unwritable_output_still_returns_error_report(tmp_path):
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("occupied", encoding="utf-8")

    result = generate_certificate(FormData(city="UNKNOWN_CITY"), output_dir=blocker)

    assert not result.success
    assert result.filename == ERROR_FILENAME
    assert result.output_path is None
    assert result.error.startswith("UnknownCity")
    assert TITLE in extract_text_from_pdf(result.pdf_bytes)


def test_save_failure_after_stamping_falls_back(assets_dir, full_form, tmp_path):
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("occupied", encoding="utf-8")

    result = generate_certificate(full_form, assets_dir=assets_dir, output_dir=blocker)

    assert not result.success
    assert result.output_path is None
    assert result.filename == ERROR_FILENAME
    assert "ERROR" in extract_text_from_pdf(result.pdf_bytes)


def test_cli_reads_legacy_payload(assets_dir, tmp_path, capsys):
    payload = tmp_path / "form.json"
    payload.write_text(
        json.dumps({"ciudad": "bogota", "razonSocial": "acme ltda", "nit": "800111222-3"}),
        encoding="utf-8",
    )
    output_dir = tmp_path / "out"
    code = cli_main(["--data", str(payload), "--assets-dir", str(assets_dir), "--output-dir", str(output_dir)])

    assert code == 0
    written = output_dir / "Certificado_BOGOTA_800111222-3.pdf"
    assert "ACME LTDA" in extract_page_texts(written.read_bytes())[0]
    assert "1 pages" in capsys.readouterr().out
