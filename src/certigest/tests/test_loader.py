import logging

import pytest
from conftest import make_city, make_page_image, make_template_pdf

from certigest.errors import InvalidAsset, TemplateNotFound
from certigest.loader import load
from certigest.registry import DEFAULT_REGISTRY
from certigest.utils import assets


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def test_template_strategy_keeps_pages(assets_dir):
    handle = load(DEFAULT_REGISTRY.lookup("CALI"), assets_dir=assets_dir)
    assert handle.strategy == "template"
    assert handle.page_count == 2
    assert handle.page_sizes == [(612.0, 792.0), (612.0, 792.0)]
    assert not handle.consumed


def test_image_strategy_builds_one_page_per_image(assets_dir):
    handle = load(DEFAULT_REGISTRY.lookup("MEDELLIN"), assets_dir=assets_dir)
    assert handle.strategy == "images"
    assert handle.page_count == 2
    assert handle.page_sizes == [(1275.0, 1650.0), (1275.0, 1650.0)]


def test_unusable_images_are_skipped(assets_dir, caplog):
    make_page_image(assets_dir / "pages" / "uno.png", size=(300, 400))
    make_page_image(assets_dir / "pages" / "dos.gif", size=(300, 400), image_format="GIF")
    (assets_dir / "pages" / "tres.png").write_bytes(b"not an image")
    city = make_city(
        {},
        images=["pages/uno.png", "pages/dos.gif", "pages/tres.png", "pages/missing.png"],
    )
    with caplog.at_level(logging.WARNING, logger="certigest.loader"):
        handle = load(city, assets_dir=assets_dir)
    assert handle.page_count == 1
    assert handle.page_sizes == [(300.0, 400.0)]
    assert caplog.text.count("Skipping page image") == 3


def test_no_usable_image_is_template_not_found(assets_dir):
    city = make_city({}, images=["pages/missing_1.jpg", "pages/missing_2.jpg"])
    with pytest.raises(TemplateNotFound) as excinfo:
        load(city, assets_dir=assets_dir)
    assert excinfo.value.city == "PRUEBA"


def test_missing_template_is_template_not_found(assets_dir):
    city = make_city({}, templatePath="templates/nope.pdf")
    with pytest.raises(TemplateNotFound) as excinfo:
        load(city, assets_dir=assets_dir)
    assert "Template not found for PRUEBA" in excinfo.value.message


def test_unreadable_template_is_invalid_asset(assets_dir):
    (assets_dir / "templates" / "broken.pdf").write_bytes(b"this is not a pdf")
    city = make_city({}, templatePath="templates/broken.pdf")
    with pytest.raises(InvalidAsset):
        load(city, assets_dir=assets_dir)


def test_absolute_template_path(tmp_path):
    path = make_template_pdf(tmp_path / "elsewhere" / "base.pdf", pages=1)
    city = make_city({}, templatePath=str(path))
    assert load(city, assets_dir=tmp_path / "unused").page_count == 1


def test_remote_template(monkeypatch, tmp_path):
    data = make_template_pdf(tmp_path / "remote.pdf", pages=3).read_bytes()
    calls = []

    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        return FakeResponse(200, data)

    monkeypatch.setattr(assets.requests, "get", fake_get)
    city = make_city({}, templatePath="https://certs.example.com/base.pdf")
    handle = load(city, assets_dir=tmp_path, timeout=5)
    assert handle.page_count == 3
    assert calls == [("https://certs.example.com/base.pdf", 5)]


def test_remote_404_is_template_not_found(monkeypatch, tmp_path):
    monkeypatch.setattr(assets.requests, "get", lambda url, timeout=None: FakeResponse(404))
    city = make_city({}, templatePath="https://certs.example.com/missing.pdf")
    with pytest.raises(TemplateNotFound) as excinfo:
        load(city, assets_dir=tmp_path)
    assert "HTTP 404" in excinfo.value.message
