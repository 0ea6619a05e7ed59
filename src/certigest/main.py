"""
Main entry point for certificate generation.

``generate_certificate`` runs the whole pipeline for one request:
registry lookup -> document loader -> stamper -> exporter. Any failure is
turned into the fallback error report, so a call always yields a
downloadable artifact.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import CertificateError
from .exporter import build_filename, export, save_download
from .fallback import ERROR_FILENAME, report_failure
from .loader import load
from .registry import DEFAULT_REGISTRY, TemplateRegistry, normalize_city_key
from .schemas.base import GenerationResult
from .schemas.form import FormData
from .stamper import stamp

logger = logging.getLogger(__name__)


def render_certificate(
    form_data: FormData,
    city: str,
    registry: TemplateRegistry,
    debug: bool = False,
    assets_dir: Path | None = None,
) -> tuple[bytes, int, int]:
    """
    Produce the stamped certificate bytes without any error recovery.

    Returns:
        Tuple of (pdf_bytes, page_count, operation_count)

    Raises:
        CertificateError: On unknown city, missing or unreadable template
    """
    city_config = registry.lookup(city)
    handle = load(city_config, assets_dir=assets_dir)
    operations = stamp(handle, form_data, city_config, debug=debug)
    pdf_bytes = export(handle)
    return pdf_bytes, handle.page_count, len(operations)


def generate_certificate(
    form_data: FormData | Mapping[str, Any],
    city: str | None = None,
    debug: bool = False,
    registry: TemplateRegistry | None = None,
    assets_dir: Path | None = None,
    output_dir: Path | None = None,
    save: bool = True,
) -> GenerationResult:
    """
    Generate a filled certificate, or the error report when that fails.

    Args:
        form_data: Operator values (FormData or a mapping with snake_case or
                   legacy camelCase keys)
        city: City whose template is used (defaults to the form's city field)
        debug: Calibration mode (grid, captions, translucent masks)
        registry: Template registry (defaults to the bundled one)
        assets_dir: Base directory for relative template/image paths
        output_dir: Where the artifact is saved
        save: Write the artifact to ``output_dir``

    Returns:
        GenerationResult; ``success`` is False when the error report was produced

    Example:
        >>> result = generate_certificate({"ciudad": "Cali", "nit": "900658287-6"})
        >>> result.filename
        'Certificado_CALI_900658287-6.pdf'
    """
    registry = registry or DEFAULT_REGISTRY
    city_key = ""
    try:
        if not isinstance(form_data, FormData):
            form_data = FormData.model_validate(form_data)
        city_key = normalize_city_key(city or form_data.city)
        logger.info("Generating certificate for %s (debug=%s)", city_key or "<empty>", debug)

        pdf_bytes, page_count, operation_count = render_certificate(
            form_data,
            city_key,
            registry,
            debug=debug,
            assets_dir=assets_dir,
        )
        filename = build_filename(city_key, form_data.tax_id, debug=debug)
        output_path = save_download(pdf_bytes, filename, output_dir) if save else None
        return GenerationResult(
            success=True,
            city=city_key,
            filename=filename,
            output_path=output_path,
            pdf_bytes=pdf_bytes,
            page_count=page_count,
            operations=operation_count,
            debug=debug,
        )

    except CertificateError as e:
        logger.error("Certificate generation failed: %s", e.message)
        return _fallback_result(e, city_key, debug, output_dir, save)
    except Exception as e:
        logger.exception("Unexpected error generating certificate")
        return _fallback_result(e, city_key, debug, output_dir, save)


def _fallback_result(
    error: BaseException,
    city_key: str,
    debug: bool,
    output_dir: Path | None,
    save: bool,
) -> GenerationResult:
    pdf_bytes = report_failure(error)
    output_path = None
    if save:
        try:
            output_path = save_download(pdf_bytes, ERROR_FILENAME, output_dir)
        except OSError as exc:
            logger.error("Could not save %s: %s", ERROR_FILENAME, exc)
    return GenerationResult(
        success=False,
        city=city_key,
        filename=ERROR_FILENAME,
        output_path=output_path,
        pdf_bytes=pdf_bytes,
        page_count=1,
        debug=debug,
        error=f"{type(error).__name__}: {error}",
    )
