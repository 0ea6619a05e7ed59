"""
CertiGest - company-registration certificates stamped on per-city templates.

The operator's form values are drawn at the coordinates configured for the
city's certificate template and the filled PDF is saved as a download. When
anything fails, a one-page error report is produced instead.

Usage:
    from certigest import generate_certificate, sample_form_data

    result = generate_certificate(sample_form_data(), assets_dir="public")

    if result.success:
        print(result.output_path)          # generated/Certificado_CALI_900658287-6.pdf
    else:
        print(result.error)                # error_log.pdf was saved instead

    # Calibration output with grid and field captions
    generate_certificate(sample_form_data(), debug=True)
"""

from .errors import (
    AssetFetchFailed,
    CertificateError,
    HandleConsumed,
    InvalidAsset,
    MissingTemplateSource,
    TemplateNotFound,
    UnknownCity,
    UnsupportedImageFormat,
)
from .forms import (
    blank_form_data,
    generate_security_codes,
    missing_required_fields,
    sample_form_data,
    sections_for,
    with_security_codes,
)
from .main import generate_certificate, render_certificate
from .registry import DEFAULT_REGISTRY, TemplateRegistry, normalize_city_key
from .resolver import ConcretePlacement, resolve
from .schemas.base import FieldKey, FontVariant, GenerationResult
from .schemas.form import FormData
from .schemas.template import CityTemplateConfig, PlacementConfig

__all__ = [
    # Pipeline
    "generate_certificate",
    "render_certificate",
    # Registry and forms
    "DEFAULT_REGISTRY",
    "TemplateRegistry",
    "normalize_city_key",
    "sections_for",
    "missing_required_fields",
    "sample_form_data",
    "blank_form_data",
    "generate_security_codes",
    "with_security_codes",
    # Resolution
    "ConcretePlacement",
    "resolve",
    # Types
    "FieldKey",
    "FontVariant",
    "FormData",
    "GenerationResult",
    "CityTemplateConfig",
    "PlacementConfig",
    # Errors
    "CertificateError",
    "UnknownCity",
    "AssetFetchFailed",
    "TemplateNotFound",
    "InvalidAsset",
    "UnsupportedImageFormat",
    "MissingTemplateSource",
    "HandleConsumed",
]
