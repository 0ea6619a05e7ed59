"""
Schemas module for data validation and structure definitions.
"""

from .base import FIELD_ALIASES, FieldKey, FontVariant, GenerationResult, normalize_field_key
from .form import FormData
from .template import (
    CityTemplateConfig,
    FieldMapping,
    FormFieldDef,
    FormSection,
    ImageSource,
    PlacementConfig,
    TemplateSource,
)

__all__ = [
    "FIELD_ALIASES",
    "FieldKey",
    "FontVariant",
    "GenerationResult",
    "normalize_field_key",
    "FormData",
    "CityTemplateConfig",
    "FieldMapping",
    "FormFieldDef",
    "FormSection",
    "ImageSource",
    "PlacementConfig",
    "TemplateSource",
]
