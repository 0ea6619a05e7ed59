"""
Form schema provider and form-value helpers.

The sections returned here only drive the operator form. They are independent
of the stamping coordinates: a field can be shown in the form and not be
mapped on the certificate of a given city, and vice versa.
"""

from __future__ import annotations

import datetime as dt
import json
import random
import secrets
import string
from pathlib import Path

from .registry import DEFAULT_REGISTRY, TemplateRegistry
from .schemas.base import FieldKey
from .schemas.form import FormData
from .schemas.template import FormFieldDef, FormSection

SAMPLE_FORM_PATH = Path(__file__).resolve().parent / "data" / "sample_form.json"

RECEIPT_NUMBER_DIGITS = 10
VERIFICATION_CODE_LENGTH = 9
VERIFICATION_CODE_ALPHABET = string.ascii_uppercase + string.digits


DEFAULT_SECTIONS: list[FormSection] = [
    FormSection(
        title="1. Datos de Identificación",
        icon="file-text",
        fields=[
            FormFieldDef(key=FieldKey.LEGAL_NAME, label="Razón Social", required=True),
            FormFieldDef(key=FieldKey.TAX_ID, label="NIT", required=True),
            FormFieldDef(key=FieldKey.REGISTRATION_NUMBER, label="Nro Matrícula"),
            FormFieldDef(key=FieldKey.NIIF_GROUP, label="Grupo NIIF"),
        ],
    ),
    FormSection(
        title="2. Datos de Ubicación",
        icon="map-pin",
        fields=[
            FormFieldDef(key=FieldKey.CITY, label="Ciudad (Define la plantilla)", required=True),
            FormFieldDef(key=FieldKey.DEPARTMENT, label="Departamento"),
            FormFieldDef(key=FieldKey.ADDRESS, label="Dirección Principal"),
            FormFieldDef(key=FieldKey.EMAIL, label="Correo Electrónico", type="email"),
            FormFieldDef(key=FieldKey.PHONE, label="Teléfono"),
        ],
    ),
    FormSection(
        title="3. Representación Legal",
        icon="user",
        fields=[
            FormFieldDef(key=FieldKey.REPRESENTATIVE, label="Representante Legal", required=True),
            FormFieldDef(key=FieldKey.REPRESENTATIVE_ID, label="Identificación", required=True),
            FormFieldDef(key=FieldKey.DATE, label="Fecha Renovación", type="date"),
        ],
    ),
]


def sections_for(city: str, registry: TemplateRegistry | None = None) -> list[FormSection]:
    """
    Ordered form sections to render for a city.

    Cities without their own ``formStructure`` get ``DEFAULT_SECTIONS``.

    Raises:
        UnknownCity: If the city is not configured
    """
    city_config = (registry or DEFAULT_REGISTRY).lookup(city)
    if city_config.form_structure:
        return list(city_config.form_structure)
    return list(DEFAULT_SECTIONS)


def missing_required_fields(form_data: FormData, sections: list[FormSection]) -> list[FieldKey]:
    """Required fields left empty. Advisory only; stamping never enforces it."""
    missing: list[FieldKey] = []
    for section in sections:
        for field in section.fields:
            if field.required and not form_data.value(field.key):
                missing.append(field.key)
    return missing


def today() -> str:
    return dt.date.today().isoformat()


def sample_form_data() -> FormData:
    """Pre-filled example values with today's date."""
    with SAMPLE_FORM_PATH.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return FormData.model_validate(raw).model_copy(update={"date": today()})


def blank_form_data() -> FormData:
    """Cleared form: everything empty except the date."""
    return FormData(date=today())


def generate_security_codes(rng: random.Random | None = None) -> dict[str, str]:
    """
    Fresh receipt number and verification code.

    Args:
        rng: Random source; defaults to the OS CSPRNG. Pass a seeded
             ``random.Random`` for reproducible codes.

    Returns:
        Dictionary with ``receipt_number`` and ``verification_code``
    """
    source = rng or secrets.SystemRandom()
    receipt = "".join(source.choice(string.digits) for _ in range(RECEIPT_NUMBER_DIGITS))
    code = "".join(source.choice(VERIFICATION_CODE_ALPHABET) for _ in range(VERIFICATION_CODE_LENGTH))
    return {
        FieldKey.RECEIPT_NUMBER.value: receipt,
        FieldKey.VERIFICATION_CODE.value: code,
    }


def with_security_codes(form_data: FormData, rng: random.Random | None = None) -> FormData:
    """Fill receipt number and verification code only where they are empty."""
    codes = generate_security_codes(rng)
    update = {key: value for key, value in codes.items() if not form_data.value(key)}
    if not update:
        return form_data
    return form_data.model_copy(update=update)
