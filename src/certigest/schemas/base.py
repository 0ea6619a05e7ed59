"""
Base schemas and types used across the certificate generator.
"""

from enum import Enum
from pathlib import Path
from pydantic import BaseModel


class FieldKey(str, Enum):
    """Closed set of form fields that can be stamped on a certificate."""
    # Company identification
    LEGAL_NAME = "legal_name"
    TAX_ID = "tax_id"
    REGISTRATION_NUMBER = "registration_number"
    NIIF_GROUP = "niif_group"
    # Location
    CITY = "city"
    DEPARTMENT = "department"
    ADDRESS = "address"
    EMAIL = "email"
    PHONE = "phone"
    # Legal representation
    REPRESENTATIVE = "representative"
    REPRESENTATIVE_ID = "representative_id"
    DATE = "date"
    # Security codes
    RECEIPT_NUMBER = "receipt_number"
    VERIFICATION_CODE = "verification_code"


# Field names used by the legacy web form
FIELD_ALIASES: dict[str, FieldKey] = {
    "razonSocial": FieldKey.LEGAL_NAME,
    "nit": FieldKey.TAX_ID,
    "ciudad": FieldKey.CITY,
    "representante": FieldKey.REPRESENTATIVE,
    "cedulaRep": FieldKey.REPRESENTATIVE_ID,
    "fecha": FieldKey.DATE,
    "matricula": FieldKey.REGISTRATION_NUMBER,
    "grupoNiif": FieldKey.NIIF_GROUP,
    "domicilio": FieldKey.ADDRESS,
    "departamento": FieldKey.DEPARTMENT,
    "correo": FieldKey.EMAIL,
    "telefono": FieldKey.PHONE,
    "recibo": FieldKey.RECEIPT_NUMBER,
    "codigoVerificacion": FieldKey.VERIFICATION_CODE,
}


def normalize_field_key(value: str | FieldKey) -> FieldKey:
    """
    Resolve a field name, accepting both snake_case keys and legacy aliases.

    Args:
        value: Field name as written in a payload or mapping file

    Returns:
        The matching FieldKey

    Raises:
        ValueError: If the name is not part of the closed field set
    """
    if isinstance(value, FieldKey):
        return value
    if value in FIELD_ALIASES:
        return FIELD_ALIASES[value]
    return FieldKey(value)


class FontVariant(str, Enum):
    """Fonts available for stamping (reportlab standard fonts)."""
    REGULAR = "Helvetica"
    BOLD = "Helvetica-Bold"
    MONOSPACE = "Courier"


class GenerationResult(BaseModel):
    """
    Result of a certificate generation run.

    Attributes:
        success: Whether the certificate was generated (False means the
                 fallback error report was produced instead)
        city: Normalized city key requested
        filename: Name of the downloadable artifact
        output_path: Where the artifact was saved (None when not saved)
        pdf_bytes: The artifact itself
        page_count: Pages in the artifact
        operations: Number of drawing operations stamped
        debug: Whether calibration mode was active
        error: Error message (if failed)
    """
    success: bool
    city: str
    filename: str
    output_path: Path | None = None
    pdf_bytes: bytes = b""
    page_count: int = 0
    operations: int = 0
    debug: bool = False
    error: str | None = None
