"""
FormData - values typed by the operator for one certificate.
"""

from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import FieldKey, normalize_field_key


class FormData(BaseModel):
    """
    Flat mapping of field key to plain text.

    Every field defaults to an empty string; missing or None values are
    treated as empty. camelCase names from the legacy web form are
    accepted as aliases and unknown keys are ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    legal_name: str = Field("", alias="razonSocial")
    tax_id: str = Field("", alias="nit")
    city: str = Field("", alias="ciudad")
    representative: str = Field("", alias="representante")
    representative_id: str = Field("", alias="cedulaRep")
    date: str = Field("", alias="fecha")
    registration_number: str = Field("", alias="matricula")
    niif_group: str = Field("", alias="grupoNiif")
    address: str = Field("", alias="domicilio")
    department: str = Field("", alias="departamento")
    email: str = Field("", alias="correo")
    phone: str = Field("", alias="telefono")
    receipt_number: str = Field("", alias="recibo")
    verification_code: str = Field("", alias="codigoVerificacion")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def value(self, key: FieldKey | str) -> str:
        """Value of a field, empty string when not filled."""
        return getattr(self, normalize_field_key(key).value)
