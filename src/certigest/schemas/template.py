"""
CityTemplateConfig - per-city template source, form layout and field placements.

This schema mirrors the JSON files authored by operators under
``certigest/data/cities``. Coordinates are PDF points with the origin at the
bottom-left corner of the page.
"""

from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import MissingTemplateSource
from .base import FieldKey, FontVariant, normalize_field_key


class PlacementConfig(BaseModel):
    """One instruction to draw a value at a position."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    x: float
    y: float
    size: float | None = Field(None, gt=0)
    font: FontVariant | None = None
    page: int | None = Field(None, ge=0)  # None = first page
    is_global: bool = Field(False, alias="isGlobal")  # repeat on every page
    max_width: float | None = Field(None, alias="maxWidth", gt=0)

    # Covering rectangle for pre-printed content
    box_width: float | None = Field(None, alias="boxWidth", gt=0)
    box_height: float | None = Field(None, alias="boxHeight", gt=0)

    @model_validator(mode="after")
    def _check_box(self) -> "PlacementConfig":
        if (self.box_width is None) != (self.box_height is None):
            raise ValueError("boxWidth and boxHeight must be given together")
        return self

    @property
    def has_mask(self) -> bool:
        return self.box_width is not None and self.box_height is not None


# A field is either absent, placed once, or placed several times
FieldMapping = PlacementConfig | list[PlacementConfig]


class TemplateSource(BaseModel):
    """Base document is an existing PDF."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["template"] = "template"
    path: str = Field(..., min_length=1)


class ImageSource(BaseModel):
    """Legacy: base document is assembled from page images."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["images"] = "images"
    images: list[str] = Field(..., min_length=1)


DocumentSource = Annotated[Union[TemplateSource, ImageSource], Field(discriminator="kind")]


class FormFieldDef(BaseModel):
    """One input of the operator form."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: FieldKey
    label: str
    type: Literal["text", "date", "email", "number"] = "text"
    placeholder: str = ""
    required: bool = False
    class_name: str = Field("", alias="className")

    @field_validator("key", mode="before")
    @classmethod
    def _normalize_key(cls, value: Any) -> FieldKey:
        return normalize_field_key(value)


class FormSection(BaseModel):
    """A titled group of form inputs."""
    model_config = ConfigDict(frozen=True)

    title: str
    icon: str | None = None
    fields: list[FormFieldDef] = Field(default_factory=list)


class CityTemplateConfig(BaseModel):
    """
    Template configuration of one city.

    Attributes:
        city: Normalized city key (uppercase, trimmed)
        source: Either a PDF template or an ordered list of page images
        form_structure: Sections shown in the operator form (UI only)
        pdf_mapping: Where each field is stamped (stamping only)
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    city: str
    source: DocumentSource
    form_structure: list[FormSection] | None = Field(None, alias="formStructure")
    pdf_mapping: dict[FieldKey, FieldMapping] = Field(default_factory=dict, alias="pdfMapping")

    @field_validator("city", mode="before")
    @classmethod
    def _normalize_city(cls, value: Any) -> str:
        return str(value).strip().upper()

    @field_validator("pdf_mapping", mode="before")
    @classmethod
    def _normalize_mapping_keys(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {normalize_field_key(key): entry for key, entry in value.items()}

    @classmethod
    def from_raw(cls, raw: dict[str, Any], origin: str | None = None) -> "CityTemplateConfig":
        """
        Build a config from the operator-authored JSON shape.

        The JSON uses ``templatePath`` or ``images`` instead of a tagged
        ``source``; the template path wins when both are present.

        Args:
            raw: Parsed JSON object
            origin: Where the object came from, for error messages

        Returns:
            Validated CityTemplateConfig

        Raises:
            MissingTemplateSource: If the entry has no template and no images
            pydantic.ValidationError: If the entry has the wrong shape
        """
        data = dict(raw)
        template_path = data.pop("templatePath", None)
        images = data.pop("images", None)
        if "source" not in data:
            if template_path:
                data["source"] = {"kind": "template", "path": template_path}
            elif images:
                data["source"] = {"kind": "images", "images": images}
            else:
                city = str(data.get("city", "")).strip().upper() or None
                where = f" ({origin})" if origin else ""
                raise MissingTemplateSource(
                    f"City '{city}' has neither templatePath nor images{where}",
                    city=city,
                )
        return cls.model_validate(data)
