"""
Field resolver: turns a field's mapping entry into concrete placements.

A mapping entry is absent, a single placement, or a list of placements. The
resolver always returns a list so the stamper handles "appears once" and
"appears N times" the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Union

from .schemas.base import FieldKey, FontVariant, normalize_field_key
from .schemas.template import CityTemplateConfig, PlacementConfig

DEFAULT_FONT_SIZE = 10.0
DEFAULT_FONT = FontVariant.REGULAR
ALL_PAGES: Literal["all"] = "all"


@dataclass(frozen=True)
class ConcretePlacement:
    """A placement with defaults applied and its target page decided."""

    key: FieldKey
    pages: Union[int, Literal["all"]]
    x: float
    y: float
    size: float = DEFAULT_FONT_SIZE
    font: FontVariant = DEFAULT_FONT
    max_width: float | None = None
    box_width: float | None = None
    box_height: float | None = None

    @property
    def has_mask(self) -> bool:
        return self.box_width is not None and self.box_height is not None

    def target_pages(self, page_count: int) -> List[int]:
        """Page indexes to draw on for a document of ``page_count`` pages."""
        if self.pages == ALL_PAGES:
            return list(range(page_count))
        return [self.pages]


def concretize(key: FieldKey, placement: PlacementConfig) -> ConcretePlacement:
    return ConcretePlacement(
        key=key,
        pages=ALL_PAGES if placement.is_global else (placement.page or 0),
        x=placement.x,
        y=placement.y,
        size=placement.size or DEFAULT_FONT_SIZE,
        font=placement.font or DEFAULT_FONT,
        max_width=placement.max_width,
        box_width=placement.box_width,
        box_height=placement.box_height,
    )


def resolve(field_key: FieldKey | str, city_config: CityTemplateConfig) -> List[ConcretePlacement]:
    """
    Resolve every placement of a field for a city.

    Args:
        field_key: Field to resolve (snake_case key or legacy alias)
        city_config: Template configuration of the city

    Returns:
        Placements in configured order; empty when the field is not mapped
        or not a known field
    """
    try:
        key = normalize_field_key(field_key)
    except ValueError:
        return []
    entry = city_config.pdf_mapping.get(key)
    if entry is None:
        return []
    if isinstance(entry, PlacementConfig):
        entry = [entry]
    return [concretize(key, placement) for placement in entry]
