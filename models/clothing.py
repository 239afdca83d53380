"""Clothing descriptor value object and helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from models.taxonomy import (
    color_key,
    normalize_color_value,
    normalize_label,
    normalize_subtype,
    type_for_subtype,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClothingDescriptor:
    """Attributes identifying one clothing item for matching purposes.

    ``color`` and ``subtype`` are expected on every descriptor; a descriptor
    missing either never matches anything. ``material``, ``pattern`` and
    ``brand`` are optional and ``None`` means the attribute is unconstrained.
    ``item_id`` and ``category`` are carried for callers and never compared.
    """

    color: Optional[str]
    subtype: Optional[str]
    material: Optional[str] = None
    pattern: Optional[str] = None
    brand: Optional[str] = None
    item_id: Optional[str] = None
    category: Optional[str] = None

    @property
    def is_comparable(self) -> bool:
        """True when both required attributes are present."""

        return self.color is not None and self.subtype is not None

    @property
    def color_key(self):
        return color_key(self.color)


def _clean(value: Any, normaliser: Callable[[str], str] | None) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    if normaliser is None:
        return text
    cleaned = normaliser(text)
    return cleaned or None


def _first_present(metadata: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if metadata.get(key) is not None:
            return metadata[key]
    return None


def descriptor_from_metadata(metadata: Mapping[str, Any], normalise: bool = True) -> ClothingDescriptor:
    """Factory to build a :class:`ClothingDescriptor` from a loose storage row.

    With ``normalise`` enabled, labels are trimmed and lower-cased, color and
    subtype synonyms collapse to canonical names and blank values become
    ``None``. Missing required attributes are kept as ``None`` rather than
    rejected so the descriptor simply never matches.
    """

    color = _clean(metadata.get("color"), normalize_color_value if normalise else None)
    subtype = _clean(metadata.get("subtype"), normalize_subtype if normalise else None)
    label = normalize_label if normalise else None
    item_id = _first_present(metadata, "id", "item_id")
    category = _clean(_first_present(metadata, "type", "category"), label)
    if category is None and normalise:
        category = type_for_subtype(subtype)

    descriptor = ClothingDescriptor(
        color=color,
        subtype=subtype,
        material=_clean(metadata.get("material"), label),
        pattern=_clean(metadata.get("pattern"), label),
        brand=_clean(metadata.get("brand"), label),
        item_id=str(item_id) if item_id is not None else None,
        category=category,
    )
    if not descriptor.is_comparable:
        logger.debug("Descriptor missing color or subtype", extra={"item_id": descriptor.item_id})
    return descriptor


__all__ = ["ClothingDescriptor", "descriptor_from_metadata"]
