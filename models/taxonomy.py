"""Canonical taxonomy definitions for clothing descriptors.

This module centralises the canonical labels for garment subtypes and colors.
Normalisation helpers are applied when descriptors are built from loose
storage rows. The scorer compares single values exactly as it receives them;
only the entries of a comma separated color list are trimmed before comparison.
"""

from typing import Dict, FrozenSet, List, Optional

COLOR_SEPARATOR = ","

SUBTYPES_BY_TYPE: Dict[str, List[str]] = {
    "top": ["tshirt", "polo", "shirt", "sweater", "sweatshirt", "jacket", "coat", "blazer"],
    "bottom": ["jeans", "pants", "shorts", "skirt", "sweatpants"],
    "shoes": ["sneakers", "boots", "flats", "heels", "sandals"],
    "accessory": ["hat", "scarf", "belt", "bag", "socks", "jewelry", "watch", "glasses"],
    "ensemble": ["dress", "jumpsuit", "suit"],
}

COLOR_MAP = {
    "grey": "gray",
    "navy blue": "blue",
    "navy": "blue",
    "light blue": "blue",
    "sky blue": "blue",
    "off white": "white",
    "cream": "beige",
    "tan": "beige",
    "purple": "violet",
    "burgundy": "red",
    "golden": "gold",
}

SUBTYPE_ALIASES = {
    "t-shirt": "tshirt",
    "t_shirt": "tshirt",
    "tee": "tshirt",
    "trousers": "pants",
    "jean": "jeans",
    "sweat": "sweatshirt",
    "hoodie": "sweatshirt",
    "jogging": "sweatpants",
}


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color name."""

    key = raw_string.strip().lower()
    return COLOR_MAP.get(key, key)


def normalize_color_value(raw_string: str) -> str:
    """Normalise every color of a comma separated color field."""

    parts = [normalize_color_name(part) for part in raw_string.split(COLOR_SEPARATOR)]
    return COLOR_SEPARATOR.join(part for part in parts if part)


def normalize_subtype(raw_string: str) -> str:
    """Map a raw subtype label to its canonical key."""

    key = _normalize_key(raw_string)
    return SUBTYPE_ALIASES.get(key, key)


def normalize_label(raw_string: str) -> str:
    """Normalise a free-form nominal label such as a material or pattern."""

    return raw_string.strip().lower()


def type_for_subtype(subtype: Optional[str]) -> Optional[str]:
    """Return the garment type owning ``subtype`` or ``None`` if unknown."""

    if subtype is None:
        return None
    for garment_type, subtypes in SUBTYPES_BY_TYPE.items():
        if subtype in subtypes:
            return garment_type
    return None


def color_key(value: Optional[str]) -> Optional[FrozenSet[str]]:
    """Return the order-insensitive identity of a color field.

    A field may list several colors separated by commas. Two fields are the
    same color when they list the same colors in any order; entries are
    trimmed and blank entries ignored. A value without a separator is kept
    verbatim, so ``""`` and ``"black "`` stay distinct from ``","`` and
    ``"black"``. ``None`` stays ``None`` so callers can treat it as missing.
    """

    if value is None:
        return None
    if COLOR_SEPARATOR not in value:
        return frozenset({value})
    return frozenset(part.strip() for part in value.split(COLOR_SEPARATOR) if part.strip())


__all__ = [
    "COLOR_MAP",
    "COLOR_SEPARATOR",
    "SUBTYPES_BY_TYPE",
    "SUBTYPE_ALIASES",
    "color_key",
    "normalize_color_name",
    "normalize_color_value",
    "normalize_label",
    "normalize_subtype",
    "type_for_subtype",
]
