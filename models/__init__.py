"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing import ClothingDescriptor, descriptor_from_metadata
from models.outfit import Outfit, outfit_from_metadata
from models.wardrobe import Wardrobe, wardrobe_from_metadata

__all__ = [
    "ClothingDescriptor",
    "Outfit",
    "Wardrobe",
    "descriptor_from_metadata",
    "outfit_from_metadata",
    "wardrobe_from_metadata",
]
