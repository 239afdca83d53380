"""Outfit schema and builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from models.clothing import ClothingDescriptor, descriptor_from_metadata

Slot = Optional[ClothingDescriptor]


@dataclass(frozen=True)
class Outfit:
    """Ordered slots of a curated outfit. ``None`` marks an unfilled slot."""

    slots: Tuple[Slot, ...] = field(default_factory=tuple)
    outfit_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "slots", tuple(self.slots))

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def filled_slots(self) -> List[ClothingDescriptor]:
        return [slot for slot in self.slots if slot is not None]


def _slot_from_raw(raw: Any, normalise: bool) -> Slot:
    if raw is None:
        return None
    if isinstance(raw, ClothingDescriptor):
        return raw
    if isinstance(raw, Mapping):
        # join rows wrap the garment under "clothe"
        nested = raw.get("clothe")
        if isinstance(nested, Mapping):
            raw = nested
        elif "clothe" in raw and nested is None:
            return None
        return descriptor_from_metadata(raw, normalise=normalise)
    return None


def outfit_from_metadata(
    metadata: Union[Mapping[str, Any], Sequence[Any], None], normalise: bool = True
) -> Outfit:
    """Build an :class:`Outfit` from a list of slots or an outfit row with ``clothes``."""

    if metadata is None:
        return Outfit()
    if isinstance(metadata, Mapping):
        raw_slots = metadata.get("clothes") or metadata.get("slots") or []
        outfit_id = metadata.get("id", metadata.get("outfit_id"))
        name = metadata.get("name")
    else:
        raw_slots, outfit_id, name = metadata, None, None
    return Outfit(
        slots=tuple(_slot_from_raw(raw, normalise) for raw in raw_slots),
        outfit_id=str(outfit_id) if outfit_id is not None else None,
        name=name,
    )


__all__ = ["Outfit", "Slot", "outfit_from_metadata"]
