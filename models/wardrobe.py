"""Wardrobe domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

from models.clothing import ClothingDescriptor, descriptor_from_metadata


@dataclass(frozen=True)
class Wardrobe:
    """Clothing owned by one user. Duplicates are independent candidates."""

    items: Tuple[ClothingDescriptor, ...] = field(default_factory=tuple)
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(item for item in self.items if item is not None))

    def __iter__(self) -> Iterator[ClothingDescriptor]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def wardrobe_from_metadata(
    metadata: Union[Mapping[str, Any], Iterable[Any], None], normalise: bool = True
) -> Wardrobe:
    """Build a :class:`Wardrobe` from storage rows or a mapping with ``items``."""

    if metadata is None:
        return Wardrobe()
    user_id = None
    rows: Iterable[Any] = metadata
    if isinstance(metadata, Mapping):
        rows = metadata.get("items") or []
        user_id = metadata.get("user_id")
    items = []
    for row in rows:
        if isinstance(row, ClothingDescriptor):
            items.append(row)
        elif isinstance(row, Mapping):
            items.append(descriptor_from_metadata(row, normalise=normalise))
    return Wardrobe(items=tuple(items), user_id=str(user_id) if user_id is not None else None)


__all__ = ["Wardrobe", "wardrobe_from_metadata"]
