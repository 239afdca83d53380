"""Deterministic wardrobe compatibility scoring for curated outfits.

Each filled outfit slot is compared against every wardrobe item on its own:
slots never reserve wardrobe items, so one owned garment may cover several
slots. A slot earns full credit when some item matches at the exact tier,
half credit when the best match is loose, nothing otherwise. The percentage
is the mean credit over filled slots, rounded half away from zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from models.clothing import ClothingDescriptor
from models.outfit import Outfit, Slot

logger = logging.getLogger(__name__)

EXACT_CREDIT = 100
LOOSE_CREDIT = 50
NO_CREDIT = 0

HIGH_MATCH_THRESHOLD = 80
MEDIUM_MATCH_THRESHOLD = 50

OutfitLike = Union[Outfit, Sequence[Slot], None]
WardrobeLike = Optional[Iterable[Optional[ClothingDescriptor]]]


class MatchTier(str, Enum):
    NONE = "none"
    LOOSE = "loose"
    EXACT = "exact"

    @property
    def credit(self) -> int:
        return _TIER_CREDITS[self]


_TIER_CREDITS = {MatchTier.NONE: NO_CREDIT, MatchTier.LOOSE: LOOSE_CREDIT, MatchTier.EXACT: EXACT_CREDIT}


class MatchLevel(str, Enum):
    """Presentation band for a percentage."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SlotResult:
    """Outcome for one outfit slot."""

    index: int
    target: Optional[ClothingDescriptor]
    tier: MatchTier = MatchTier.NONE
    exact_matches: Tuple[ClothingDescriptor, ...] = ()
    loose_matches: Tuple[ClothingDescriptor, ...] = ()

    @property
    def empty(self) -> bool:
        return self.target is None

    @property
    def credit(self) -> int:
        return self.tier.credit

    @property
    def matches(self) -> Tuple[ClothingDescriptor, ...]:
        """All covering wardrobe items, exact ones first."""

        return self.exact_matches + self.loose_matches


@dataclass(frozen=True)
class CompatibilityResult:
    percentage: int
    slots: Tuple[SlotResult, ...] = field(default_factory=tuple)

    @property
    def level(self) -> MatchLevel:
        return match_level(self.percentage)


@dataclass(frozen=True)
class ItemMatches:
    """Wardrobe items matching a single garment, split by tier."""

    exact: Tuple[ClothingDescriptor, ...] = ()
    loose: Tuple[ClothingDescriptor, ...] = ()

    @property
    def tier(self) -> MatchTier:
        if self.exact:
            return MatchTier.EXACT
        if self.loose:
            return MatchTier.LOOSE
        return MatchTier.NONE


def _constraint_met(required: Optional[str], actual: Optional[str]) -> bool:
    # an absent constraint accepts any value, an empty string is a real value
    return required is None or required == actual


def is_loose_match(target: ClothingDescriptor, candidate: ClothingDescriptor) -> bool:
    """Color, subtype and (if constrained) material agree."""

    if not (target.is_comparable and candidate.is_comparable):
        return False
    return (
        target.color_key == candidate.color_key
        and target.subtype == candidate.subtype
        and _constraint_met(target.material, candidate.material)
    )


def is_exact_match(target: ClothingDescriptor, candidate: ClothingDescriptor) -> bool:
    """Loose match that also satisfies the pattern and brand constraints."""

    return (
        is_loose_match(target, candidate)
        and _constraint_met(target.pattern, candidate.pattern)
        and _constraint_met(target.brand, candidate.brand)
    )


def match_tier(target: ClothingDescriptor, candidate: ClothingDescriptor) -> MatchTier:
    """Return the best tier ``candidate`` reaches for ``target``."""

    if not is_loose_match(target, candidate):
        return MatchTier.NONE
    if _constraint_met(target.pattern, candidate.pattern) and _constraint_met(target.brand, candidate.brand):
        return MatchTier.EXACT
    return MatchTier.LOOSE


def match_level(percentage: int) -> MatchLevel:
    if percentage >= HIGH_MATCH_THRESHOLD:
        return MatchLevel.HIGH
    if percentage >= MEDIUM_MATCH_THRESHOLD:
        return MatchLevel.MEDIUM
    return MatchLevel.LOW


def _as_outfit(outfit: OutfitLike) -> Outfit:
    if outfit is None:
        return Outfit()
    if isinstance(outfit, Outfit):
        return outfit
    return Outfit(slots=tuple(outfit))


def _candidates_of(wardrobe: WardrobeLike) -> Tuple[ClothingDescriptor, ...]:
    if wardrobe is None:
        return ()
    return tuple(item for item in wardrobe if item is not None)


def _rounded_mean(total: int, count: int) -> int:
    """Integer mean rounded half away from zero, exact for non-negative totals."""

    return (2 * total + count) // (2 * count)


def _classify(target: ClothingDescriptor, candidates: Sequence[ClothingDescriptor]) -> ItemMatches:
    exact: List[ClothingDescriptor] = []
    loose: List[ClothingDescriptor] = []
    for candidate in candidates:
        tier = match_tier(target, candidate)
        if tier is MatchTier.EXACT:
            exact.append(candidate)
        elif tier is MatchTier.LOOSE:
            loose.append(candidate)
    return ItemMatches(exact=tuple(exact), loose=tuple(loose))


def _slot_tier(target: ClothingDescriptor, candidates: Sequence[ClothingDescriptor]) -> MatchTier:
    best = MatchTier.NONE
    for candidate in candidates:
        tier = match_tier(target, candidate)
        if tier is MatchTier.EXACT:
            return tier
        if tier is MatchTier.LOOSE:
            best = tier
    return best


def score(outfit: OutfitLike, wardrobe: WardrobeLike) -> int:
    """Return how much of ``outfit`` the wardrobe can reproduce, from 0 to 100."""

    targets = _as_outfit(outfit).filled_slots
    candidates = _candidates_of(wardrobe)
    if not targets or not candidates:
        logger.debug("Degenerate compatibility input: %s slots, %s items", len(targets), len(candidates))
        return 0

    total = sum(_slot_tier(target, candidates).credit for target in targets)
    percentage = _rounded_mean(total, len(targets))
    logger.debug("Scored %s slots against %s items -> %s", len(targets), len(candidates), percentage)
    return percentage


def score_detailed(outfit: OutfitLike, wardrobe: WardrobeLike) -> CompatibilityResult:
    """Score an outfit and report, per slot, the tier reached and the qualifying items."""

    parsed = _as_outfit(outfit)
    slots = parsed.slots
    candidates = _candidates_of(wardrobe)
    filled = parsed.filled_slots
    if not filled or not candidates:
        return CompatibilityResult(
            percentage=0,
            slots=tuple(SlotResult(index=index, target=slot) for index, slot in enumerate(slots)),
        )

    results: List[SlotResult] = []
    total = 0
    for index, slot in enumerate(slots):
        if slot is None:
            results.append(SlotResult(index=index, target=None))
            continue
        matches = _classify(slot, candidates)
        result = SlotResult(
            index=index,
            target=slot,
            tier=matches.tier,
            exact_matches=matches.exact,
            loose_matches=matches.loose,
        )
        total += result.credit
        results.append(result)

    return CompatibilityResult(percentage=_rounded_mean(total, len(filled)), slots=tuple(results))


def find_matches(
    target: Optional[ClothingDescriptor], wardrobe: WardrobeLike, exclude_self: bool = True
) -> ItemMatches:
    """Split the wardrobe into exact and loose-only matches for a single garment.

    With ``exclude_self`` the garment's own wardrobe entry (same ``item_id``)
    is left out.
    """

    if target is None:
        return ItemMatches()
    candidates = _candidates_of(wardrobe)
    if exclude_self and target.item_id is not None:
        candidates = tuple(item for item in candidates if item.item_id != target.item_id)
    return _classify(target, candidates)


def score_many(outfits: Iterable[OutfitLike], wardrobe: WardrobeLike) -> List[int]:
    """Score each outfit against the same wardrobe, keeping input order."""

    candidates = _candidates_of(wardrobe)
    return [score(outfit, candidates) for outfit in outfits]


__all__ = [
    "CompatibilityResult",
    "EXACT_CREDIT",
    "ItemMatches",
    "LOOSE_CREDIT",
    "MatchLevel",
    "MatchTier",
    "SlotResult",
    "find_matches",
    "is_exact_match",
    "is_loose_match",
    "match_level",
    "match_tier",
    "score",
    "score_detailed",
    "score_many",
]
