"""Tool wrappers exposing compatibility scoring to raw-payload callers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from logic.compatibility import (
    CompatibilityResult,
    ItemMatches,
    find_matches,
    match_level,
    score_detailed,
    score_many,
)
from logic.validation import (
    BatchScoreRequest,
    ItemMatchRequest,
    ScoreRequest,
    ScoreResponse,
    SlotResultPayload,
    validation_failure,
)
from matcher_app.config import MatcherConfig
from models.clothing import ClothingDescriptor, descriptor_from_metadata
from models.outfit import outfit_from_metadata
from models.wardrobe import Wardrobe, wardrobe_from_metadata
from tools.observability import instrument_tool


def _invalid_request(exc):
    return validation_failure("Invalid compatibility request", exc)


def _item_ids(items) -> List[Optional[str]]:
    return [item.item_id for item in items]


class CompatibilityTools:
    """Thin facade turning storage rows into descriptors and scores.

    Inputs are validated with the request models; malformed payloads come back
    as ``needs_review`` envelopes instead of raising.
    """

    def __init__(self, config: Optional[MatcherConfig] = None) -> None:
        self.config = config or MatcherConfig.from_env()

    def _wardrobe(self, rows: List[Optional[Dict[str, Any]]], user_id: Optional[str]) -> Wardrobe:
        return wardrobe_from_metadata(
            {"items": [row for row in rows if row is not None], "user_id": user_id},
            normalise=self.config.normalise_categories,
        )

    def _descriptor(self, row: Dict[str, Any]) -> ClothingDescriptor:
        return descriptor_from_metadata(row, normalise=self.config.normalise_categories)

    def _response(self, result: CompatibilityResult) -> Dict[str, Any]:
        slots = [
            SlotResultPayload(
                index=slot.index,
                tier=slot.tier.value,
                credit=slot.credit,
                empty=slot.empty,
                matched_item_ids=_item_ids(slot.matches) if self.config.include_matches else [],
            )
            for slot in result.slots
        ]
        return ScoreResponse(
            percentage=result.percentage,
            level=result.level.value,
            slots=slots,
        ).model_dump()

    @instrument_tool("score_outfit", input_model=ScoreRequest, on_validation_error=_invalid_request)
    def score_outfit(
        self,
        outfit: List[Optional[Dict[str, Any]]],
        wardrobe: List[Optional[Dict[str, Any]]],
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        parsed_outfit = outfit_from_metadata(outfit, normalise=self.config.normalise_categories)
        result = score_detailed(parsed_outfit, self._wardrobe(wardrobe, user_id))
        return self._response(result)

    @instrument_tool("score_outfits", input_model=BatchScoreRequest, on_validation_error=_invalid_request)
    def score_outfits(
        self,
        outfits: List[List[Optional[Dict[str, Any]]]],
        wardrobe: List[Optional[Dict[str, Any]]],
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        parsed = [outfit_from_metadata(slots, normalise=self.config.normalise_categories) for slots in outfits]
        percentages = score_many(parsed, self._wardrobe(wardrobe, user_id))
        return {
            "status": "ok",
            "percentages": percentages,
            "levels": [match_level(value).value for value in percentages],
        }

    @instrument_tool("find_item_matches", input_model=ItemMatchRequest, on_validation_error=_invalid_request)
    def find_item_matches(
        self,
        item: Dict[str, Any],
        wardrobe: List[Optional[Dict[str, Any]]],
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        matches: ItemMatches = find_matches(self._descriptor(item), self._wardrobe(wardrobe, user_id))
        return {
            "status": "ok",
            "tier": matches.tier.value,
            "exact_item_ids": _item_ids(matches.exact),
            "loose_item_ids": _item_ids(matches.loose),
        }


__all__ = ["CompatibilityTools"]
