"""Pydantic schemas and helpers for validating tool payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class DescriptorPayload(BaseModel):
    """Loose clothing row as supplied by storage collaborators.

    ``color`` and ``subtype`` may be missing; such a row is accepted and
    never matches.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    item_id: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    subtype: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    brand: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_join_row(cls, data: Any) -> Any:
        # outfit join rows nest the garment under "clothe"
        if isinstance(data, dict) and isinstance(data.get("clothe"), dict):
            return data["clothe"]
        return data

    @field_validator("id", "item_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


def _is_empty_join_row(row: Any) -> bool:
    return isinstance(row, dict) and "clothe" in row and row["clothe"] is None


def _blank_empty_join_rows(slots: Any) -> Any:
    """Turn ``{"clothe": None}`` join rows into ``None`` so they stay empty slots."""

    if not isinstance(slots, list):
        return slots
    return [None if _is_empty_join_row(slot) else slot for slot in slots]


class ScoreRequest(BaseModel):
    """Input contract for scoring one outfit against one wardrobe."""

    outfit: List[Optional[DescriptorPayload]] = Field(default_factory=list)
    wardrobe: List[Optional[DescriptorPayload]] = Field(default_factory=list)
    user_id: Optional[str] = None

    @field_validator("outfit", mode="before")
    @classmethod
    def _empty_join_rows(cls, value: Any) -> Any:
        return _blank_empty_join_rows(value)


class BatchScoreRequest(BaseModel):
    """Input contract for scoring several outfits against one wardrobe."""

    outfits: List[List[Optional[DescriptorPayload]]] = Field(default_factory=list)
    wardrobe: List[Optional[DescriptorPayload]] = Field(default_factory=list)
    user_id: Optional[str] = None

    @field_validator("outfits", mode="before")
    @classmethod
    def _empty_join_rows(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [_blank_empty_join_rows(slots) for slots in value]


class ItemMatchRequest(BaseModel):
    """Input contract for listing wardrobe matches of one garment."""

    item: DescriptorPayload
    wardrobe: List[Optional[DescriptorPayload]] = Field(default_factory=list)
    user_id: Optional[str] = None


class SlotResultPayload(BaseModel):
    index: int
    tier: Literal["none", "loose", "exact"]
    credit: int
    empty: bool = False
    matched_item_ids: List[Optional[str]] = []


class ScoreResponse(BaseModel):
    """Structure returned by the scoring tool."""

    status: Literal["ok"] = "ok"
    percentage: int = Field(ge=0, le=100)
    level: Literal["low", "medium", "high"]
    slots: List[SlotResultPayload] = []


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = exc.errors(include_url=False, include_context=False)
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "BatchScoreRequest",
    "DescriptorPayload",
    "ItemMatchRequest",
    "ScoreRequest",
    "ScoreResponse",
    "SlotResultPayload",
    "ValidationResult",
    "validation_failure",
]
