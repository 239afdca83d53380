"""Tool facade tests: validation envelopes, normalisation and structured logs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.compatibility import score
from matcher_app.config import MatcherConfig
from models.outfit import outfit_from_metadata
from models.wardrobe import wardrobe_from_metadata
from tools.compatibility_tools import CompatibilityTools


@pytest.fixture()
def tools() -> CompatibilityTools:
    return CompatibilityTools(config=MatcherConfig())


def _outfit():
    return [
        {"id": "o-1", "color": "Black", "subtype": "T-Shirt", "pattern": "plain", "brand": "X"},
        None,
        {"clothe": {"id": "o-2", "color": "blue", "subtype": "jeans", "material": "denim"}},
    ]


def test_score_outfit_normalises_rows_and_reports_slots(tools: CompatibilityTools) -> None:
    wardrobe = [
        {"id": 1, "color": "black", "subtype": "tshirt", "pattern": "Plain", "brand": "x"},
        {"id": 2, "color": "blue", "subtype": "jeans", "material": "linen"},
    ]

    response = tools.score_outfit(outfit=_outfit(), wardrobe=wardrobe, user_id="user-1")

    assert response["status"] == "ok"
    assert response["percentage"] == 50
    assert response["level"] == "medium"
    assert [slot["tier"] for slot in response["slots"]] == ["exact", "none", "none"]
    assert response["slots"][0]["matched_item_ids"] == ["1"]
    assert response["slots"][1]["empty"] is True


def test_score_outfit_can_omit_matched_items() -> None:
    tools = CompatibilityTools(config=MatcherConfig(include_matches=False))
    wardrobe = [{"id": "w-1", "color": "black", "subtype": "tshirt"}]

    response = tools.score_outfit(outfit=_outfit(), wardrobe=wardrobe)

    assert response["percentage"] == 25
    assert response["slots"][0]["tier"] == "loose"
    assert response["slots"][0]["matched_item_ids"] == []


def test_raw_values_compare_exactly_without_normalisation() -> None:
    tools = CompatibilityTools(config=MatcherConfig(normalise_categories=False))
    wardrobe = [{"id": "w-1", "color": "black", "subtype": "tshirt", "pattern": "plain", "brand": "X"}]

    response = tools.score_outfit(outfit=_outfit()[:1], wardrobe=wardrobe)

    assert response["percentage"] == 0


def test_invalid_payload_returns_review_envelope(tools: CompatibilityTools, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    response = tools.score_outfit(outfit="not-a-list", wardrobe=[])

    assert response["status"] == "needs_review"
    assert response["details"]
    rejected = next(
        record for record in caplog.records if getattr(record, "event", None) == "compatibility_request_rejected"
    )
    assert rejected.error_count == len(response["details"])
    assert rejected.error_locations[0][0] == "outfit"


def test_tool_calls_log_score_summary(tools: CompatibilityTools, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    tools.score_outfit(outfit=_outfit(), wardrobe=[], user_id="user-1")

    scored = next(record for record in caplog.records if getattr(record, "event", None) == "compatibility_scored")
    assert scored.tool == "score_outfit"
    assert scored.outfit_slots == 3
    assert scored.empty_slots == 1
    assert scored.wardrobe_items == 0
    assert scored.percentage == 0
    assert scored.match_level == "low"
    assert scored.tier_counts == {"none": 2}
    assert not hasattr(scored, "user_id")


def test_empty_join_row_is_an_empty_slot(tools: CompatibilityTools) -> None:
    outfit = [{"color": "black", "subtype": "tshirt"}, {"clothe": None}]
    wardrobe = [{"id": "w-1", "color": "black", "subtype": "tshirt"}]

    response = tools.score_outfit(outfit=outfit, wardrobe=wardrobe)

    assert response["percentage"] == 100
    assert response["slots"][1]["empty"] is True
    assert response["percentage"] == score(outfit_from_metadata(outfit), wardrobe_from_metadata(wardrobe))
    assert tools.score_outfits(outfits=[outfit], wardrobe=wardrobe)["percentages"] == [100]


def test_wardrobe_rows_keyed_by_item_id_report_their_ids(tools: CompatibilityTools) -> None:
    outfit = [{"color": "black", "subtype": "tshirt"}, {"color": "blue", "subtype": "jeans"}]
    wardrobe = [
        {"item_id": "w-1", "category": "Top", "color": "black", "subtype": "tshirt"},
        {"id": None, "item_id": 7, "color": "blue", "subtype": "jeans"},
    ]

    response = tools.score_outfit(outfit=outfit, wardrobe=wardrobe)

    assert response["percentage"] == 100
    assert response["slots"][0]["matched_item_ids"] == ["w-1"]
    assert response["slots"][1]["matched_item_ids"] == ["7"]


def test_score_outfits_keeps_order(tools: CompatibilityTools) -> None:
    wardrobe = [{"id": "w-1", "color": "red", "subtype": "coat"}]
    outfits = [
        [{"color": "red", "subtype": "coat"}],
        [{"color": "red", "subtype": "coat", "brand": "Zara"}, {"color": "white", "subtype": "sneakers"}],
        [],
    ]

    response = tools.score_outfits(outfits=outfits, wardrobe=wardrobe)

    assert response == {"status": "ok", "percentages": [100, 25, 0], "levels": ["high", "low", "low"]}


def test_find_item_matches_excludes_the_item_itself(tools: CompatibilityTools) -> None:
    item = {"id": "tee-1", "color": "black", "subtype": "tshirt", "brand": "Nike"}
    wardrobe = [
        item,
        {"id": "tee-2", "color": "black", "subtype": "tshirt", "brand": "nike"},
        {"id": "tee-3", "color": "black", "subtype": "tshirt", "brand": "Adidas"},
        {"id": "tee-4", "color": "white", "subtype": "tshirt"},
    ]

    response = tools.find_item_matches(item=item, wardrobe=wardrobe)

    assert response["tier"] == "exact"
    assert response["exact_item_ids"] == ["tee-2"]
    assert response["loose_item_ids"] == ["tee-3"]


def test_main_scores_request_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    import json

    import main as entrypoint

    monkeypatch.setattr(entrypoint, "configure_logging", lambda *_: None)
    request_file = tmp_path / "request.json"
    request_file.write_text(
        json.dumps(
            {
                "outfit": [{"color": "black", "subtype": "tshirt"}],
                "wardrobe": [{"id": "w-1", "color": "black", "subtype": "tshirt"}],
            }
        )
    )

    entrypoint.main([str(request_file)])

    output = json.loads(capsys.readouterr().out)
    assert output["percentage"] == 100
    assert output["slots"][0]["matched_item_ids"] == ["w-1"]
