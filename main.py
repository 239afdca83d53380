"""Simple entrypoint to score an outfit request file locally."""

import json
import sys
from pathlib import Path

from matcher_app.config import MatcherConfig
from matcher_app.logging_config import configure_logging, operation_context
from tools.compatibility_tools import CompatibilityTools

DEMO_REQUEST = {
    "outfit": [
        {"id": "o-1", "color": "black", "subtype": "tshirt", "pattern": "plain", "brand": "X"},
        {"id": "o-2", "color": "blue", "subtype": "jeans", "material": "denim"},
        None,
    ],
    "wardrobe": [
        {"id": "w-1", "color": "black", "subtype": "tshirt", "pattern": "striped", "brand": "Y"},
        {"id": "w-2", "color": "blue", "subtype": "jeans", "material": "denim"},
    ],
}


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    config = MatcherConfig.from_env()
    configure_logging(config.log_level)
    request = json.loads(Path(args[0]).read_text()) if args else DEMO_REQUEST
    tools = CompatibilityTools(config=config)
    outfit = request.get("outfit") or []
    with operation_context(
        "score_request",
        environment=config.environment,
        outfit_slots=len(outfit),
        empty_slots=sum(1 for slot in outfit if slot is None),
    ) as summary:
        response = tools.score_outfit(**request)
        summary["percentage"] = response.get("percentage")
    print(json.dumps(response, indent=2))


if __name__ == "__main__":
    main()
