"""Configuration helpers for the wardrobe match engine."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


@dataclass
class MatcherConfig:
    """Configuration values for callers embedding the scoring engine.

    The scorer itself takes no configuration; these values shape the logging
    setup and how the tool facade turns raw storage rows into descriptors.
    """

    environment: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    normalise_categories: bool = True
    include_matches: bool = True

    @classmethod
    def from_env(cls) -> "MatcherConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default. Environment variables win over file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("MATCHER_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        log_level = str(get_value("log_level", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
        if log_level not in _LOG_LEVELS:
            log_level = DEFAULT_LOG_LEVEL

        return cls(
            environment=env_name or yaml_config.get("environment"),
            log_level=log_level,
            normalise_categories=_parse_bool(get_value("normalise_categories"), True),
            include_matches=_parse_bool(get_value("include_matches"), True),
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
