from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bulletin_finder.report import EXPORT_FORMATS, MISSING
from bulletin_finder.vocabulary import DEFAULT_VOCABULARY, Vocabulary

SUPPORTED_CONFIG_SUFFIXES = {".json", ".yml", ".yaml"}
DEFAULT_CONFIG_NAME = "bulletin-finder.json"

STARTER_CONFIG = {
    "extra_organization_keywords": [],
    "extra_state_markers": [],
    "organization_placeholder": MISSING,
    "missing_placeholder": MISSING,
    "export_format": "xlsx",
}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class FinderConfig:
    extra_organization_keywords: tuple[str, ...] = ()
    extra_state_markers: tuple[str, ...] = ()
    organization_placeholder: str = MISSING
    missing_placeholder: str = MISSING
    export_format: str = "xlsx"

    @property
    def vocabulary(self) -> Vocabulary:
        if not self.extra_organization_keywords and not self.extra_state_markers:
            return DEFAULT_VOCABULARY
        return DEFAULT_VOCABULARY.extended(
            organization_keywords=self.extra_organization_keywords,
            state_markers=self.extra_state_markers,
        )


def _string_list(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(item for item in value if item.strip())


def _string(payload: dict[str, Any], key: str, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def parse_config(payload: Any) -> FinderConfig:
    if not isinstance(payload, dict):
        raise ConfigError("Config root must be a JSON object.")
    unknown = sorted(set(payload) - set(STARTER_CONFIG))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    export_format = _string(payload, "export_format", "xlsx")
    if export_format not in EXPORT_FORMATS:
        raise ConfigError(f"'export_format' must be one of: {', '.join(EXPORT_FORMATS)}")
    return FinderConfig(
        extra_organization_keywords=_string_list(payload, "extra_organization_keywords"),
        extra_state_markers=_string_list(payload, "extra_state_markers"),
        organization_placeholder=_string(payload, "organization_placeholder", MISSING),
        missing_placeholder=_string(payload, "missing_placeholder", MISSING),
        export_format=export_format,
    )


def load_config(path: Path | str | None) -> FinderConfig:
    if path is None:
        return FinderConfig()
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config not found: {config_path}")
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ConfigError("Config must be .json, .yml, or .yaml")
    if suffix in {".yml", ".yaml"}:
        raise ConfigError("YAML configs are not supported yet. Use JSON for now.")
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not read config: {exc}") from exc
    return parse_config(payload)


def starter_config_text() -> str:
    return json.dumps(STARTER_CONFIG, indent=2, ensure_ascii=False) + "\n"
