from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from k8s_log_analyzer.models import AnalyzerSettings, AppConfig, PatternRule, Severity

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    pass


def load_config(path: str | Path) -> AppConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    analyzer_raw = raw.get("analyzer", {})
    if not isinstance(analyzer_raw, dict):
        raise ConfigError("'analyzer' must be an object")

    defaults = AnalyzerSettings()
    analyzer = AnalyzerSettings(
        max_matching_lines=_non_negative_int(
            analyzer_raw.get("max_matching_lines", defaults.max_matching_lines),
            "max_matching_lines",
        ),
        restart_count_threshold=_non_negative_int(
            analyzer_raw.get("restart_count_threshold", defaults.restart_count_threshold),
            "restart_count_threshold",
        ),
    )

    log_level = str(raw.get("log_level", "WARNING")).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log_level: {log_level}")

    return AppConfig(
        analyzer=analyzer,
        extra_rules_path=_optional_str(raw.get("extra_rules_path")),
        log_level=log_level,
    )


def load_rules(path: str | Path) -> list[PatternRule]:
    rules_path = Path(path)
    if not rules_path.exists():
        raise ConfigError(f"Rules file not found: {rules_path}")

    with rules_path.open("r", encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Rules file is not valid JSON: {exc}") from exc

    if not isinstance(raw, list) or not raw:
        raise ConfigError("Rules file must contain a non-empty list")

    rules: list[PatternRule] = []
    for item in raw:
        if not isinstance(item, dict):
            raise ConfigError("Each rule entry must be an object")

        missing = [
            key
            for key in ("name", "pattern", "severity", "description", "suggestions", "docs")
            if key not in item
        ]
        if missing:
            raise ConfigError(f"Rule is missing keys: {', '.join(missing)}")

        try:
            severity = Severity(str(item["severity"]).lower())
        except ValueError as exc:
            raise ConfigError(f"Unknown severity for rule {item['name']!r}: {item['severity']}") from exc

        try:
            rule = PatternRule(
                name=str(item["name"]),
                pattern=str(item["pattern"]),
                severity=severity,
                description=str(item["description"]),
                suggestions=tuple(_ensure_string_list(item["suggestions"])),
                docs=str(item["docs"]),
            )
        except re.error as exc:
            raise ConfigError(f"Invalid pattern for rule {item['name']!r}: {exc}") from exc
        rules.append(rule)

    return rules


def resolve_log_level(config: AppConfig | None, verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    if config is None:
        return logging.WARNING
    return getattr(logging, config.log_level)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _non_negative_int(value: object, key: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"'{key}' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be an integer") from exc
    if number < 0:
        raise ConfigError(f"'{key}' must not be negative")
    return number


def _ensure_string_list(value: object) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("Expected a list of strings")
    return [str(item) for item in value]
