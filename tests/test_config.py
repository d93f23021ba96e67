import json
import logging
from pathlib import Path

import pytest

from k8s_log_analyzer.analyzer import PatternAnalyzer
from k8s_log_analyzer.catalog import build_catalog
from k8s_log_analyzer.config import ConfigError, load_config, load_rules, resolve_log_level
from k8s_log_analyzer.models import AnalyzerSettings, Severity

ROOT = Path(__file__).resolve().parents[1]


def test_example_config_and_rules_load():
    config = load_config(ROOT / "configs" / "config.example.json")
    rules = load_rules(ROOT / "configs" / "extra_rules.example.json")

    assert config.analyzer == AnalyzerSettings(max_matching_lines=3, restart_count_threshold=5)
    assert config.log_level == "INFO"
    assert config.extra_rules_path == "configs/extra_rules.example.json"
    assert [rule.name for rule in rules] == ["CreateContainerConfigError"]
    assert rules[0].severity is Severity.ERROR


def test_extra_rules_are_reported_after_builtin_issues():
    rules = load_rules(ROOT / "configs" / "extra_rules.example.json")
    analyzer = PatternAnalyzer(rules=build_catalog(rules))

    issues = analyzer.analyze(
        'Warning  Failed  kubelet  Error: configmap "app-settings" not found\n'
        "Reason: CreateContainerConfigError\n"
        "Reason: CrashLoopBackOff\n"
    )

    assert [issue.name for issue in issues] == ["CrashLoopBackOff", "CreateContainerConfigError"]
    assert len(issues[1].matching_lines) == 2


def test_empty_config_uses_defaults(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")

    config = load_config(path)

    assert config.analyzer == AnalyzerSettings()
    assert config.extra_rules_path is None
    assert config.log_level == "WARNING"


def test_missing_config_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"analyzer": []},
        {"analyzer": {"max_matching_lines": "many"}},
        {"analyzer": {"restart_count_threshold": -1}},
        {"analyzer": {"restart_count_threshold": True}},
        {"analyzer": {"max_matching_lines": 3.9}},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_config_raises(tmp_path: Path, payload):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_malformed_json_raises_config_error(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="not valid JSON"):
        load_config(path)


def _rule_payload(**overrides):
    payload = {
        "name": "Evicted",
        "pattern": "The node was low on resource",
        "severity": "warning",
        "description": "Pod was evicted by the kubelet",
        "suggestions": ["Check node pressure conditions"],
        "docs": "https://kubernetes.io/docs/concepts/scheduling-eviction/node-pressure-eviction/",
    }
    payload.update(overrides)
    return payload


def test_rules_file_validation(tmp_path: Path):
    path = tmp_path / "rules.json"

    path.write_text(json.dumps([]), encoding="utf-8")
    with pytest.raises(ConfigError, match="non-empty list"):
        load_rules(path)

    incomplete = _rule_payload()
    del incomplete["docs"]
    path.write_text(json.dumps([incomplete]), encoding="utf-8")
    with pytest.raises(ConfigError, match="missing keys: docs"):
        load_rules(path)

    path.write_text(json.dumps([_rule_payload(severity="critical")]), encoding="utf-8")
    with pytest.raises(ConfigError, match="Unknown severity"):
        load_rules(path)

    path.write_text(json.dumps([_rule_payload(pattern="(unclosed")]), encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid pattern"):
        load_rules(path)


def test_rules_file_severity_is_case_insensitive(tmp_path: Path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps([_rule_payload(severity="WARNING")]), encoding="utf-8")

    rules = load_rules(path)

    assert rules[0].severity is Severity.WARNING
    assert rules[0].suggestions == ("Check node pressure conditions",)


def test_resolve_log_level(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "error"}), encoding="utf-8")
    config = load_config(path)

    assert resolve_log_level(None, verbose=False) == logging.WARNING
    assert resolve_log_level(config, verbose=False) == logging.ERROR
    assert resolve_log_level(config, verbose=True) == logging.DEBUG


def test_integral_float_settings_are_accepted(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"analyzer": {"max_matching_lines": 2.0}}), encoding="utf-8")

    assert load_config(path).analyzer.max_matching_lines == 2
