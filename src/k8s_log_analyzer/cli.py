from __future__ import annotations

import argparse
import json
import logging
import sys

from k8s_log_analyzer.analyzer import PatternAnalyzer
from k8s_log_analyzer.catalog import CatalogError, build_catalog
from k8s_log_analyzer.config import ConfigError, load_config, load_rules, resolve_log_level
from k8s_log_analyzer.models import AppConfig
from k8s_log_analyzer.reporting import RENDERERS, render, write_report
from k8s_log_analyzer.samples import SAMPLE_POD_DESCRIBE

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please paste your kubectl logs or describe output"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="k8s-log-analyzer",
        description="Detect common Kubernetes pod failures in kubectl logs/describe output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="JSON config path")
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument("--format", choices=sorted(RENDERERS), default="text")
    output.add_argument("--output", default=None, help="Write the report to a file instead of stdout")

    analyze_parser = subparsers.add_parser(
        "analyze",
        parents=[common, output],
        help="Analyze pasted kubectl output",
    )
    analyze_parser.add_argument(
        "--input",
        default="-",
        help="File with kubectl logs/describe output ('-' reads stdin)",
    )

    subparsers.add_parser(
        "sample",
        parents=[common, output],
        help="Analyze the bundled sample pod description",
    )

    subparsers.add_parser("rules", parents=[common], help="Print the active rule catalog as JSON")

    return parser


def build_analyzer(config: AppConfig | None) -> PatternAnalyzer:
    if config is None:
        return PatternAnalyzer()
    extra = load_rules(config.extra_rules_path) if config.extra_rules_path else []
    return PatternAnalyzer(rules=build_catalog(extra), settings=config.analyzer)


def read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8", errors="replace") as handle:
        return handle.read()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else None
        logging.basicConfig(
            level=resolve_log_level(config, args.verbose),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        analyzer = build_analyzer(config)
    except (ConfigError, CatalogError) as exc:
        parser.error(str(exc))
        return 2

    if args.command == "rules":
        print(json.dumps([rule.to_dict() for rule in analyzer.rules], indent=2, ensure_ascii=True))
        return 0

    if args.command == "sample":
        text = SAMPLE_POD_DESCRIBE
    elif args.command == "analyze":
        try:
            text = read_input(args.input)
        except OSError as exc:
            parser.error(f"Cannot read input: {exc}")
            return 2
    else:
        parser.error(f"Unsupported command: {args.command}")
        return 2

    text = text.strip()
    if not text:
        parser.error(EMPTY_INPUT_MESSAGE)
        return 2

    issues = analyzer.analyze(text)
    logger.info("Detected %d issue(s)", len(issues))

    if args.output:
        path = write_report(issues, args.output, args.format)
        print(json.dumps({"output": str(path.resolve()), "issues_count": len(issues)}, indent=2))
        return 0

    print(render(issues, args.format))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
