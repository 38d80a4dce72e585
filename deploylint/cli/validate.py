#!/usr/bin/env python3
"""
Validate CLI - Lint deployment configuration files from the command line.

Usage:
    python -m deploylint.cli.validate deployments.yaml
    python -m deploylint.cli.validate deployments.yaml --format json -o report.json
    python -m deploylint.cli.validate deployments.yaml --list-hooks
    cat deployments.yaml | python -m deploylint.cli.validate -
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml

from ..config.models import DeploymentConfig
from ..config.report import Report
from ..config.settings import (
    OUTPUT_FORMATS,
    LintSettings,
    env_settings,
    load_settings_file,
    merge_settings,
)
from ..config.validator import ConfigValidator, validate_config
from ..utils.logging import LogContext, get_logger, log_report, setup_logging

logger = get_logger("cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def hook_inventory(config: DeploymentConfig) -> list[dict]:
    """List every hook in deployment, module and lifecycle-stage order."""
    return [
        {
            "deployment": index,
            "module": module.path,
            "stage": stage,
            "path": hook.path,
            "args": hook.args,
        }
        for index, deployment in enumerate(config.deployments)
        for module in deployment.modules
        for stage, hook in module.all_hooks()
    ]


def render_report(report: Report, output_format: str, list_hooks: bool = False) -> str:
    """Render a report as text, JSON or YAML, optionally with the hook inventory."""
    hooks = hook_inventory(report.config) if list_hooks and report.config else None

    if output_format in ("json", "yaml"):
        data = report.to_dict()
        if hooks is not None:
            data["hooks"] = hooks
        if output_format == "json":
            return json.dumps(data, indent=2)
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    text = report.summary()
    if hooks is not None:
        lines = [
            "",
            f"Hooks: {len(hooks)} across {report.config.module_count} module(s)",
        ]
        for hook in hooks:
            args = " ".join(f"{k}={v}" for k, v in hook["args"].items())
            lines.append(
                f"  deployment {hook['deployment']} {hook['module']} "
                f"{hook['stage']}: {hook['path']}" + (f" {args}" if args else "")
            )
        text += "\n" + "\n".join(lines)
    return text


def exit_code(report: Report, strict: bool = False) -> int:
    """Map a report to a process exit code."""
    if not report.passed:
        return EXIT_FAILED
    if strict and report.warnings:
        return EXIT_FAILED
    return EXIT_OK


def run_validation(config: str, settings: LintSettings) -> Report:
    """
    Validate a configuration file, or stdin when config is "-".

    Args:
        config: Path to configuration file, or "-"
        settings: Linter settings

    Returns:
        Report

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    source = "<stdin>" if config == "-" else config
    with LogContext(config_file=source):
        if config == "-":
            validator = ConfigValidator(base_dir=settings.base_dir)
            report = validator.validate(sys.stdin.read(), source=source)
        else:
            report = validate_config(config, base_dir=settings.base_dir)

        log_report(logger, report)

    return report


def resolve_settings(args: argparse.Namespace) -> LintSettings:
    """
    Build settings from the settings file, then DEPLOYLINT_* variables, then flags.

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        ValueError: If the merged settings are invalid
    """
    file_settings = load_settings_file(args.settings) if args.settings else {}

    flags: dict = {"lint": {}, "logging": {}}
    if args.base_dir:
        flags["lint"]["base_dir"] = args.base_dir
    if args.format:
        flags["lint"]["output_format"] = args.format
    if args.strict:
        flags["lint"]["strict"] = True
    if args.verbose:
        flags["logging"]["level"] = "DEBUG"

    return LintSettings.from_settings(merge_settings(file_settings, env_settings(), flags))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploylint",
        description="Validate deployment configuration files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Text report
  deploylint deployments.yaml

  # Resolve hook paths against another directory
  deploylint deployments.yaml --base-dir ./infra

  # Machine-readable report saved to a file
  deploylint deployments.yaml --format json -o results/lint.json

  # Fail on warnings too, and list every hook
  deploylint deployments.yaml --strict --list-hooks

  # Defaults from a settings file (lint/logging sections)
  deploylint deployments.yaml --settings deploylint.yaml

Settings precedence: --settings file < environment < command-line flags.

Environment:
  DEPLOYLINT_BASE_DIR, DEPLOYLINT_FORMAT, DEPLOYLINT_STRICT,
  DEPLOYLINT_LOG_LEVEL, DEPLOYLINT_LOG_FILE, DEPLOYLINT_JSON_LOGS
        """,
    )

    parser.add_argument(
        "config",
        help="Configuration file to validate ('-' reads from stdin)",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="YAML settings file with 'lint' and 'logging' sections",
    )
    parser.add_argument(
        "--base-dir",
        type=str,
        default=None,
        help="Directory hook paths are resolved against "
             "(default: the configuration file's directory)",
    )
    parser.add_argument(
        "-f", "--format",
        type=str,
        default=None,
        choices=OUTPUT_FORMATS,
        help="Report format (default: text)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when warnings are reported",
    )
    parser.add_argument(
        "--list-hooks",
        action="store_true",
        help="Append the hook inventory of a passing configuration",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write the report to a file instead of stdout",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the validate CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.json_logs,
    )

    try:
        report = run_validation(args.config, settings)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read {args.config}: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\nValidation cancelled by user", file=sys.stderr)
        return 130

    rendered = render_report(report, settings.output_format, list_hooks=args.list_hooks)

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(rendered + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error: could not write {args.output}: {e}", file=sys.stderr)
            return EXIT_USAGE
        logger.info(f"Report saved to: {output_path}")
    else:
        print(rendered)

    return exit_code(report, strict=settings.strict)


if __name__ == "__main__":
    sys.exit(main())
