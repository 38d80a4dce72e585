"""Deployment configuration validation."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .errors import ConfigValidationError, ParseError, StructuralError
from .models import LIFECYCLE_STAGES, DeploymentConfig
from .report import CheckType, Report, Severity

logger = logging.getLogger(__name__)


class ConfigValidator:
    """
    Validates deployment configuration documents.

    Validation is a single linear pass: parse, check the deployments
    structure, count modules per deployment, then check every referenced
    hook script. Only a parse failure stops the pass early.
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def validate(self, document_text: str, source: str = "<string>") -> Report:
        """
        Validate a configuration document.

        Args:
            document_text: Raw YAML or JSON text
            source: Name of the document, used in the rendered report

        Returns:
            Report with checks in the order they were performed
        """
        report = Report(source=source)

        try:
            data = self.parse(document_text)
        except ParseError as e:
            logger.debug(f"Parse failure in {source}: {e}")
            report.add(Severity.FAIL, CheckType.PARSE_ERROR, str(e))
            return report

        try:
            deployments = self._require_deployments(data)
        except StructuralError as e:
            report.add(Severity.FAIL, CheckType.STRUCTURAL_ERROR, str(e))
            return report

        report.add(
            Severity.PASS,
            CheckType.DEPLOYMENTS,
            f"deployments: {len(deployments)} deployment(s) defined",
        )

        hook_modules = []
        for index, deployment in enumerate(deployments):
            try:
                modules = self._require_modules(index, deployment)
            except StructuralError as e:
                report.add(Severity.FAIL, CheckType.STRUCTURAL_ERROR, str(e))
                continue

            if not modules:
                report.add(
                    Severity.WARNING,
                    CheckType.MODULES,
                    f"deployment {index}: no modules defined",
                )
            else:
                report.add(
                    Severity.PASS,
                    CheckType.MODULES,
                    f"deployment {index}: {len(modules)} module(s)",
                )
            hook_modules.extend(
                (index, module_index, module) for module_index, module in enumerate(modules)
            )

        self._check_hooks(hook_modules, report)

        if report.passed:
            report.config = DeploymentConfig.from_dict(data)

        logger.debug(
            f"Validated {source}: {len(report.failures)} failure(s), "
            f"{len(report.warnings)} warning(s)"
        )
        return report

    def parse(self, document_text: str) -> Any:
        """Parse document text, raising ParseError on invalid syntax."""
        try:
            return yaml.safe_load(document_text)
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark
            problem = e.problem or e.context or "invalid syntax"
            if mark is None:
                raise ParseError(problem) from e
            raise ParseError(problem, line=mark.line + 1, column=mark.column + 1) from e
        except yaml.YAMLError as e:
            raise ParseError(str(e)) from e
        except RecursionError as e:
            # PyYAML's composer and constructor recurse once per nesting level
            raise ParseError("document nested too deeply") from e

    def _require_deployments(self, data: Any) -> list:
        """Return the deployments sequence or raise StructuralError."""
        if data is None:
            raise StructuralError("deployments: missing required key")
        if not isinstance(data, dict):
            raise StructuralError(
                f"configuration root must be a mapping, got {type(data).__name__}"
            )
        if "deployments" not in data:
            raise StructuralError("deployments: missing required key")

        deployments = data["deployments"]
        if deployments is None:
            raise StructuralError("deployments: no deployments defined")
        if not isinstance(deployments, list):
            raise StructuralError(
                f"deployments: expected a sequence, got {type(deployments).__name__}"
            )
        if not deployments:
            raise StructuralError("deployments: no deployments defined")
        return deployments

    def _require_modules(self, index: int, deployment: Any) -> list:
        """Return a deployment's modules or raise StructuralError."""
        if not isinstance(deployment, dict):
            raise StructuralError(
                f"deployment {index}: expected a mapping, got {type(deployment).__name__}"
            )
        modules = deployment.get("modules")
        if modules is None:
            return []
        if not isinstance(modules, list):
            raise StructuralError(
                f"deployment {index}: modules must be a sequence, got {type(modules).__name__}"
            )
        return modules

    def _check_hooks(self, modules: list, report: Report) -> None:
        """Probe every referenced hook path, warning once per missing path."""
        seen: set[str] = set()

        for deployment_index, module_index, module in modules:
            location = f"deployment {deployment_index} module {module_index}"
            if not isinstance(module, dict):
                report.add(
                    Severity.WARNING,
                    CheckType.HOOK_ENTRY,
                    f"{location}: expected a mapping, got {type(module).__name__}",
                )
                continue

            for stage in LIFECYCLE_STAGES:
                entries = module.get(stage)
                if entries is None:
                    continue
                if not isinstance(entries, list):
                    report.add(
                        Severity.WARNING,
                        CheckType.HOOK_ENTRY,
                        f"{location}: {stage} must be a sequence",
                    )
                    continue

                for hook_index, entry in enumerate(entries):
                    hook_location = f"{location}: {stage}[{hook_index}]"
                    path = self._hook_path(hook_location, entry, report)
                    if path is None or path in seen:
                        continue
                    seen.add(path)

                    problem = self._check_path(path)
                    if problem == "missing":
                        report.add(
                            Severity.WARNING,
                            CheckType.HOOK_PATH,
                            f"missing hook file: {path}",
                        )
                    elif problem:
                        report.add(
                            Severity.WARNING,
                            CheckType.HOOK_PATH,
                            f"cannot access hook file: {path} ({problem})",
                        )

    def _hook_path(self, location: str, entry: Any, report: Report) -> Optional[str]:
        """Extract a hook's path, warning about malformed entries."""
        if not isinstance(entry, dict):
            report.add(
                Severity.WARNING,
                CheckType.HOOK_ENTRY,
                f"{location} must be a mapping",
            )
            return None

        args = entry.get("args")
        if args is not None and not isinstance(args, dict):
            report.add(
                Severity.WARNING,
                CheckType.HOOK_ENTRY,
                f"{location} args must be a mapping",
            )

        path = entry.get("path")
        if not isinstance(path, str) or not path.strip():
            report.add(
                Severity.WARNING,
                CheckType.HOOK_ENTRY,
                f"{location} has no path",
            )
            return None
        return path

    def _check_path(self, path: str) -> Optional[str]:
        """
        Check a hook path on the filesystem.

        Returns:
            None if the path exists, "missing" if it does not, or the
            reason the path could not be examined.
        """
        target = Path(path)
        if self.base_dir is not None and not target.is_absolute():
            target = self.base_dir / target

        try:
            target.stat()
        except (FileNotFoundError, NotADirectoryError):
            return "missing"
        except OSError as e:
            logger.debug(f"Could not stat hook path {target}: {e}")
            return e.strerror or str(e)
        except ValueError as e:
            return str(e)
        return None


def validate_config(config_path: str, base_dir: Optional[str] = None) -> Report:
    """
    Validate a configuration file.

    Args:
        config_path: Path to configuration file
        base_dir: Directory hook paths are resolved against
            (defaults to the configuration file's directory)

    Returns:
        Report

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    text = path.read_text(encoding="utf-8")
    validator = ConfigValidator(base_dir=base_dir if base_dir is not None else path.parent)
    return validator.validate(text, source=str(path))


def load_and_validate_config(config_path: str, base_dir: Optional[str] = None) -> DeploymentConfig:
    """
    Load and validate configuration, raising on errors.

    Args:
        config_path: Path to configuration file
        base_dir: Directory hook paths are resolved against

    Returns:
        Typed deployment configuration

    Raises:
        ConfigValidationError: If validation fails
        FileNotFoundError: If config file doesn't exist
    """
    report = validate_config(config_path, base_dir=base_dir)

    if not report.passed:
        raise ConfigValidationError([c.message for c in report.failures])

    for warning in report.warnings:
        logger.warning(f"Config warning: {warning.message}")

    return report.config
