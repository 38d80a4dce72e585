"""Deployment configuration model and validation."""

from .errors import ConfigError, ConfigValidationError, ParseError, StructuralError
from .models import LIFECYCLE_STAGES, Deployment, DeploymentConfig, HookRef, Module
from .report import Check, CheckType, Report, Severity
from .settings import LintSettings
from .validator import ConfigValidator, load_and_validate_config, validate_config

__all__ = [
    # Validation
    "ConfigValidator",
    "validate_config",
    "load_and_validate_config",
    # Report
    "Report",
    "Check",
    "CheckType",
    "Severity",
    # Errors
    "ConfigError",
    "ConfigValidationError",
    "ParseError",
    "StructuralError",
    # Model
    "DeploymentConfig",
    "Deployment",
    "Module",
    "HookRef",
    "LIFECYCLE_STAGES",
    # Settings
    "LintSettings",
]
