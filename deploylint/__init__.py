"""Advisory linter for deployment configuration documents."""

from .config import ConfigValidator, Report, Severity, validate_config

__version__ = "0.1.0"

__all__ = ["ConfigValidator", "Report", "Severity", "validate_config", "__version__"]
