"""Configuration error types."""

from typing import Optional


class ConfigError(Exception):
    """Base class for configuration document errors."""


class ParseError(ConfigError):
    """Raised when a document is not syntactically valid."""

    def __init__(self, problem: str, line: Optional[int] = None, column: Optional[int] = None):
        self.problem = problem
        self.line = line
        self.column = column
        if line is not None:
            location = f"line {line}, column {column}"
            message = f"parse error at {location}: {problem}"
        else:
            message = f"parse error: {problem}"
        super().__init__(message)


class StructuralError(ConfigError):
    """Raised when a parsed document lacks required structure."""


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")
