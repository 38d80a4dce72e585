"""Validation report types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models import DeploymentConfig


class Severity(str, Enum):
    """Outcome of a single check."""
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


class CheckType(str, Enum):
    """Kinds of checks performed on a configuration document."""
    PARSE_ERROR = "parse_error"
    STRUCTURAL_ERROR = "structural_error"
    DEPLOYMENTS = "deployments"
    MODULES = "modules"
    HOOK_ENTRY = "hook_entry"
    HOOK_PATH = "hook_path"


_LABELS = {
    Severity.PASS: "PASS",
    Severity.WARNING: "WARN",
    Severity.FAIL: "FAIL",
}


@dataclass
class Check:
    """A single severity-tagged finding."""
    severity: Severity
    check_type: CheckType
    message: str

    def __repr__(self) -> str:
        return f"<Check {self.severity.value} {self.check_type.value}: {self.message}>"

    def __str__(self) -> str:
        return f"[{_LABELS[self.severity]}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "check_type": self.check_type.value,
            "message": self.message,
        }


@dataclass
class Report:
    """Ordered checks from one validation pass."""
    checks: list[Check] = field(default_factory=list)
    source: str = "<string>"
    # Typed model of the document, set only when the report passed
    config: Optional[DeploymentConfig] = field(default=None, compare=False, repr=False)

    @property
    def passed(self) -> bool:
        return not any(c.severity == Severity.FAIL for c in self.checks)

    def __bool__(self) -> bool:
        return self.passed

    @property
    def failures(self) -> list[Check]:
        return [c for c in self.checks if c.severity == Severity.FAIL]

    @property
    def warnings(self) -> list[Check]:
        return [c for c in self.checks if c.severity == Severity.WARNING]

    def add(self, severity: Severity, check_type: CheckType, message: str) -> Check:
        check = Check(severity=severity, check_type=check_type, message=message)
        self.checks.append(check)
        return check

    def summary(self) -> str:
        """Generate a human-readable report."""
        lines = [f"Validation Report: {self.source}", ""]
        lines.extend(str(check) for check in self.checks)
        lines.append("")
        result = "PASSED" if self.passed else "FAILED"
        lines.append(
            f"Result: {result} "
            f"({len(self.failures)} failure(s), {len(self.warnings)} warning(s))"
        )
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "passed": self.passed,
            "checks": [c.to_dict() for c in self.checks],
            "failures": len(self.failures),
            "warnings": len(self.warnings),
        }
