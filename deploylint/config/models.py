"""Typed model of a deployment configuration document."""

from dataclasses import dataclass, field
from typing import Any, Optional

LIFECYCLE_STAGES = ("pre_deploy", "post_deploy", "pre_destroy", "post_destroy")


@dataclass
class HookRef:
    """External script invoked at a lifecycle stage."""
    path: str
    args: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "HookRef":
        args = data.get("args")
        return cls(
            path=str(data.get("path", "")),
            args=dict(args) if isinstance(args, dict) else {},
        )


@dataclass
class Module:
    """Unit of infrastructure definition with optional lifecycle hooks."""
    path: str
    pre_deploy: list[HookRef] = field(default_factory=list)
    post_deploy: list[HookRef] = field(default_factory=list)
    pre_destroy: list[HookRef] = field(default_factory=list)
    post_destroy: list[HookRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Module":
        hooks = {}
        for stage in LIFECYCLE_STAGES:
            entries = data.get(stage) or []
            if not isinstance(entries, list):
                entries = []
            hooks[stage] = [
                HookRef.from_dict(entry) for entry in entries if isinstance(entry, dict)
            ]
        return cls(path=str(data.get("path", "")), **hooks)

    def hooks(self, stage: str) -> list[HookRef]:
        """Return the hooks registered for a lifecycle stage."""
        if stage not in LIFECYCLE_STAGES:
            raise ValueError(f"Unknown lifecycle stage: {stage}")
        return getattr(self, stage)

    def all_hooks(self) -> list[tuple[str, HookRef]]:
        """Return (stage, hook) pairs in canonical stage order."""
        return [(stage, hook) for stage in LIFECYCLE_STAGES for hook in self.hooks(stage)]


@dataclass
class Deployment:
    """Collection of modules provisioned together."""
    modules: list[Module] = field(default_factory=list)
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Deployment":
        modules = data.get("modules") or []
        if not isinstance(modules, list):
            modules = []
        name = data.get("name")
        return cls(
            modules=[Module.from_dict(m) for m in modules if isinstance(m, dict)],
            name=str(name) if name is not None else None,
        )


@dataclass
class DeploymentConfig:
    """Root of a deployment configuration document."""
    deployments: list[Deployment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "DeploymentConfig":
        deployments = (data or {}).get("deployments") or []
        if not isinstance(deployments, list):
            deployments = []
        return cls(
            deployments=[Deployment.from_dict(d) for d in deployments if isinstance(d, dict)]
        )

    @property
    def module_count(self) -> int:
        return sum(len(d.modules) for d in self.deployments)
