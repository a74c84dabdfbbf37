"""
project.py

Responsibility: the host project that components attach to.

A project owns the shared, project-wide configuration that components
register into (default task, type-checker includes, lint settings) and runs
the component lifecycle in two explicit phases:
1) `register()`: once per component, in insertion order
2) `pre_synthesize()`: every time `synth()` runs

Registrations are append-only; adding an entry that is already present is a
no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from projkit.descriptor import BootstrapDescriptor


def _append_unique(items: list[Any], item: Any) -> None:
    if item not in items:
        items.append(item)


@dataclass
class Task:
    name: str
    steps: list[str] = field(default_factory=list)

    def exec(self, command: str) -> None:
        self.steps.append(command)


@dataclass
class TypeCheckConfig:
    include: list[str] = field(default_factory=list)

    def add_include(self, pattern: str) -> None:
        _append_unique(self.include, pattern)


@dataclass(frozen=True)
class LintOverride:
    """Rule settings applied only to `files`."""

    files: tuple[str, ...]
    rules: dict[str, str] = field(default_factory=dict)


@dataclass
class LintConfig:
    lint_patterns: list[str] = field(default_factory=list)
    ignore_patterns: list[str] = field(default_factory=list)
    dev_deps_allowed: list[str] = field(default_factory=list)
    overrides: list[LintOverride] = field(default_factory=list)

    def add_lint_pattern(self, pattern: str) -> None:
        _append_unique(self.lint_patterns, pattern)

    def add_ignore_pattern(self, pattern: str) -> None:
        _append_unique(self.ignore_patterns, pattern)

    def allow_dev_deps(self, pattern: str) -> None:
        _append_unique(self.dev_deps_allowed, pattern)

    def add_override(self, override: LintOverride) -> None:
        _append_unique(self.overrides, override)


class Component:
    """Base class for project components; both phases default to no-ops."""

    def __init__(self, project: Project) -> None:
        self.project = project
        project.add_component(self)

    def register(self) -> None:
        pass

    def pre_synthesize(self) -> None:
        pass


class Project:
    def __init__(
        self,
        outdir: str | Path,
        *,
        bootstrap: BootstrapDescriptor | None = None,
        lint: LintConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.outdir = Path(outdir).resolve()
        self.bootstrap = bootstrap
        self.lint = lint
        self.logger = logger or logging.getLogger("projkit.project")
        self.default_task = Task("default")
        self.type_check = TypeCheckConfig()
        self.components: list[Component] = []
        self._registered: set[Component] = set()

    def add_component(self, component: Component) -> None:
        if component not in self.components:
            self.components.append(component)

    def register_components(self) -> None:
        """Run `register()` for components that have not been registered yet."""
        for component in list(self.components):
            if component in self._registered:
                continue
            self._registered.add(component)
            component.register()

    def synth(self) -> None:
        self.register_components()
        for component in self.components:
            component.pre_synthesize()
        self.logger.debug("Synthesized project at %s (%d components)", self.outdir, len(self.components))
