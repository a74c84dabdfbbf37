"""
projenrc.py

Responsibility: scaffold the project-definition script (`.projenrc.py`) once.

The script is generated only when it does not exist yet; after that it is
owned by the user and never read, diffed or overwritten here. The component
also wires the script into the project's default task, type-checker includes
and lint settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from projkit.project import Component, LintOverride, Project
from projkit.render_options import render_python_options
from projkit.renderer import RenderError, render_projenrc

# Rules a dot-prefixed script at the project root always trips:
# not part of a package, and not an importable module name.
RCFILE_DISABLED_RULES = ("INP001", "N999")


@dataclass(frozen=True)
class ProjenrcOptions:
    """
    - filename: the project-definition script (default ".projenrc.py")
    - code_dir: directory of helper modules the script may import
      (default "projenrc")
    """

    filename: str = ".projenrc.py"
    code_dir: str = "projenrc"


class GenerationState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CHECKED = "checked"
    SKIPPED = "skipped"
    GENERATED = "generated"


class Projenrc(Component):
    def __init__(self, project: Project, options: ProjenrcOptions | None = None) -> None:
        super().__init__(project)
        options = options or ProjenrcOptions()
        self.rcfile = options.filename
        self.code_dir = options.code_dir
        self.state = GenerationState.UNINITIALIZED

    @property
    def path(self) -> Path:
        return self.project.outdir / self.rcfile

    def register(self) -> None:
        # Running the project without a specific task executes the script.
        self.project.default_task.exec(f"python {self.rcfile}")
        self.generate()

    def generate(self) -> GenerationState:
        rcfile = self.path
        self.state = GenerationState.CHECKED
        if rcfile.exists():
            self.project.logger.debug("Project definition file already exists: %s", rcfile)
            self.state = GenerationState.SKIPPED
            return self.state

        bootstrap = self.project.bootstrap
        if bootstrap is None:
            self.state = GenerationState.SKIPPED
            return self.state

        module_name, class_name = bootstrap.split()
        rendered = render_python_options(bootstrap.args, bootstrap.comments)
        rendered.imports.add(module_name, class_name.split(".")[0])

        text = render_projenrc(
            imports=rendered.imports.as_python_imports(),
            class_name=class_name,
            options=rendered.text,
        )
        # Encode up front; the file must not exist unless it is complete.
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise RenderError(f"Project definition for {class_name} is not valid UTF-8") from e

        rcfile.parent.mkdir(parents=True, exist_ok=True)
        rcfile.write_bytes(data)
        self.state = GenerationState.GENERATED
        self.project.logger.info("Project definition file was created at %s", rcfile)
        return self.state

    def pre_synthesize(self) -> None:
        code_glob = f"{self.code_dir}/**/*.py"

        self.project.type_check.add_include(self.rcfile)
        self.project.type_check.add_include(code_glob)

        lint = self.project.lint
        if lint is None:
            return

        lint.add_lint_pattern(self.code_dir)
        lint.add_lint_pattern(self.rcfile)
        lint.allow_dev_deps(self.rcfile)
        lint.allow_dev_deps(code_glob)
        lint.add_ignore_pattern(f"!{self.rcfile}")
        lint.add_ignore_pattern(f"!{code_glob}")
        lint.add_override(
            LintOverride(
                files=(self.rcfile,),
                rules={rule: "off" for rule in RCFILE_DISABLED_RULES},
            )
        )
