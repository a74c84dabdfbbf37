"""
renderer.py

Responsibility: render the project-definition script from its template.

Rules:
- Output is deterministic for a given set of imports and arguments.
- The template only assembles already-rendered pieces; argument rendering
  lives in `render_options.py`.

This module intentionally does NOT know about the filesystem or the project.
"""

from __future__ import annotations

from collections.abc import Iterable

from jinja2 import Environment, StrictUndefined


class RenderError(RuntimeError):
    pass


PROJENRC_TEMPLATE = (
    "{% for statement in imports %}{{ statement }}\n{% endfor %}"
    "\n"
    "project = {{ class_name }}({{ options }})\n"
    "\n"
    "project.synth()\n"
)

_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_projenrc(*, imports: Iterable[str], class_name: str, options: str) -> str:
    """
    Render the script: import lines, the project construction and the final
    `project.synth()` call, separated by blank lines.
    """
    template = _env.from_string(PROJENRC_TEMPLATE)
    try:
        return template.render(imports=list(imports), class_name=class_name, options=options)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering project definition for {class_name}") from e
