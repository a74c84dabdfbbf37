"""
render_options.py

Responsibility: render bootstrap arguments as a Python keyword-argument list.

Values referencing exported symbols (`SymbolRef`) are rendered as attribute
access on an imported name, and the import is collected alongside the text.
"""

from __future__ import annotations

import json
import keyword
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from projkit.renderer import RenderError

INDENT = "    "


@dataclass(frozen=True)
class SymbolRef:
    """Reference to an exported symbol, e.g. `pkg.sub.Enum.VALUE`."""

    fqn: str


class ImportCollection:
    """
    `from x import a, b` statements, one per module, in insertion order.
    """

    def __init__(self) -> None:
        self._imports: dict[str, dict[str, None]] = {}

    def add(self, module: str, symbol: str) -> None:
        self._imports.setdefault(module, {})[symbol] = None

    def merge(self, other: ImportCollection) -> None:
        for module, symbols in other._imports.items():
            for symbol in symbols:
                self.add(module, symbol)

    def as_python_imports(self) -> Iterator[str]:
        for module, symbols in self._imports.items():
            yield f"from {module} import {', '.join(symbols)}"

    def __len__(self) -> int:
        return sum(len(symbols) for symbols in self._imports.values())


@dataclass
class RenderedOptions:
    text: str
    imports: ImportCollection = field(default_factory=ImportCollection)


def _one_line(comment: str) -> str:
    return " ".join(str(comment).split())


def _render_ref(ref: SymbolRef, imports: ImportCollection) -> str:
    parts = ref.fqn.split(".")
    if len(parts) < 2 or not all(parts):
        raise RenderError(f"Invalid symbol reference: {ref.fqn!r}")
    imports.add(parts[0], parts[1])
    return ".".join(parts[1:])


def _render_value(value: Any, imports: ImportCollection, depth: int) -> str:
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise RenderError(f"Cannot render non-finite number: {value!r}")
    # Exact types only: int/float subclasses such as IntEnum repr as `<Enum.X: 1>`.
    if type(value) in (int, float):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, SymbolRef):
        return _render_ref(value, imports)

    inner = INDENT * (depth + 1)
    outer = INDENT * depth
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{inner}{_render_value(v, imports, depth + 1)}," for v in value]
        return "[\n" + "\n".join(items) + f"\n{outer}]"
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        items = []
        for k, v in value.items():
            if not isinstance(k, str):
                raise RenderError(f"Mapping keys must be strings, got {type(k).__name__}: {k!r}")
            items.append(f"{inner}{json.dumps(k, ensure_ascii=False)}: {_render_value(v, imports, depth + 1)},")
        return "{\n" + "\n".join(items) + f"\n{outer}}}"

    raise RenderError(f"Cannot render value of type {type(value).__name__}: {value!r}")


def render_python_options(
    args: Mapping[str, Any] | None,
    comments: Mapping[str, str] | None = None,
) -> RenderedOptions:
    """
    Render `args` as keyword arguments, one per line.

    A comment for an argument is appended after it as `# ...`. The returned
    imports cover every `SymbolRef` found in the values.
    """
    imports = ImportCollection()
    if not args:
        return RenderedOptions(text="", imports=imports)

    comments = comments or {}
    lines = [""]
    for key, value in args.items():
        if not isinstance(key, str) or not key.isidentifier() or keyword.iskeyword(key):
            raise RenderError(f"Not a valid keyword argument name: {key!r}")
        line = f"{INDENT}{key}={_render_value(value, imports, 1)},"
        comment = comments.get(key)
        if comment:
            line += f"  # {_one_line(comment)}"
        lines.append(line)
    lines.append("")
    return RenderedOptions(text="\n".join(lines), imports=imports)
