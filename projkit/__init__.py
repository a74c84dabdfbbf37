"""
projkit package

Declarative helpers for CI workflow steps and a write-once scaffold generator
for project-definition scripts.

Key responsibilities are split across modules:
- `steps.py`: typed builders for common GitHub Actions job steps
- `objects.py`: small mapping helpers shared by the builders
- `render_options.py`: render bootstrap arguments as Python source
- `renderer.py`: render the project-definition script from a template
- `project.py`: host project model and two-phase component lifecycle
- `projenrc.py`: component that scaffolds `.projenrc.py` exactly once
- `descriptor.py`: load project and step configuration from YAML
- `cli.py`: CLI entrypoint (scaffold, steps)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
