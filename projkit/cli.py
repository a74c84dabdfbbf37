"""
cli.py

Responsibility: CLI entrypoint for projkit.

Commands:
- `scaffold`: load a project YAML file, attach `Projenrc`, synthesize
  (writes `.projenrc.py` only when it does not exist yet)
- `steps`: build job steps listed in a YAML file and emit them as YAML

This module should orchestrate behavior but keep concerns isolated:
- Config loading: `descriptor.py`
- Step building: `steps.py`
- Scaffolding: `projenrc.py`
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from projkit.descriptor import ConfigError, parse_project_config, parse_steps_config
from projkit.project import LintConfig, Project
from projkit.projenrc import Projenrc, ProjenrcOptions
from projkit.renderer import RenderError
from projkit.steps import dump_steps

logger = logging.getLogger(__name__)


def scaffold_cmd(args: argparse.Namespace) -> int:
    config = parse_project_config(args.config_path)

    # CLI overrides
    outdir = Path(args.outdir).resolve() if args.outdir else config.outdir

    project = Project(outdir, bootstrap=config.bootstrap, lint=LintConfig())
    rc = Projenrc(project, ProjenrcOptions(filename=config.rcfile, code_dir=config.code_dir))
    project.synth()

    logger.info("%s: %s", rc.path, rc.state.value)
    logger.debug("default task: %s", project.default_task.steps)
    logger.debug("type-check includes: %s", project.type_check.include)
    if project.lint is not None:
        logger.debug("lint patterns: %s", project.lint.lint_patterns)
        logger.debug("lint ignore patterns: %s", project.lint.ignore_patterns)
    return 0


def steps_cmd(args: argparse.Namespace) -> int:
    steps = parse_steps_config(args.config_path)
    text = dump_steps(steps)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8", newline="\n")
        logger.info("Wrote %d steps to %s", len(steps), out)
    else:
        sys.stdout.write(text)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="projkit", description="CI step builders and project-definition scaffolding")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("scaffold", help="Create the project-definition script if it does not exist yet")
    s.add_argument("config_path", help="Path to the project YAML file")
    s.add_argument("--outdir", default=None, help="Project directory (overrides `outdir` in the config)")
    s.set_defaults(func=scaffold_cmd)

    w = sub.add_parser("steps", help="Render job steps from a YAML file")
    w.add_argument("config_path", help="Path to the steps YAML file")
    w.add_argument("-o", "--output", default=None, help="Write YAML here instead of stdout")
    w.set_defaults(func=steps_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s | %(message)s",
    )
    try:
        return int(args.func(args))
    except (ConfigError, RenderError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
