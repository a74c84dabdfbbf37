"""
descriptor.py

Responsibility: Load project and step configuration from YAML into typed models.

Two files are understood:
- a project file describing where the project lives and how to bootstrap
  its `.projenrc.py` (see `parse_project_config`)
- a steps file listing job steps by kind (see `parse_steps_config`)

The CLI treats the parsed result as the single source of truth.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from projkit import steps as st
from projkit.render_options import SymbolRef


class ConfigError(ValueError):
    pass


class InvalidDescriptorError(ConfigError):
    pass


@dataclass(frozen=True)
class BootstrapDescriptor:
    """
    How to construct the project in a freshly scaffolded `.projenrc.py`.

    `fqn` is `<module>.<symbol path>`: the first segment is imported, the rest
    is the (possibly nested) symbol that gets constructed.
    """

    fqn: str
    args: dict[str, Any] = field(default_factory=dict)
    comments: dict[str, str] = field(default_factory=dict)

    def split(self) -> tuple[str, str]:
        """Return (module name, symbol path)."""
        parts = self.fqn.split(".")
        if len(parts) < 2 or not all(parts):
            raise InvalidDescriptorError(
                f"Invalid bootstrap descriptor {self.fqn!r}: expected '<module>.<symbol>'"
            )
        return parts[0], ".".join(parts[1:])


@dataclass(frozen=True)
class ProjectConfig:
    outdir: Path
    rcfile: str = ".projenrc.py"
    code_dir: str = "projenrc"
    bootstrap: BootstrapDescriptor | None = None


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping/object at the top level.")
    return data


def _mapping(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"`{key}` must be an object/mapping when provided.")
    return raw


def _resolve_refs(value: Any) -> Any:
    """Turn `{"$ref": "<fqn>"}` mappings into `SymbolRef`s, recursively."""
    if isinstance(value, dict):
        if set(value) == {"$ref"}:
            return SymbolRef(str(value["$ref"]))
        return {k: _resolve_refs(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_refs(v) for v in value]
    return value


def _parse_bootstrap(raw: dict[str, Any]) -> BootstrapDescriptor | None:
    if not raw:
        return None
    fqn = raw.get("fqn")
    if fqn is not None and not isinstance(fqn, str):
        raise ConfigError(f"`bootstrap.fqn` must be a string, got {type(fqn).__name__}: {fqn!r}")
    fqn = (fqn or "").strip()
    if not fqn:
        raise ConfigError("`bootstrap.fqn` is required when `bootstrap` is provided.")

    args = _mapping(raw, "args")
    comments = {str(k): str(v) for k, v in _mapping(raw, "comments").items()}
    descriptor = BootstrapDescriptor(fqn=fqn, args=_resolve_refs(args), comments=comments)
    descriptor.split()
    return descriptor


def parse_project_config(config_path: str | Path) -> ProjectConfig:
    """
    Parse a project YAML file into a `ProjectConfig`.

    Recognized keys:
    - outdir: str (relative to the config file's directory; default ".")
    - projenrc.filename: str
    - projenrc.code_dir: str
    - bootstrap.fqn: str
    - bootstrap.args: mapping of keyword arguments
    - bootstrap.comments: mapping of argument name -> comment
    """
    path = Path(config_path)
    data = _load_yaml_mapping(path)

    outdir = (path.parent / str(data.get("outdir") or ".")).resolve()

    rc = _mapping(data, "projenrc")
    rcfile = str(rc.get("filename") or ".projenrc.py").strip()
    code_dir = str(rc.get("code_dir") or "projenrc").strip().rstrip("/")

    return ProjectConfig(
        outdir=outdir,
        rcfile=rcfile,
        code_dir=code_dir,
        bootstrap=_parse_bootstrap(_mapping(data, "bootstrap")),
    )


def _normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in raw.items():
        key = str(k).replace("-", "_")
        if key in ("with", "if"):
            key = {"with": "with_", "if": "condition"}[key]
        out[key] = v
    return out


def _build(cls: type, raw: dict[str, Any], where: str) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"{where}: unknown keys: {', '.join(unknown)}")
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigError(f"{where}: {e}") from e


def _nested(raw: dict[str, Any], key: str, cls: type, where: str) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"{where}: `{key}` must be an object/mapping.")
    return _build(cls, _normalize_keys(value), f"{where}.{key}")


def _checkout(raw: dict[str, Any], where: str) -> st.JobStep:
    raw["with_"] = _nested(raw, "with_", st.CheckoutWith, where)
    return st.checkout(_build(st.CheckoutOptions, raw, where))


def _setup_git_identity(raw: dict[str, Any], where: str) -> st.JobStep:
    raw["git_identity"] = _nested(raw, "git_identity", st.GitIdentity, where)
    if raw["git_identity"] is None:
        raise ConfigError(f"{where}: `git-identity` is required.")
    return st.setup_git_identity(_build(st.SetupGitIdentityOptions, raw, where))


def _tag_exists(raw: dict[str, Any], where: str) -> st.JobStep:
    tag = raw.pop("tag", None)
    if tag is not None and not isinstance(tag, str):
        raise ConfigError(f"{where}: `tag` must be a string (quote it in YAML), got {tag!r}")
    if tag is None or not tag.strip():
        raise ConfigError(f"{where}: `tag` is required.")
    return st.tag_exists(tag, _build(st.StepConfiguration, raw, where))


def _upload_artifact(raw: dict[str, Any], where: str) -> st.JobStep:
    raw["with_"] = _nested(raw, "with_", st.UploadArtifactWith, where)
    if raw["with_"] is None:
        raise ConfigError(f"{where}: `with.path` is required.")
    return st.upload_artifact(_build(st.UploadArtifactOptions, raw, where))


_STEP_BUILDERS: dict[st.StepKind, Callable[[dict[str, Any], str], st.JobStep]] = {
    st.StepKind.CHECKOUT: _checkout,
    st.StepKind.SETUP_GIT_IDENTITY: _setup_git_identity,
    st.StepKind.TAG_EXISTS: _tag_exists,
    st.StepKind.UPLOAD_ARTIFACT: _upload_artifact,
}


def parse_step(raw: dict[str, Any], where: str = "step") -> st.JobStep:
    """Build one `JobStep` from a mapping with a `kind` key."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be an object/mapping.")
    data = _normalize_keys(raw)
    kind_raw = data.pop("kind", None)
    try:
        kind = st.StepKind(kind_raw)
    except ValueError as e:
        valid = ", ".join(k.value for k in st.StepKind)
        raise ConfigError(f"{where}: unknown step kind {kind_raw!r} (expected one of: {valid})") from e
    return _STEP_BUILDERS[kind](data, f"{where} ({kind.value})")


def parse_steps_config(config_path: str | Path) -> list[st.JobStep]:
    """
    Parse a steps YAML file (`steps: [...]`) into job steps, in file order.
    """
    path = Path(config_path)
    data = _load_yaml_mapping(path)
    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise ConfigError("`steps` must be a list when provided.")
    return [parse_step(raw, f"steps[{i}]") for i, raw in enumerate(raw_steps)]
