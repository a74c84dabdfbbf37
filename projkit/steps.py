"""
steps.py

Responsibility: build commonly used, individual GitHub Workflow job steps.

Every builder is a pure function: a typed options object goes in, a `JobStep`
comes out. Only the common step fields listed in `StepConfiguration` are
carried over from the options; step-specific parameters are shaped by the
`*With` dataclasses and dropped entirely when nothing is set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

import yaml

from projkit.objects import compact

CHECKOUT_ACTION = "actions/checkout@v3"
UPLOAD_ARTIFACT_ACTION = "actions/upload-artifact@v4"


class StepKind(str, Enum):
    CHECKOUT = "checkout"
    SETUP_GIT_IDENTITY = "setup-git-identity"
    TAG_EXISTS = "tag-exists"
    UPLOAD_ARTIFACT = "upload-artifact"

    @property
    def uses(self) -> str | None:
        """Versioned action reference, or None for inline-script steps."""
        return _ACTION_REFS.get(self)


_ACTION_REFS = {
    StepKind.CHECKOUT: CHECKOUT_ACTION,
    StepKind.UPLOAD_ARTIFACT: UPLOAD_ARTIFACT_ACTION,
}


@dataclass(frozen=True, kw_only=True)
class StepConfiguration:
    """Fields shared by every job step."""

    name: str | None = None
    id: str | None = None
    condition: str | None = None
    continue_on_error: bool | None = None
    env: dict[str, str] | None = None
    timeout_minutes: float | None = None
    working_directory: str | None = None


_COMMON_FIELDS = (
    "name",
    "id",
    "condition",
    "continue_on_error",
    "env",
    "timeout_minutes",
    "working_directory",
)


@dataclass(frozen=True, kw_only=True)
class JobStep(StepConfiguration):
    uses: str | None = None
    with_: dict[str, Any] | None = None
    run: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Workflow-file representation (GitHub Actions key names)."""
        return compact(
            {
                "name": self.name,
                "id": self.id,
                "if": self.condition,
                "uses": self.uses,
                "with": self.with_,
                "run": self.run,
                "env": self.env,
                "continue-on-error": self.continue_on_error,
                "timeout-minutes": self.timeout_minutes,
                "working-directory": self.working_directory,
            }
        ) or {}


@dataclass(frozen=True)
class GitIdentity:
    name: str
    email: str


@dataclass(frozen=True)
class CheckoutWith:
    """
    Parameters for `actions/checkout`.

    - fetch_depth: commits to fetch, 0 means all history (action default: 1)
    - lfs: emitted only when enabled
    - ref: branch or tag name (default branch when omitted)
    - repository: owner/repo to check out (current repository when omitted)
    - token: token used for the checkout; use a PAT with `repo` scope to push
      changes back (GITHUB_TOKEN when omitted)
    """

    fetch_depth: int | None = None
    lfs: bool | None = None
    ref: str | None = None
    repository: str | None = None
    token: str | None = None

    def to_params(self) -> dict[str, Any] | None:
        return compact(
            {
                "fetch-depth": self.fetch_depth,
                "token": self.token,
                "ref": self.ref,
                "repository": self.repository,
                "lfs": True if self.lfs else None,
            }
        )


@dataclass(frozen=True)
class UploadArtifactWith:
    """
    Parameters for `actions/upload-artifact`.

    - path: file, directory or wildcard pattern to upload
    - name: artifact name (action default: "artifact")
    - overwrite: replace an existing artifact of the same name; v4 flipped the
      action's own default, so it is pinned to True here
    - if_no_files_found: "error", "warn" or "ignore" (action default: "warn")
    - retention_days: 1..90, 0 keeps the repository default
    - compression_level: zlib level 0..9 (action default: 6)
    """

    path: str
    name: str | None = None
    overwrite: bool | None = True
    if_no_files_found: Literal["error", "warn", "ignore"] | None = None
    retention_days: int | None = None
    compression_level: int | None = None

    def to_params(self) -> dict[str, Any] | None:
        return compact(
            {
                "name": self.name,
                "path": self.path,
                "overwrite": True if self.overwrite is None else self.overwrite,
                "if-no-files-found": self.if_no_files_found,
                "retention-days": self.retention_days,
                "compression-level": self.compression_level,
            }
        )


@dataclass(frozen=True, kw_only=True)
class CheckoutOptions(StepConfiguration):
    with_: CheckoutWith | None = None


@dataclass(frozen=True, kw_only=True)
class SetupGitIdentityOptions(StepConfiguration):
    git_identity: GitIdentity


@dataclass(frozen=True, kw_only=True)
class UploadArtifactOptions(StepConfiguration):
    with_: UploadArtifactWith


def _step_config(options: StepConfiguration | None, **defaults: Any) -> dict[str, Any]:
    """
    Copy the allowlisted common fields off `options`.

    `defaults` fill in fields the caller left as None.
    """
    values = {f: getattr(options, f, None) for f in _COMMON_FIELDS}
    for key, value in defaults.items():
        if values[key] is None:
            values[key] = value
    return values


def checkout(options: CheckoutOptions | None = None) -> JobStep:
    """Check out a repository."""
    options = options or CheckoutOptions()
    params = options.with_.to_params() if options.with_ is not None else None
    return JobStep(
        **_step_config(options, name="Checkout"),
        uses=StepKind.CHECKOUT.uses,
        with_=params,
    )


def setup_git_identity(options: SetupGitIdentityOptions) -> JobStep:
    """
    Configure the git user name and email.

    Values are placed inside double quotes without further escaping.
    """
    identity = options.git_identity
    return JobStep(
        **_step_config(options, name="Set git identity"),
        run="\n".join(
            [
                f'git config user.name "{identity.name}"',
                f'git config user.email "{identity.email}"',
            ]
        ),
    )


def _check_tag(remote_tag: str) -> str:
    return f"git ls-remote -q --exit-code --tags origin {remote_tag}"


def _var_is_set(variable: str) -> str:
    return f'[ ! -z "${variable}" ]'


def _set_output(value: bool) -> str:
    return f'(echo "exists={"true" if value else "false"}" >> $GITHUB_OUTPUT)'


def tag_exists(tag: str, options: StepConfiguration | None = None) -> JobStep:
    """
    Check whether a tag exists on the `origin` remote.

    Needs an earlier checkout with fetch depth 0. Writes `exists=true` or
    `exists=false` to the step outputs. `tag` may be a bash expression.
    """
    return JobStep(
        **_step_config(options, name="Check if tag exists", id="check-tag"),
        run="\n".join(
            [
                f"TAG={tag}",
                f"({_var_is_set('TAG')} && {_check_tag('$TAG')} && {_set_output(True)}) || {_set_output(False)}",
                "cat $GITHUB_OUTPUT",
            ]
        ),
    )


def upload_artifact(options: UploadArtifactOptions) -> JobStep:
    """Upload an artifact."""
    return JobStep(
        **_step_config(options, name="Upload artifact"),
        uses=StepKind.UPLOAD_ARTIFACT.uses,
        with_=options.with_.to_params(),
    )


def dump_steps(steps: list[JobStep]) -> str:
    """Serialize steps as a YAML list, keeping key order."""
    return yaml.safe_dump(
        [step.to_dict() for step in steps],
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
