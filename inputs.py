"""
Action inputs and run context.

The runner injects `with:` inputs as INPUT_<NAME> environment variables
(name upper-cased, spaces replaced by underscores, hyphens kept) and
describes the repository in GITHUB_REPOSITORY / GITHUB_SHA.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from rules import ConfigError

DEFAULT_CONFIGURATION_PATH = ".github/pr-labeler.yml"


@dataclass(frozen=True)
class Args:
    repo_token: str = field(repr=False)
    configuration_path: str
    skip_labeled_prs: bool
    operations_per_run: int


@dataclass(frozen=True)
class RunContext:
    owner: str
    repo: str
    sha: Optional[str] = None
    api_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def get_input(name: str, environ: Mapping[str, str], required: bool = False) -> str:
    value = environ.get("INPUT_" + name.replace(" ", "_").upper(), "").strip()
    if required and not value:
        raise ConfigError(f"Input required and not supplied: {name}")
    return value


def load_args(environ: Optional[Mapping[str, str]] = None) -> Args:
    environ = os.environ if environ is None else environ
    repo_token = get_input("repo-token", environ) or environ.get("GITHUB_TOKEN", "").strip()
    if not repo_token:
        raise ConfigError("Input required and not supplied: repo-token")
    operations = get_input("operations-per-run", environ, required=True)
    try:
        operations_per_run = int(operations)
    except ValueError:
        raise ConfigError("input operations-per-run did not parse to a valid integer") from None
    skip_labeled_prs = get_input("skip-labeled-prs", environ, required=True).lower() == "true"
    return Args(
        repo_token=repo_token,
        configuration_path=get_input("configuration-path", environ) or DEFAULT_CONFIGURATION_PATH,
        skip_labeled_prs=skip_labeled_prs,
        operations_per_run=operations_per_run,
    )


def load_context(environ: Optional[Mapping[str, str]] = None) -> RunContext:
    environ = os.environ if environ is None else environ
    repository = environ.get("GITHUB_REPOSITORY", "").strip()
    owner, _, repo = repository.partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigError(f"GITHUB_REPOSITORY must be owner/repo, got {repository!r}")
    return RunContext(
        owner=owner,
        repo=repo,
        sha=environ.get("GITHUB_SHA") or None,
        api_url=environ.get("GITHUB_API_URL") or None,
    )
