"""
PyGithub adapter for the four remote operations a labeling run makes:
read the rule file, list a page of open PRs, list one PR's files, add labels.

Each method issues exactly one request. Failures surface as RemoteCallError.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import AbstractSet, Any, FrozenSet, Iterator, List, Optional

import requests
from github import Auth, Github, GithubException

from inputs import RunContext
from rules import ConfigError

logger = logging.getLogger("pr-file-labeler")

PAGE_SIZE = 100


class RemoteCallError(Exception):
    def __init__(self, operation: str, message: str, status: Optional[int] = None) -> None:
        detail = f" (status {status})" if status else ""
        super().__init__(f"{operation} failed{detail}: {message}")
        self.operation = operation
        self.status = status


@dataclass(frozen=True)
class PullRequestSummary:
    number: int
    title: str
    labels: FrozenSet[str] = frozenset()
    # PyGithub PullRequest the summary was built from
    handle: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_github(cls, pr) -> "PullRequestSummary":
        return cls(
            number=pr.number,
            title=pr.title or "",
            labels=frozenset(l.name for l in pr.labels),
            handle=pr,
        )


@contextmanager
def _remote_call(operation: str) -> Iterator[None]:
    try:
        yield
    except GithubException as e:
        message = e.data.get("message") if isinstance(e.data, dict) else None
        raise RemoteCallError(operation, message or str(e), status=e.status) from e
    except requests.exceptions.RequestException as e:
        raise RemoteCallError(operation, str(e)) from e


class RepoClient:
    def __init__(self, gh: Github, context: RunContext) -> None:
        self.context = context
        # gh must be built with lazy=True: the repository object must not cost a request
        self._repo = gh.get_repo(context.full_name)

    @classmethod
    def from_token(cls, token: str, context: RunContext, page_size: int = PAGE_SIZE) -> "RepoClient":
        # retry=None: one charged operation is one request, failures are not retried
        kwargs = {"auth": Auth.Token(token), "per_page": page_size, "lazy": True, "retry": None}
        if context.api_url:
            kwargs["base_url"] = context.api_url
        return cls(Github(**kwargs), context)

    def get_file_contents(self, path: str, ref: Optional[str] = None) -> str:
        ref = ref or self.context.sha
        with _remote_call(f"GetFileContents {path}"):
            if ref:
                contents = self._repo.get_contents(path, ref=ref)
            else:
                contents = self._repo.get_contents(path)
        if isinstance(contents, list):
            raise ConfigError(f"configuration path {path} is a directory, expected a YAML file")
        if contents.encoding == "base64":
            return contents.decoded_content.decode("utf-8")
        if not contents.content:
            # files over 1 MB come back with encoding "none" and no content
            raise ConfigError(
                f"configuration file {path} came back without content (encoding {contents.encoding!r}); is it too large?"
            )
        return contents.content

    def list_open_pull_requests(self, page: int) -> List[PullRequestSummary]:
        """Open PRs, most recently updated first. `page` starts at 1."""
        with _remote_call(f"ListOpenPullRequests page {page}"):
            pulls = self._repo.get_pulls(state="open", sort="updated", direction="desc")
            return [PullRequestSummary.from_github(pr) for pr in pulls.get_page(page - 1)]

    def list_changed_files(self, pr: PullRequestSummary) -> List[str]:
        # first page only, one request per PR
        with _remote_call(f"ListChangedFiles #{pr.number}"):
            return [f.filename for f in pr.handle.get_files().get_page(0)]

    def add_labels(self, pr: PullRequestSummary, labels: AbstractSet[str]) -> None:
        with _remote_call(f"AddLabels #{pr.number}"):
            pr.handle.add_to_labels(*sorted(labels))
