"""
Shared fixtures: an in-memory stand-in for RepoClient that records every
remote call it is asked to make.
"""

import pytest

from github_client import PullRequestSummary, RemoteCallError
from inputs import Args, RunContext


class FakeClient:
    """Serves canned pages/files/config and records calls in order."""

    def __init__(self, pages=None, files=None, config="docs: '*.md'\n", fail_on=None):
        self.context = RunContext(owner="octo", repo="widgets", sha="abc123")
        self.pages = pages or []
        self.files = files or {}
        self.config = config
        self.fail_on = fail_on
        self.calls = []

    def _record(self, call):
        self.calls.append(call)
        if self.fail_on is not None and call[0] == self.fail_on:
            raise RemoteCallError(call[0], "boom", status=502)

    def get_file_contents(self, path, ref=None):
        self._record(("GetFileContents", path))
        return self.config

    def list_open_pull_requests(self, page):
        self._record(("ListOpenPullRequests", page))
        return list(self.pages[page - 1]) if page <= len(self.pages) else []

    def list_changed_files(self, pr):
        self._record(("ListChangedFiles", pr.number))
        return list(self.files.get(pr.number, []))

    def add_labels(self, pr, labels):
        self._record(("AddLabels", pr.number, frozenset(labels)))

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]


def make_pr(number, labels=(), title=None):
    return PullRequestSummary(number=number, title=title or f"PR {number}", labels=frozenset(labels))


@pytest.fixture
def make_args():
    def _make(operations_per_run=100, skip_labeled_prs=False, configuration_path=".github/pr-labeler.yml"):
        return Args(
            repo_token="fake_github_token",
            configuration_path=configuration_path,
            skip_labeled_prs=skip_labeled_prs,
            operations_per_run=operations_per_run,
        )
    return _make
