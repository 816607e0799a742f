from typing import Dict, List, Optional

import pytest

from release_notes_helper.host.github_client import HostNotFoundError
from release_notes_helper.host.models import (
    CommitObject,
    CommitRecord,
    Comparison,
    GitObjectRef,
    TagRecord,
)


class FakeHost:
    """In-memory stand-in for GitHubClient.

    ``comparisons`` maps ``(base, head)`` to a Comparison or an exception
    instance to raise. ``commits`` maps a SHA to its CommitObject and
    ``refs`` maps ref names (``tags/v1.0.0``) to GitObjectRefs.
    """

    repository_url = "https://github.com/acme/widgets"

    def __init__(
        self,
        tags: Optional[List[TagRecord]] = None,
        page_size: int = 2,
        history: Optional[List[CommitRecord]] = None,
    ) -> None:
        self.tags = tags or []
        self.page_size = page_size
        self.history = history or []
        self.comparisons: Dict[tuple, object] = {}
        self.commits: Dict[str, CommitObject] = {}
        self.refs: Dict[str, GitObjectRef] = {}
        self.tag_objects: Dict[str, GitObjectRef] = {}
        self.tag_pages_fetched = 0
        self.commit_pages_fetched = 0
        self.calls: List[tuple] = []
        self.list_commits_error: Optional[Exception] = None

    def list_tags(self):
        for start in range(0, len(self.tags), self.page_size):
            self.tag_pages_fetched += 1
            yield self.tags[start:start + self.page_size]

    def list_commits(self, from_reference):
        self.calls.append(("list_commits", from_reference))
        if self.list_commits_error is not None:
            raise self.list_commits_error
        for start in range(0, len(self.history), self.page_size):
            self.commit_pages_fetched += 1
            yield self.history[start:start + self.page_size]

    def compare_references(self, base, head):
        self.calls.append(("compare", base, head))
        result = self.comparisons.get((base, head))
        if result is None:
            result = self.comparisons.get((head, base))
        if result is None:
            raise HostNotFoundError(f"no comparison for {base}...{head}")
        if isinstance(result, Exception):
            raise result
        return result

    def get_commit_object(self, reference):
        self.calls.append(("commit", reference))
        if reference not in self.commits:
            raise HostNotFoundError(reference)
        return self.commits[reference]

    def get_tag_object(self, reference):
        if reference not in self.tag_objects:
            raise HostNotFoundError(reference)
        return self.tag_objects[reference]

    def resolve_ref(self, name):
        if name not in self.refs:
            raise HostNotFoundError(name)
        return self.refs[name]


def commit(sha: str, message: str, author: Optional[str] = None, pr: Optional[int] = None) -> CommitRecord:
    return CommitRecord(reference=sha, raw_message=message, author_handle=author, associated_pr=pr)


def comparison(ahead=1, behind=0, status="ahead", files=1, commits=None) -> Comparison:
    commits = commits or []
    return Comparison(
        ahead_by=ahead,
        behind_by=behind,
        status=status,
        total_commits=len(commits) if commits else ahead,
        changed_files=files,
        commits=commits,
    )


@pytest.fixture
def fake_host():
    return FakeHost


@pytest.fixture
def make_commit():
    return commit


@pytest.fixture
def make_comparison():
    return comparison


