import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import requests

from release_notes_helper.host.github_client import GitHubClient, HostError, HostNotFoundError
from release_notes_helper.host.models import CommitObject, GitObjectRef, TagRecord


class DummyResponse(SimpleNamespace):
    def json(self):
        return json.loads(self.text)


def respond(payload, status_code=200, next_url=None):
    links = {"next": {"url": next_url}} if next_url else {}
    return DummyResponse(status_code=status_code, text=json.dumps(payload), links=links)


class TestGitHubClient(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GitHubClient("acme", "widgets", token="secret")

    def test_repository_url(self) -> None:
        self.assertEqual(self.client.repository_url, "https://github.com/acme/widgets")
        enterprise = GitHubClient("acme", "widgets", server_url="https://git.example.com/")
        self.assertEqual(enterprise.repository_url, "https://git.example.com/acme/widgets")

    def test_list_tags_is_lazy_and_follows_links(self) -> None:
        pages = {
            "https://api.github.com/repos/acme/widgets/tags": respond(
                [{"name": "v1.1.0", "commit": {"sha": "s2"}}],
                next_url="https://api.github.com/repositories/1/tags?page=2",
            ),
            "https://api.github.com/repositories/1/tags?page=2": respond(
                [{"name": "v1.0.0", "commit": {"sha": "s1"}}]
            ),
        }
        requested = []

        def fake_get(url, *_args, **kwargs):
            requested.append((url, kwargs.get("params")))
            return pages[url]

        with patch("requests.get", fake_get):
            iterator = self.client.list_tags()
            self.assertEqual(next(iterator), [TagRecord("v1.1.0", "s2")])
            self.assertEqual(len(requested), 1)
            self.assertEqual(requested[0][1], {"per_page": 100})
            self.assertEqual(next(iterator), [TagRecord("v1.0.0", "s1")])
            self.assertIsNone(requested[1][1])
            self.assertIsNone(next(iterator, None))

    def test_authorization_header(self) -> None:
        seen = {}

        def fake_get(url, *_args, **kwargs):
            seen.update(kwargs["headers"])
            return respond({"object": {"sha": "abc", "type": "commit"}})

        with patch("requests.get", fake_get):
            self.client.resolve_ref("tags/v1.0.0")
        self.assertEqual(seen["Authorization"], "Bearer secret")

    def test_list_commits(self) -> None:
        payload = [
            {"sha": "abc", "commit": {"message": "feat: x\n\nbody"}, "author": {"login": "alice"}},
            {"sha": "def", "commit": {"message": "fix: y"}, "author": None},
        ]
        calls = []

        def fake_get(url, *_args, **kwargs):
            calls.append(kwargs["params"])
            return respond(payload)

        with patch("requests.get", fake_get):
            pages = list(self.client.list_commits("head-sha"))
        self.assertEqual(calls[0]["sha"], "head-sha")
        self.assertEqual(pages[0][0].author_handle, "alice")
        self.assertIsNone(pages[0][1].author_handle)
        self.assertEqual(pages[0][1].raw_message, "fix: y")

    def test_compare_references(self) -> None:
        payload = {
            "status": "ahead",
            "ahead_by": 2,
            "behind_by": 0,
            "total_commits": 2,
            "files": [{"filename": "a.py"}],
            "commits": [{"sha": "abc", "commit": {"message": "feat: x"}, "author": {"login": "bob"}}],
        }
        urls = []

        def fake_get(url, *_args, **kwargs):
            urls.append(url)
            return respond(payload)

        with patch("requests.get", fake_get):
            comparison = self.client.compare_references("release/1.0", "abc")
        self.assertEqual(urls[0], "https://api.github.com/repos/acme/widgets/compare/release%2F1.0...abc")
        self.assertEqual(comparison.ahead_by, 2)
        self.assertEqual(comparison.changed_files, 1)
        self.assertEqual(comparison.commits[0].author_handle, "bob")

    def test_compare_without_file_list(self) -> None:
        with patch("requests.get", lambda url, *a, **k: respond({"status": "identical"})):
            comparison = self.client.compare_references("a", "b")
        self.assertIsNone(comparison.changed_files)
        self.assertEqual(comparison.commits, [])

    def test_git_objects(self) -> None:
        responses = {
            "git/commits/abc": {"sha": "abc", "tree": {"sha": "t1"}, "parents": [{"sha": "p1"}, {"sha": "p2"}]},
            "git/tags/tagsha": {"object": {"sha": "abc", "type": "commit"}},
        }

        def fake_get(url, *_args, **kwargs):
            key = url.split("/repos/acme/widgets/")[1]
            return respond(responses[key])

        with patch("requests.get", fake_get):
            self.assertEqual(self.client.get_commit_object("abc"), CommitObject("abc", "t1", ["p1", "p2"]))
            self.assertEqual(self.client.get_tag_object("tagsha"), GitObjectRef("abc", "commit"))

    def test_not_found(self) -> None:
        with patch("requests.get", lambda url, *a, **k: respond({"message": "Not Found"}, status_code=404)):
            with self.assertRaises(HostNotFoundError):
                self.client.get_commit_object("missing")

    def test_ambiguous_ref_is_not_found(self) -> None:
        with patch("requests.get", lambda url, *a, **k: respond([{"ref": "refs/tags/v1"}])):
            with self.assertRaises(HostNotFoundError):
                self.client.resolve_ref("tags/v1")

    def test_error_status(self) -> None:
        with patch("requests.get", lambda url, *a, **k: DummyResponse(status_code=500, text="oops", links={})):
            with self.assertRaises(HostError):
                self.client.compare_references("a", "b")

    def test_invalid_json(self) -> None:
        with patch("requests.get", lambda url, *a, **k: DummyResponse(status_code=200, text="nope", links={})):
            with self.assertRaises(HostError):
                self.client.get_commit_object("abc")

    def test_transport_error(self) -> None:
        def fake_get(url, *_args, **kwargs):
            raise requests.ConnectionError("unreachable")

        with patch("requests.get", fake_get):
            with self.assertRaises(HostError):
                next(self.client.list_tags())


if __name__ == "__main__":
    unittest.main()
