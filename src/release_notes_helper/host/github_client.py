"""
Client for the read-only parts of the GitHub REST API.

This client wraps HTTP requests to the endpoints the changelog pipeline
needs: tag and commit listings, range comparison and the low level git
object endpoints. Listings are returned as lazy page iterators so that
callers can stop early. On error conditions (HTTP errors, timeouts,
malformed payloads), a :class:`HostError` is raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import quote

import requests

from release_notes_helper.host.models import (
    CommitObject,
    CommitRecord,
    Comparison,
    GitObjectRef,
    TagRecord,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SERVER_URL = "https://github.com"


class HostError(Exception):
    """Raised when communication with the hosting service fails."""

    pass


class HostNotFoundError(HostError):
    """Raised when the requested object does not exist on the host."""

    pass


class GitHubClient:
    """Client for a single GitHub repository.

    Parameters
    ----------
    owner, repo : str
        Repository coordinates, e.g. ``"octocat"`` and ``"hello-world"``.
    token : str, optional
        Token sent as a bearer ``Authorization`` header.
    api_url : str, optional
        Base URL of the REST API. Defaults to ``https://api.github.com``.
    server_url : str, optional
        Base URL of the web UI, used to build links in the changelog.
    per_page : int, optional
        Page size for listings. Defaults to 100 (the API maximum).
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 30 seconds.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        server_url: str = DEFAULT_SERVER_URL,
        per_page: int = 100,
        request_timeout: float = 30.0,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.server_url = server_url.rstrip("/")
        self.per_page = per_page
        self.request_timeout = request_timeout

    @property
    def repository_url(self) -> str:
        return f"{self.server_url}/{self.owner}/{self.repo}"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "release-notes-helper",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _endpoint(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/{path.lstrip('/')}"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None):
        """Issue a GET request and return the response.

        Raises
        ------
        HostNotFoundError
            If the host answers 404.
        HostError
            If the request fails or the host returns any other non-200
            status.
        """
        logger.debug("GET %s params=%s", url, params)
        try:
            response = requests.get(
                url,
                headers=self._headers(),
                params=params,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise HostError(str(exc)) from exc
        if response.status_code == 404:
            raise HostNotFoundError(f"Not found: {url}")
        if response.status_code != 200:
            logger.warning(
                "GitHub returned non-200 status %s for %s: %s",
                response.status_code,
                url,
                response.text,
            )
            raise HostError(f"GitHub returned status {response.status_code}: {response.text}")
        return response

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._get(url, params)
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("Failed to parse GitHub response from %s: %s", url, exc)
            raise HostError("Failed to parse GitHub response") from exc

    def _paginate(self, path: str, params: Optional[Dict[str, Any]] = None) -> Iterator[List[Dict[str, Any]]]:
        """Yield pages of a listing endpoint, following ``Link: next``.

        Each page is only requested when the previous one has been
        consumed, so abandoning the iterator stops further requests.
        """
        url: Optional[str] = self._endpoint(path)
        page_params: Optional[Dict[str, Any]] = dict(params or {}, per_page=self.per_page)
        while url:
            response = self._get(url, page_params)
            try:
                data = response.json()
            except (json.JSONDecodeError, ValueError) as exc:
                raise HostError("Failed to parse GitHub response") from exc
            if not isinstance(data, list):
                raise HostError(f"Expected a list from {url}")
            yield data
            url = (getattr(response, "links", None) or {}).get("next", {}).get("url")
            # the next link already carries the query string
            page_params = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_tags(self) -> Iterator[List[TagRecord]]:
        """Yield pages of tags, most recently published first."""
        for page in self._paginate("tags"):
            yield [TagRecord.from_api_response(item) for item in page]

    def list_commits(self, from_reference: str) -> Iterator[List[CommitRecord]]:
        """Yield pages of commits reachable from ``from_reference``, newest first."""
        for page in self._paginate("commits", {"sha": from_reference}):
            yield [CommitRecord.from_api_response(item) for item in page]

    def compare_references(self, base: str, head: str) -> Comparison:
        """Compare ``base...head``."""
        path = f"compare/{quote(base, safe='')}...{quote(head, safe='')}"
        data = self._get_json(self._endpoint(path))
        if not isinstance(data, dict):
            raise HostError("Unexpected response structure from compare endpoint")
        return Comparison.from_api_response(data)

    def get_commit_object(self, reference: str) -> CommitObject:
        data = self._get_json(self._endpoint(f"git/commits/{reference}"))
        return CommitObject.from_api_response(data)

    def get_tag_object(self, reference: str) -> GitObjectRef:
        """Return the object an annotated tag points to."""
        data = self._get_json(self._endpoint(f"git/tags/{reference}"))
        return GitObjectRef.from_api_response(data)

    def resolve_ref(self, name: str) -> GitObjectRef:
        """Resolve a ref such as ``tags/v1.0.0`` or ``heads/main``."""
        data = self._get_json(self._endpoint(f"git/ref/{name}"))
        if not isinstance(data, dict):
            # the API returns a list when ``name`` is a prefix of several refs
            raise HostNotFoundError(f"Ambiguous ref: {name}")
        return GitObjectRef.from_api_response(data)
