"""
Data models returned by the hosting service client.

These are thin, immutable views over the GitHub REST payloads holding
only the fields the changelog pipeline needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class TagRecord:
    """A tag as listed by the host, most-recent-first."""

    name: str
    reference: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "TagRecord":
        return cls(name=data.get("name", ""), reference=(data.get("commit") or {}).get("sha", ""))


@dataclass(frozen=True)
class CommitRecord:
    """A commit in a range or listing."""

    reference: str
    raw_message: str
    author_handle: Optional[str] = None
    associated_pr: Optional[int] = None

    @property
    def short_reference(self) -> str:
        return self.reference[:7]

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "CommitRecord":
        author = data.get("author") or {}
        return cls(
            reference=data.get("sha", ""),
            raw_message=(data.get("commit") or {}).get("message", ""),
            author_handle=author.get("login") if isinstance(author, dict) else None,
        )


@dataclass(frozen=True)
class Comparison:
    """Result of comparing ``base...head``.

    ``changed_files`` is ``None`` when the host omitted the file list.
    """

    ahead_by: int
    behind_by: int
    status: str
    total_commits: int
    changed_files: Optional[int] = None
    commits: List[CommitRecord] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Comparison":
        files = data.get("files")
        return cls(
            ahead_by=data.get("ahead_by", 0),
            behind_by=data.get("behind_by", 0),
            status=data.get("status", ""),
            total_commits=data.get("total_commits", 0),
            changed_files=len(files) if isinstance(files, list) else None,
            commits=[CommitRecord.from_api_response(c) for c in data.get("commits", [])],
        )


@dataclass(frozen=True)
class CommitObject:
    """Low level commit object: its tree and parents."""

    sha: str
    tree_sha: str
    parents: List[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "CommitObject":
        return cls(
            sha=data.get("sha", ""),
            tree_sha=(data.get("tree") or {}).get("sha", ""),
            parents=[p.get("sha", "") for p in data.get("parents", [])],
        )


@dataclass(frozen=True)
class GitObjectRef:
    """Pointer to a git object: ``type`` is ``"commit"`` or ``"tag"``."""

    sha: str
    type: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "GitObjectRef":
        obj = data.get("object") or {}
        return cls(sha=obj.get("sha", ""), type=obj.get("type", ""))
