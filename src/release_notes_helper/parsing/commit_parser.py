"""
Parsing of commit messages into Conventional Commit records.

The parser reads the subject line of a commit message and extracts the
``type(scope)!: description [flag] (#N)`` header. It is deterministic and
never raises for malformed input: anything it cannot make sense of is
reported as ``None`` so that callers can skip the commit and continue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


HEADER_RE = re.compile(
    r"^(?P<type>[\w-]+)(?:\((?P<scope>[^()]*)\))?(?P<breaking>!)?:(?P<description>.*)$"
)
PR_SUFFIX_RE = re.compile(r"\s*\(#(?P<pr>\d+)\)\s*$")
FLAG_SUFFIX_RE = re.compile(r"\s*\[(?P<flag>[^\[\]]*)\]\s*$")
SPACES_RE = re.compile(r" {2,}")

IGNORE_FLAG = "ignore"


@dataclass(frozen=True)
class ClassifiedCommit:
    """Structured view of a commit subject.

    Attributes
    ----------
    type : str
        Raw commit type (``feat``, ``fix``...), empty when the subject has
        no conventional header.
    scope : str
        Scope inside the parentheses, empty when ungrouped.
    description : str
        Normalized description; never empty.
    breaking : bool
        True when the header carries the ``!`` marker.
    flag : Optional[str]
        Trailing ``[flag]`` value, e.g. ``"ignore"``.
    pr : Optional[int]
        Pull request number from a trailing ``(#N)``.
    merge, revert : bool
        Markers for merge and revert commits, which never reach the
        changelog.
    """

    type: str
    scope: str
    description: str
    breaking: bool = False
    flag: Optional[str] = None
    pr: Optional[int] = None
    merge: bool = False
    revert: bool = False

    @property
    def eligible(self) -> bool:
        return not (self.merge or self.revert)

    @property
    def ignored(self) -> bool:
        return self.flag == IGNORE_FLAG


def normalize(value: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace and collapse runs of spaces."""
    if value is None:
        return None
    return SPACES_RE.sub(" ", value.strip())


def is_merge_subject(subject: str) -> bool:
    """Return True for subjects produced by merges (local or via the web UI)."""
    return subject.startswith("Merge ") or " into " in subject or "//github.com" in subject


def is_revert_subject(subject: str) -> bool:
    return subject.startswith("Revert ")


def _split_suffixes(text: str):
    """Peel the trailing ``[flag]`` and ``(#N)`` markers off a description.

    Both markers are optional and accepted in either order.
    """
    flag = None
    pr = None
    while True:
        match = PR_SUFFIX_RE.search(text)
        if match and pr is None:
            pr = int(match.group("pr"))
            text = text[: match.start()]
            continue
        match = FLAG_SUFFIX_RE.search(text)
        if match and flag is None:
            flag = match.group("flag")
            text = text[: match.start()]
            continue
        return text, flag, pr


def classify(raw_message) -> Optional[ClassifiedCommit]:
    """Classify a commit message.

    Parameters
    ----------
    raw_message : str
        Full commit message; only the first line is considered.

    Returns
    -------
    Optional[ClassifiedCommit]
        The classification, or ``None`` when no description can be
        extracted. Merge and revert commits are returned with their
        markers set so the caller can count and drop them.
    """
    if not isinstance(raw_message, str):
        return None
    lines = raw_message.splitlines()
    subject = lines[0].strip() if lines else ""
    if not subject:
        return None

    merge = is_merge_subject(subject)
    revert = is_revert_subject(subject)

    match = HEADER_RE.match(subject)
    if match:
        raw_type = normalize(match.group("type")) or ""
        scope = normalize(match.group("scope")) or ""
        breaking = match.group("breaking") is not None
        rest = match.group("description")
    else:
        raw_type, scope, breaking, rest = "", "", False, subject

    rest, flag, pr = _split_suffixes(rest)
    description = normalize(rest)
    if not description:
        return None

    return ClassifiedCommit(
        type=raw_type,
        scope=scope,
        description=description,
        breaking=breaking,
        flag=normalize(flag),
        pr=pr,
        merge=merge,
        revert=revert or raw_type.lower() == "revert",
    )
