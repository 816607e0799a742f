"""
Data models for changelog grouping.

A changelog is a two-level tree: a :class:`TypeGroup` per section
heading (``New Features``), a :class:`ScopeGroup` per scope inside it,
and a :class:`LogEntry` per unique description inside a scope. The
:class:`ChangelogBuilder` owns one such tree for a single build and
creates nodes on first use, keeping insertion order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class LogEntry:
    """One changelog line.

    Attributes
    ----------
    breaking : bool
        Whether the line is rendered with the breaking marker.
    description : str
        Normalized commit description, unique within its scope.
    references : List[str]
        PR/commit links and author mentions, one string per commit (or
        per run of commits by the same author).
    """

    breaking: bool
    description: str
    references: List[str] = field(default_factory=list)

    def add_reference(self, links: List[str], mention: Optional[str] = None) -> None:
        """Append the reference of one more commit.

        When the previous reference already ends with the same author
        mention, it is rewritten to ``<previous links> & <links> <mention>``
        instead of repeating the mention.
        """
        reference = list(links)
        if mention:
            reference.append(mention)
            last = self.references[-1] if self.references else None
            if last is not None and last.endswith(mention):
                if links:
                    prefix = last[: -len(mention)]
                    self.references[-1] = f"{prefix}& {' '.join(reference)}"
                return
        if reference:
            self.references.append(" ".join(reference))


@dataclass
class ScopeGroup:
    scope: str
    entries: Dict[str, LogEntry] = field(default_factory=dict)


@dataclass
class TypeGroup:
    type: str
    scopes: Dict[str, ScopeGroup] = field(default_factory=dict)

    def sorted_scopes(self) -> List[ScopeGroup]:
        return [self.scopes[name] for name in sorted(self.scopes)]


class ChangelogBuilder:
    """Owner of the type -> scope -> entry tree for one changelog build."""

    def __init__(self) -> None:
        self.groups: Dict[str, TypeGroup] = {}

    def entry(self, type_: str, scope: str, description: str, breaking: bool = False) -> LogEntry:
        """Return the entry for ``(type_, scope, description)``, creating it if needed.

        An existing entry keeps the breaking marker of the commit that
        created it.
        """
        group = self.groups.setdefault(type_, TypeGroup(type_))
        scope_group = group.scopes.setdefault(scope, ScopeGroup(scope))
        return scope_group.entries.setdefault(description, LogEntry(breaking, description))

    def __len__(self) -> int:
        return sum(
            len(scope.entries) for group in self.groups.values() for scope in group.scopes.values()
        )

    def __iter__(self) -> Iterator[TypeGroup]:
        return iter(self.groups.values())


class ChangelogOutcome(enum.Enum):
    """How a changelog body was produced."""

    GENERATED = "generated"
    NO_CHANGES = "no_changes"
    NO_SIGNIFICANT_CHANGES = "no_significant_changes"
    UNDETERMINED = "undetermined"


@dataclass(frozen=True)
class ChangelogResult:
    text: str
    outcome: ChangelogOutcome
    commit_count: int = 0
    included_count: int = 0

    @property
    def has_changes(self) -> bool:
        return self.outcome is ChangelogOutcome.GENERATED
