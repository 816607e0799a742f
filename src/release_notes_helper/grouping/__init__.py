"""
Grouping of classified commits into a changelog.

See :mod:`release_notes_helper.grouping.group_model` for the tree that
is built and :mod:`release_notes_helper.grouping.aggregator` for the
fold and the Markdown rendering.
"""

from .aggregator import build_changelog, fold_commits, render_changelog  # noqa: F401
from .group_model import (  # noqa: F401
    ChangelogBuilder,
    ChangelogOutcome,
    ChangelogResult,
    LogEntry,
    ScopeGroup,
    TypeGroup,
)
