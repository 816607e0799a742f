"""
Commit message parsing.

See :mod:`release_notes_helper.parsing.commit_parser` for the header
grammar and the merge/revert detection rules.
"""

from .commit_parser import ClassifiedCommit, classify, normalize  # noqa: F401
