"""
Detection of references that point at identical code.

Automated release processes often re-tag a commit without changing any
file. :class:`EquivalenceDetector` decides whether two references
represent the same content using a series of checks against the host,
from cheapest to most expensive:

1. the compare endpoint reports nothing ahead and nothing behind;
2. the compare endpoint reports no changed files;
3. the compare endpoint reports the status ``identical``;
4. both references resolve to commits with the same tree SHA.

A failing check is logged and the next one is tried. When no check
proves equivalence the references are considered different, so two
distinct releases are never merged by mistake.
"""

from __future__ import annotations

import logging

from release_notes_helper.host.github_client import HostError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Annotated tags may point at other tag objects; follow at most this many.
MAX_TAG_DEPTH = 5


class EquivalenceDetector:
    """Decide whether two references have identical content.

    Parameters
    ----------
    host : GitHubClient
        Any object exposing ``compare_references``, ``resolve_ref``,
        ``get_tag_object`` and ``get_commit_object``.
    """

    def __init__(self, host) -> None:
        self.host = host

    def are_equivalent(self, a: str, b: str) -> bool:
        logger.info("Checking whether %s and %s are identical", a, b)
        if a == b:
            return True
        if self._comparison_shows_no_changes(a, b):
            return True
        if self._trees_match(a, b):
            return True
        logger.info("References %s and %s differ", a, b)
        return False

    def _comparison_shows_no_changes(self, a: str, b: str) -> bool:
        try:
            comparison = self.host.compare_references(a, b)
        except HostError as exc:
            logger.info("Comparing %s...%s failed: %s", a, b, exc)
            return False

        if comparison.ahead_by == 0 and comparison.behind_by == 0:
            logger.info("Compare reports nothing ahead or behind")
            return True
        if comparison.changed_files == 0:
            logger.info("Compare reports no changed files")
            return True
        if comparison.status == "identical":
            logger.info("Compare reports status 'identical'")
            return True
        logger.info(
            "Compare result: ahead_by=%s, behind_by=%s, files=%s, total_commits=%s",
            comparison.ahead_by,
            comparison.behind_by,
            comparison.changed_files if comparison.changed_files is not None else "N/A",
            comparison.total_commits,
        )
        return False

    def _trees_match(self, a: str, b: str) -> bool:
        try:
            tree_a = self.host.get_commit_object(self.resolve_commit(a)).tree_sha
            tree_b = self.host.get_commit_object(self.resolve_commit(b)).tree_sha
        except HostError as exc:
            logger.info("Comparing trees of %s and %s failed: %s", a, b, exc)
            return False
        if tree_a and tree_a == tree_b:
            logger.info("Tree SHAs are identical: %s", tree_a)
            return True
        logger.info("Tree SHAs differ: %s != %s", tree_a, tree_b)
        return False

    def resolve_commit(self, reference: str) -> str:
        """Resolve a tag name, branch name or SHA to a commit SHA.

        Tags are tried first, then branches (for names without a slash);
        anything else is taken as a SHA. Annotated tags are dereferenced
        to the commit they point at.
        """
        if reference.startswith("refs/"):
            candidates = [reference[len("refs/"):]]
        else:
            candidates = [f"tags/{reference}"]
            if "/" not in reference:
                candidates.append(f"heads/{reference}")

        target = None
        for name in candidates:
            try:
                target = self.host.resolve_ref(name)
                break
            except HostError:
                logger.debug("Ref %s not found", name)
        if target is None:
            return reference

        for _ in range(MAX_TAG_DEPTH):
            if target.type != "tag":
                break
            target = self.host.get_tag_object(target.sha)
        logger.debug("Resolved %s to %s", reference, target.sha)
        return target.sha
