"""
Changelog generation for a range of history.

The :class:`ChangelogGenerator` obtains the commits between a base and a
head reference and hands them to the aggregator. The range is taken from
the host's compare endpoint; if that call fails the generator falls back,
once, to walking the commit listing from the head until the base is
reached. Inconsistent compare results are reported as "no significant
changes" rather than as errors.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from release_notes_helper.config.loader import ChangelogOptions
from release_notes_helper.equivalence.detector import EquivalenceDetector
from release_notes_helper.grouping.aggregator import build_changelog, no_significant_changes
from release_notes_helper.grouping.group_model import ChangelogOutcome, ChangelogResult
from release_notes_helper.host.github_client import HostError
from release_notes_helper.host.models import CommitRecord, Comparison


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


NO_CHANGES_TEXT = "## No changes in this release\n\n**No changes detected between these releases.**"
UNDETERMINED_TEXT = (
    "## Unable to generate changelog\n\n"
    "**Unable to determine meaningful differences between these releases.**"
)
EMPTY_RANGE_HEADING = "## No significant changes detected"


def no_changes() -> ChangelogResult:
    return ChangelogResult(text=NO_CHANGES_TEXT, outcome=ChangelogOutcome.NO_CHANGES)


def undetermined() -> ChangelogResult:
    return ChangelogResult(text=UNDETERMINED_TEXT, outcome=ChangelogOutcome.UNDETERMINED)


class ChangelogGenerator:
    """Generate the changelog body for ``base..head``.

    Parameters
    ----------
    host : GitHubClient
        Read-only host client.
    options : ChangelogOptions
        Grouping and rendering options.
    """

    def __init__(self, host, options: ChangelogOptions) -> None:
        self.host = host
        self.options = options

    @property
    def repository_url(self) -> str:
        return self.host.repository_url

    def generate(
        self,
        head_reference: str,
        base_reference: Optional[str] = None,
        check_equivalence: bool = True,
    ) -> ChangelogResult:
        """Build the changelog of the commits after ``base_reference``.

        Without a base every commit reachable from the head is included.
        With ``check_equivalence`` the base is first checked for identical
        content, in which case no commits are fetched at all.

        Raises
        ------
        HostError
            If the commit listing used as fallback fails as well.
        """
        logger.info("Generating changelog for %s (previous: %s)", head_reference, base_reference or "none")

        if base_reference is not None:
            if base_reference == head_reference:
                logger.info("Current and previous references are identical")
                return no_changes()
            if check_equivalence and EquivalenceDetector(self.host).are_equivalent(
                base_reference, head_reference
            ):
                logger.info("Releases have identical content, nothing to include")
                return no_changes()

            try:
                comparison = self.host.compare_references(base_reference, head_reference)
            except HostError as exc:
                logger.warning("Compare API failed, falling back to the commit listing: %s", exc)
            else:
                return self._from_comparison(comparison, base_reference, head_reference)

        commits = self._list_commits(head_reference, base_reference)
        return build_changelog(
            commits, self.options, self.repository_url, base_reference, head_reference
        )

    def _from_comparison(self, comparison: Comparison, base: str, head: str) -> ChangelogResult:
        logger.info(
            "Compare status: %s, total commits: %s, ahead by: %s, behind by: %s",
            comparison.status,
            comparison.total_commits,
            comparison.ahead_by,
            comparison.behind_by,
        )
        if (comparison.ahead_by > 0 and comparison.total_commits == 0) or comparison.changed_files == 0:
            logger.info("Compare reports no file changes")
            return ChangelogResult(
                text=no_significant_changes(self.repository_url, base, head),
                outcome=ChangelogOutcome.NO_SIGNIFICANT_CHANGES,
            )
        if comparison.ahead_by == 0:
            logger.info("No commits ahead of the base reference")
            return no_changes()
        if not comparison.commits:
            logger.warning(
                "Compare reported %s commit(s) ahead but returned no commits",
                comparison.ahead_by,
            )
            return ChangelogResult(
                text=no_significant_changes(self.repository_url, base, head, EMPTY_RANGE_HEADING),
                outcome=ChangelogOutcome.NO_SIGNIFICANT_CHANGES,
            )

        logger.info("Found %s commit(s) between %s and %s", len(comparison.commits), base[:7], head[:7])
        return build_changelog(comparison.commits, self.options, self.repository_url, base, head)

    def _list_commits(self, head: str, base: Optional[str]) -> Iterator[CommitRecord]:
        """Yield commits from ``head`` backwards, stopping at ``base``."""
        logger.info("Listing commits from %s", head)
        for page in self.host.list_commits(head):
            for commit in page:
                if base is not None and commit.reference == base:
                    logger.info("Reached previous reference %s", base[:7])
                    return
                yield commit
        if base is not None:
            logger.info("Previous reference %s not found in the commit listing", base[:7])
