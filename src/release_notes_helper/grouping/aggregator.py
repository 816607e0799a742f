"""
Aggregation of classified commits into a rendered changelog.

:func:`fold_commits` runs the commit parser over a range of commits and
folds the eligible ones into a :class:`ChangelogBuilder`. The resulting
tree is rendered by :func:`render_changelog` as one ``##`` section per
commit type, in the order declared by the configuration.
:func:`build_changelog` combines both and takes care of the
"no significant changes" case.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from release_notes_helper.config.loader import ChangelogOptions
from release_notes_helper.grouping.group_model import (
    ChangelogBuilder,
    ChangelogOutcome,
    ChangelogResult,
)
from release_notes_helper.host.models import CommitRecord
from release_notes_helper.links import commit_reference, compare_url, pr_reference
from release_notes_helper.parsing.commit_parser import ClassifiedCommit, classify


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


BREAKING_MARKER = "***breaking:*** "
NO_SIGNIFICANT_CHANGES_HEADING = "## No significant changes in this release"


@dataclass
class FoldStats:
    """Counters describing which commits made it into the changelog."""

    seen: int = 0
    included: int = 0
    invalid: int = 0
    merges: int = 0
    reverts: int = 0
    ignored: int = 0
    unknown_type: int = 0


def commit_links(
    commit: CommitRecord,
    classified: ClassifiedCommit,
    options: ChangelogOptions,
    repository_url: str,
) -> Tuple[List[str], Optional[str]]:
    """Return the links and author mention referencing ``commit``.

    A pull request link takes priority over a commit link.
    """
    links: List[str] = []
    pr = classified.pr if classified.pr is not None else commit.associated_pr
    if pr is not None and options.include_pr_links:
        links.append(pr_reference(repository_url, pr, options.use_github_autolink))
    elif options.include_commit_links:
        links.append(commit_reference(repository_url, commit.reference, options.use_github_autolink))

    mention = None
    if options.mention_authors and commit.author_handle:
        mention = f"by @{commit.author_handle}"
    return links, mention


def display_type(classified: ClassifiedCommit, options: ChangelogOptions) -> Optional[str]:
    """Map a raw commit type to its section heading.

    Returns ``None`` when the type is unknown and ``strict_types`` is set.
    """
    heading = options.commit_types.get(classified.type)
    if heading is not None:
        return heading
    if options.strict_types:
        return None
    return options.default_commit_type


def fold_commits(
    commits: Iterable[CommitRecord],
    options: ChangelogOptions,
    repository_url: str,
) -> Tuple[ChangelogBuilder, FoldStats]:
    """Fold a commit range into a fresh :class:`ChangelogBuilder`."""
    builder = ChangelogBuilder()
    stats = FoldStats()

    for commit in commits:
        stats.seen += 1
        logger.debug("commit message -> %s", commit.raw_message.split("\n")[0])

        classified = classify(commit.raw_message)
        if classified is None:
            logger.info("Commit %s skipped: no description", commit.short_reference)
            stats.invalid += 1
            continue
        if classified.merge:
            logger.info("Commit %s skipped: merge commit", commit.short_reference)
            stats.merges += 1
            continue
        if classified.revert:
            logger.info("Commit %s skipped: revert commit", commit.short_reference)
            stats.reverts += 1
            continue
        if classified.ignored:
            logger.info("Commit %s skipped: marked as ignore", commit.short_reference)
            stats.ignored += 1
            continue

        heading = display_type(classified, options)
        if heading is None:
            logger.info(
                "Commit %s skipped: unknown type %r", commit.short_reference, classified.type
            )
            stats.unknown_type += 1
            continue

        stats.included += 1
        if stats.included < 5 or stats.included % 10 == 0:
            scope = f"({classified.scope})" if classified.scope else ""
            logger.info(
                "Processing commit %s: %s%s: %s",
                commit.short_reference,
                heading,
                scope,
                classified.description,
            )

        entry = builder.entry(heading, classified.scope, classified.description, classified.breaking)
        links, mention = commit_links(commit, classified, options, repository_url)
        entry.add_reference(links, mention)

    logger.info(
        "Commits analyzed: %s, included: %s (merges: %s, reverts: %s, empty: %s, ignored: %s, unknown type: %s)",
        stats.seen,
        stats.included,
        stats.merges,
        stats.reverts,
        stats.invalid,
        stats.ignored,
        stats.unknown_type,
    )
    return builder, stats


def render_changelog(builder: ChangelogBuilder, type_order: List[str]) -> str:
    """Render the tree as Markdown, sections in ``type_order``."""
    lines: List[str] = []
    for type_ in type_order:
        group = builder.groups.get(type_)
        if group is None or not any(scope.entries for scope in group.scopes.values()):
            continue

        lines.append(f"## {type_}")
        for scope_group in group.sorted_scopes():
            prefix = ""
            if scope_group.scope:
                lines.append(f"* **{scope_group.scope}:**")
                prefix = "  "
            for entry in scope_group.entries.values():
                line = f"{prefix}* {BREAKING_MARKER if entry.breaking else ''}{entry.description}"
                if entry.references:
                    line += f" ({', '.join(entry.references)})"
                lines.append(line)
        lines.append("")
    return "\n".join(lines)


def no_significant_changes(
    repository_url: str,
    base_reference: Optional[str],
    head_reference: Optional[str],
    heading: str = NO_SIGNIFICANT_CHANGES_HEADING,
) -> str:
    """Text used when no commit survived filtering.

    Includes a compare link for manual inspection when a base is known.
    """
    if base_reference and head_reference:
        return f"{heading}\n\n**Full Changelog**: {compare_url(repository_url, base_reference, head_reference)}"
    return heading


def build_changelog(
    commits: Iterable[CommitRecord],
    options: ChangelogOptions,
    repository_url: str,
    base_reference: Optional[str] = None,
    head_reference: Optional[str] = None,
) -> ChangelogResult:
    """Classify, group and render a range of commits.

    Args:
        commits: Commits in the range, newest first.
        options: Grouping and rendering options.
        repository_url: Web URL of the repository, used in links.
        base_reference: Base of the range, if any; used for the compare
                        link of an empty changelog.
        head_reference: Head of the range.

    Returns:
        A ``GENERATED`` result, or ``NO_SIGNIFICANT_CHANGES`` when every
        commit was filtered out.
    """
    builder, stats = fold_commits(commits, options, repository_url)
    if len(builder) == 0:
        logger.info("No significant changes found (all commits were filtered)")
        return ChangelogResult(
            text=no_significant_changes(repository_url, base_reference, head_reference),
            outcome=ChangelogOutcome.NO_SIGNIFICANT_CHANGES,
            commit_count=stats.seen,
        )
    return ChangelogResult(
        text=render_changelog(builder, options.type_order()),
        outcome=ChangelogOutcome.GENERATED,
        commit_count=stats.seen,
        included_count=stats.included,
    )
