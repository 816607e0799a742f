"""
Footer of the release notes: the "Full Changelog" compare link.
"""

from __future__ import annotations

import logging
from typing import Optional

from release_notes_helper.config.loader import ChangelogOptions
from release_notes_helper.links import compare_url
from release_notes_helper.versioning.tag_resolver import PreviousRelease


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def generate_footer(
    options: ChangelogOptions,
    repository_url: str,
    tag_name: str,
    head_reference: str,
    previous: Optional[PreviousRelease],
    prerelease: bool = False,
) -> str:
    """Return the footer appended to the changelog body.

    Prereleases, and bases that are not tags, are compared by SHA; other
    releases by tag name. The link is written as explicit Markdown unless
    GitHub autolinking is enabled and no release name prefix is set.
    Returns an empty string when there is nothing to show.
    """
    if not options.include_compare_link or previous is None:
        return ""

    markdown = not options.use_github_autolink or bool(options.release_name_prefix)
    if (prerelease or previous.name is None) and previous.reference:
        logger.info("Using SHA-based comparison link")
        link = compare_url(repository_url, previous.reference, head_reference)
        if markdown:
            link = f"[{previous.reference[:7]}...{head_reference[:7]}]({link})"
    elif previous.name:
        logger.info("Using tag-based comparison link")
        link = compare_url(repository_url, previous.name, tag_name)
        if markdown:
            link = f"[{previous.name}...{tag_name}]({link})"
    else:
        logger.info("No previous reference available for comparison link")
        return ""

    return f"\n\n**Full Changelog**: {link}"
