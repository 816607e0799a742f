"""
End-to-end generation of the release notes for one release.

:func:`generate_release_notes` ties the pieces together:

1. parse the release name (in semver mode a non-semver name is fatal);
2. resolve the previous release among the repository tags;
3. walk past previous releases whose content is identical to this one;
4. generate the changelog body for the remaining range;
5. append the "Full Changelog" footer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from release_notes_helper.config.loader import ChangelogOptions
from release_notes_helper.equivalence.base_walk import (
    Exhausted,
    first_parent_finder,
    walk_to_distinct_base,
)
from release_notes_helper.equivalence.detector import EquivalenceDetector
from release_notes_helper.generation.changelog_generator import ChangelogGenerator, undetermined
from release_notes_helper.generation.footer import generate_footer
from release_notes_helper.grouping.group_model import ChangelogOutcome
from release_notes_helper.versioning.release_version import release_id, require_release_version
from release_notes_helper.versioning.tag_resolver import PreviousRelease, TagResolver


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ReleaseNotes:
    """Generated notes for a release.

    Attributes
    ----------
    body : str
        The grouped changelog, or the text of a no-change outcome.
    footer : str
        Optional "Full Changelog" fragment, empty when not applicable.
    outcome : ChangelogOutcome
        How the body was produced.
    previous : Optional[PreviousRelease]
        The base the changelog was computed against.
    prerelease : bool
        Whether the release is a semver prerelease.
    release_id : str
        ``"latest"`` for stable releases, the prerelease channel otherwise.
    """

    body: str
    footer: str
    outcome: ChangelogOutcome
    previous: Optional[PreviousRelease] = None
    prerelease: bool = False
    release_id: str = "latest"

    @property
    def text(self) -> str:
        return self.body + self.footer


def generate_release_notes(
    host,
    release_name: str,
    head_reference: str,
    options: Optional[ChangelogOptions] = None,
) -> ReleaseNotes:
    """Generate the release notes for ``release_name`` at ``head_reference``.

    Args:
        host: Read-only host client (see :class:`GitHubClient`).
        release_name: Name of the release being published, e.g. ``v1.2.0``.
        head_reference: Commit SHA the release points at.
        options: Changelog options; defaults are used when omitted.

    Raises:
        InvalidReleaseNameError: In semver mode, if ``release_name`` is
                                 not a semantic version.
        HostError: If the tag listing fails, or both the compare call and
                   the commit listing fallback fail.
    """
    options = options or ChangelogOptions()

    version = None
    if options.semver:
        version = require_release_version(release_name, options.release_name_prefix)
        logger.info(
            "Current release %s parsed as %s (prerelease: %s)",
            release_name,
            version,
            version.is_prerelease,
        )
    prerelease = version is not None and version.is_prerelease

    resolver = TagResolver(host.list_tags(), head_reference, version, options.release_name_prefix)
    previous = resolver.find_previous()
    generator = ChangelogGenerator(host, options)

    if previous is None:
        logger.info("No previous release, including all reachable commits")
        result = generator.generate(head_reference)
    else:
        walk = walk_to_distinct_base(
            head_reference,
            previous,
            EquivalenceDetector(host),
            resolver.next_older,
            first_parent_finder(host),
        )
        if isinstance(walk, Exhausted):
            result = undetermined()
        else:
            previous = walk.candidate
            result = generator.generate(head_reference, previous.reference, check_equivalence=False)

    footer = generate_footer(
        options, host.repository_url, release_name, head_reference, previous, prerelease
    )
    return ReleaseNotes(
        body=result.text,
        footer=footer,
        outcome=result.outcome,
        previous=previous,
        prerelease=prerelease,
        release_id=release_id(version),
    )
