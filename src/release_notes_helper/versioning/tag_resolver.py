"""
Resolution of the release to diff against.

The :class:`TagResolver` scans the repository tags in the order the host
publishes them (most recent first) and picks the first one that is a
valid predecessor of the current release. Pages are pulled lazily and the
scan stops as soon as a match is found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from release_notes_helper.host.models import TagRecord
from release_notes_helper.versioning.release_version import (
    ReleaseVersion,
    parse_release_version,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class PreviousRelease:
    """The base of a changelog: a reference and, for tags, its name."""

    reference: str
    name: Optional[str] = None


class TagResolver:
    """Find the previous release among paginated tags.

    Parameters
    ----------
    tag_pages : Iterable[List[TagRecord]]
        Pages of tags, most recent first. Consumed lazily.
    current_reference : str
        Commit SHA of the release being generated; tags pointing at it
        are never candidates.
    current_version : ReleaseVersion, optional
        Parsed version of the current release. ``None`` selects
        non-semver mode, where any other tag qualifies.
    prefix : str, optional
        Release name prefix stripped from tag names before parsing.
    """

    def __init__(
        self,
        tag_pages: Iterable[List[TagRecord]],
        current_reference: str,
        current_version: Optional[ReleaseVersion] = None,
        prefix: str = "",
    ) -> None:
        self._pages: Iterator[List[TagRecord]] = iter(tag_pages)
        self._fetched: List[TagRecord] = []
        self._position = 0
        self.current_reference = current_reference
        self.current_version = current_version
        self.prefix = prefix

    def _is_candidate(self, tag: TagRecord) -> bool:
        logger.debug("Analyzing tag %s (%s)", tag.name, tag.reference)
        if tag.reference == self.current_reference:
            logger.debug("Skipping tag %s: same commit as the current release", tag.name)
            return False

        current = self.current_version
        if current is None:
            return True

        version = parse_release_version(tag.name, self.prefix)
        if version is None:
            logger.debug("Skipping tag %s: not a semantic version", tag.name)
            return False
        if not version < current:
            logger.debug("Skipping tag %s: not older than %s", tag.name, current)
            return False

        if current.is_prerelease:
            if not version.is_prerelease:
                logger.debug("Skipping tag %s: stable tag for a prerelease", tag.name)
                return False
            if version.channel != current.channel:
                logger.debug(
                    "Skipping tag %s: channel %s differs from %s",
                    tag.name,
                    version.channel,
                    current.channel,
                )
                return False
        elif version.is_prerelease:
            logger.debug("Skipping tag %s: prerelease tag for a stable release", tag.name)
            return False
        return True

    def _scan(self, fetch: bool) -> Optional[PreviousRelease]:
        while True:
            while self._position < len(self._fetched):
                tag = self._fetched[self._position]
                self._position += 1
                if self._is_candidate(tag):
                    logger.info("Selected previous tag %s (%s)", tag.name, tag.reference)
                    return PreviousRelease(reference=tag.reference, name=tag.name)
            if not fetch:
                return None
            page = next(self._pages, None)
            if page is None:
                return None
            self._fetched.extend(page)

    def find_previous(self) -> Optional[PreviousRelease]:
        """Return the most recent qualifying tag, fetching pages as needed."""
        previous = self._scan(fetch=True)
        if previous is None:
            logger.info("No previous tag found for comparison")
        return previous

    def next_older(self) -> Optional[PreviousRelease]:
        """Return the next qualifying tag after the last one selected.

        Only tags that were already fetched are considered; no further
        pages are requested.
        """
        return self._scan(fetch=False)
