"""
Semantic versions parsed from release and tag names.

Release names are parsed with the ``semver`` library after stripping a
configured prefix and a leading ``v``. The prerelease *channel* of a
version is its first prerelease identifier (``rc`` in ``1.0.0-rc.1``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import semver

from release_notes_helper.config.loader import ConfigError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


STABLE_RELEASE_ID = "latest"


class InvalidReleaseNameError(ConfigError):
    """Raised when a release name expected to be a semantic version is not one."""

    pass


@dataclass(frozen=True)
class ReleaseVersion:
    """A semantic version together with the name it was parsed from."""

    name: str
    version: semver.Version

    @property
    def major(self) -> int:
        return self.version.major

    @property
    def minor(self) -> int:
        return self.version.minor

    @property
    def patch(self) -> int:
        return self.version.patch

    @property
    def prerelease(self) -> Tuple[str, ...]:
        if not self.version.prerelease:
            return ()
        return tuple(self.version.prerelease.split("."))

    @property
    def channel(self) -> Optional[str]:
        identifiers = self.prerelease
        return identifiers[0] if identifiers else None

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def __lt__(self, other: "ReleaseVersion") -> bool:
        return self.version.compare(other.version) < 0

    def __str__(self) -> str:
        return str(self.version)


def parse_release_version(name: str, prefix: str = "") -> Optional[ReleaseVersion]:
    """Parse ``name`` as a semantic version.

    Returns ``None`` if the name (after removing ``prefix`` and a leading
    ``v``) is not a valid semantic version.
    """
    text = name.strip()
    if prefix and text.startswith(prefix):
        text = text[len(prefix):]
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return ReleaseVersion(name=name, version=semver.Version.parse(text))
    except (ValueError, TypeError):
        return None


def require_release_version(name: str, prefix: str = "") -> ReleaseVersion:
    """Parse the current release name, which must be a semantic version.

    Raises
    ------
    InvalidReleaseNameError
        If ``name`` is not a semantic version. This is a configuration
        problem and is never recovered from.
    """
    version = parse_release_version(name, prefix)
    if version is None:
        logger.error("Release name %r is not a semantic version", name)
        raise InvalidReleaseNameError(
            f'Expected a semver compatible release name, got "{name}" instead.'
        )
    return version


def release_id(version: Optional[ReleaseVersion]) -> str:
    """Return the release channel id: the prerelease channel, or ``latest``."""
    if version is None or version.channel is None:
        return STABLE_RELEASE_ID
    return version.channel
