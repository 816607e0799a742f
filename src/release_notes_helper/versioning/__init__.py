"""
Release versions and previous-release resolution.
"""

from .release_version import (  # noqa: F401
    InvalidReleaseNameError,
    ReleaseVersion,
    parse_release_version,
    release_id,
    require_release_version,
)
from .tag_resolver import PreviousRelease, TagResolver  # noqa: F401
