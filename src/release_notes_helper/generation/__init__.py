"""
Generation of changelog bodies and complete release notes.
"""

from .changelog_generator import ChangelogGenerator  # noqa: F401
from .footer import generate_footer  # noqa: F401
from .release_notes import ReleaseNotes, generate_release_notes  # noqa: F401
