"""
Configuration loading for release_notes_helper.

Provides a loader for the changelog options file. See
:mod:`release_notes_helper.config.loader` for implementation details.
"""

from .loader import ChangelogOptions, ConfigError, load_config  # noqa: F401
