"""
Top-level package for release_notes_helper.

The package builds grouped Markdown changelogs for a release published
on GitHub. The main entry point is
:func:`release_notes_helper.generation.release_notes.generate_release_notes`,
which resolves the previous release, skips releases whose content is
unchanged and renders the commits in between.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
