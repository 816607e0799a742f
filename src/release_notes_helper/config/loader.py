"""
Configuration loader for release_notes_helper.

The changelog options are read from a JSON file, by default named
``.changelog_config.json`` in the current working directory. This loader
validates the structure of the file and returns a
:class:`ChangelogOptions` instance controlling how commits are grouped
and how references are rendered.

If an explicitly requested file is missing, or any file is malformed or
contains values of the wrong type, a :class:`ConfigError` is raised. A
missing default file simply yields the default options.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
# Attach a null handler so the library stays silent until the embedding
# application configures logging. Messages still propagate to the root.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CONFIG_FILENAME = ".changelog_config.json"

DEFAULT_COMMIT_TYPES: Dict[str, str] = {
    "feat": "New Features",
    "fix": "Bug Fixes",
    "build": "Build System & Dependencies",
    "perf": "Performance Improvements",
    "docs": "Documentation",
    "test": "Tests",
    "refactor": "Refactors",
    "chore": "Chores",
    "ci": "CI",
    "style": "Code Style",
}

DEFAULT_COMMIT_TYPE = "Other Changes"


class ConfigError(Exception):
    """Raised when the changelog configuration is missing or invalid."""

    pass


@dataclass
class ChangelogOptions:
    """Options controlling changelog grouping and rendering.

    Attributes
    ----------
    commit_types : Dict[str, str]
        Mapping of raw commit types (``feat``) to section headings
        (``New Features``). The order of the values is the order of the
        sections in the rendered changelog.
    default_commit_type : str
        Heading used for commits whose type is not in ``commit_types``
        when ``strict_types`` is disabled. Always rendered last.
    strict_types : bool
        When True, commits with an unknown type are dropped. When False
        they are grouped under ``default_commit_type``.
    include_pr_links, include_commit_links : bool
        Whether to reference pull requests and commits for each entry.
    mention_authors : bool
        Whether to append ``by @handle`` to references.
    use_github_autolink : bool
        Render bare ``#N`` / SHA references and let GitHub link them
        instead of writing explicit Markdown links.
    include_compare_link : bool
        Whether the footer contains a "Full Changelog" compare link.
    semver : bool
        Whether release and tag names are semantic versions.
    release_name_prefix : str
        Prefix stripped from release and tag names before parsing them
        as semantic versions (e.g. ``"release-"``).
    """

    commit_types: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMIT_TYPES))
    default_commit_type: str = DEFAULT_COMMIT_TYPE
    strict_types: bool = True
    include_pr_links: bool = True
    include_commit_links: bool = True
    mention_authors: bool = True
    use_github_autolink: bool = True
    include_compare_link: bool = True
    semver: bool = True
    release_name_prefix: str = ""

    def type_order(self) -> list:
        """Return the section headings in output order, without duplicates."""
        order = list(dict.fromkeys(self.commit_types.values()))
        if self.default_commit_type not in order:
            order.append(self.default_commit_type)
        return order

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChangelogOptions":
        """Build options from a parsed configuration mapping.

        Raises
        ------
        ConfigError
            If a known option has a value of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", unknown)

        commit_types = data.get("commit_types", DEFAULT_COMMIT_TYPES)
        if not isinstance(commit_types, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in commit_types.items()
        ):
            raise ConfigError("'commit_types' must be an object mapping strings to strings")

        for key in ("default_commit_type", "release_name_prefix"):
            if key in data and not isinstance(data[key], str):
                raise ConfigError(f"'{key}' must be a string")

        for key in (
            "strict_types",
            "include_pr_links",
            "include_commit_links",
            "mention_authors",
            "use_github_autolink",
            "include_compare_link",
            "semver",
        ):
            if key in data and not isinstance(data[key], bool):
                raise ConfigError(f"'{key}' must be a boolean")

        values = {key: data[key] for key in known if key in data}
        values["commit_types"] = dict(commit_types)
        return cls(**values)


def load_config(path: Optional[Path] = None) -> ChangelogOptions:
    """Load the changelog options and return them.

    Args:
        path: Location of the JSON configuration file. When omitted,
              ``.changelog_config.json`` in the current directory is used
              if present, otherwise the defaults are returned.

    Returns:
        The validated :class:`ChangelogOptions`.

    Raises:
        ConfigError: If an explicit file is missing, or the file is
                     malformed or invalid.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else Path.cwd() / DEFAULT_CONFIG_FILENAME

    if not config_path.exists():
        if explicit:
            logger.error("Configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing changelog configuration file: {config_path}")
        logger.debug("No configuration file at %s, using defaults", config_path)
        return ChangelogOptions()

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    options = ChangelogOptions.from_dict(data)
    logger.debug("Loaded changelog configuration from: %s", config_path)
    return options
