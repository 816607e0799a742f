"""
Markdown links to objects on the hosting service.
"""

from __future__ import annotations

from urllib.parse import quote


def compare_url(repository_url: str, base: str, head: str) -> str:
    return f"{repository_url}/compare/{quote(base, safe='')}...{quote(head, safe='')}"


def pr_reference(repository_url: str, number: int, autolink: bool) -> str:
    """Reference a pull request, as ``#N`` when GitHub autolinks it."""
    if autolink:
        return f"#{number}"
    return f"[#{number}]({repository_url}/issues/{number})"


def commit_reference(repository_url: str, sha: str, autolink: bool) -> str:
    """Reference a commit, as the bare SHA when GitHub autolinks it."""
    if autolink:
        return sha
    return f"[{sha[:7]}]({repository_url}/commit/{sha})"
