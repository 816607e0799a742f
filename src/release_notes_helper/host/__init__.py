"""
Hosting service integration.

This package contains the read-only GitHub REST client and the data
models it returns.
"""

from .github_client import GitHubClient, HostError, HostNotFoundError  # noqa: F401
from .models import CommitObject, CommitRecord, Comparison, GitObjectRef, TagRecord  # noqa: F401
