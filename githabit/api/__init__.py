"""
GitHub API module.

Provides the async REST client used for profile and repository refreshes.
"""

from .github_client import GitHubClient

__all__ = ["GitHubClient"]
