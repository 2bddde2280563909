"""
Application constants for GitHabit.

Remote API shape, persistence keys and display labels.
"""

# =============================================================================
# GitHub REST API
# =============================================================================

GITHUB_API_BASE = "https://api.github.com"
GITHUB_WEB_BASE = "https://github.com"
GITHUB_MEDIA_TYPE = "application/vnd.github.v3+json"
USER_AGENT = "GitHabit/1.0"

# Repository listing: most recently updated first, one full page
REPOS_SORT = "updated"
REPOS_PAGE_SIZE = 100

# Statuses the API uses for rate limiting
RATE_LIMIT_STATUSES = frozenset({403, 429})

# =============================================================================
# Handle persistence
# =============================================================================

HANDLE_KEY = "github_handle"
HANDLE_DEFAULT = ""

# Debounce window between the last edit and the store write
DEBOUNCE_QUIET_PERIOD_MS = 500

# Characters never allowed in a handle (str.splitlines boundaries)
LINE_BREAK_CHARS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"

# =============================================================================
# Display
# =============================================================================

NEVER_ACTIVE_LABEL = "NEVER"
