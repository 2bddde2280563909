# Plain-text renderers for DisplayState

from typing import Optional

from ..models import DisplayState, RepositoryList, UserProfile

UNAVAILABLE = "Data could not be loaded"


def format_profile(profile: Optional[UserProfile]) -> str:
    """
    Format the profile section.

    Returns - Formatted text string
    """
    output = ["GitHub Profile"]
    if profile is None:
        output.append(f"  {UNAVAILABLE}")
        return "\n".join(output)

    output.append(f"  Handle: {profile.login}")
    output.append(f"  Public Repos: {profile.public_repo_count}")
    if profile.bio is not None:
        output.append(f"  Bio: {profile.bio}")
    output.append(f"  Profile: {profile.profile_url}")
    output.append(f"  Avatar: {profile.avatar_url}")
    return "\n".join(output)


def format_repositories(repos: Optional[RepositoryList], verbose: bool = False) -> str:
    """
    Format the repository section, most recently updated first.

    Returns - Formatted text string
    """
    output = ["GitHub Repositories"]
    if repos is None:
        output.append(f"  {UNAVAILABLE}")
        return "\n".join(output)
    if not repos:
        output.append("  No public repositories")
        return "\n".join(output)

    for repo in repos:
        output.append(f"  {repo.name}  {repo.page_url}")
        if verbose:
            details = [
                f"stars {repo.star_count}",
                f"forks {repo.fork_count}",
                f"watchers {repo.watcher_count}",
            ]
            if repo.primary_language:
                details.append(repo.primary_language)
            if repo.is_private:
                details.append("private")
            details.append(f"updated {repo.last_updated_date}")
            output.append(f"    {', '.join(details)}")
            if repo.description:
                output.append(f"    {repo.description}")
    return "\n".join(output)


def format_display_state(state: DisplayState, saved_handle: str, verbose: bool = False) -> str:
    """
    Format the whole screen.

    Returns - Formatted text string
    """
    output = ["GitHabit"]

    if saved_handle == "":
        output.append("Please enter your GitHub handle!")
    if state.handle_invalid:
        output.append("Invalid GitHub handle")
    if state.last_error:
        output.append(state.last_error)

    label = state.last_activity
    if label is not None:
        output.append(f"Last Commit: {label}")

    output.append("")
    output.append(format_profile(state.profile))
    output.append("")
    output.append(format_repositories(state.repos, verbose=verbose))
    return "\n".join(output) + "\n"
