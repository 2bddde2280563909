"""
Tests for GitHub payload models and derived display values.
"""

import httpx
import pytest
from pydantic import ValidationError

from conftest import make_repo
from githabit.models import (
    DisplayState,
    TransportError,
    describe_error,
    last_activity_label,
    parse_profile,
    parse_repositories,
)


class TestUserProfile:
    """Tests for UserProfile decoding."""

    def test_parse_wire_names(self, profile_payload):
        """Test GitHub field names map onto the model."""
        profile = parse_profile(profile_payload)

        assert profile.login == "octocat"
        assert profile.avatar_url.startswith("https://avatars.githubusercontent.com/")
        assert profile.public_repo_count == 8
        assert profile.profile_url == "https://github.com/octocat"

    def test_null_bio_is_none(self, profile_payload):
        """Test a null bio stays absent rather than becoming an empty string."""
        assert parse_profile(profile_payload).bio is None

    def test_missing_bio_is_none(self, profile_payload):
        del profile_payload["bio"]

        assert parse_profile(profile_payload).bio is None

    def test_unknown_fields_ignored(self, profile_payload):
        """Test additive schema drift is not an error."""
        profile_payload["brand_new_field"] = {"nested": True}

        assert parse_profile(profile_payload).login == "octocat"

    def test_missing_required_field(self, profile_payload):
        del profile_payload["login"]

        with pytest.raises(ValidationError):
            parse_profile(profile_payload)

    def test_negative_repo_count_rejected(self, profile_payload):
        profile_payload["public_repos"] = -1

        with pytest.raises(ValidationError):
            parse_profile(profile_payload)

    def test_error_document_rejected(self):
        """Test GitHub's error document is not mistaken for a profile."""
        with pytest.raises(ValidationError):
            parse_profile({"message": "Not Found", "documentation_url": "https://docs.github.com"})


class TestRepository:
    """Tests for repository list decoding."""

    def test_parse_list_preserves_order(self, repos_payload):
        repos = parse_repositories(repos_payload)

        assert [repo.name for repo in repos] == ["hello-world", "spoon-knife", "linguist"]

    def test_field_mapping(self, repos_payload):
        repo = parse_repositories(repos_payload)[0]

        assert repo.id == 1
        assert repo.full_name == "octocat/hello-world"
        assert repo.page_url == "https://github.com/octocat/hello-world"
        assert repo.description == "My first repo"
        assert repo.star_count == 10
        assert repo.fork_count == 2
        assert repo.watcher_count == 10
        assert repo.primary_language == "Python"
        assert repo.is_private is False
        assert repo.last_updated_at == "2024-03-01T10:00:00Z"
        assert repo.last_updated_date == "2024-03-01"

    def test_nullable_fields(self, repos_payload):
        repo = parse_repositories(repos_payload)[1]

        assert repo.primary_language is None
        assert repo.description is None

    def test_object_instead_of_list_rejected(self, profile_payload):
        with pytest.raises(ValidationError):
            parse_repositories(profile_payload)

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_repositories([make_repo(1, "x", "2024-01-01T00:00:00Z", stargazers_count="many")])


class TestLastActivityLabel:
    """Tests for the last activity label."""

    def test_unresolved(self):
        assert last_activity_label(None) is None

    def test_empty_list_is_never(self):
        assert last_activity_label([]) == "NEVER"

    def test_first_entry_date(self, repos_payload):
        assert last_activity_label(parse_repositories(repos_payload)) == "2024-03-01"

    def test_display_state_property(self, repos_payload):
        state = DisplayState(repos=parse_repositories(repos_payload))

        assert state.last_activity == "2024-03-01"
        assert DisplayState().last_activity is None


class TestDescribeError:
    """Tests for failure descriptions."""

    def test_message_included(self):
        assert describe_error(ValueError("boom")) == "ValueError: boom"

    def test_empty_message_uses_type(self):
        request = httpx.Request("GET", "https://api.github.test/users/octocat")
        outcome = TransportError(httpx.ReadTimeout("", request=request))

        assert outcome.describe() == "ReadTimeout"
