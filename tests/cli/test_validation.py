"""Tests for CLI validation utilities."""

import pytest

from src.cli.utils.validation import (
    validate_channel_id,
    validate_move_content,
    validate_server_url,
    validate_user_id,
)


class TestValidateUserId:
    """Tests for user ID validation."""

    def test_valid_user_id(self):
        """Valid user IDs are returned unchanged."""
        assert validate_user_id("alice") == "alice"
        assert validate_user_id("user_123") == "user_123"
        assert validate_user_id("1234567890:42") == "1234567890:42"

    def test_strips_whitespace(self):
        """Whitespace is stripped from user ID."""
        assert validate_user_id("  alice  ") == "alice"

    def test_empty_raises(self):
        """Empty user ID raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_user_id("   ")

    def test_too_long_raises(self):
        """User ID over 64 chars raises ValueError."""
        with pytest.raises(ValueError, match="exceed 64"):
            validate_user_id("a" * 65)

    def test_invalid_chars_raise(self):
        """Spaces and symbols are rejected."""
        with pytest.raises(ValueError, match="can only contain"):
            validate_user_id("bad id!")

    def test_channel_label(self):
        """Channel errors name the channel."""
        with pytest.raises(ValueError, match="Channel ID"):
            validate_channel_id("")


class TestValidateServerUrl:
    """Tests for server URL validation."""

    def test_http_and_https(self):
        """Both schemes are accepted and trailing slashes dropped."""
        assert validate_server_url("http://localhost:8000/") == "http://localhost:8000"
        assert validate_server_url("https://game.example.com") == "https://game.example.com"

    def test_scheme_required(self):
        """A bare host is rejected."""
        with pytest.raises(ValueError, match="http"):
            validate_server_url("localhost:8000")

    def test_empty_raises(self):
        """Empty URL raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_server_url("")


class TestValidateMoveContent:
    """Tests for move content validation."""

    def test_optional(self):
        """No content is fine."""
        assert validate_move_content(None) is None

    def test_too_long_raises(self):
        """Content over 4000 chars raises ValueError."""
        with pytest.raises(ValueError, match="4000"):
            validate_move_content("x" * 4001)
