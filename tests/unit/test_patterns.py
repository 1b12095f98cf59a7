"""
Unit tests for endpoint pattern translation.
"""

import pytest
from starlette.routing import compile_path

from route_creator.routing.patterns import (
    TokenConvertor,
    compile_pattern,
    register_token_convertor,
    to_host_path,
    translate_pattern,
)


class TestTranslatePattern:
    """Test translate_pattern."""

    def test_single_placeholder(self):
        """Placeholder becomes a named capture group."""
        assert (
            translate_pattern("/books/{book_id}")
            == "/books/(?P<book_id>[a-zA-Z0-9-]+)"
        )

    def test_multiple_placeholders(self):
        """Every placeholder is translated, in place."""
        assert translate_pattern("/users/{user_id}/posts/{post_2}") == (
            "/users/(?P<user_id>[a-zA-Z0-9-]+)/posts/(?P<post_2>[a-zA-Z0-9-]+)"
        )

    def test_plain_path_unchanged(self):
        """Paths without placeholders pass through."""
        assert translate_pattern("/health") == "/health"

    def test_malformed_braces_left_as_text(self):
        """Only well-formed placeholders are rewritten."""
        pattern = "/a/{}/b/{bad-name}/{open"
        assert translate_pattern(pattern) == pattern


class TestCompilePattern:
    """Test the compiled matcher."""

    @pytest.mark.parametrize("value", ["abc", "ABC-123", "2024-01-01", "x"])
    def test_accepts_letters_digits_hyphens(self, value):
        match = compile_pattern("/books/{book_id}").match(f"/books/{value}")

        assert match is not None
        assert match.group("book_id") == value

    @pytest.mark.parametrize("value", ["a/b", "a_b", "a.b", ""])
    def test_rejects_other_characters(self, value):
        assert compile_pattern("/books/{book_id}").match(f"/books/{value}") is None

    def test_anchored(self):
        """Matcher does not match a longer path."""
        assert compile_pattern("/books/{book_id}").match("/books/1/extra") is None


class TestHostPath:
    """Test the Starlette path produced for binding."""

    def test_to_host_path(self):
        assert to_host_path("/books/{book_id}") == "/books/{book_id:token}"

    def test_host_regex_matches_translation(self):
        """Starlette compiles the host path to the translated matcher."""
        register_token_convertor()
        endpoint = "/books/{book_id}/pages/{page}"

        path_regex, path_format, convertors = compile_path(to_host_path(endpoint))

        assert path_regex.pattern == f"^{translate_pattern(endpoint)}$"
        assert path_format == endpoint
        assert set(convertors) == {"book_id", "page"}

    def test_register_is_idempotent(self):
        register_token_convertor()
        register_token_convertor()


class TestTokenConvertor:
    """Test TokenConvertor."""

    def test_convert_returns_string(self):
        assert TokenConvertor().convert("abc-1") == "abc-1"

    def test_to_string_rejects_slash(self):
        with pytest.raises(ValueError):
            TokenConvertor().to_string("a/b")
