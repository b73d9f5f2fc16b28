"""Tests for search term escaping in the PostgreSQL buyer store."""

import pytest

from leadbook.buyers.stores.postgres import escape_like


class TestEscapeLike:
    """Tests for escape_like."""

    @pytest.mark.parametrize(
        ("term", "expected"),
        [
            ("ravi", "ravi"),
            ("a_b", "a\\_b"),
            ("50%", "50\\%"),
            ("c:\\x", "c:\\\\x"),
        ],
    )
    def test_wildcards_escaped(self, term: str, expected: str) -> None:
        assert escape_like(term) == expected

    def test_backslash_escaped_before_wildcards(self) -> None:
        assert escape_like("\\%") == "\\\\\\%"
