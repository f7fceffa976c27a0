"""
Notes Gateway — Identity Resolver Tests
========================================

What we test:
    ✅ Explicit authors win over the caller
    ✅ Absent authors fall back to the caller's email
    ✅ No author and no caller raises MissingIdentityError
    ✅ Identity header parsing
"""

import pytest

from gateway.exceptions import MissingIdentityError
from gateway.services.identity import (
    ANONYMOUS,
    CallerIdentity,
    resolve_author,
    resolve_authors,
)


class TestCallerIdentity:
    def test_from_header_strips_whitespace(self):
        assert CallerIdentity.from_header("  ada@example.com ").email == "ada@example.com"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_header_is_anonymous(self, value):
        assert CallerIdentity.from_header(value).is_anonymous

    def test_require_email_on_anonymous_raises(self):
        with pytest.raises(MissingIdentityError) as exc_info:
            ANONYMOUS.require_email()
        assert exc_info.value.code == "missing_identity"


class TestResolveAuthors:
    def test_absent_authors_default_to_caller(self):
        assert resolve_authors(None, CallerIdentity("a@x.com")) == ["a@x.com"]

    def test_explicit_authors_win(self):
        assert resolve_authors(["b@x.com"], CallerIdentity("a@x.com")) == ["b@x.com"]

    def test_explicit_authors_need_no_caller(self):
        assert resolve_authors(["b@x.com", None], ANONYMOUS) == ["b@x.com"]

    def test_given_but_empty_list_is_kept(self):
        assert resolve_authors([None], CallerIdentity("a@x.com")) == []

    def test_no_authors_and_no_caller_raises(self):
        with pytest.raises(MissingIdentityError):
            resolve_authors(None, ANONYMOUS)


class TestResolveAuthor:
    def test_explicit_author_wins(self):
        assert resolve_author("b@x.com", CallerIdentity("a@x.com")) == "b@x.com"

    def test_empty_author_falls_back_to_caller(self):
        assert resolve_author("", CallerIdentity("a@x.com")) == "a@x.com"
        assert resolve_author(None, CallerIdentity("a@x.com")) == "a@x.com"

    def test_no_author_and_no_caller_raises(self):
        with pytest.raises(MissingIdentityError):
            resolve_author(None, ANONYMOUS)
