"""Unit tests for EmailAddress validation."""

import pytest

from pms.domain.value import EmailAddress


class TestEmailAddress:
    """Tests for EmailAddress."""

    def test_strips_whitespace(self):
        assert EmailAddress("  a@x.com ").root == "a@x.com"

    @pytest.mark.parametrize(
        "raw",
        [
            "not-an-email",
            "a@x",
            "a b@x.com",
            "a@@x.com",
            "",
            "a..b@x.com",
            ".a@x.com",
            "a.@x.com",
            "a@-x.com",
            "a@x-.com",
        ],
    )
    def test_try_parse_rejects_malformed(self, raw):
        assert EmailAddress.try_parse(raw) is None

    def test_try_parse_rejects_overlong(self):
        """Addresses longer than 254 characters are rejected."""
        raw = "a" * 250 + "@x.com"
        assert EmailAddress.try_parse(raw) is None

    def test_try_parse_accepts_dotted_local_part(self):
        parsed = EmailAddress.try_parse("first.last@mail.x.com")

        assert parsed is not None
        assert parsed.root == "first.last@mail.x.com"

    def test_str_is_the_address(self):
        assert str(EmailAddress("a@x.com")) == "a@x.com"
