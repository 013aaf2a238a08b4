"""Unit tests for provider claim mapping."""

from pms.adapter.oauth import PROVIDER_ENDPOINTS, map_claims
from pms.domain.value import ClaimTypes, ExternalIdentity, LoginProvider


class TestMapClaims:
    """Tests for map_claims()."""

    def test_github_user_maps_to_standard_claims(self):
        """Mapped keys become standard claim types, all scalars kept as urn claims."""
        # Arrange
        user_info = {
            "id": 583231,
            "login": "octocat",
            "email": "octocat@github.com",
            "site_admin": False,
            "plan": {"name": "free"},
        }

        # Act
        claims = map_claims(
            LoginProvider.GITHUB, PROVIDER_ENDPOINTS[LoginProvider.GITHUB], user_info
        )

        # Assert
        by_type = {c.type: c.value for c in claims}
        assert by_type[ClaimTypes.NAME_IDENTIFIER] == "583231"
        assert by_type[ClaimTypes.NAME] == "octocat"
        assert by_type[ClaimTypes.EMAIL] == "octocat@github.com"
        assert by_type["urn:github:login"] == "octocat"
        assert by_type["urn:github:site_admin"] == "False"
        assert "urn:github:plan" not in by_type

    def test_missing_and_empty_values_are_dropped(self):
        """A null or empty email produces no email claim."""
        claims = map_claims(
            LoginProvider.GITHUB,
            PROVIDER_ENDPOINTS[LoginProvider.GITHUB],
            {"id": 1, "login": "a", "email": None, "bio": ""},
        )

        types = [c.type for c in claims]
        assert ClaimTypes.EMAIL not in types
        assert "urn:github:email" not in types
        assert "urn:github:bio" not in types

    def test_google_uses_sub_as_key(self):
        """Google identifies users by the ``sub`` field."""
        endpoints = PROVIDER_ENDPOINTS[LoginProvider.GOOGLE]

        claims = map_claims(
            LoginProvider.GOOGLE,
            endpoints,
            {"sub": "1099", "email": "a@gmail.com", "name": "A"},
        )
        identity = ExternalIdentity(
            provider=LoginProvider.GOOGLE,
            provider_key="1099",
            claims=claims,
            display_name="Google",
        )

        assert endpoints.key_field == "sub"
        assert identity.find_first_value(ClaimTypes.NAME_IDENTIFIER) == "1099"
        assert identity.candidate_email() == "a@gmail.com"
