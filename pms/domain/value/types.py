"""Domain value objects for identity and external logins.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import EmailStr, field_validator

from pms.domain.value.common import RootValueObject, ValueObject


class LoginProvider(str, Enum):
    """Supported external login providers."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    MICROSOFT = "microsoft"
    GITHUB = "github"
    TWITTER = "twitter"

    @property
    def display_name(self) -> str:
        """Human-readable provider name shown on identity pages."""
        return _PROVIDER_DISPLAY_NAMES[self]


_PROVIDER_DISPLAY_NAMES = {
    LoginProvider.GOOGLE: "Google",
    LoginProvider.FACEBOOK: "Facebook",
    LoginProvider.MICROSOFT: "Microsoft",
    LoginProvider.GITHUB: "GitHub",
    LoginProvider.TWITTER: "Twitter",
}


class ClaimTypes:
    """Well-known claim type URIs."""

    NAME_IDENTIFIER = (
        "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"
    )
    NAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"
    EMAIL = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress"
    GIVEN_NAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/givenname"
    SURNAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/surname"


class EmailAddress(RootValueObject[EmailStr]):
    """Syntactically well-formed email address, at most 254 characters.

    Validation is done by ``email-validator`` without a deliverability
    check; the domain part comes back normalized.
    """

    @field_validator("root", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v


class Claim(ValueObject):
    """A single (type, value) statement made by an identity provider."""

    type: str
    value: str


class ExternalIdentity(ValueObject):
    """Identity asserted by an external login provider.

    Built from a provider callback and immutable afterwards.
    """

    provider: LoginProvider
    provider_key: str  # Opaque, unique per provider
    claims: tuple[Claim, ...] = ()
    display_name: str

    @property
    def provider_name(self) -> str:
        """Provider name as stored on login links."""
        return self.provider.value

    @property
    def principal_name(self) -> str | None:
        """Name claim of the external principal, if any."""
        return self.find_first_value(ClaimTypes.NAME)

    def find_first_value(self, claim_type: str) -> str | None:
        """Return the value of the first claim with exactly this type."""
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def candidate_email(self) -> str | None:
        """Best-effort email extracted from the provider claims.

        Checked in order: the standard email claim type, a claim named
        "email" (any case), then any claim whose type contains "email".
        The first non-empty value wins.
        """
        candidates = (
            lambda c: c.type == ClaimTypes.EMAIL,
            lambda c: c.type.lower() == "email",
            lambda c: "email" in c.type.lower(),
        )
        for matches in candidates:
            for claim in self.claims:
                if matches(claim) and claim.value:
                    return claim.value
        return None


class IdentityError(ValueObject):
    """A single failure reported by an identity store operation."""

    code: str
    description: str

    @classmethod
    def duplicate_email(cls, email: str) -> "IdentityError":
        return cls(code="DuplicateEmail", description=f"Email '{email}' is already taken.")

    @classmethod
    def duplicate_user_name(cls, user_name: str) -> "IdentityError":
        return cls(
            code="DuplicateUserName",
            description=f"Username '{user_name}' is already taken.",
        )

    @classmethod
    def invalid_email(cls, email: str | None) -> "IdentityError":
        return cls(code="InvalidEmail", description=f"Email '{email}' is invalid.")

    @classmethod
    def invalid_user_name(cls, user_name: str | None) -> "IdentityError":
        return cls(
            code="InvalidUserName",
            description=f"Username '{user_name}' is invalid, can only contain letters or digits.",
        )

    @classmethod
    def login_already_associated(cls) -> "IdentityError":
        return cls(
            code="LoginAlreadyAssociated",
            description="A user with this login already exists.",
        )

    @classmethod
    def invalid_token(cls) -> "IdentityError":
        return cls(code="InvalidToken", description="Invalid token.")


class IdentityResult(ValueObject):
    """Outcome of an identity store operation."""

    succeeded: bool
    errors: tuple[IdentityError, ...] = ()

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> "IdentityResult":
        return cls(succeeded=False, errors=tuple(errors))
