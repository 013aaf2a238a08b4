"""Token domain service."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import logfire

from pms.config import AuthSettings
from pms.domain.model import User
from pms.domain.value import ExternalIdentity, UserId
from pms.util.jwt import JWTError, create_token, verify_token

EMAIL_CONFIRMATION_PURPOSE = "EmailConfirmation"
SESSION_PURPOSE = "Session"
EXTERNAL_LOGIN_PURPOSE = "ExternalLogin"
CORRELATION_PURPOSE = "Correlation"


class TokenService:
    """Domain service for signed tokens.

    Email confirmation tokens embed the user's security stamp, so rotating
    the stamp invalidates outstanding tokens.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize token service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def generate_email_confirmation_token(self, user: User) -> str:
        """Create an email confirmation token for ``user``."""
        with logfire.span(
            "token_service.generate_email_confirmation_token", user_id=str(user.id)
        ):
            return create_token(
                EMAIL_CONFIRMATION_PURPOSE,
                {"sub": str(user.id), "stamp": user.security_stamp, "email": user.email},
                timedelta(hours=self.auth_settings.email_token_expiry_hours),
                self.auth_settings,
            )

    def verify_email_confirmation_token(self, user: User, token: str) -> bool:
        """Check that ``token`` confirms the current email of ``user``."""
        with logfire.span(
            "token_service.verify_email_confirmation_token", user_id=str(user.id)
        ):
            try:
                claims = verify_token(
                    token, EMAIL_CONFIRMATION_PURPOSE, self.auth_settings
                )
            except JWTError as e:
                logfire.warn(
                    "Email confirmation token rejected",
                    user_id=str(user.id),
                    error=str(e),
                )
                return False

            return (
                claims.get("sub") == str(user.id)
                and claims.get("stamp") == user.security_stamp
                and claims.get("email") == user.email
            )

    def create_session_token(
        self,
        user: User,
        is_persistent: bool,
        authentication_method: str | None = None,
    ) -> tuple[str, datetime]:
        """Create an application session token.

        Returns:
            Tuple of (token, expiry)
        """
        lifetime = timedelta(minutes=self.auth_settings.session_expiry_minutes)
        expires_at = datetime.now(timezone.utc) + lifetime
        payload = {
            "sub": str(user.id),
            "name": user.user_name,
            "stamp": user.security_stamp,
            "persistent": is_persistent,
        }
        if authentication_method:
            payload["amr"] = authentication_method

        token = create_token(SESSION_PURPOSE, payload, lifetime, self.auth_settings)
        logfire.info(
            "Session token created",
            user_id=str(user.id),
            persistent=is_persistent,
            authentication_method=authentication_method,
        )
        return token, expires_at

    def read_session_token(self, token: str) -> UserId | None:
        """User ID carried by a valid session token, None otherwise."""
        try:
            claims = verify_token(token, SESSION_PURPOSE, self.auth_settings)
        except JWTError:
            return None
        return UserId(UUID(claims["sub"]))

    def protect_external_identity(self, identity: ExternalIdentity) -> str:
        """Serialize an external identity into a signed, short-lived token."""
        return create_token(
            EXTERNAL_LOGIN_PURPOSE,
            {"identity": identity.model_dump(mode="json")},
            timedelta(minutes=self.auth_settings.external_expiry_minutes),
            self.auth_settings,
        )

    def unprotect_external_identity(self, token: str) -> ExternalIdentity | None:
        """Restore an external identity, or None if the token is not valid."""
        try:
            claims = verify_token(token, EXTERNAL_LOGIN_PURPOSE, self.auth_settings)
        except JWTError as e:
            logfire.warn("External login token rejected", error=str(e))
            return None
        return ExternalIdentity.model_validate(claims["identity"])

    def protect_correlation(
        self, provider: str, state: str, code_verifier: str, return_url: str
    ) -> str:
        """Sign the values that must survive the provider redirect."""
        return create_token(
            CORRELATION_PURPOSE,
            {
                "provider": provider,
                "state": state,
                "verifier": code_verifier,
                "return_url": return_url,
            },
            timedelta(minutes=self.auth_settings.correlation_expiry_minutes),
            self.auth_settings,
        )

    def unprotect_correlation(self, token: str) -> dict[str, str] | None:
        """Restore correlation values, or None if the token is not valid."""
        try:
            claims = verify_token(token, CORRELATION_PURPOSE, self.auth_settings)
        except JWTError as e:
            logfire.warn("Correlation token rejected", error=str(e))
            return None
        return {
            "provider": claims["provider"],
            "state": claims["state"],
            "verifier": claims["verifier"],
            "return_url": claims["return_url"],
        }
