"""User domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from pms.config import LockoutSettings
from pms.domain.error import DuplicateLoginError, DuplicateUserError, NotFoundError
from pms.domain.model import LoginLink, User
from pms.domain.repository import LoginLinkRepository, UserEmailStore
from pms.domain.value import (
    EmailAddress,
    ExternalIdentity,
    IdentityError,
    IdentityResult,
    LoginLinkId,
    UserId,
)
from .token_service import TokenService

ALLOWED_USER_NAME_CHARACTERS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+"
)


class UserService:
    """Domain service for local user accounts and their external logins.

    Store rejections are reported as ``IdentityResult`` errors rather than
    raised, so callers can present them next to the form that caused them.
    """

    def __init__(
        self,
        user_store: UserEmailStore,
        login_link_repository: LoginLinkRepository,
        token_service: TokenService,
        lockout_settings: LockoutSettings,
    ) -> None:
        """Initialize user service.

        Args:
            user_store: User store with email support
            login_link_repository: Login link repository
            token_service: Token domain service
            lockout_settings: Lockout configuration applied to new users
        """
        self.user_store = user_store
        self.login_link_repository = login_link_repository
        self.token_service = token_service
        self.lockout_settings = lockout_settings

    def new_user(self) -> User:
        """Blank user carrying the configured lockout defaults."""
        return User(lockout_enabled=self.lockout_settings.allowed_for_new_users)

    async def set_user_name(self, user: User, user_name: str) -> User:
        """Set the user name through the store's setter."""
        return await self.user_store.set_user_name(user, user_name)

    async def set_email(self, user: User, email: str) -> User:
        """Set the email through the store's setter."""
        return await self.user_store.set_email(user, email)

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_store.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email, ignoring case.

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        with logfire.span("user_service.find_by_email", email=email):
            user = await self.user_store.find_by_email(email)
            if user:
                logfire.info("User found", email=email, user_id=str(user.id))
            else:
                logfire.info("User not found", email=email)
            return user

    async def find_by_login(self, provider: str, provider_key: str) -> User | None:
        """Find the user linked to an external login.

        Args:
            provider: Provider name
            provider_key: Provider-scoped user key

        Returns:
            User if a link exists, None otherwise
        """
        with logfire.span(
            "user_service.find_by_login", provider=provider, provider_key=provider_key
        ):
            link = await self.login_link_repository.find_by_provider(
                provider, provider_key
            )
            if not link:
                return None

            user = await self.user_store.find_by_id(link.user_id)
            if not user:
                logfire.error(
                    "Login link points to a missing user",
                    provider=provider,
                    user_id=str(link.user_id),
                )
            return user

    async def get_logins(self, user: User) -> list[LoginLink]:
        """All external logins linked to ``user``."""
        return await self.login_link_repository.find_all_by_user_id(user.id)

    async def create(self, user: User) -> IdentityResult:
        """Validate and insert a new user.

        Args:
            user: User with user name and email already set

        Returns:
            Success, or the validation and store errors
        """
        with logfire.span(
            "user_service.create", user_id=str(user.id), email=user.email
        ):
            errors = await self._validate(user)
            if errors:
                logfire.warn(
                    "User validation failed",
                    email=user.email,
                    codes=[e.code for e in errors],
                )
                return IdentityResult.failed(*errors)

            try:
                await self.user_store.create(user)
            except DuplicateUserError as e:
                # Lost a race with a concurrent create; the store's constraint wins
                logfire.warn("User create rejected by store", field=e.field, value=e.value)
                if e.field == "email":
                    return IdentityResult.failed(IdentityError.duplicate_email(e.value))
                return IdentityResult.failed(IdentityError.duplicate_user_name(e.value))

            logfire.info("User created", user_id=str(user.id), email=user.email)
            return IdentityResult.success()

    async def add_login(self, user: User, identity: ExternalIdentity) -> IdentityResult:
        """Link an external login to ``user``.

        Args:
            user: Local user
            identity: External identity to link

        Returns:
            Success, or ``LoginAlreadyAssociated`` if the login is linked already
        """
        with logfire.span(
            "user_service.add_login",
            user_id=str(user.id),
            provider=identity.provider_name,
        ):
            existing = await self.login_link_repository.find_by_provider(
                identity.provider_name, identity.provider_key
            )
            if existing:
                logfire.warn(
                    "Login already linked",
                    provider=identity.provider_name,
                    linked_user_id=str(existing.user_id),
                )
                return IdentityResult.failed(IdentityError.login_already_associated())

            link = LoginLink(
                id=LoginLinkId(uuid4()),
                user_id=user.id,
                provider=identity.provider_name,
                provider_key=identity.provider_key,
                provider_display_name=identity.display_name,
            )
            try:
                await self.login_link_repository.add(link)
            except DuplicateLoginError:
                return IdentityResult.failed(IdentityError.login_already_associated())

            logfire.info(
                "Login linked", user_id=str(user.id), provider=identity.provider_name
            )
            return IdentityResult.success()

    def generate_email_confirmation_token(self, user: User) -> str:
        """Token that confirms the current email of ``user``."""
        return self.token_service.generate_email_confirmation_token(user)

    async def confirm_email(self, user: User, token: str) -> IdentityResult:
        """Mark the email of ``user`` confirmed if ``token`` is valid.

        Args:
            user: Local user
            token: Email confirmation token (not URL-encoded)

        Returns:
            Success, or ``InvalidToken``
        """
        with logfire.span("user_service.confirm_email", user_id=str(user.id)):
            if not self.token_service.verify_email_confirmation_token(user, token):
                return IdentityResult.failed(IdentityError.invalid_token())

            confirmed = await self.user_store.set_email_confirmed(user, True)
            await self.user_store.update(
                confirmed.evolve(updated_at=datetime.now(timezone.utc))
            )
            logfire.info("Email confirmed", user_id=str(user.id))
            return IdentityResult.success()

    async def _validate(self, user: User) -> list[IdentityError]:
        errors: list[IdentityError] = []

        user_name = user.user_name or ""
        if not user_name or any(c not in ALLOWED_USER_NAME_CHARACTERS for c in user_name):
            errors.append(IdentityError.invalid_user_name(user.user_name))
        else:
            owner = await self.user_store.find_by_user_name(user_name)
            if owner and owner.id != user.id:
                errors.append(IdentityError.duplicate_user_name(user_name))

        if EmailAddress.try_parse(user.email or "") is None:
            errors.append(IdentityError.invalid_email(user.email))
        else:
            owner = await self.user_store.find_by_email(user.email)
            if owner and owner.id != user.id:
                errors.append(IdentityError.duplicate_email(user.email))

        return errors
