"""Unit tests for ConfirmExternalLoginUseCase."""

import asyncio
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

from dishka import AsyncContainer
import pytest

from pms.adapter.email import EmailQueue
from pms.application.usecase.account import (
    Authenticated,
    CollectEmail,
    ConfirmExternalLoginRequest,
    ConfirmExternalLoginUseCase,
    PendingConfirmation,
)
from pms.config import AuthSettings, LockoutSettings, Settings
from pms.domain.model import LoginLink
from pms.domain.repository import LoginLinkRepository, UserEmailStore
from pms.domain.service import SignInService, TokenService, UserService
from pms.domain.value import LoginLinkId, UserId
from pms.persistence.repository.inmemory import (
    InMemoryLoginLinkRepository,
    InMemoryUserRepository,
)
from pms.util.encoding import base64url_decode
from tests.conftest import make_identity
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class BrokenQueue(EmailQueue):
    """Queue whose enqueue fails with an unexpected error."""

    def enqueue(self, recipient_email, subject, html_body):
        raise RuntimeError("queue backend unavailable")


class SlowUserRepository(InMemoryUserRepository):
    """In-memory store whose email lookup yields to the event loop like real I/O."""

    async def find_by_email(self, email: str):
        await asyncio.sleep(0)
        return await super().find_by_email(email)


def _build_use_case(
    user_store: InMemoryUserRepository,
    links: InMemoryLoginLinkRepository,
    queue: EmailQueue,
    require_confirmed_account: bool = True,
) -> ConfirmExternalLoginUseCase:
    settings = Settings()
    auth_settings = AuthSettings(require_confirmed_account=require_confirmed_account)
    token_service = TokenService(auth_settings)
    user_service = UserService(user_store, links, token_service, LockoutSettings())
    sign_in_service = SignInService(user_service, token_service, auth_settings)
    return ConfirmExternalLoginUseCase(user_service, sign_in_service, queue, settings)


class TestConfirmExternalLogin:
    """Tests for the email confirmation form post."""

    @pytest.mark.asyncio
    async def test_new_account_created_and_email_queued(
        self, unit_env: AsyncContainer
    ):
        """Valid new email → one user, one link, one confirmation email."""
        # Arrange
        use_case = await unit_env.get(ConfirmExternalLoginUseCase)
        user_store = await unit_env.get(UserEmailStore)
        links = await unit_env.get(LoginLinkRepository)
        queue = await unit_env.get(EmailQueue)
        identity = make_identity(provider_key="gh-9")

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=identity, email="a@x.com")
        )

        # Assert
        assert outcome == PendingConfirmation(email="a@x.com")

        users = user_store.all()
        assert len(users) == 1
        assert users[0].user_name == "a@x.com"
        assert users[0].email == "a@x.com"
        assert users[0].email_confirmed is False

        stored_links = links.all()
        assert len(stored_links) == 1
        assert stored_links[0].user_id == users[0].id
        assert stored_links[0].provider_key == "gh-9"

        assert queue.qsize() == 1
        job = await queue.get()
        assert job.recipient_email == "a@x.com"
        assert job.subject == "Confirm your email"
        assert "clicking here</a>." in job.body

    @pytest.mark.asyncio
    async def test_confirmation_link_confirms_the_new_user(
        self, unit_env: AsyncContainer
    ):
        """The queued link carries a code that confirms the account."""
        # Arrange
        use_case = await unit_env.get(ConfirmExternalLoginUseCase)
        user_service = await unit_env.get(UserService)
        user_store = await unit_env.get(UserEmailStore)
        await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="a@x.com")
        )
        user = user_store.all()[0]

        # Act
        url = use_case.confirmation_url(user)

        # Assert
        parsed = urlparse(url)
        assert parsed.path == "/Identity/Account/ConfirmEmail"
        params = parse_qs(parsed.query)
        assert params["userId"] == [str(user.id)]
        result = await user_service.confirm_email(
            user, base64url_decode(params["code"][0])
        )
        assert result.succeeded

    @pytest.mark.asyncio
    async def test_invalid_email_never_creates_user(self, unit_env: AsyncContainer):
        """Malformed email re-renders the form with an error."""
        # Arrange
        use_case = await unit_env.get(ConfirmExternalLoginUseCase)
        user_store = await unit_env.get(UserEmailStore)
        queue = await unit_env.get(EmailQueue)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(
                identity=make_identity(), email="not-an-email", return_url="/x"
            )
        )

        # Assert
        assert outcome == CollectEmail(
            provider_display_name="GitHub",
            return_url="/x",
            email="not-an-email",
            errors=("The Email field is not a valid e-mail address.",),
        )
        assert user_store.all() == []
        assert queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_missing_email_is_required(self, unit_env: AsyncContainer):
        """Blank email is a required-field error."""
        use_case = await unit_env.get(ConfirmExternalLoginUseCase)

        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="  ")
        )

        assert isinstance(outcome, CollectEmail)
        assert outcome.errors == ("The Email field is required.",)

    @pytest.mark.asyncio
    async def test_existing_email_links_instead_of_creating(
        self, unit_env: AsyncContainer
    ):
        """Submitting an email that already has an account links to it."""
        # Arrange
        use_case = await unit_env.get(ConfirmExternalLoginUseCase)
        user_service = await unit_env.get(UserService)
        user_store = await unit_env.get(UserEmailStore)
        queue = await unit_env.get(EmailQueue)
        existing = user_service.new_user()
        existing = await user_service.set_user_name(existing, "a@x.com")
        existing = await user_service.set_email(existing, "a@x.com")
        await user_service.create(existing)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="A@X.com")
        )

        # Assert
        assert isinstance(outcome, Authenticated)
        assert outcome.ticket.user_id == existing.id
        assert len(user_store.all()) == 1
        assert queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_signs_in_when_confirmation_not_required(self):
        """Without required confirmation the new user is signed in directly."""
        # Arrange
        user_store = InMemoryUserRepository()
        queue = EmailQueue()
        use_case = _build_use_case(
            user_store,
            InMemoryLoginLinkRepository(),
            queue,
            require_confirmed_account=False,
        )

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(
                identity=make_identity(), email="a@x.com", return_url="/home"
            )
        )

        # Assert
        assert isinstance(outcome, Authenticated)
        assert outcome.return_url == "/home"
        assert outcome.ticket.authentication_method == "github"
        assert queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_full_queue_does_not_fail_registration(self):
        """Enqueue failure is logged; the account is still created."""
        # Arrange
        user_store = InMemoryUserRepository()
        queue = EmailQueue(capacity=1)
        queue.enqueue("someone@x.com", "Filler", "<p>filler</p>")
        use_case = _build_use_case(user_store, InMemoryLoginLinkRepository(), queue)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="a@x.com")
        )

        # Assert
        assert outcome == PendingConfirmation(email="a@x.com")
        assert len(user_store.all()) == 1
        assert queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_concurrent_confirmations_create_one_user(self):
        """Two racing confirmations for the same new email create one user."""
        # Arrange
        user_store = SlowUserRepository()
        links = InMemoryLoginLinkRepository()
        queue = EmailQueue()
        first = _build_use_case(user_store, links, queue)
        second = _build_use_case(user_store, links, queue)

        # Act
        outcomes = await asyncio.gather(
            first.execute(
                ConfirmExternalLoginRequest(
                    identity=make_identity(provider_key="gh-1"), email="a@x.com"
                )
            ),
            second.execute(
                ConfirmExternalLoginRequest(
                    identity=make_identity(provider_key="gh-2"), email="a@x.com"
                )
            ),
        )

        # Assert
        assert len(user_store.all()) == 1
        pending = [o for o in outcomes if isinstance(o, PendingConfirmation)]
        assert len(pending) == 1
        assert queue.qsize() == 1


class TestConfirmExternalLoginFailures:
    """Tests for store and link rejections on the confirmation form."""

    @pytest.mark.asyncio
    async def test_malformed_dotted_email_never_creates_user(self):
        """Consecutive dots in the local part are rejected before any write."""
        # Arrange
        user_store = InMemoryUserRepository()
        queue = EmailQueue()
        use_case = _build_use_case(user_store, InMemoryLoginLinkRepository(), queue)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="a..b@x.com")
        )

        # Assert
        assert isinstance(outcome, CollectEmail)
        assert outcome.errors == ("The Email field is not a valid e-mail address.",)
        assert user_store.all() == []
        assert queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_rejected_create_shows_form_again(self):
        """A valid email that is not a valid user name fails creation."""
        # Arrange
        user_store = InMemoryUserRepository()
        links = InMemoryLoginLinkRepository()
        queue = EmailQueue()
        use_case = _build_use_case(user_store, links, queue)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(
                identity=make_identity(), email="o'brien@x.com", return_url="/x"
            )
        )

        # Assert
        assert isinstance(outcome, CollectEmail)
        assert outcome.email == "o'brien@x.com"
        assert outcome.return_url == "/x"
        assert outcome.errors == (
            "Username 'o'brien@x.com' is invalid, can only contain letters or digits.",
        )
        assert user_store.all() == []
        assert links.all() == []
        assert queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_failed_link_leaves_user_unlinked_and_sends_nothing(self):
        """The user is kept without a link and no confirmation is queued."""
        # Arrange
        user_store = InMemoryUserRepository()
        links = InMemoryLoginLinkRepository()
        queue = EmailQueue()
        identity = make_identity(provider_key="gh-9")
        other_user = UserId(uuid4())
        await links.add(
            LoginLink(
                id=LoginLinkId(uuid4()),
                user_id=other_user,
                provider=identity.provider_name,
                provider_key=identity.provider_key,
                provider_display_name=identity.display_name,
            )
        )
        use_case = _build_use_case(user_store, links, queue)

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=identity, email="b@x.com")
        )

        # Assert
        assert isinstance(outcome, CollectEmail)
        assert outcome.errors == ("A user with this login already exists.",)
        users = user_store.all()
        assert len(users) == 1
        assert users[0].email == "b@x.com"
        assert [link.user_id for link in links.all()] == [other_user]
        assert queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_unexpected_enqueue_error_does_not_fail_registration(self):
        """Any dispatch failure is logged; the account still goes pending."""
        # Arrange
        user_store = InMemoryUserRepository()
        use_case = _build_use_case(
            user_store, InMemoryLoginLinkRepository(), BrokenQueue()
        )

        # Act
        outcome = await use_case.execute(
            ConfirmExternalLoginRequest(identity=make_identity(), email="a@x.com")
        )

        # Assert
        assert outcome == PendingConfirmation(email="a@x.com")
        assert len(user_store.all()) == 1
