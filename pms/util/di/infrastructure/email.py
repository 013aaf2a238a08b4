"""Email infrastructure providers."""

from dishka import Scope, provide

from pms.adapter.email import (
    EmailDeliveryWorker,
    EmailQueue,
    EmailSender,
    HttpEmailSender,
    LoggingEmailSender,
)
from pms.config import EmailSettings
from pms.util.di.base import ProviderBase


class EmailQueueProvider(ProviderBase):
    """Email queue and delivery worker - concrete, shared by all senders."""

    @provide(scope=Scope.APP)
    def get_email_queue(self, email_settings: EmailSettings) -> EmailQueue:
        """Provide the process-wide email queue."""
        return EmailQueue(capacity=email_settings.queue_capacity)

    @provide(scope=Scope.APP)
    def get_email_worker(
        self,
        queue: EmailQueue,
        sender: EmailSender,
        email_settings: EmailSettings,
    ) -> EmailDeliveryWorker:
        """Provide the background delivery worker."""
        return EmailDeliveryWorker(queue=queue, sender=sender, settings=email_settings)


class EmailProvider(ProviderBase):
    """Email sender component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_sender(self, email_settings: EmailSettings) -> EmailSender:
        """Provide email sender.

        Returns:
            HTTP sender when an email API is configured, otherwise a logging sender
        """
        if email_settings.api_url and email_settings.api_key:
            return HttpEmailSender(
                api_url=email_settings.api_url,
                api_key=email_settings.api_key,
                from_address=email_settings.from_address,
                timeout=email_settings.http_timeout_seconds,
            )
        return LoggingEmailSender()
