"""Email senders.

``HttpEmailSender`` posts to an HTTP email provider (SendGrid-shaped payload).
``LoggingEmailSender`` only logs, for environments without a provider.
"""

import hashlib

import httpx
import logfire

from pms.adapter.error import EmailDeliveryError
from pms.domain.model import EmailJob


class EmailSender:
    """Generic email sender interface."""

    async def send(self, job: EmailJob) -> None:
        """Deliver one email.

        Args:
            job: Email to deliver

        Raises:
            EmailDeliveryError: If the provider did not accept the message
        """
        raise NotImplementedError


def idempotency_key(job: EmailJob) -> str:
    """Stable key so the provider won't send duplicates across retries."""
    payload_hash = hashlib.sha256(
        (job.recipient_email + "\x1f" + job.subject + "\x1f" + job.body).encode("utf-8")
    ).hexdigest()
    return f"email:{payload_hash}"


class HttpEmailSender(EmailSender):
    """Sends email through an HTTP provider API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        from_address: str,
        timeout: float = 10.0,
    ) -> None:
        """Initialize HTTP email sender.

        Args:
            api_url: Provider send endpoint
            api_key: Provider secret
            from_address: Sender address
            timeout: HTTP timeout in seconds
        """
        self.api_url = api_url
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout

    async def send(self, job: EmailJob) -> None:
        payload = {
            "from": {"email": self.from_address},
            "personalizations": [
                {"to": [{"email": job.recipient_email}], "subject": job.subject}
            ],
            "content": [{"type": "text/html", "value": job.body}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Idempotency-Key": idempotency_key(job),
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logfire.error("Email provider HTTP error", error=str(e))
            raise EmailDeliveryError(f"HTTP error sending email: {e}")

        if 200 <= response.status_code < 300:
            logfire.info("Email sent", recipient=job.recipient_email, subject=job.subject)
            return

        # 5xx and 429 are transient; other 4xx will fail again on retry
        retryable = response.status_code >= 500 or response.status_code == 429
        logfire.error(
            "Email provider rejected message",
            status_code=response.status_code,
            error=response.text[:200],
            retryable=retryable,
        )
        raise EmailDeliveryError(
            f"Email send failed {response.status_code}: {response.text[:200]}",
            retryable=retryable,
        )


class LoggingEmailSender(EmailSender):
    """Sender that logs emails instead of delivering them."""

    async def send(self, job: EmailJob) -> None:
        logfire.info(
            "Email not delivered (no provider configured)",
            recipient=job.recipient_email,
            subject=job.subject,
            body=job.body,
        )


class RecordingEmailSender(EmailSender):
    """Mock sender for testing.

    Records delivered jobs. The first ``fail_times`` sends raise a retryable
    ``EmailDeliveryError``.
    """

    def __init__(self, fail_times: int = 0):
        self.fail_times = fail_times
        self.attempts = 0
        self.sent: list[EmailJob] = []

    async def send(self, job: EmailJob) -> None:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise EmailDeliveryError("Mock delivery failure")
        self.sent.append(job)
