"""Background delivery of queued emails."""

import asyncio
import contextlib

import logfire

from pms.adapter.error import EmailDeliveryError
from pms.config import EmailSettings
from pms.domain.model import EmailJob

from .queue import EmailQueue
from .sender import EmailSender


class EmailDeliveryWorker:
    """Consumes the email queue for the lifetime of the application.

    Delivery is at-least-once: a failed send is retried up to
    ``max_attempts`` times with a fixed delay, then dropped with an error log.
    """

    def __init__(
        self,
        queue: EmailQueue,
        sender: EmailSender,
        settings: EmailSettings,
    ) -> None:
        """Initialize delivery worker.

        Args:
            queue: Queue to consume
            sender: Sender used for each delivery attempt
            settings: Retry and drain configuration
        """
        self.queue = queue
        self.sender = sender
        self.settings = settings
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start consuming in a background task."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="email-delivery-worker")
        logfire.info("Email delivery worker started")

    async def stop(self, drain_timeout: float | None = None) -> None:
        """Close the queue, deliver what is left, then stop.

        Args:
            drain_timeout: Seconds allowed for draining, defaults to settings
        """
        timeout = (
            self.settings.drain_timeout_seconds if drain_timeout is None else drain_timeout
        )
        self.queue.close()

        if self._task is None:
            return

        try:
            await asyncio.wait_for(self.queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logfire.warn(
                "Email queue not drained before shutdown", remaining=self.queue.qsize()
            )

        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logfire.info("Email delivery worker stopped")

    async def _run(self) -> None:
        while True:
            job = await self.queue.get()
            try:
                await self.deliver(job)
            except Exception as e:
                # Keep consuming; a broken sender must not stop the worker
                logfire.error(
                    "Unexpected email delivery failure",
                    recipient=job.recipient_email,
                    error=str(e),
                )
            finally:
                self.queue.task_done()

    async def deliver(self, job: EmailJob) -> bool:
        """Deliver one job with retries.

        Returns:
            True if the provider accepted the message
        """
        with logfire.span(
            "email_worker.deliver", recipient=job.recipient_email, subject=job.subject
        ):
            while True:
                try:
                    await self.sender.send(job)
                    return True
                except EmailDeliveryError as e:
                    job = job.evolve(attempts=job.attempts + 1)
                    if not e.retryable or job.attempts >= self.settings.max_attempts:
                        logfire.error(
                            "Email delivery failed, dropping",
                            recipient=job.recipient_email,
                            attempts=job.attempts,
                            error=str(e),
                        )
                        return False

                    logfire.warn(
                        "Email delivery failed, retrying",
                        recipient=job.recipient_email,
                        attempts=job.attempts,
                        error=str(e),
                    )
                    await asyncio.sleep(self.settings.retry_delay_seconds)
