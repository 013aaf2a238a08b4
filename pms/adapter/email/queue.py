"""Bounded in-process queue of outbound emails."""

import asyncio

import logfire

from pms.adapter.error import EmailQueueError
from pms.domain.model import EmailJob


class EmailQueue:
    """Bounded FIFO of email jobs shared by all requests.

    ``enqueue`` never waits: a full or closed queue is reported to the caller
    immediately so request handling is never blocked by delivery.
    """

    def __init__(self, capacity: int = 100) -> None:
        """Initialize email queue.

        Args:
            capacity: Maximum number of jobs waiting for delivery
        """
        self.capacity = capacity
        self._queue: asyncio.Queue[EmailJob] = asyncio.Queue(maxsize=capacity)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        """Number of jobs waiting for delivery."""
        return self._queue.qsize()

    def enqueue(self, recipient_email: str, subject: str, html_body: str) -> EmailJob:
        """Submit an email for asynchronous delivery.

        Args:
            recipient_email: Recipient address
            subject: Subject line
            html_body: HTML body

        Returns:
            The queued job

        Raises:
            EmailQueueError: If the queue is closed or full
        """
        if self._closed:
            raise EmailQueueError("Email queue is closed")

        job = EmailJob(recipient_email=recipient_email, subject=subject, body=html_body)
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            logfire.warn(
                "Email queue full", capacity=self.capacity, recipient=recipient_email
            )
            raise EmailQueueError(f"Email queue is full ({self.capacity} jobs)")

        logfire.info("Email queued", recipient=recipient_email, subject=subject)
        return job

    async def get(self) -> EmailJob:
        """Wait for the next job."""
        return await self._queue.get()

    def task_done(self) -> None:
        """Mark the job returned by the last ``get`` as processed."""
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        await self._queue.join()

    def close(self) -> None:
        """Stop accepting new jobs. Already queued jobs stay deliverable."""
        self._closed = True
