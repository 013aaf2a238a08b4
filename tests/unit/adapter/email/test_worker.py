"""Unit tests for EmailDeliveryWorker."""

import asyncio

import pytest

from pms.adapter.email import EmailDeliveryWorker, EmailQueue, RecordingEmailSender
from pms.adapter.error import EmailDeliveryError
from pms.config import EmailSettings
from pms.domain.model import EmailJob


def _settings(**overrides) -> EmailSettings:
    return EmailSettings(retry_delay_seconds=0, **overrides)


class RejectingEmailSender(RecordingEmailSender):
    """Sender whose provider permanently rejects every message."""

    async def send(self, job: EmailJob) -> None:
        self.attempts += 1
        raise EmailDeliveryError("Bad recipient", retryable=False)


class TestDeliver:
    """Tests for EmailDeliveryWorker.deliver()."""

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self):
        """Transient failures are retried until the send succeeds."""
        # Arrange
        sender = RecordingEmailSender(fail_times=2)
        worker = EmailDeliveryWorker(EmailQueue(), sender, _settings(max_attempts=3))
        job = EmailJob(recipient_email="a@x.com", subject="Hi", body="<p>hi</p>")

        # Act
        delivered = await worker.deliver(job)

        # Assert
        assert delivered is True
        assert sender.attempts == 3
        assert len(sender.sent) == 1
        assert sender.sent[0].recipient_email == "a@x.com"
        assert sender.sent[0].attempts == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        """Job is dropped once attempts are exhausted."""
        sender = RecordingEmailSender(fail_times=10)
        worker = EmailDeliveryWorker(EmailQueue(), sender, _settings(max_attempts=3))
        job = EmailJob(recipient_email="a@x.com", subject="Hi", body="<p>hi</p>")

        delivered = await worker.deliver(job)

        assert delivered is False
        assert sender.attempts == 3
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_permanent_failure_is_not_retried(self):
        """Non-retryable rejection stops after the first attempt."""
        sender = RejectingEmailSender()
        worker = EmailDeliveryWorker(EmailQueue(), sender, _settings(max_attempts=5))
        job = EmailJob(recipient_email="a@x.com", subject="Hi", body="<p>hi</p>")

        delivered = await worker.deliver(job)

        assert delivered is False
        assert sender.attempts == 1


class TestLifecycle:
    """Tests for start/stop of the background worker."""

    @pytest.mark.asyncio
    async def test_stop_drains_queued_jobs(self):
        """Jobs queued before shutdown are delivered before the worker stops."""
        # Arrange
        queue = EmailQueue()
        sender = RecordingEmailSender()
        worker = EmailDeliveryWorker(queue, sender, _settings())
        worker.start()
        for i in range(3):
            queue.enqueue(f"user{i}@x.com", f"Message {i}", "<p>hi</p>")

        # Act
        await worker.stop()

        # Assert
        assert [job.subject for job in sender.sent] == [
            "Message 0",
            "Message 1",
            "Message 2",
        ]
        assert not worker.running
        assert queue.closed

    @pytest.mark.asyncio
    async def test_worker_delivers_while_running(self):
        """A started worker picks up new jobs."""
        queue = EmailQueue()
        sender = RecordingEmailSender()
        worker = EmailDeliveryWorker(queue, sender, _settings())
        worker.start()

        queue.enqueue("a@x.com", "Hello", "<p>hi</p>")
        await asyncio.wait_for(queue.join(), timeout=1)

        assert worker.running
        assert len(sender.sent) == 1
        await worker.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        """Stopping an idle worker only closes the queue."""
        queue = EmailQueue()
        worker = EmailDeliveryWorker(queue, RecordingEmailSender(), _settings())

        await worker.stop()

        assert queue.closed
        assert not worker.running
