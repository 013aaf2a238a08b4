"""Unit tests for EmailQueue."""

import pytest

from pms.adapter.email import EmailQueue
from pms.adapter.error import EmailQueueError


class TestEmailQueue:
    """Tests for the bounded email queue."""

    @pytest.mark.asyncio
    async def test_enqueue_is_fifo(self):
        """Jobs come out in submission order."""
        queue = EmailQueue()

        queue.enqueue("a@x.com", "First", "<p>1</p>")
        queue.enqueue("b@x.com", "Second", "<p>2</p>")

        assert (await queue.get()).subject == "First"
        assert (await queue.get()).subject == "Second"

    def test_full_queue_raises(self):
        """Enqueue never blocks; a full queue is an error."""
        queue = EmailQueue(capacity=1)
        queue.enqueue("a@x.com", "First", "<p>1</p>")

        with pytest.raises(EmailQueueError):
            queue.enqueue("b@x.com", "Second", "<p>2</p>")

        assert queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_closed_queue_rejects_but_keeps_jobs(self):
        """Closing stops intake; queued jobs remain deliverable."""
        queue = EmailQueue()
        queue.enqueue("a@x.com", "Queued", "<p>1</p>")

        queue.close()

        assert queue.closed
        with pytest.raises(EmailQueueError):
            queue.enqueue("b@x.com", "Late", "<p>2</p>")
        assert (await queue.get()).subject == "Queued"
