"""Queued outbound email."""

from pydantic import Field

from pms.domain.model.common import DomainModel


class EmailJob(DomainModel):
    """Email waiting for asynchronous delivery.

    Jobs are delivered at least once; ``attempts`` counts failed sends.
    """

    recipient_email: str
    subject: str
    body: str  # HTML
    attempts: int = Field(default=0, ge=0)
