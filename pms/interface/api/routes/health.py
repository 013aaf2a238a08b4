"""Health check routes."""

from datetime import datetime, timezone
from typing import Literal

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from pms.adapter.email import EmailDeliveryWorker, EmailQueue
from pms.config import Settings

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Process liveness plus email dispatcher state."""

    status: Literal["healthy", "degraded"]
    timestamp: datetime
    version: str
    git_sha: str
    email_worker_running: bool
    email_queue_size: int
    email_queue_capacity: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    email_queue: FromDishka[EmailQueue],
    email_worker: FromDishka[EmailDeliveryWorker],
) -> HealthResponse:
    """Report ``degraded`` when confirmation emails are not being delivered."""
    running = email_worker.running
    return HealthResponse(
        status="healthy" if running else "degraded",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        email_worker_running=running,
        email_queue_size=email_queue.qsize(),
        email_queue_capacity=email_queue.capacity,
    )
