"""Outbound email adapter."""

from .queue import EmailQueue
from .sender import (
    EmailSender,
    HttpEmailSender,
    LoggingEmailSender,
    RecordingEmailSender,
)
from .worker import EmailDeliveryWorker

__all__ = [
    "EmailDeliveryWorker",
    "EmailQueue",
    "EmailSender",
    "HttpEmailSender",
    "LoggingEmailSender",
    "RecordingEmailSender",
]
