"""Strongly typed identifiers for domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
LoginLinkId = NewType("LoginLinkId", UUID)
AuditLogEntryId = NewType("AuditLogEntryId", UUID)
