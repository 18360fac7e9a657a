"""Structured audit logging for policy generation requests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

audit_logger = logging.getLogger("policykit.audit")


class AuditEvent(BaseModel):
    """Audit log entry."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event_type: str
    endpoint: str
    method: str
    resource_id: str | None = None
    action: str
    status: str  # "success", "not_found", "error"
    details: dict[str, Any] = Field(default_factory=dict)
    ip_address: str | None = None


def log_audit_event(
    event_type: str,
    endpoint: str,
    method: str,
    action: str,
    status: str,
    request: Request | None = None,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditEvent:
    """Log an audit event as a single JSON line."""
    event = AuditEvent(
        event_type=event_type,
        endpoint=endpoint,
        method=method,
        resource_id=resource_id,
        action=action,
        status=status,
        details=details or {},
        ip_address=request.client.host if request and request.client else None,
    )

    audit_logger.info(event.model_dump_json())
    return event
