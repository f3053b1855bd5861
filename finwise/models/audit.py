"""
Audit Models for FinWise

Every change to the records, every assistant answer and every export
leaves an audit event behind, so that:
1. The settings tab can show recent activity
2. A goal's running total can be traced back contribution by contribution
3. Corrupt stored data is noticed instead of silently vanishing

DESIGN DECISION: The audit trail is append-only. The stored copy is capped
and drops its oldest events first.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """What happened."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Savings goals
    GOAL_CREATED = "goal_created"
    GOAL_CONTRIBUTION = "goal_contribution"
    GOAL_DELETED = "goal_deleted"

    # Validation and storage
    VALIDATION_FAILED = "validation_failed"
    STORAGE_LOAD_FAILED = "storage_load_failed"

    # Assistant and receipts
    ASSISTANT_ANSWERED = "assistant_answered"
    RECEIPT_SCANNED = "receipt_scanned"

    # Exports
    REPORT_EXPORTED = "report_exported"


class AuditSeverity(str, Enum):
    """Maps onto the local log level the event is written at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One entry of the audit trail.

    entity_type/entity_id point at the record concerned, correlation_id
    groups events of one assistant conversation.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Identifier of this entry"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Time of the event, timezone-aware UTC"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="'transaction', 'goal', 'collection', 'assistant', 'receipt' or 'report'"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Record id, or the storage key for collection events"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Conversation id for assistant events"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = Field(
        default=False,
        description="True when the event follows directly from user input"
    )

    def to_log_dict(self) -> dict:
        """
        Flat, JSON-ready form used both for structured log lines and for
        the stored audit collection.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


DESCRIPTION_TEXT_LIMIT = 80


def _clip(text: str, limit: int = DESCRIPTION_TEXT_LIMIT) -> str:
    """Shorten user-supplied text interpolated into a description."""
    text = str(text)
    return text if len(text) <= limit else text[:limit - 3] + "..."


def _user_event(event_type: AuditEventType, entity_type: str, description: str, **fields: Any) -> AuditEvent:
    return AuditEvent(
        event_type=event_type,
        entity_type=entity_type,
        description=description,
        is_user_action=True,
        **fields,
    )


class AuditEventBuilder:
    """
    Named constructors for the events FinWise records.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, kind, category, amount)
        event = AuditEventBuilder.goal_contribution(goal_id, amount, new_total)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        kind: str,
        category: str,
        amount: float,
    ) -> AuditEvent:
        return _user_event(
            AuditEventType.TRANSACTION_ADDED,
            "transaction",
            f"Transaction added: {kind} {amount:.2f} ({_clip(category)})",
            entity_id=transaction_id,
            details={"kind": kind, "category": category, "amount": amount},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return _user_event(
            AuditEventType.TRANSACTION_DELETED,
            "transaction",
            "Transaction deleted",
            entity_id=transaction_id,
        )

    @staticmethod
    def goal_created(goal_id: str, name: str, target_amount: float) -> AuditEvent:
        return _user_event(
            AuditEventType.GOAL_CREATED,
            "goal",
            f"Savings goal created: {_clip(name)}",
            entity_id=goal_id,
            details={"name": name, "target_amount": target_amount},
        )

    @staticmethod
    def goal_contribution(goal_id: str, amount: float, new_total: float) -> AuditEvent:
        return _user_event(
            AuditEventType.GOAL_CONTRIBUTION,
            "goal",
            f"Contribution of {amount:.2f} added to goal",
            entity_id=goal_id,
            details={"amount": amount, "current_amount": new_total},
        )

    @staticmethod
    def goal_deleted(goal_id: str) -> AuditEvent:
        return _user_event(
            AuditEventType.GOAL_DELETED,
            "goal",
            "Savings goal deleted",
            entity_id=goal_id,
        )

    @staticmethod
    def validation_failed(entity_type: str, issues: list[dict]) -> AuditEvent:
        """Rejected form input; nothing was changed."""
        return _user_event(
            AuditEventType.VALIDATION_FAILED,
            entity_type,
            f"Rejected {_clip(entity_type)} input ({len(issues)} issues)",
            severity=AuditSeverity.WARNING,
            details={"issues": issues},
        )

    @staticmethod
    def storage_load_failed(key: str, error_message: str) -> AuditEvent:
        """A stored collection could not be read and was replaced by an empty one."""
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            entity_id=key,
            description=f"Stored collection '{_clip(key)}' unreadable, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def assistant_answered(
        topic: str,
        question_length: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        # The question text itself is not kept
        return _user_event(
            AuditEventType.ASSISTANT_ANSWERED,
            "assistant",
            f"Assistant answered a '{_clip(topic)}' question",
            correlation_id=correlation_id,
            details={"topic": topic, "question_length": question_length},
        )

    @staticmethod
    def receipt_scanned(filename: str, amount: float, category: str) -> AuditEvent:
        return _user_event(
            AuditEventType.RECEIPT_SCANNED,
            "receipt",
            f"Receipt scanned: {_clip(filename)}",
            details={
                "filename": filename,
                "amount": amount,
                "category": category,
                "simulated": True,
            },
        )

    @staticmethod
    def report_exported(export_format: str, row_count: int) -> AuditEvent:
        return _user_event(
            AuditEventType.REPORT_EXPORTED,
            "report",
            f"Report exported as {_clip(export_format)} ({row_count} rows)",
            details={"format": export_format, "row_count": row_count},
        )
