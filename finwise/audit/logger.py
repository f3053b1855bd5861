"""
Audit Logger

DESIGN DECISION: Auditing must never cost the user a change that already
succeeded. A record is saved first; the audit entry follows, and if the
audit write fails that failure is logged and swallowed here.

Each event goes to two places:
- a structured JSON log line (stdlib logging through structlog)
- optionally, a capped list in key-value storage, read back by the
  settings tab
"""

import json
import logging
from typing import Optional

import structlog

from finwise.models.audit import AuditEvent
from finwise.services.storage import KeyValueStorage, StorageError


SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

structlog.configure(
    processors=SHARED_PROCESSORS + [structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class AuditLogger:
    """
    Writes audit events to the local log and, when storage is given, to a
    capped JSON list under `key`.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = "auditLog",
        max_events: int = 500,
    ):
        """
        Args:
            storage: Where to keep the audit collection. None keeps
                    events in the local log only.
            key: Storage key of the audit collection.
            max_events: Cap on stored events; the newest are kept.
                    0 disables persistence.
        """
        self._storage = storage
        self._key = key
        self._max_events = max_events
        self._logger = structlog.get_logger("finwise.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Record an event.

        Returns:
            False only when the storage write failed
        """
        entry = event.to_log_dict()
        # Severity values double as logger method names
        getattr(self._logger, event.severity.value)("audit_event", **entry)

        if self._storage is None or self._max_events == 0:
            return True

        try:
            events = self._read_stored()
            events.append(entry)
            self._storage.set(self._key, json.dumps(events[-self._max_events:]))
        except StorageError as e:
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=entry["event_id"],
            )
            return False
        return True

    def recent_events(self, limit: int = 50) -> list[dict]:
        """Stored events, newest first."""
        if self._storage is None:
            return []
        try:
            events = self._read_stored()
        except StorageError as e:
            self._logger.warning("audit_storage_unreadable", error=str(e))
            return []
        return list(reversed(events))[:limit]

    def _read_stored(self) -> list[dict]:
        raw = self._storage.get(self._key)
        if not raw:
            return []
        try:
            events = json.loads(raw)
        except json.JSONDecodeError:
            # Start over rather than block auditing forever
            self._logger.warning("audit_log_corrupt", key=self._key)
            return []
        return events if isinstance(events, list) else []
