"""Audit logging package."""

from finwise.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
