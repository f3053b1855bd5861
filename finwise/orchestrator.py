"""
Main Orchestrator for FinWise

This module ties together all the components and defines the flows the
presentation layer calls:
1. Records (add / delete / contribute) -> RecordStore
2. Views (dashboard, reports, goals) -> analytics, for a reference date
3. Assistant (question -> delayed answer) -> AssistantSession
4. Receipt scan (image -> proposed form values) -> ReceiptExtractor
5. Export (filtered transactions -> PDF / XLSX bytes)

DESIGN DECISION: The UI never touches storage or the audit log directly.
Everything that changes state or leaves the app goes through here, so it
is audited in one place.
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Optional

import structlog

from finwise.agents import AssistantSession
from finwise.analytics import build_dashboard, build_goals_view, build_reports
from finwise.audit import AuditLogger, configure_logging
from finwise.config import Settings, get_settings
from finwise.exports import to_pdf_bytes, to_spreadsheet_bytes
from finwise.models.audit import AuditEventBuilder
from finwise.models.records import Transaction
from finwise.models.views import DashboardView, GoalsView, ReportsView
from finwise.services.receipts import (
    ReceiptExtraction,
    ReceiptExtractor,
    SimulatedReceiptExtractor,
)
from finwise.services.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from finwise.store import RecordStore

logger = structlog.get_logger("finwise.orchestrator")


class FinanceApp:
    """
    The application root: owns the store and hands out its collaborators.
    """

    def __init__(
        self,
        store: RecordStore,
        assistant: AssistantSession,
        receipt_extractor: ReceiptExtractor,
        audit_logger: AuditLogger,
        settings: Settings,
    ):
        self.store = store
        self.assistant = assistant
        self.receipt_extractor = receipt_extractor
        self.audit_logger = audit_logger
        self.settings = settings

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def dashboard(self, reference: Optional[date] = None) -> DashboardView:
        app = self.settings.app
        return build_dashboard(
            self.store.transactions,
            self.store.goals,
            reference or date.today(),
            recent_limit=app.recent_transactions_limit,
            top_limit=app.top_categories_limit,
        )

    def reports(self, reference: Optional[date] = None) -> ReportsView:
        app = self.settings.app
        return build_reports(
            self.store.transactions,
            reference or date.today(),
            months=app.trend_months,
            days=app.trend_days,
        )

    def goals_view(self, reference: Optional[date] = None) -> GoalsView:
        return build_goals_view(
            self.store.transactions,
            self.store.goals,
            reference or date.today(),
        )

    # ------------------------------------------------------------------
    # Receipts and exports
    # ------------------------------------------------------------------

    async def scan_receipt(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str = "image/png",
    ) -> ReceiptExtraction:
        """Propose transaction form values from a receipt image."""
        extraction = await self.receipt_extractor.extract(image_bytes, mime_type)
        self.audit_logger.log(AuditEventBuilder.receipt_scanned(
            filename=filename,
            amount=extraction.amount,
            category=extraction.category,
        ))
        return extraction

    def export_spreadsheet(self, transactions: Sequence[Transaction]) -> bytes:
        data = to_spreadsheet_bytes(transactions, self.settings.assistant.currency_symbol)
        self.audit_logger.log(AuditEventBuilder.report_exported("xlsx", len(transactions)))
        return data

    def export_pdf(
        self,
        transactions: Sequence[Transaction],
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        data = to_pdf_bytes(transactions, generated_at, self.settings.assistant.currency_symbol)
        self.audit_logger.log(AuditEventBuilder.report_exported("pdf", len(transactions)))
        return data


def create_storage(settings: Settings) -> KeyValueStorage:
    """Build the configured key-value backend."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(storage_settings.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    receipt_extractor: Optional[ReceiptExtractor] = None,
) -> FinanceApp:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached environment settings.
        storage: Storage backend; defaults to the one the settings select.
        receipt_extractor: Defaults to the simulated extractor.

    Returns:
        The wired FinanceApp
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    assistant_settings = settings.assistant

    configure_logging(settings.app.log_level)

    storage = storage or create_storage(settings)
    audit_logger = AuditLogger(
        storage,
        key=storage_settings.audit_key,
        max_events=storage_settings.audit_max_events,
    )

    store = RecordStore(
        storage,
        audit_logger=audit_logger,
        transactions_key=storage_settings.transactions_key,
        goals_key=storage_settings.goals_key,
    )

    assistant = AssistantSession(
        store,
        delay_seconds=assistant_settings.response_delay_seconds,
        currency=assistant_settings.currency_symbol,
        audit_logger=audit_logger,
    )

    receipt_extractor = receipt_extractor or SimulatedReceiptExtractor(
        delay_seconds=assistant_settings.receipt_scan_delay_seconds,
    )

    logger.info(
        "app_components_created",
        backend=type(storage).__name__,
        transactions=len(store.transactions),
        goals=len(store.goals),
    )

    return FinanceApp(
        store=store,
        assistant=assistant,
        receipt_extractor=receipt_extractor,
        audit_logger=audit_logger,
        settings=settings,
    )
