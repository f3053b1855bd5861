"""
Integration tests for the application factory and its flows.
"""

import asyncio
import pytest
import random
from datetime import date, datetime

from finwise.config import Settings, get_settings
from finwise.orchestrator import FinanceApp, create_app_components, create_storage
from finwise.services.receipts import SimulatedReceiptExtractor
from finwise.services.storage import InMemoryStorage, JsonFileStorage

REFERENCE = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FINWISE_ASSISTANT_RESPONSE_DELAY_SECONDS", "0")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app():
    return create_app_components(
        settings=Settings(),
        storage=InMemoryStorage(),
        receipt_extractor=SimulatedReceiptExtractor(
            delay_seconds=0,
            rng=random.Random(11),
            today=lambda: REFERENCE,
        ),
    )


def add_sample_records(app: FinanceApp):
    app.store.add_transaction(
        {"amount": "3000", "category": "Other", "description": "Salary", "kind": "income", "date": "2024-03-01"},
    )
    app.store.add_transaction(
        {"amount": "45.20", "category": "Groceries", "description": "Market", "date": "2024-03-14"},
    )
    return app.store.add_goal(
        {"name": "Emergency", "target_amount": "6000", "deadline": "2024-09-11", "category": "Emergency Fund"},
    )


class TestFactory:
    """Tests for create_app_components and create_storage."""

    def test_components_are_wired(self, app):
        """Test that the factory returns a usable application."""
        assert isinstance(app, FinanceApp)
        assert app.store.transactions == ()
        assert app.assistant.messages[0].role == "assistant"

    def test_memory_backend(self, monkeypatch):
        """Test backend selection from settings."""
        monkeypatch.setenv("FINWISE_STORAGE_BACKEND", "memory")
        assert isinstance(create_storage(Settings()), InMemoryStorage)

    def test_json_backend_uses_data_dir(self, monkeypatch, tmp_path):
        """Test the default file backend."""
        monkeypatch.setenv("FINWISE_STORAGE_DATA_DIR", str(tmp_path / "data"))
        storage = create_storage(Settings())
        assert isinstance(storage, JsonFileStorage)
        assert storage.data_dir == tmp_path / "data"

    def test_records_survive_restart(self, monkeypatch, tmp_path):
        """Test that a second app instance sees the first one's records."""
        monkeypatch.setenv("FINWISE_STORAGE_DATA_DIR", str(tmp_path / "data"))
        first = create_app_components(settings=Settings())
        goal = add_sample_records(first)

        second = create_app_components(settings=Settings())
        assert len(second.store.transactions) == 2
        assert second.store.get_goal(goal.id) == goal
        assert (tmp_path / "data" / "expenses.json").exists()
        assert (tmp_path / "data" / "savingsGoals.json").exists()


class TestFlows:
    """Tests for the flows the UI calls."""

    def test_dashboard(self, app):
        """Test the dashboard view for a reference date."""
        add_sample_records(app)
        view = app.dashboard(REFERENCE)
        assert view.month_income == 3000
        assert view.month_expenses == pytest.approx(45.2)
        assert view.recent_transactions[0].description == "Market"

    def test_reports(self, app):
        """Test the reports view sizes follow the settings."""
        add_sample_records(app)
        view = app.reports(REFERENCE)
        assert len(view.monthly_trend) == 6
        assert len(view.daily_trend) == 7

    def test_goals_view(self, app):
        """Test goal pacing through the app."""
        goal = add_sample_records(app)
        view = app.goals_view(REFERENCE)
        pacing = view.pacing[goal.id]
        assert pacing.days_remaining == 180
        assert pacing.required_monthly_pace == pytest.approx(1000.0)
        assert view.show_savings_insight is True

    def test_assistant_answers_from_store(self, app):
        """Test a question answered from the app's records."""
        add_sample_records(app)
        reply = asyncio.run(app.assistant.ask("Financial overview"))
        assert "💵 Income: $3000.00" in reply.content
        assert "🎯 Active Goals: 1" in reply.content

    def test_scan_receipt_is_audited(self, app):
        """Test that a scan proposes values without storing anything."""
        extraction = asyncio.run(app.scan_receipt(b"image", "receipt.png"))
        assert extraction.description == "Receipt from 03/15/2024"
        assert app.store.transactions == ()

        event = app.audit_logger.recent_events()[0]
        assert event["event_type"] == "receipt_scanned"
        assert event["details"]["filename"] == "receipt.png"

    def test_scan_with_long_filename(self, app):
        """Test that an overlong upload name is shortened in the description only."""
        filename = "r" * 600 + ".png"
        extraction = asyncio.run(app.scan_receipt(b"image", filename))
        assert extraction.amount > 0

        event = app.audit_logger.recent_events()[0]
        assert len(event["description"]) <= 500
        assert event["description"].endswith("...")
        assert event["details"]["filename"] == filename

    def test_scanned_values_can_be_submitted(self, app):
        """Test the scan-then-submit flow."""
        extraction = asyncio.run(app.scan_receipt(b"image", "receipt.png"))
        t = app.store.add_transaction(extraction.model_dump(exclude={"simulated"}), today=REFERENCE)
        assert t.amount == extraction.amount
        assert t.receipt_image.startswith("data:image/png;base64,")

    def test_exports_are_audited(self, app):
        """Test both export formats."""
        add_sample_records(app)
        transactions = app.store.transactions
        pdf = app.export_pdf(transactions, generated_at=datetime(2024, 3, 15, 9, 0))
        xlsx = app.export_spreadsheet(transactions)
        assert pdf.startswith(b"%PDF")
        assert xlsx[:2] == b"PK"

        events = app.audit_logger.recent_events(limit=2)
        assert [e["details"]["format"] for e in events] == ["xlsx", "pdf"]
        assert events[0]["details"]["row_count"] == 2
