"""
Streamlit Frontend for FinWise

The presentation layer: one tab per view over the record store and the
analytics views.

DESIGN PRINCIPLES:
1. Every number on screen comes from the analytics layer
2. Every change goes through the store (and is persisted immediately)
3. Validation errors are shown next to the form, nothing is half-saved
4. Receipt scanning only pre-fills the form; the user still submits it
"""

import asyncio
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from finwise.agents import QUICK_ACTIONS
from finwise.analytics import filter_transactions
from finwise.config import validate_all_settings
from finwise.exports import (
    PDF_FILENAME,
    SPREADSHEET_FILENAME,
    build_export_rows,
    format_money,
)
from finwise.models.records import (
    ExpenseCategory,
    GoalCategory,
    PaymentMethod,
    TransactionKind,
)
from finwise.orchestrator import FinanceApp, create_app_components
from finwise.services.receipts import ReceiptExtractionError
from finwise.validation import RecordValidationError


# Page configuration
st.set_page_config(
    page_title="FinWise AI",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="collapsed",
)

CHART_COLORS = ["#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899", "#14b8a6", "#f97316"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_app() -> FinanceApp:
    """Get or create application components (cached)."""
    return create_app_components()


def money(app: FinanceApp, value: float) -> str:
    return format_money(value, app.settings.assistant.currency_symbol)


def show_validation_error(error: RecordValidationError):
    for issue in error.issues:
        st.error(f"{issue.field}: {issue.message}")


def main():
    """Main application entry point."""
    app = get_app()

    header_left, header_right = st.columns([4, 1])
    with header_left:
        st.title("💰 FinWise AI")
        st.caption("Smart Personal Finance Manager")
    with header_right:
        if st.button("➕ Add Transaction", type="primary"):
            st.session_state.show_transaction_form = True

    if st.session_state.get("show_transaction_form"):
        render_transaction_form(app)

    tabs = st.tabs(
        ["Dashboard", "Transactions", "Reports", "Savings Goals", "AI Assistant", "Settings"]
    )
    renderers = (
        render_dashboard,
        render_transactions,
        render_reports,
        render_goals,
        render_assistant,
        render_settings,
    )
    for tab, render in zip(tabs, renderers):
        with tab:
            render(app)


def render_transaction_form(app: FinanceApp):
    """Add-transaction form with the simulated receipt scanner."""
    st.markdown("---")
    st.subheader("Add Transaction")

    defaults = st.session_state.get("receipt_prefill", {})

    uploaded = st.file_uploader(
        "Scan a receipt (optional)",
        type=["jpg", "jpeg", "png", "webp"],
        help="Fills in the form for you to review",
    )
    if uploaded and st.button("✨ Scan Receipt"):
        with st.spinner("Reading receipt..."):
            try:
                extraction = run_async(app.scan_receipt(
                    uploaded.getvalue(), uploaded.name, uploaded.type or "image/png",
                ))
            except ReceiptExtractionError as e:
                st.error(str(e))
            else:
                st.session_state.receipt_prefill = extraction.model_dump()
                st.rerun()

    categories = [c.value for c in ExpenseCategory]
    methods = list(PaymentMethod)

    with st.form("transaction_form", clear_on_submit=True):
        kind = st.radio(
            "Transaction Type",
            options=list(TransactionKind),
            format_func=lambda k: k.value.title(),
            horizontal=True,
        )
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount *", value=str(defaults.get("amount", "")))
            default_category = defaults.get("category")
            category = st.selectbox(
                "Category *",
                options=[""] + categories,
                index=categories.index(default_category) + 1 if default_category in categories else 0,
                format_func=lambda c: c or "Select a category",
            )
            description = st.text_input("Description *", value=defaults.get("description", ""))
        with col2:
            tx_date = st.date_input("Date", value=date.today())
            payment_method = st.selectbox(
                "Payment Method",
                options=methods,
                format_func=lambda m: m.label,
            )

        submitted = st.form_submit_button("Add Transaction", type="primary")
        cancelled = st.form_submit_button("Cancel")

    if cancelled:
        st.session_state.show_transaction_form = False
        st.session_state.pop("receipt_prefill", None)
        st.rerun()

    if submitted:
        try:
            app.store.add_transaction({
                "amount": amount,
                "category": category,
                "description": description,
                "date": tx_date,
                "kind": kind.value,
                "payment_method": payment_method.value,
                "receipt_image": defaults.get("receipt_image"),
            })
        except RecordValidationError as e:
            show_validation_error(e)
        else:
            st.session_state.show_transaction_form = False
            st.session_state.pop("receipt_prefill", None)
            st.rerun()


def render_dashboard(app: FinanceApp):
    """This month at a glance."""
    view = app.dashboard()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income (this month)", money(app, view.month_income))
    col2.metric("Expenses (this month)", money(app, view.month_expenses))
    col3.metric("Net (this month)", money(app, view.month_net))
    col4.metric(
        "Savings Goals",
        f"{view.summary.goals_progress_pct:.0f}%",
        help=f"{money(app, view.summary.goals_current_total)} of {money(app, view.summary.goals_target_total)}",
    )

    left, right = st.columns(2)
    with left:
        st.subheader("Recent Transactions")
        if not view.recent_transactions:
            st.info("No transactions yet. Add your first one with 'Add Transaction'.")
        for t in view.recent_transactions:
            sign = "+" if t.is_income else "-"
            st.markdown(
                f"**{t.description}** · {t.category} · {t.date.strftime('%b %d')} "
                f"— {sign}{money(app, t.amount)}"
            )
    with right:
        st.subheader("Top Spending Categories")
        if not view.top_categories:
            st.info("No expenses this month.")
        for cat in view.top_categories:
            st.markdown(f"{cat.category} — {money(app, cat.total)}")
            st.progress(min(cat.share_pct / 100, 1.0))

    col1, col2 = st.columns(2)
    col1.metric("Largest Expense", money(app, view.largest_month_expense))
    col2.metric("Transactions This Month", view.month_transaction_count)


def render_transactions(app: FinanceApp):
    """Filterable list with delete and export."""
    col1, col2, col3 = st.columns(3)
    with col1:
        search = st.text_input("Search", placeholder="Description or category")
    with col2:
        category = st.selectbox(
            "Category",
            options=["all"] + [c.value for c in ExpenseCategory],
            format_func=lambda c: "All Categories" if c == "all" else c,
        )
    with col3:
        kind = st.selectbox(
            "Type",
            options=[None] + list(TransactionKind),
            format_func=lambda k: "All Types" if k is None else k.value.title(),
        )

    filtered = filter_transactions(app.store.transactions, search, category, kind)
    st.caption(f"{len(filtered)} transactions found")

    # Exports are built on request so each one is audited once
    export_left, export_right = st.columns(2)
    with export_left:
        if st.button("📄 Export PDF", disabled=not filtered):
            st.session_state.export = ("pdf", app.export_pdf(filtered))
    with export_right:
        if st.button("📊 Export Excel", disabled=not filtered):
            st.session_state.export = ("xlsx", app.export_spreadsheet(filtered))

    export = st.session_state.get("export")
    if export:
        export_format, data = export
        st.download_button(
            f"⬇️ Download {export_format.upper()}",
            data=data,
            file_name=PDF_FILENAME if export_format == "pdf" else SPREADSHEET_FILENAME,
            mime=(
                "application/pdf" if export_format == "pdf"
                else "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
            ),
            on_click=lambda: st.session_state.pop("export", None),
        )

    if not filtered:
        st.info("No transactions match your filters.")
        return

    st.dataframe(
        pd.DataFrame(build_export_rows(filtered, app.settings.assistant.currency_symbol)),
        use_container_width=True,
        hide_index=True,
    )

    with st.expander("🗑️ Delete a transaction"):
        choice = st.selectbox(
            "Transaction",
            options=filtered,
            format_func=lambda t: f"{t.date.isoformat()} · {t.description} · {money(app, t.amount)}",
        )
        if st.button("Delete", type="secondary"):
            app.store.delete_transaction(choice.id)
            st.rerun()


def render_reports(app: FinanceApp):
    """Trends and breakdowns."""
    view = app.reports()
    summary = view.summary

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", money(app, summary.total_income), help="All time")
    col2.metric("Total Expenses", money(app, summary.total_expenses), help="All time")
    col3.metric("Net Savings", money(app, summary.net_savings), help="All time")

    trend = pd.DataFrame([p.model_dump() for p in view.monthly_trend])
    st.subheader(f"{len(view.monthly_trend)}-Month Financial Trend")
    fig = go.Figure()
    for column, color in (("income", "#10b981"), ("expenses", "#ef4444"), ("savings", "#3b82f6")):
        fig.add_trace(go.Scatter(
            x=trend["label"], y=trend[column], mode="lines+markers",
            name=column.title(), line=dict(color=color, width=2),
        ))
    st.plotly_chart(fig, use_container_width=True)

    left, right = st.columns(2)
    with left:
        st.subheader(f"Spending by Category ({view.reference_date.strftime('%B')})")
        if view.month_categories:
            categories = pd.DataFrame([c.model_dump() for c in view.month_categories])
            pie = px.pie(
                categories, names="category", values="total",
                color_discrete_sequence=CHART_COLORS,
            )
            st.plotly_chart(pie, use_container_width=True)
        else:
            st.info("No expense data for this month")
    with right:
        st.subheader(f"Last {len(view.daily_trend)} Days Spending")
        daily = pd.DataFrame([p.model_dump() for p in view.daily_trend])
        bar = px.bar(daily, x="label", y="amount", color_discrete_sequence=["#3b82f6"])
        st.plotly_chart(bar, use_container_width=True)
        st.markdown(f"**Weekly Average:** {money(app, view.daily_average)}/day")

    st.subheader("Monthly Income vs Expenses")
    comparison = go.Figure(data=[
        go.Bar(name="Income", x=trend["label"], y=trend["income"], marker_color="#10b981"),
        go.Bar(name="Expenses", x=trend["label"], y=trend["expenses"], marker_color="#ef4444"),
    ])
    comparison.update_layout(barmode="group")
    st.plotly_chart(comparison, use_container_width=True)


def render_goals(app: FinanceApp):
    """Savings goals with pacing and contributions."""
    view = app.goals_view()

    if view.show_savings_insight:
        st.info(
            f"💡 Based on your current savings rate of {money(app, view.monthly_savings)}/month, "
            "you could reach your goals faster by allocating funds strategically."
        )

    with st.expander("➕ New Goal"):
        with st.form("goal_form", clear_on_submit=True):
            name = st.text_input("Goal Name *")
            target = st.text_input("Target Amount *")
            deadline = st.date_input("Deadline *", value=date.today())
            category = st.selectbox(
                "Category *",
                options=[""] + [c.value for c in GoalCategory],
                format_func=lambda c: c or "Select category",
            )
            if st.form_submit_button("Create Goal", type="primary"):
                try:
                    app.store.add_goal({
                        "name": name,
                        "target_amount": target,
                        "deadline": deadline,
                        "category": category,
                    })
                except RecordValidationError as e:
                    show_validation_error(e)
                else:
                    st.rerun()

    if not view.goals:
        st.info("No savings goals yet. Create one to start tracking your progress.")
        return

    columns = st.columns(2)
    for index, goal in enumerate(view.goals):
        pacing = view.pacing[goal.id]
        with columns[index % 2]:
            st.subheader(goal.name)
            st.caption(goal.category)
            st.progress(min(pacing.progress_pct / 100, 1.0))
            st.markdown(
                f"{money(app, goal.current_amount)} of {money(app, goal.target_amount)} "
                f"({pacing.progress_pct:.1f}%)"
            )
            st.markdown(f"**Remaining:** {money(app, pacing.remaining)}")
            st.markdown(f"**Time left:** {pacing.display_days_remaining} days")
            if pacing.is_overdue:
                st.warning("Deadline passed before the goal was reached")
            if pacing.remaining > 0 and pacing.required_monthly_pace is not None:
                st.markdown(f"**Save per month:** {money(app, pacing.required_monthly_pace)}")

            contribution = st.text_input("Contribution", key=f"contribution_{goal.id}")
            add_col, delete_col = st.columns(2)
            if add_col.button("Add", key=f"add_{goal.id}"):
                try:
                    app.store.contribute(goal.id, contribution)
                except RecordValidationError as e:
                    show_validation_error(e)
                else:
                    st.rerun()
            if delete_col.button("Delete", key=f"delete_{goal.id}"):
                app.store.delete_goal(goal.id)
                st.rerun()


def render_assistant(app: FinanceApp):
    """Chat with the rule-based assistant."""
    session = app.assistant

    for message in session.messages:
        with st.chat_message(message.role):
            st.markdown(message.content.replace("\n", "  \n"))

    question = None
    if session.show_quick_actions:
        st.caption("Quick actions:")
        columns = st.columns(2)
        for index, action in enumerate(QUICK_ACTIONS):
            if columns[index % 2].button(action, key=f"quick_{index}"):
                question = action

    typed = st.chat_input("Ask me anything about your finances...")
    question = question or typed

    if question:
        with st.spinner("Thinking..."):
            run_async(session.ask(question))
        st.rerun()

    if len(session.messages) > 1 and st.button("🔄 New conversation"):
        session.reset()
        st.rerun()


def render_settings(app: FinanceApp):
    """Configuration status and recent activity."""
    st.markdown("### Configuration Status")

    status = validate_all_settings()
    sections = [
        ("Storage", "storage"),
        ("Assistant", "assistant"),
        ("Application", "app"),
    ]
    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Invalid configuration")
            st.error(f"❌ {name} - {error}")

    storage = app.settings.storage
    st.markdown(f"**Backend:** `{storage.backend}`")
    if storage.backend == "json":
        st.markdown(f"**Data directory:** `{storage.data_dir}`")

    if app.settings.app.debug_mode:
        with st.expander("Effective configuration"):
            st.json({
                "storage": storage.model_dump(mode="json"),
                "assistant": app.settings.assistant.model_dump(mode="json"),
                "app": app.settings.app.model_dump(mode="json"),
            })

    st.markdown("---")
    st.markdown("### Recent Activity")
    events = app.audit_logger.recent_events(limit=20)
    if events:
        st.dataframe(
            pd.DataFrame(events)[["timestamp", "event_type", "severity", "description"]],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No activity recorded yet.")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
