"""
Streamlit Frontend for Budget Tracker

The single page users interact with daily:
1. Summary cards (income, expenses, balance, count)
2. Spending-by-category chart and the AI insights panel
3. Filters and the transaction list with edit/delete
4. The add/edit transaction form

The page never touches storage or the inference service directly.
Every action goes through the BudgetController.
"""

import asyncio
from datetime import date

import streamlit as st

from budget_tracker.config import validate_all_settings
from budget_tracker.controller import BudgetController, create_app_components
from budget_tracker.formatting import category_options, format_money, insight_html
from budget_tracker.models.transaction import (
    KNOWN_CATEGORIES,
    TYPE_FILTER_ALL,
    ReportingWindow,
    TransactionDraft,
    TransactionType,
    known_category_names,
)
from budget_tracker.services.storage import StorageError
from budget_tracker.validation import DraftValidator


# Page configuration
st.set_page_config(
    page_title="Budget Tracker",
    page_icon="💰",
    layout="wide",
)

ICONS = {category.name: category.icon for category in KNOWN_CATEGORIES}

FORM_DEFAULTS = {
    "form_type": TransactionType.EXPENSE,
    "form_amount": "",
    "form_description": "",
    "form_category": "",
    "form_date": None,
    "form_notes": "",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_controller() -> BudgetController:
    """Get or create the application controller (cached)."""
    return create_app_components()


def inject_theme(dark_mode: bool):
    background, surface, text = (
        ("#111827", "#1F2937", "#F9FAFB") if dark_mode
        else ("#F7FAFC", "#FFFFFF", "#23272F")
    )
    st.markdown(f"""
    <style>
        .stApp {{ background-color: {background}; color: {text}; }}
        .card {{
            padding: 20px;
            background-color: {surface};
            border-radius: 12px;
            margin: 5px 0;
        }}
        .card .label {{ font-size: 0.9em; color: #6B7280; }}
        .card .value {{ font-size: 2em; font-weight: bold; }}
        .error-box {{
            padding: 12px; border-radius: 8px; margin: 6px 0;
            background-color: #f8d7da; border-left: 5px solid #dc3545; color: #23272F;
        }}
        .warning-box {{
            padding: 12px; border-radius: 8px; margin: 6px 0;
            background-color: #fff3cd; border-left: 5px solid #ffc107; color: #23272F;
        }}
        .info-box {{
            padding: 12px; border-radius: 8px; margin: 6px 0;
            background-color: #cce5ff; border-left: 5px solid #004085; color: #23272F;
        }}
    </style>
    """, unsafe_allow_html=True)


def init_session_state():
    for key, value in FORM_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value if key != "form_date" else date.today()
    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None
    if "form_errors" not in st.session_state:
        st.session_state.form_errors = []


def reset_form():
    for key, value in FORM_DEFAULTS.items():
        st.session_state[key] = value if key != "form_date" else date.today()
    st.session_state.editing_id = None
    st.session_state.form_errors = []


def start_editing(controller: BudgetController, transaction_id: str):
    transaction = controller.get_transaction(transaction_id)
    if transaction is None:
        return
    draft = TransactionDraft.from_transaction(transaction)
    st.session_state.form_type = draft.type
    st.session_state.form_amount = str(draft.amount)
    st.session_state.form_description = draft.description
    st.session_state.form_category = draft.category
    st.session_state.form_date = draft.date
    st.session_state.form_notes = draft.notes
    st.session_state.editing_id = transaction_id
    st.session_state.form_errors = []


def on_description_change(controller: BudgetController):
    """Pre-fill the category from the description when none is chosen yet."""
    suggestion = run_async(controller.suggest_category(
        st.session_state.form_description,
        st.session_state.form_category,
    ))
    if suggestion:
        st.session_state.form_category = suggestion


def submit_form(controller: BudgetController):
    draft = TransactionDraft(
        amount=st.session_state.form_amount,
        category=st.session_state.form_category,
        date=st.session_state.form_date,
        type=st.session_state.form_type,
        description=st.session_state.form_description,
        notes=st.session_state.form_notes,
    )
    result = DraftValidator().validate(draft)
    if not result.is_valid:
        st.session_state.form_errors = result.messages()
        return

    try:
        if st.session_state.editing_id is not None:
            controller.update_transaction(st.session_state.editing_id, draft)
        else:
            controller.create_transaction(draft)
    except StorageError as e:
        st.session_state.form_errors = [f"Could not save the transaction: {e}"]
        return
    reset_form()


def delete_transaction(controller: BudgetController, transaction_id: str):
    try:
        controller.delete_transaction(transaction_id)
    except StorageError as e:
        st.session_state.form_errors = [f"Could not delete the transaction: {e}"]
        return
    if st.session_state.editing_id == transaction_id:
        reset_form()


def render_header(controller: BudgetController):
    col1, col2, col3 = st.columns([6, 1, 1])
    with col1:
        st.title("💰 Budget Tracker")
    with col2:
        label = "📅 Weekly" if controller.state.window == ReportingWindow.WEEKLY else "📊 Monthly"
        if st.button(label, help="Switch the insights reporting window"):
            controller.toggle_window()
            st.rerun()
    with col3:
        if st.button("☀️" if controller.state.dark_mode else "🌙", help="Toggle dark mode"):
            controller.toggle_dark_mode()
            st.rerun()


def render_summary(controller: BudgetController):
    summary = controller.summary()
    cards = [
        ("Total Income", format_money(summary.total_income), "#43A047"),
        ("Total Expenses", format_money(summary.total_expenses), "#E53935"),
        ("Balance", format_money(summary.balance), "#43A047" if summary.balance >= 0 else "#E53935"),
        ("Transactions", str(summary.transaction_count), "#2979FF"),
    ]
    for column, (label, value, color) in zip(st.columns(4), cards):
        with column:
            st.markdown(f"""
            <div class="card">
                <div class="label">{label}</div>
                <div class="value" style="color: {color};">{value}</div>
            </div>
            """, unsafe_allow_html=True)


def render_chart_and_insights(controller: BudgetController):
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Spending by Category")
        totals = controller.expense_category_totals()
        if totals:
            st.bar_chart(
                {
                    "category": [entry.category for entry in totals],
                    "total": [float(entry.total) for entry in totals],
                },
                x="category",
                y="total",
            )
        else:
            st.info("No expenses recorded yet.")

    with col2:
        st.subheader("🤖 AI Insights")
        if controller.insights_due:
            with st.spinner("Analyzing your transactions..."):
                run_async(controller.refresh_insights())

        insights = controller.state.insights
        if not insights:
            st.info("No insights available yet. Add some transactions to get started!")
        for insight in insights:
            st.markdown(insight_html(insight), unsafe_allow_html=True)


def render_filters(controller: BudgetController):
    col1, col2 = st.columns(2)
    with col1:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[""] + known_category_names(),
            format_func=lambda x: "All Categories" if not x else f"{ICONS.get(x, '')} {x}",
        )
    with col2:
        type_filter = st.selectbox(
            "Filter by Type",
            options=[TYPE_FILTER_ALL] + [t.value for t in TransactionType],
            format_func=lambda x: "All Types" if x == TYPE_FILTER_ALL else x.title(),
        )
    controller.set_filters(category_filter=category_filter, type_filter=type_filter)


def render_transactions(controller: BudgetController):
    st.subheader("Transactions")
    visible = controller.visible_transactions()
    if not visible:
        st.info("No transactions match the current filters.")
        return

    for transaction in visible:
        col1, col2, col3, col4 = st.columns([6, 2, 1, 1])
        sign = "+" if transaction.is_income else "-"
        color = "#43A047" if transaction.is_income else "#E53935"
        with col1:
            st.markdown(
                f"**{transaction.description}**  \n"
                f"{ICONS.get(transaction.category, '🏷️')} {transaction.category} · "
                f"{transaction.date.isoformat()}"
            )
            if transaction.notes:
                st.caption(transaction.notes)
        with col2:
            st.markdown(
                f"<span style='color: {color}; font-weight: bold;'>"
                f"{sign}{format_money(transaction.amount)}</span>",
                unsafe_allow_html=True,
            )
        with col3:
            st.button(
                "✏️",
                key=f"edit-{transaction.id}",
                on_click=start_editing,
                args=(controller, transaction.id),
            )
        with col4:
            st.button(
                "🗑️",
                key=f"delete-{transaction.id}",
                on_click=delete_transaction,
                args=(controller, transaction.id),
            )


def render_form(controller: BudgetController):
    editing = st.session_state.editing_id is not None
    st.subheader("Edit Transaction" if editing else "Add Transaction")

    col1, col2 = st.columns(2)
    with col1:
        st.selectbox(
            "Type",
            options=list(TransactionType),
            format_func=lambda x: x.value.title(),
            key="form_type",
        )
        st.text_input("Amount", placeholder="0.00", key="form_amount")
        st.text_input(
            "Description",
            placeholder="eg. Grocery shopping",
            key="form_description",
            on_change=on_description_change,
            args=(controller,),
        )
    with col2:
        st.selectbox(
            "Category",
            options=category_options(st.session_state.form_category),
            format_func=lambda x: "Select Category" if not x else f"{ICONS.get(x, '🏷️')} {x}",
            key="form_category",
        )
        st.date_input("Date", key="form_date")

    st.text_area("Notes (optional)", placeholder="Additional notes...", key="form_notes")

    for message in st.session_state.form_errors:
        st.error(message)

    col1, col2 = st.columns(2)
    with col1:
        st.button(
            "Update Transaction" if editing else "Add Transaction",
            type="primary",
            on_click=submit_form,
            args=(controller,),
        )
    with col2:
        st.button("Cancel", on_click=reset_form)


def render_settings_sidebar():
    st.sidebar.title("⚙️ Settings")
    status = validate_all_settings()
    services = [
        ("AI Insights", "inference"),
        ("Local Storage", "storage"),
    ]
    for name, key in services:
        if status.get(key, False):
            st.sidebar.success(f"✅ {name} - Configured")
        else:
            st.sidebar.warning(f"⚠️ {name} - {status.get(f'{key}_error', 'Not configured')}")
    st.sidebar.markdown(
        "To enable AI insights, set `INFERENCE_API_KEY` in a `.env` file."
    )


def main():
    """Main application entry point."""
    controller = get_controller()
    init_session_state()
    inject_theme(controller.state.dark_mode)
    render_settings_sidebar()

    render_header(controller)
    render_summary(controller)
    st.markdown("---")
    render_chart_and_insights(controller)
    st.markdown("---")
    render_filters(controller)
    render_transactions(controller)
    st.markdown("---")
    render_form(controller)


if __name__ == "__main__":
    main()
