"""
Application Controller for Budget Tracker

This module ties together all the components and owns the application
state. The UI never touches the store, the persistence adapter or the
agents directly; it issues commands here:

    create / update / delete transaction
    set filters, set or toggle the reporting window, toggle dark mode
    refresh insights, suggest a category

DESIGN DECISION: Insight requests are tagged with a monotonically
increasing sequence number. A reply is applied only if no newer
request was dispatched in the meantime, so a slow stale reply can
never overwrite insights computed for a newer transaction list.
"""

from typing import Optional

import httpx
import structlog
from pydantic import BaseModel, Field

from budget_tracker.agents import CategoryAgent, InsightAgent
from budget_tracker.audit import AuditLogger, configure_logging
from budget_tracker.config import InferenceSettings, Settings, get_settings
from budget_tracker.models.transaction import (
    TYPE_FILTER_ALL,
    BudgetSummary,
    CategoryTotal,
    Insight,
    ReportingWindow,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from budget_tracker.queries import (
    category_totals,
    expense_category_totals,
    filtered_transactions,
    summarize,
)
from budget_tracker.services.inference import InferenceClient
from budget_tracker.services.storage import (
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceAdapter,
)
from budget_tracker.store import TransactionStore


logger = structlog.get_logger(__name__)

VALID_TYPE_FILTERS = {TYPE_FILTER_ALL, *(t.value for t in TransactionType)}


class AppState(BaseModel):
    """Everything the UI renders besides the transactions themselves."""

    category_filter: str = ""
    type_filter: str = TYPE_FILTER_ALL
    window: ReportingWindow = ReportingWindow.WEEKLY
    dark_mode: bool = False

    insights: list[Insight] = Field(default_factory=list)
    is_loading: bool = False
    insights_stale: bool = Field(
        default=True,
        description="Transactions or window changed since the last refresh"
    )
    latest_insight_sequence: int = 0


class BudgetController:
    """
    Single owner of the application state.

    Store mutations are synchronous and complete before the next command
    runs. Only the two AI calls are coroutines.
    """

    def __init__(
        self,
        store: TransactionStore,
        persistence: PersistenceAdapter,
        insight_agent: InsightAgent,
        category_agent: CategoryAgent,
        audit_logger: Optional[AuditLogger] = None,
        default_window: ReportingWindow = ReportingWindow.WEEKLY,
    ):
        self._store = store
        self._persistence = persistence
        self._insight_agent = insight_agent
        self._category_agent = category_agent
        self._audit_logger = audit_logger or AuditLogger()

        self.state = AppState(
            window=default_window,
            dark_mode=persistence.load_dark_mode(),
        )

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> list[Transaction]:
        return self._store.list()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._store.get(transaction_id)

    def visible_transactions(self) -> list[Transaction]:
        """The list view: current filters applied, newest first."""
        return filtered_transactions(
            self._store.list(),
            self.state.category_filter,
            self.state.type_filter,
        )

    def summary(self) -> BudgetSummary:
        return summarize(self._store.list())

    def category_totals(self) -> list[CategoryTotal]:
        return category_totals(self._store.list())

    def expense_category_totals(self) -> list[CategoryTotal]:
        return expense_category_totals(self._store.list())

    # ------------------------------------------------------------------
    # Transaction commands
    # ------------------------------------------------------------------

    def create_transaction(self, draft: TransactionDraft) -> Optional[Transaction]:
        transaction = self._store.create(draft)
        if transaction is not None:
            self.state.insights_stale = True
        return transaction

    def update_transaction(self, transaction_id: str, draft: TransactionDraft) -> Optional[Transaction]:
        transaction = self._store.update(transaction_id, draft)
        if transaction is not None:
            self.state.insights_stale = True
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        deleted = self._store.delete(transaction_id)
        if deleted:
            self.state.insights_stale = True
        return deleted

    # ------------------------------------------------------------------
    # View commands
    # ------------------------------------------------------------------

    def set_filters(
        self,
        category_filter: Optional[str] = None,
        type_filter: Optional[str] = None,
    ) -> None:
        """Change the list filters. Filters never trigger insights."""
        if type_filter is not None:
            type_filter = getattr(type_filter, "value", type_filter)
            if type_filter not in VALID_TYPE_FILTERS:
                raise ValueError(
                    f"Unknown type filter: {type_filter}. Allowed: {sorted(VALID_TYPE_FILTERS)}"
                )
            self.state.type_filter = type_filter
        if category_filter is not None:
            self.state.category_filter = category_filter.strip()

    def set_window(self, window: ReportingWindow) -> None:
        window = ReportingWindow(window)
        if window == self.state.window:
            return
        self.state.window = window
        self.state.insights_stale = True
        self._audit_logger.log_reporting_window_changed(window.value)

    def toggle_window(self) -> ReportingWindow:
        self.set_window(self.state.window.toggled())
        return self.state.window

    def set_dark_mode(self, enabled: bool) -> None:
        enabled = bool(enabled)
        self.state.dark_mode = enabled
        self._persistence.save_dark_mode(enabled)
        self._audit_logger.log_dark_mode_changed(enabled)

    def toggle_dark_mode(self) -> bool:
        self.set_dark_mode(not self.state.dark_mode)
        return self.state.dark_mode

    # ------------------------------------------------------------------
    # AI commands
    # ------------------------------------------------------------------

    @property
    def insights_due(self) -> bool:
        """True when a refresh would produce new insights."""
        return self.state.insights_stale and len(self._store) > 0

    async def refresh_insights(self) -> list[Insight]:
        """
        Regenerate insights for the current transactions and window.

        With no transactions nothing is requested and the current
        insights are kept. A reply that arrives after a newer request
        was dispatched is discarded.
        """
        transactions = self._store.list()
        if not transactions:
            self.state.insights_stale = False
            return self.state.insights

        self.state.latest_insight_sequence += 1
        sequence = self.state.latest_insight_sequence
        window = self.state.window

        self.state.is_loading = True
        self.state.insights_stale = False
        self._audit_logger.log_insights_requested(sequence, window.value, len(transactions))

        insights = await self._insight_agent.generate_insights(transactions, window)

        if sequence != self.state.latest_insight_sequence:
            self._audit_logger.log_insights_discarded(
                sequence, self.state.latest_insight_sequence
            )
            return self.state.insights

        self.state.insights = insights
        self.state.is_loading = False
        self._audit_logger.log_insights_generated(sequence, len(insights))
        return insights

    async def refresh_insights_if_due(self) -> list[Insight]:
        if self.insights_due:
            return await self.refresh_insights()
        return self.state.insights

    async def suggest_category(self, description: str, current_category: str = "") -> Optional[str]:
        """
        Suggest a category for a description, only while the form has
        no category yet. Returns None when nothing should be pre-filled.
        """
        if current_category and current_category.strip():
            return None
        return await self._category_agent.suggest_category(description)


def _inference_settings(settings: Settings) -> Optional[InferenceSettings]:
    try:
        return settings.inference
    except ValueError as e:
        logger.warning("inference_not_configured", error=str(e))
        return None


def create_app_components(
    settings: Optional[Settings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    inference_settings: Optional[InferenceSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BudgetController:
    """
    Wire up the application.

    Without inference configuration the app still works: both agents
    run in offline mode (local fallback insight, no suggestions).
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level, app_settings.json_logs)
    audit_logger = AuditLogger()

    kv_store = kv_store or JsonFileKeyValueStore(storage_settings.path)
    persistence = PersistenceAdapter(
        kv_store,
        transactions_key=storage_settings.transactions_key,
        dark_mode_key=storage_settings.dark_mode_key,
        audit_logger=audit_logger,
    )
    store = TransactionStore(persistence, audit_logger=audit_logger)

    inference_settings = inference_settings or _inference_settings(settings)
    client = (
        InferenceClient(inference_settings, transport=transport)
        if inference_settings is not None
        else None
    )

    return BudgetController(
        store=store,
        persistence=persistence,
        insight_agent=InsightAgent(
            client, audit_logger=audit_logger, currency_symbol=app_settings.currency_symbol
        ),
        category_agent=CategoryAgent(client, audit_logger=audit_logger),
        audit_logger=audit_logger,
        default_window=ReportingWindow(app_settings.default_reporting_window),
    )
