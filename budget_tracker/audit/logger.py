"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every change to the transaction list
2. Visibility into AI calls that silently fell back
3. Debugging capability without a debugger attached

The audit logger:
- Only writes to the structured log (nothing is persisted)
- Never raises: a logging failure must not break a user action
"""

import logging
import sys
from typing import Optional

import structlog

from budget_tracker.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Call once at application startup. Safe to call again (e.g. on a
    Streamlit rerun); the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central activity logging service.

    Keeps the last events in memory as well, so the UI and tests can
    inspect what happened without parsing log output.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("budget_tracker.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> list[AuditEvent]:
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()
        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            print(f"audit logging failed: {e}", file=sys.stderr)

    def log_transaction_created(self, transaction_id: str, transaction_type: str, amount: str) -> None:
        self.log(AuditEventBuilder.transaction_created(transaction_id, transaction_type, amount))

    def log_transaction_updated(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_updated(transaction_id))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_transaction_rejected(
        self,
        operation: str,
        issues: list[str],
        transaction_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_rejected(operation, issues, transaction_id))

    def log_reporting_window_changed(self, window: str) -> None:
        self.log(AuditEventBuilder.reporting_window_changed(window))

    def log_dark_mode_changed(self, enabled: bool) -> None:
        self.log(AuditEventBuilder.dark_mode_changed(enabled))

    def log_insights_requested(self, sequence: int, window: str, transaction_count: int) -> None:
        self.log(AuditEventBuilder.insights_requested(sequence, window, transaction_count))

    def log_insights_generated(self, sequence: int, insight_count: int) -> None:
        self.log(AuditEventBuilder.insights_generated(sequence, insight_count))

    def log_insights_fallback(self, window: str, reason: str) -> None:
        self.log(AuditEventBuilder.insights_fallback_used(window, reason))

    def log_insights_discarded(self, sequence: int, latest: int) -> None:
        self.log(AuditEventBuilder.insights_discarded_stale(sequence, latest))

    def log_category_suggested(self, suggestion: Optional[str]) -> None:
        self.log(AuditEventBuilder.category_suggested(suggestion))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_storage_write_failed(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_write_failed(operation, error_message))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        self.log(AuditEventBuilder.external_service_error(service, error_message))
