"""
Audit Logger

DESIGN DECISION: Every change to the expense list and every save/load is
logged. Write failures are never shown to the user, so the log is the only
place they surface.

The audit logger:
- Writes structured (JSON by default) log lines through structlog
- Never raises - a logging problem must not break an add or a delete
"""

import logging
from typing import Optional
from uuid import UUID

import structlog

from expense_tracker.config import LoggingSettings
from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Safe to call more than once; the last call wins.
    """
    settings = settings or LoggingSettings()

    logging.basicConfig(format="%(message)s")
    logging.getLogger().setLevel(settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
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
        cache_logger_on_first_use=False,
    )


class AuditLogger:
    """Central audit logging service."""

    def __init__(self):
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
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
            logging.getLogger(__name__).error(
                "audit logging failed for %s: %s", event.event_id, e
            )

    def log_expense_added(
        self,
        expense_id: UUID,
        amount: str,
        tags: list[str],
    ) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            amount=amount,
            tags=tags,
        ))

    def log_expense_deleted(
        self,
        expense_id: UUID,
        amount: str,
    ) -> None:
        """Log a deleted expense."""
        self.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            amount=amount,
        ))

    def log_input_rejected(
        self,
        field: str,
        message: str,
    ) -> None:
        """Log a validation failure shown to the user."""
        self.log(AuditEventBuilder.input_rejected(field=field, message=message))

    def log_save_result(
        self,
        saved: bool,
        count: int,
        location: str,
    ) -> None:
        """Log the outcome of writing the list."""
        if saved:
            event = AuditEventBuilder.expenses_saved(count=count, location=location)
        else:
            event = AuditEventBuilder.save_failed(count=count, location=location)
        self.log(event)

    def log_expenses_loaded(
        self,
        count: int,
        location: str,
    ) -> None:
        """Log a (re)load of the list."""
        self.log(AuditEventBuilder.expenses_loaded(count=count, location=location))
