"""Structured logging configuration for the application."""

from datetime import UTC, datetime
import json
import logging
import sys

from campusvote.core.config import settings


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging() -> None:
    """Configure application logging based on environment."""
    # Determine log level
    log_level = logging.INFO
    if settings.ENVIRONMENT == "development":
        log_level = logging.DEBUG
    elif settings.ENVIRONMENT == "production":
        log_level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    # Use JSON formatter in production, standard elsewhere
    if settings.ENVIRONMENT == "production":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = StandardFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class ElectionAuditLogger:
    """Specialized logger for account and election events."""

    def __init__(self) -> None:
        self.logger = get_logger("audit")

    def log_login_attempt(
        self,
        student_id: str,
        success: bool,
        reason: str | None = None,
    ) -> None:
        """Log a login attempt."""
        extra_fields = {
            "event_type": "login_attempt",
            "student_id": student_id,
            "success": success,
        }

        if not success and reason:
            extra_fields["failure_reason"] = reason

        message = f"Login {'succeeded' if success else 'failed'} for student: {student_id}"

        if success:
            self.logger.info(message, extra={"extra_fields": extra_fields})
        else:
            self.logger.warning(message, extra={"extra_fields": extra_fields})

    def log_user_registration(self, student_id: str, department: str) -> None:
        """Log new student registration."""
        self.logger.info(
            f"New student registered: {student_id}",
            extra={
                "extra_fields": {
                    "event_type": "user_registration",
                    "student_id": student_id,
                    "department": department,
                }
            },
        )

    def log_ballot_accepted(
        self, student_id: str, department: str, candidate_ids: list[int]
    ) -> None:
        """Log a recorded ballot."""
        self.logger.info(
            f"Ballot recorded for student: {student_id}",
            extra={
                "extra_fields": {
                    "event_type": "ballot_accepted",
                    "student_id": student_id,
                    "department": department,
                    "candidate_ids": candidate_ids,
                }
            },
        )

    def log_ballot_rejected(self, student_id: str, reason: str) -> None:
        """Log a rejected ballot submission."""
        self.logger.warning(
            f"Ballot rejected for student: {student_id} ({reason})",
            extra={
                "extra_fields": {
                    "event_type": "ballot_rejected",
                    "student_id": student_id,
                    "reason": reason,
                }
            },
        )

    def log_window_change(
        self, admin_id: str, action: str, end_timestamp: int
    ) -> None:
        """Log an administrator changing the voting window."""
        self.logger.info(
            f"Voting window {action} by: {admin_id}",
            extra={
                "extra_fields": {
                    "event_type": "window_change",
                    "admin_id": admin_id,
                    "action": action,
                    "end_timestamp": end_timestamp,
                }
            },
        )

    def log_unauthorized_access(
        self,
        resource: str,
        student_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Log unauthorized access attempt."""
        self.logger.warning(
            f"Unauthorized access attempt to: {resource}",
            extra={
                "extra_fields": {
                    "event_type": "unauthorized_access",
                    "resource": resource,
                    "student_id": student_id,
                    "reason": reason,
                }
            },
        )


# Global audit logger instance
audit_logger = ElectionAuditLogger()
