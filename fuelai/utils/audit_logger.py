"""
Audit logging for FuelAI.
Structured JSON events for ownership failures and meal plan mutations.
"""

import logging
import json
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from pathlib import Path
from fuelai.core.config import settings

class AuditLogger:
    """Structured audit events written to a dedicated log file"""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir or settings.AUDIT_LOG_DIR)
        self.audit_logger = logging.getLogger('audit')
        self.audit_logger.setLevel(getattr(logging, settings.AUDIT_LOG_LEVEL.upper(), logging.INFO))

    def _ensure_handler(self):
        """Attach the file handler on first use so importing never touches the filesystem"""
        if self.audit_logger.handlers:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(self.log_dir / "audit_events.log")

        # JSON formatter for structured logs
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "message": %(message)s}',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        self.audit_logger.addHandler(handler)

    def log_event(self, event_type: str, user_id: Optional[str], details: Dict[str, Any], severity: str = "INFO"):
        """
        Log an audit event with structured data

        Args:
            event_type: Type of event (e.g., 'slot_upserted', 'ownership_denied')
            user_id: ID of user involved in event
            details: Additional event details
            severity: Log severity level
        """
        if not settings.LOG_AUDIT_EVENTS:
            return

        self._ensure_handler()

        event_data = {
            "event_type": event_type,
            "user_id": user_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "severity": severity,
            "details": details,
            "source": "fuelai"
        }

        log_message = json.dumps(event_data, default=str)

        if severity == "ERROR":
            self.audit_logger.error(log_message)
        elif severity == "WARNING":
            self.audit_logger.warning(log_message)
        else:
            self.audit_logger.info(log_message)

    def log_ownership_denied(self, user_id: str, resource: str, resource_id: str):
        """Log access to a record owned by another user"""
        self.log_event(
            event_type="ownership_denied",
            user_id=user_id,
            details={
                "resource": resource,
                "resource_id": resource_id,
                "action": "request_rejected"
            },
            severity="WARNING"
        )

    def log_slot_upserted(self, user_id: str, meal_plan_id: str, day_of_week: str,
                          meal_time: str, meal_id: str, created: bool):
        self.log_event(
            event_type="slot_upserted",
            user_id=user_id,
            details={
                "meal_plan_id": meal_plan_id,
                "day_of_week": day_of_week,
                "meal_time": meal_time,
                "meal_id": meal_id,
                "action": "created" if created else "updated"
            }
        )

    def log_plan_activated(self, user_id: str, meal_plan_id: str):
        self.log_event(
            event_type="plan_activated",
            user_id=user_id,
            details={"meal_plan_id": meal_plan_id}
        )

    def log_partial_assignment(self, user_id: str, meal_plan_id: str, succeeded: int, failed: int, errors: list):
        """Log a repeat assignment that did not complete for every day"""
        self.log_event(
            event_type="partial_assignment",
            user_id=user_id,
            details={
                "meal_plan_id": meal_plan_id,
                "succeeded": succeeded,
                "failed": failed,
                "errors": errors
            },
            severity="WARNING"
        )

# Global audit logger instance
audit_logger = AuditLogger()
