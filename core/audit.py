"""
Audit trail for service order mutations.

Every successful mutation is recorded as one JSON line on the "audit"
logger, so deployments can route it to a file or collector with ordinary
logging configuration. Entries are written only after the persistence API
accepted the change.

Entry format:
    {"entity_type": "service_order", "entity_id": "...", "action": "update",
     "changes": {...}, "recorded_at": "..."}
"""

import json
import logging
from enum import Enum
from typing import Any

from utils.timezone import now_utc

audit_log = logging.getLogger("audit")


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Args:
        old: Previous state of entity
        new: New state of entity
        exclude_fields: Fields to ignore (defaults to {"updatedAt", "__v"})

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or {"updatedAt", "__v"}
    changes = {}

    for key in sorted(set(old) | set(new)):
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)

        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Writes audit entries for entity changes.

    Pass JSON-compatible data: dump models with model_dump(mode="json").

    Usage:
        audit = AuditLogger()
        audit.log_change(
            entity_type="service_order",
            entity_id=order.id,
            action=AuditAction.UPDATE,
            changes=compute_changes(old_dump, new_dump),
        )
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or audit_log

    def log_change(
        self,
        entity_type: str,
        entity_id: str | None,
        action: AuditAction,
        changes: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Record an entity change.

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}

        Returns:
            The entry as written
        """
        entry = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "action": action.value,
            "changes": changes,
            "recorded_at": now_utc().isoformat(),
        }
        self.logger.info(json.dumps(entry, ensure_ascii=False, default=str))
        return entry
