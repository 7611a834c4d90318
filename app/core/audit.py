"""
Audit logging for feature catalog changes
"""
from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog, AuditAction
from typing import Optional
import json
import logging
import uuid

logger = logging.getLogger(__name__)


def log_feature_event(
    db: Session,
    action: AuditAction,
    feature_name: str,
    user_id: Optional[uuid.UUID] = None,
    details: Optional[dict] = None
) -> AuditLog:
    """
    Stage an audit row for a feature change.

    The row is added to the caller's session and committed together with the
    change it describes, so a rolled back mutation leaves no audit trail.

    Args:
        db: Database session
        action: What happened to the feature
        feature_name: Name of the feature (the registry's lookup key)
        user_id: Acting user, if known
        details: Additional details as a dictionary (will be JSON-encoded)
    """
    audit_log = AuditLog(
        user_id=user_id,
        action=action,
        resource="feature",
        resource_id=feature_name,
        details=json.dumps(details, default=str) if details else None
    )
    db.add(audit_log)
    logger.debug("[AUDIT] %s %s by %s", action.value, feature_name, user_id)
    return audit_log
