from app.models.user import User, UserRole
from app.models.organization import Organization
from app.models.system_feature import SystemFeature, FeatureCategory
from app.models.audit_log import AuditLog, AuditAction

__all__ = [
    "User", "UserRole", "Organization",
    "SystemFeature", "FeatureCategory",
    "AuditLog", "AuditAction",
]
