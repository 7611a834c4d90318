from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey, Uuid
import uuid
from datetime import datetime
import enum
from app.db.session import Base


class AuditAction(str, enum.Enum):
    """Feature catalog changes recorded in the audit log"""
    CREATE_FEATURE = "create_feature"
    UPDATE_FEATURE = "update_feature"
    ENABLE_FEATURE = "enable_feature"
    DISABLE_FEATURE = "disable_feature"
    DELETE_FEATURE = "delete_feature"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(
        SQLEnum(AuditAction, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    resource = Column(String, nullable=False, default="feature")
    resource_id = Column(String, nullable=True)  # feature name
    details = Column(Text, nullable=True)  # JSON string with additional details
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
