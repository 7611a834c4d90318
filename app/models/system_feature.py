from sqlalchemy import Column, String, Text, Boolean, DateTime, Float, ForeignKey, JSON, Uuid, Enum as SQLEnum
import uuid
from datetime import datetime
import enum
from app.db.session import Base


class FeatureCategory(str, enum.Enum):
    CORE = "core"
    COLLABORATION = "collaboration"
    ANALYTICS = "analytics"
    INTEGRATION = "integration"
    AI = "ai"
    SECURITY = "security"


class SystemFeature(Base):
    """Toggleable product feature with pricing, permission scoping and dependencies"""
    __tablename__ = "system_features"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True, index=True)  # e.g. "video_call", "ai_assistant"
    display_name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(
        SQLEnum(FeatureCategory, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=FeatureCategory.CORE,
        nullable=False,
        index=True,
    )
    is_enabled = Column(Boolean, default=True, nullable=False, index=True)
    is_premium = Column(Boolean, default=False, nullable=False)

    pricing_monthly = Column(Float, default=0, nullable=False)
    pricing_yearly = Column(Float, default=0, nullable=False)

    # Role values and organization ids (as strings); empty means unrestricted
    permission_roles = Column(JSON, default=list, nullable=False)
    permission_organizations = Column(JSON, default=list, nullable=False)

    configuration = Column(JSON, default=dict, nullable=False)
    dependencies = Column(JSON, default=list, nullable=False)  # feature names, in declared order

    version = Column(String, default="1.0.0", nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def pricing(self) -> dict:
        return {"monthly": self.pricing_monthly, "yearly": self.pricing_yearly}

    @property
    def permissions(self) -> dict:
        return {
            "roles": list(self.permission_roles or []),
            "organizations": list(self.permission_organizations or []),
        }
