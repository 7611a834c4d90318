from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from uuid import UUID

from app.core.config import settings
from app.models.system_feature import FeatureCategory
from app.models.user import UserRole


def _dedupe(values: List[Any]) -> List[Any]:
    """Collapse duplicates, keeping first-seen order"""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _required_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _feature_name(value: str) -> str:
    """Names are lookup keys, so they are stored exactly as given and may not be padded"""
    _required_text(value)
    if value != value.strip():
        raise ValueError("must not have leading or trailing whitespace")
    return value


class FeaturePricing(BaseModel):
    monthly: float = Field(0, ge=0)
    yearly: float = Field(0, ge=0)


class FeaturePricingUpdate(BaseModel):
    monthly: Optional[float] = Field(None, ge=0)
    yearly: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("monthly", "yearly", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class FeaturePermissions(BaseModel):
    roles: List[UserRole] = []
    organizations: List[UUID] = []

    @field_validator("roles", "organizations")
    @classmethod
    def unique_entries(cls, v):
        return _dedupe(v)


class FeaturePermissionsUpdate(BaseModel):
    roles: Optional[List[UserRole]] = None
    organizations: Optional[List[UUID]] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("roles", "organizations")
    @classmethod
    def unique_entries(cls, v):
        return _dedupe(v)

    @field_validator("roles", "organizations", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class SystemFeatureCreate(BaseModel):
    """Body for creating a feature; created_by is taken from the acting user"""
    name: str
    display_name: str
    description: str
    category: FeatureCategory = FeatureCategory.CORE
    is_enabled: bool = True
    is_premium: bool = False
    pricing: FeaturePricing = Field(default_factory=FeaturePricing)
    permissions: FeaturePermissions = Field(default_factory=FeaturePermissions)
    configuration: Dict[str, Any] = Field(default_factory=dict)
    dependencies: List[str] = []
    version: str = Field(default_factory=lambda: settings.DEFAULT_FEATURE_VERSION)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "video_call",
                "display_name": "Video Calls",
                "description": "In-app video meetings for project teams",
                "category": "collaboration",
                "is_premium": True,
                "pricing": {"monthly": 9, "yearly": 90},
                "permissions": {"roles": ["project_manager", "team_leader", "member"]},
            }
        }
    )

    @field_validator("name")
    @classmethod
    def valid_name(cls, v: str) -> str:
        return _feature_name(v)

    @field_validator("display_name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("dependencies")
    @classmethod
    def clean_dependencies(cls, v: List[str]) -> List[str]:
        names = [_feature_name(name) for name in v]
        if len(set(names)) != len(names):
            raise ValueError("duplicate dependency names")
        return names


class SystemFeatureUpdate(BaseModel):
    """Partial update; only fields present in the request are applied. The name is immutable."""
    display_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[FeatureCategory] = None
    is_enabled: Optional[bool] = None
    is_premium: Optional[bool] = None
    pricing: Optional[FeaturePricingUpdate] = None
    permissions: Optional[FeaturePermissionsUpdate] = None
    configuration: Optional[Dict[str, Any]] = None
    dependencies: Optional[List[str]] = None
    version: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("display_name", "description", "version")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("must not be null")
        return _required_text(v)

    @field_validator("category", "is_enabled", "is_premium", "configuration", "dependencies", "pricing", "permissions", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("dependencies")
    @classmethod
    def clean_dependencies(cls, v: List[str]) -> List[str]:
        names = [_feature_name(name) for name in v]
        if len(set(names)) != len(names):
            raise ValueError("duplicate dependency names")
        return names


class FeatureEnabledUpdate(BaseModel):
    is_enabled: bool


class SystemFeature(BaseModel):
    id: UUID
    name: str
    display_name: str
    description: str
    category: FeatureCategory
    is_enabled: bool
    is_premium: bool
    pricing: FeaturePricing
    permissions: FeaturePermissions
    configuration: Dict[str, Any]
    dependencies: List[str]
    version: str
    last_updated: datetime
    created_by: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeatureAccessResponse(BaseModel):
    """Result of an entitlement check"""
    feature: str
    role: UserRole
    org_id: Optional[UUID] = None
    allowed: bool
    reason: Optional[str] = None  # Why access is denied (if applicable)
