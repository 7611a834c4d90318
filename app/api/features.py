"""
System feature catalog endpoints.

Reads are open to any authenticated user; changes require a feature admin.
Registry errors (validation / conflict / not found) are translated to HTTP
responses by the handlers registered in app.main.
"""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.db.session import get_db
from app.api.deps import get_current_user, require_admin
from app.models.user import User
from app.schemas.system_feature import (
    SystemFeature as SystemFeatureSchema,
    SystemFeatureCreate,
    SystemFeatureUpdate,
    FeatureEnabledUpdate,
    FeatureAccessResponse,
)
from app.services import feature_registry, entitlements

router = APIRouter()


@router.post("", response_model=SystemFeatureSchema, status_code=status.HTTP_201_CREATED)
def create_feature(
    feature_data: SystemFeatureCreate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_admin)
):
    """Create a feature; created_by is the acting admin"""
    return feature_registry.create(db, feature_data, created_by=admin_user.id)


@router.get("", response_model=List[SystemFeatureSchema])
def list_features(
    category: Optional[str] = None,
    enabled: Optional[bool] = None,
    order_by: Optional[str] = Query(None, description="Field to sort by, '-' prefix for descending"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List features, optionally filtered by category and enabled state"""
    return feature_registry.list_features(db, category=category, enabled=enabled, order_by=order_by)


@router.get("/{name}", response_model=SystemFeatureSchema)
def get_feature(
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return feature_registry.get_by_name(db, name)


@router.patch("/{name}", response_model=SystemFeatureSchema)
def update_feature(
    name: str,
    feature_update: SystemFeatureUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_admin)
):
    """Partially update a feature (name is immutable)"""
    return feature_registry.update(db, name, feature_update, user_id=admin_user.id)


@router.put("/{name}/enabled", response_model=SystemFeatureSchema)
def set_feature_enabled(
    name: str,
    body: FeatureEnabledUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_admin)
):
    """Enable or disable a feature"""
    return feature_registry.set_enabled(db, name, body.is_enabled, user_id=admin_user.id)


@router.get("/{name}/dependents", response_model=List[str])
def list_feature_dependents(
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Names of features that depend on this one"""
    return feature_registry.list_dependents(db, name)


@router.get("/{name}/access", response_model=FeatureAccessResponse)
def check_feature_access(
    name: str,
    role: Optional[str] = None,
    org_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check whether a role/organization may use this feature.
    Defaults to the caller's own role and organization.
    """
    role = role or current_user.role.value
    if org_id is None:
        org_id = current_user.org_id
    decision = entitlements.check_access(db, name, role, org_id)
    return FeatureAccessResponse(
        feature=name,
        role=role,
        org_id=org_id,
        allowed=decision.allowed,
        reason=decision.reason,
    )


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_feature(
    name: str,
    db: Session = Depends(get_db),
    admin_user: User = Depends(require_admin)
):
    """Delete a feature; refused while other features depend on it"""
    feature_registry.delete(db, name, user_id=admin_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
