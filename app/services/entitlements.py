"""
Entitlement checks: may a given role / organization use a feature?

Empty permission lists are unrestricted: a feature with no roles listed is
open to every role, and one with no organizations listed is open to every
organization. Platform admins (projectra_admin) pass both checks. A feature
is only available when it and every feature it depends on, transitively,
are enabled and permit the caller.
"""
from sqlalchemy.orm import Session
from dataclasses import dataclass
from typing import Optional, Set, Union
import logging
import uuid

from app.core.errors import ValidationError
from app.models.system_feature import SystemFeature
from app.models.user import UserRole
from app.services import feature_registry

logger = logging.getLogger(__name__)

REASON_DISABLED = "disabled"
REASON_ROLE = "role_not_permitted"
REASON_ORGANIZATION = "organization_not_permitted"
REASON_DEPENDENCY = "dependency_unavailable"


@dataclass
class AccessDecision:
    allowed: bool
    reason: Optional[str] = None


def _parse_role(role: Union[str, UserRole]) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        allowed = ", ".join(r.value for r in UserRole)
        raise ValidationError(f"Invalid role '{role}'. Allowed: {allowed}")


def _parse_org_id(org_id: Optional[Union[str, uuid.UUID]]) -> Optional[uuid.UUID]:
    if org_id is None or isinstance(org_id, uuid.UUID):
        return org_id
    try:
        return uuid.UUID(str(org_id))
    except ValueError:
        raise ValidationError(f"Invalid organization id '{org_id}'")


def roles_allow(feature: SystemFeature, role: Union[str, UserRole]) -> bool:
    role = _parse_role(role)
    if role == UserRole.PROJECTRA_ADMIN:
        return True
    roles = feature.permission_roles or []
    return not roles or role.value in roles


def organizations_allow(
    feature: SystemFeature,
    org_id: Optional[Union[str, uuid.UUID]],
    role: Optional[Union[str, UserRole]] = None,
) -> bool:
    if role is not None and _parse_role(role) == UserRole.PROJECTRA_ADMIN:
        return True
    organizations = feature.permission_organizations or []
    if not organizations:
        return True
    org_id = _parse_org_id(org_id)
    return org_id is not None and str(org_id) in organizations


def _evaluate(
    db: Session,
    feature: SystemFeature,
    role: UserRole,
    org_id: Optional[uuid.UUID],
    visited: Set[str],
) -> AccessDecision:
    visited.add(feature.name)
    if not feature.is_enabled:
        return AccessDecision(False, REASON_DISABLED)
    if not roles_allow(feature, role):
        return AccessDecision(False, REASON_ROLE)
    if not organizations_allow(feature, org_id, role):
        return AccessDecision(False, REASON_ORGANIZATION)

    dependencies = [name for name in (feature.dependencies or []) if name not in visited]
    loaded = feature_registry.find_many(db, dependencies)
    for dep_name in dependencies:
        dep = loaded.get(dep_name)
        if dep is None or not _evaluate(db, dep, role, org_id, visited).allowed:
            return AccessDecision(False, f"{REASON_DEPENDENCY}:{dep_name}")
    return AccessDecision(True)


def check_access(
    db: Session,
    name: str,
    role: Union[str, UserRole],
    org_id: Optional[Union[str, uuid.UUID]] = None,
) -> AccessDecision:
    """
    Decide whether `role` (acting within `org_id`) may use feature `name`.

    Raises:
        NotFoundError: no feature with this name
        ValidationError: unknown role or malformed organization id
    """
    role = _parse_role(role)
    org_id = _parse_org_id(org_id)
    feature = feature_registry.get_by_name(db, name)
    decision = _evaluate(db, feature, role, org_id, set())
    logger.debug("[FEATURES] Access to '%s' for role=%s org=%s: %s", name, role.value, org_id, decision)
    return decision
