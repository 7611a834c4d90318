"""
System feature registry: durable catalog of feature flags.

Every operation reads and writes through the given SQLAlchemy session; nothing
is cached, so callers always observe the latest committed state. Rules the
database cannot express (dependency integrity, immutable names, monotonic
last_updated) are enforced here.
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from pydantic import BaseModel, ValidationError as PydanticValidationError
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union
import logging
import uuid

from app.core.audit import log_feature_event
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.audit_log import AuditAction
from app.models.system_feature import SystemFeature, FeatureCategory
from app.schemas.system_feature import SystemFeatureCreate, SystemFeatureUpdate

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Columns a caller may sort listings by ("-" prefix for descending)
SORTABLE_FIELDS = {
    "name": SystemFeature.name,
    "display_name": SystemFeature.display_name,
    "category": SystemFeature.category,
    "last_updated": SystemFeature.last_updated,
    "created_at": SystemFeature.created_at,
}


def _parse(schema: Type[SchemaT], data: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Validate raw input against a schema, translating pydantic errors."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid feature data", errors=errors) from e


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    """Current UTC time, nudged forward so it is strictly after `previous`."""
    now = datetime.utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _parse_category(category: Union[str, FeatureCategory]) -> FeatureCategory:
    try:
        return FeatureCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in FeatureCategory)
        raise ValidationError(f"Invalid category '{category}'. Allowed: {allowed}")


def _find(db: Session, name: str) -> Optional[SystemFeature]:
    return db.query(SystemFeature).filter(SystemFeature.name == name).first()


def _dependency_graph(db: Session) -> Dict[str, List[str]]:
    rows = db.query(SystemFeature.name, SystemFeature.dependencies).all()
    return {name: list(deps or []) for name, deps in rows}


def _check_dependencies(db: Session, name: str, dependencies: List[str]) -> None:
    """
    Dependencies must name existing features, never the feature itself, and
    must not close a cycle back to `name`.
    """
    if not dependencies:
        return
    if name in dependencies:
        raise ValidationError(f"Feature '{name}' cannot depend on itself")

    graph = _dependency_graph(db)
    missing = [dep for dep in dependencies if dep not in graph]
    if missing:
        raise ValidationError(f"Unknown dependencies: {', '.join(missing)}")

    # Walk everything reachable from the new dependency list
    stack = list(dependencies)
    seen = set()
    while stack:
        current = stack.pop()
        if current == name:
            raise ValidationError(f"Dependencies of '{name}' would create a cycle")
        if current in seen:
            continue
        seen.add(current)
        stack.extend(graph.get(current, []))


def _premium_pricing_check(feature: SystemFeature) -> None:
    if feature.is_premium and not (feature.pricing_monthly or feature.pricing_yearly):
        logger.warning("[FEATURES] Premium feature '%s' has no pricing set", feature.name)


def create(
    db: Session,
    record: Union[SystemFeatureCreate, Mapping[str, Any]],
    created_by: uuid.UUID,
) -> SystemFeature:
    """
    Persist a new feature.

    Raises:
        ValidationError: missing/invalid fields, bad enum values, bad dependencies
        ConflictError: a feature with the same name already exists
    """
    data = _parse(SystemFeatureCreate, record)
    if created_by is None:
        raise ValidationError("created_by is required")

    if _find(db, data.name) is not None:
        logger.warning("[FEATURES] Rejected duplicate feature name '%s'", data.name)
        raise ConflictError(f"Feature '{data.name}' already exists")

    _check_dependencies(db, data.name, data.dependencies)

    # Keep created_at strictly increasing so listings follow insertion order
    now = _next_timestamp(db.query(func.max(SystemFeature.created_at)).scalar())
    feature = SystemFeature(
        name=data.name,
        display_name=data.display_name,
        description=data.description,
        category=data.category,
        is_enabled=data.is_enabled,
        is_premium=data.is_premium,
        pricing_monthly=data.pricing.monthly,
        pricing_yearly=data.pricing.yearly,
        permission_roles=[role.value for role in data.permissions.roles],
        permission_organizations=[str(org_id) for org_id in data.permissions.organizations],
        configuration=dict(data.configuration),
        dependencies=list(data.dependencies),
        version=data.version,
        last_updated=now,
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    db.add(feature)
    log_feature_event(db, AuditAction.CREATE_FEATURE, data.name, user_id=created_by, details={
        "category": data.category.value,
        "is_enabled": data.is_enabled,
        "is_premium": data.is_premium,
    })

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # Lost a race on the unique name index, or created_by is not a user
        if _find(db, data.name) is not None:
            raise ConflictError(f"Feature '{data.name}' already exists") from e
        raise ValidationError("created_by must reference an existing user") from e

    db.refresh(feature)
    _premium_pricing_check(feature)
    logger.info("[FEATURES] Created feature '%s' (category=%s)", feature.name, feature.category.value)
    return feature


def get_by_name(db: Session, name: str) -> SystemFeature:
    feature = _find(db, name)
    if feature is None:
        raise NotFoundError(f"Feature '{name}' not found")
    return feature


def list_features(
    db: Session,
    category: Optional[Union[str, FeatureCategory]] = None,
    enabled: Optional[bool] = None,
    order_by: Optional[str] = None,
) -> List[SystemFeature]:
    """List features matching the filters, in insertion order unless `order_by` is given."""
    query = db.query(SystemFeature)
    if category is not None:
        query = query.filter(SystemFeature.category == _parse_category(category))
    if enabled is not None:
        query = query.filter(SystemFeature.is_enabled == enabled)

    if order_by:
        field = order_by.lstrip("-")
        column = SORTABLE_FIELDS.get(field)
        if column is None:
            allowed = ", ".join(sorted(SORTABLE_FIELDS))
            raise ValidationError(f"Cannot order by '{order_by}'. Allowed: {allowed}")
        query = query.order_by(column.desc() if order_by.startswith("-") else column.asc())

    # Insertion order, also the tie-breaker for explicit orderings
    query = query.order_by(SystemFeature.created_at.asc(), SystemFeature.name.asc())
    return query.all()


def list_by_category(db: Session, category: Union[str, FeatureCategory]) -> List[SystemFeature]:
    return list_features(db, category=category)


def list_enabled(db: Session) -> List[SystemFeature]:
    return list_features(db, enabled=True)


def list_dependents(db: Session, name: str) -> List[str]:
    """Names of features that list `name` in their dependencies."""
    get_by_name(db, name)
    return _dependents_of(db, name)


def _dependents_of(db: Session, name: str) -> List[str]:
    features = (
        db.query(SystemFeature.name, SystemFeature.dependencies)
        .order_by(SystemFeature.created_at.asc(), SystemFeature.name.asc())
        .all()
    )
    return [
        feature_name for feature_name, deps in features
        if feature_name != name and name in (deps or [])
    ]


def _apply_changes(feature: SystemFeature, changes: Dict[str, Any]) -> None:
    for field, value in changes.items():
        if field == "pricing":
            for key, amount in value.items():
                setattr(feature, f"pricing_{key}", amount)
        elif field == "permissions":
            if "roles" in value:
                feature.permission_roles = [getattr(role, "value", role) for role in value["roles"]]
            if "organizations" in value:
                feature.permission_organizations = [str(org_id) for org_id in value["organizations"]]
        elif field == "configuration":
            feature.configuration = dict(value)
        elif field == "dependencies":
            feature.dependencies = list(value)
        else:
            setattr(feature, field, value)


def update(
    db: Session,
    name: str,
    patch: Union[SystemFeatureUpdate, Mapping[str, Any]],
    user_id: Optional[uuid.UUID] = None,
) -> SystemFeature:
    """
    Apply a partial update. Fields absent from the patch are left untouched;
    nested pricing/permissions are merged key by key.

    Raises:
        ValidationError: invalid values, attempted rename, bad dependencies
        NotFoundError: no feature with this name
    """
    if isinstance(patch, Mapping) and "name" in patch and patch["name"] != name:
        raise ValidationError("Feature name cannot be changed", errors=[
            {"field": "name", "message": "name is immutable"}
        ])
    if isinstance(patch, Mapping) and "name" in patch:
        patch = {k: v for k, v in patch.items() if k != "name"}

    data = _parse(SystemFeatureUpdate, patch)
    feature = get_by_name(db, name)
    changes = data.model_dump(exclude_unset=True)

    if "dependencies" in changes:
        _check_dependencies(db, feature.name, changes["dependencies"])

    _apply_changes(feature, changes)
    feature.last_updated = _next_timestamp(feature.last_updated)
    log_feature_event(db, AuditAction.UPDATE_FEATURE, feature.name, user_id=user_id, details={
        "fields": sorted(changes),
    })
    db.commit()
    db.refresh(feature)
    _premium_pricing_check(feature)
    logger.info("[FEATURES] Updated feature '%s' fields=%s", feature.name, sorted(changes))
    return feature


def set_enabled(
    db: Session,
    name: str,
    enabled: bool,
    user_id: Optional[uuid.UUID] = None,
) -> SystemFeature:
    feature = get_by_name(db, name)
    feature.is_enabled = bool(enabled)
    feature.last_updated = _next_timestamp(feature.last_updated)
    action = AuditAction.ENABLE_FEATURE if enabled else AuditAction.DISABLE_FEATURE
    log_feature_event(db, action, feature.name, user_id=user_id)
    db.commit()
    db.refresh(feature)
    logger.info("[FEATURES] %s feature '%s'", "Enabled" if enabled else "Disabled", feature.name)
    return feature


def delete(db: Session, name: str, user_id: Optional[uuid.UUID] = None) -> None:
    """
    Remove a feature.

    Raises:
        NotFoundError: no feature with this name
        ConflictError: other features still depend on it
    """
    feature = get_by_name(db, name)
    dependents = _dependents_of(db, name)
    if dependents:
        logger.warning("[FEATURES] Refused to delete '%s'; required by %s", name, dependents)
        raise ConflictError(f"Feature '{name}' is required by: {', '.join(dependents)}")

    db.delete(feature)
    log_feature_event(db, AuditAction.DELETE_FEATURE, name, user_id=user_id)
    db.commit()
    logger.info("[FEATURES] Deleted feature '%s'", name)


def find_many(db: Session, names: Iterable[str]) -> Dict[str, SystemFeature]:
    """Load several features by name; unknown names are simply absent from the result."""
    names = list(names)
    if not names:
        return {}
    rows = db.query(SystemFeature).filter(SystemFeature.name.in_(names)).all()
    return {feature.name: feature for feature in rows}
