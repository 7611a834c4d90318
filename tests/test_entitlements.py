"""Entitlement rule tests"""
import uuid

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.user import UserRole
from app.services import entitlements, feature_registry


def _feature(db, admin, name, **fields):
    record = {"name": name, "display_name": name.title(), "description": f"{name} feature"}
    record.update(fields)
    return feature_registry.create(db, record, created_by=admin.id)


def test_empty_role_list_allows_every_role(db_session, admin_user):
    feature = _feature(db_session, admin_user, "kanban")
    for role in UserRole:
        assert entitlements.roles_allow(feature, role)


def test_listed_roles_restrict_access(db_session, admin_user):
    feature = _feature(db_session, admin_user, "analytics", permissions={"roles": ["project_manager", "team_leader"]})
    assert entitlements.roles_allow(feature, "project_manager")
    assert entitlements.roles_allow(feature, UserRole.TEAM_LEADER)
    assert not entitlements.roles_allow(feature, "member")
    assert not entitlements.roles_allow(feature, "admin")
    # Platform admins are never locked out
    assert entitlements.roles_allow(feature, "projectra_admin")


def test_roles_allow_rejects_unknown_role(db_session, admin_user):
    feature = _feature(db_session, admin_user, "kanban")
    with pytest.raises(ValidationError):
        entitlements.roles_allow(feature, "wizard")


def test_organization_scoping(db_session, admin_user, organization):
    other_org = uuid.uuid4()
    feature = _feature(db_session, admin_user, "chat", permissions={"organizations": [str(organization.id)]})

    assert entitlements.organizations_allow(feature, organization.id)
    assert entitlements.organizations_allow(feature, str(organization.id))
    assert not entitlements.organizations_allow(feature, other_org)
    assert not entitlements.organizations_allow(feature, None)
    assert entitlements.organizations_allow(feature, None, role="projectra_admin")


def test_empty_organization_list_allows_everyone(db_session, admin_user):
    feature = _feature(db_session, admin_user, "chat")
    assert entitlements.organizations_allow(feature, uuid.uuid4())
    assert entitlements.organizations_allow(feature, None)


def test_check_access_allowed(db_session, admin_user, organization):
    _feature(db_session, admin_user, "kanban")
    decision = entitlements.check_access(db_session, "kanban", "member", organization.id)
    assert decision.allowed is True
    assert decision.reason is None


def test_check_access_disabled_feature(db_session, admin_user):
    _feature(db_session, admin_user, "kanban", is_enabled=False)
    decision = entitlements.check_access(db_session, "kanban", "projectra_admin")
    assert decision.allowed is False
    assert decision.reason == entitlements.REASON_DISABLED


def test_check_access_reports_role_and_organization_denials(db_session, admin_user, organization):
    _feature(db_session, admin_user, "reporting", permissions={"roles": ["admin"]})
    _feature(db_session, admin_user, "chat", permissions={"organizations": [str(organization.id)]})

    assert entitlements.check_access(db_session, "reporting", "member").reason == entitlements.REASON_ROLE
    assert entitlements.check_access(db_session, "chat", "member", uuid.uuid4()).reason == entitlements.REASON_ORGANIZATION


def test_check_access_follows_dependencies(db_session, admin_user):
    _feature(db_session, admin_user, "chat")
    _feature(db_session, admin_user, "ai_assistant", dependencies=["chat"])
    _feature(db_session, admin_user, "meeting_notes", dependencies=["ai_assistant"])

    assert entitlements.check_access(db_session, "meeting_notes", "member").allowed is True

    # Disabling a transitive dependency makes the dependent unavailable
    feature_registry.set_enabled(db_session, "chat", False)
    decision = entitlements.check_access(db_session, "meeting_notes", "member")
    assert decision.allowed is False
    assert decision.reason == "dependency_unavailable:ai_assistant"

    decision = entitlements.check_access(db_session, "ai_assistant", "member")
    assert decision.reason == "dependency_unavailable:chat"


def test_dependency_role_restrictions_apply(db_session, admin_user):
    _feature(db_session, admin_user, "analytics", permissions={"roles": ["project_manager"]})
    _feature(db_session, admin_user, "reporting", dependencies=["analytics"])

    assert entitlements.check_access(db_session, "reporting", "project_manager").allowed is True
    assert entitlements.check_access(db_session, "reporting", "guest").reason == "dependency_unavailable:analytics"


def test_check_access_reflects_latest_write(db_session, admin_user):
    _feature(db_session, admin_user, "kanban")
    assert entitlements.check_access(db_session, "kanban", "member").allowed is True
    feature_registry.set_enabled(db_session, "kanban", False)
    assert entitlements.check_access(db_session, "kanban", "member").allowed is False
    feature_registry.set_enabled(db_session, "kanban", True)
    assert entitlements.check_access(db_session, "kanban", "member").allowed is True


def test_check_access_unknown_feature(db_session):
    with pytest.raises(NotFoundError):
        entitlements.check_access(db_session, "ghost", "member")


def test_check_access_bad_org_id(db_session, admin_user):
    _feature(db_session, admin_user, "kanban")
    with pytest.raises(ValidationError):
        entitlements.check_access(db_session, "kanban", "member", "not-a-uuid")
