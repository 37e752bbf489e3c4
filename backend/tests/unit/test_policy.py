"""Unit tests for the authorization policy

Tests cover:
- Cross-tenant resources are reported as cross-tenant for every role
- Document edit/delete ownership rules for members
- Organization management restricted to owner/admin
- Membership change rules (owner immutable, admin-on-admin, self-removal)
"""

from uuid import uuid4

import pytest

from micromeet.errors import CrossTenant, Forbidden
from micromeet.tenancy.context import AuthContext, MemberRole
from micromeet.tenancy.policy import Action, Resource, authorize, evaluate

ORG = uuid4()


def ctx(role: MemberRole, user_id=None) -> AuthContext:
    return AuthContext(user_id=user_id or uuid4(), org_id=ORG, role=role)


ALL_ROLES = [MemberRole.OWNER, MemberRole.ADMIN, MemberRole.MEMBER]


class TestTenantBoundary:

    @pytest.mark.parametrize("role", ALL_ROLES)
    @pytest.mark.parametrize("action", list(Action))
    def test_foreign_org_is_cross_tenant(self, role, action):
        decision = evaluate(action, Resource(org_id=uuid4()), ctx(role))
        assert not decision.allowed
        assert decision.cross_tenant

    def test_authorize_raises_cross_tenant(self):
        with pytest.raises(CrossTenant):
            authorize(Action.VIEW, Resource(org_id=uuid4()), ctx(MemberRole.OWNER))


class TestDocumentRules:

    @pytest.mark.parametrize("role", ALL_ROLES)
    def test_everyone_views_and_creates(self, role):
        caller = ctx(role)
        assert evaluate(Action.VIEW, Resource(org_id=ORG), caller).allowed
        assert evaluate(Action.CREATE_DOCUMENT, Resource(org_id=ORG), caller).allowed

    @pytest.mark.parametrize("role", [MemberRole.OWNER, MemberRole.ADMIN])
    def test_managers_edit_any_document(self, role):
        resource = Resource(org_id=ORG, owner_id=uuid4())
        assert evaluate(Action.EDIT_DOCUMENT, resource, ctx(role)).allowed
        assert evaluate(Action.DELETE_DOCUMENT, resource, ctx(role)).allowed

    def test_member_edits_own_document(self):
        user_id = uuid4()
        resource = Resource(org_id=ORG, owner_id=user_id)
        assert evaluate(Action.EDIT_DOCUMENT, resource, ctx(MemberRole.MEMBER, user_id)).allowed
        assert evaluate(Action.DELETE_DOCUMENT, resource, ctx(MemberRole.MEMBER, user_id)).allowed

    def test_member_cannot_edit_others_document(self):
        resource = Resource(org_id=ORG, owner_id=uuid4())
        with pytest.raises(Forbidden) as exc_info:
            authorize(Action.EDIT_DOCUMENT, resource, ctx(MemberRole.MEMBER))
        assert "dokumen yang Anda buat" in exc_info.value.message

    def test_member_cannot_edit_document_without_creator(self):
        resource = Resource(org_id=ORG, owner_id=None)
        assert not evaluate(Action.DELETE_DOCUMENT, resource, ctx(MemberRole.MEMBER)).allowed


class TestOrganizationRules:

    def test_member_cannot_manage_org(self):
        decision = evaluate(Action.MANAGE_ORG, Resource(org_id=ORG), ctx(MemberRole.MEMBER))
        assert not decision.allowed
        assert not decision.cross_tenant

    def test_only_owner_renames(self):
        assert evaluate(Action.RENAME_ORG, Resource(org_id=ORG), ctx(MemberRole.OWNER)).allowed
        assert not evaluate(Action.RENAME_ORG, Resource(org_id=ORG), ctx(MemberRole.ADMIN)).allowed

    @pytest.mark.parametrize("role,allowed", [
        (MemberRole.OWNER, True),
        (MemberRole.ADMIN, True),
        (MemberRole.MEMBER, False),
    ])
    def test_audit_visibility(self, role, allowed):
        assert evaluate(Action.VIEW_AUDIT, Resource(org_id=ORG), ctx(role)).allowed is allowed


class TestMembershipRules:

    def member_resource(self, role: MemberRole, user_id=None) -> Resource:
        return Resource(org_id=ORG, member_user_id=user_id or uuid4(), member_role=role)

    @pytest.mark.parametrize("action", [Action.CHANGE_MEMBER_ROLE, Action.REMOVE_MEMBER])
    def test_owner_is_immutable(self, action):
        decision = evaluate(action, self.member_resource(MemberRole.OWNER), ctx(MemberRole.OWNER))
        assert not decision.allowed
        assert "pemilik" in decision.reason

    def test_admin_cannot_change_admin(self):
        decision = evaluate(
            Action.CHANGE_MEMBER_ROLE, self.member_resource(MemberRole.ADMIN), ctx(MemberRole.ADMIN)
        )
        assert decision.reason == "Hanya Owner yang dapat mengubah role Admin"

    def test_owner_can_remove_admin(self):
        assert evaluate(
            Action.REMOVE_MEMBER, self.member_resource(MemberRole.ADMIN), ctx(MemberRole.OWNER)
        ).allowed

    def test_admin_can_remove_member(self):
        assert evaluate(
            Action.REMOVE_MEMBER, self.member_resource(MemberRole.MEMBER), ctx(MemberRole.ADMIN)
        ).allowed

    def test_nobody_removes_themself(self):
        user_id = uuid4()
        decision = evaluate(
            Action.REMOVE_MEMBER,
            self.member_resource(MemberRole.ADMIN, user_id),
            ctx(MemberRole.ADMIN, user_id),
        )
        assert decision.reason == "Anda tidak dapat menghapus diri sendiri dari organisasi"

    def test_member_cannot_manage_members(self):
        assert not evaluate(
            Action.CHANGE_MEMBER_ROLE, self.member_resource(MemberRole.MEMBER), ctx(MemberRole.MEMBER)
        ).allowed
