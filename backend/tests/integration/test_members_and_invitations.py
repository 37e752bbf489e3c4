"""Integration tests for organization, member and invitation endpoints

Tests cover:
- Organization rename (owner only)
- Role changes and removal rules
- Invitation create / cancel / resend / verify / accept
- Accepting an invitation moves the user out of their previous organization
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from micromeet.models import Invitation
from micromeet.models.base import utcnow

pytestmark = pytest.mark.integration

API = "/api/v1"


def _membership_id(client, headers, user) -> str:
    members = client.get(f"{API}/members", headers=headers).json()
    return next(m["id"] for m in members if m["user_id"] == str(user.id))


def _token_for(db_session, email: str) -> str:
    return db_session.execute(
        select(Invitation.token).where(Invitation.email == email, Invitation.status == "pending")
    ).scalar_one()


class TestOrganization:

    def test_get_organization(self, client, owner, org, auth_headers):
        body = client.get(f"{API}/organization", headers=auth_headers(owner)).json()

        assert body["id"] == str(org.id)
        assert body["name"] == "PT Maju Jaya"
        assert body["role"] == "owner"

    def test_owner_renames(self, client, owner, auth_headers):
        response = client.patch(f"{API}/organization", headers=auth_headers(owner), json={"name": "PT Maju Bersama"})

        assert response.status_code == 200
        assert response.json()["name"] == "PT Maju Bersama"

    def test_admin_cannot_rename(self, client, admin, auth_headers):
        response = client.patch(f"{API}/organization", headers=auth_headers(admin), json={"name": "PT Lain"})

        assert response.status_code == 403
        assert response.json()["message"] == "Hanya pemilik yang dapat mengubah nama organisasi"


class TestMembers:

    def test_list_members(self, client, owner, admin, member, auth_headers):
        members = client.get(f"{API}/members", headers=auth_headers(admin)).json()

        assert {m["email"]: m["role"] for m in members} == {
            owner.email: "owner",
            admin.email: "admin",
            member.email: "member",
        }
        assert [m["is_current_user"] for m in members if m["email"] == admin.email] == [True]

    def test_owner_promotes_member(self, client, owner, member, auth_headers):
        headers = auth_headers(owner)
        membership_id = _membership_id(client, headers, member)

        response = client.patch(f"{API}/members/{membership_id}", headers=headers, json={"role": "admin"})
        assert response.status_code == 204

        roles = {m["user_id"]: m["role"] for m in client.get(f"{API}/members", headers=headers).json()}
        assert roles[str(member.id)] == "admin"

    def test_owner_role_is_immutable(self, client, owner, admin, auth_headers):
        membership_id = _membership_id(client, auth_headers(owner), owner)

        response = client.patch(f"{API}/members/{membership_id}", headers=auth_headers(owner), json={"role": "admin"})
        assert response.status_code == 403
        assert response.json()["message"] == "Tidak dapat mengubah role pemilik organisasi"

    def test_cannot_assign_owner_role(self, client, owner, member, auth_headers):
        membership_id = _membership_id(client, auth_headers(owner), member)

        response = client.patch(f"{API}/members/{membership_id}", headers=auth_headers(owner), json={"role": "owner"})
        assert response.status_code == 422

    def test_admin_cannot_change_admin(self, client, owner, admin, make_user, org, auth_headers):
        other_admin = make_user("admin2@majujaya.co.id", org=org, role="admin")
        membership_id = _membership_id(client, auth_headers(owner), other_admin)

        response = client.patch(f"{API}/members/{membership_id}", headers=auth_headers(admin), json={"role": "member"})
        assert response.status_code == 403
        assert response.json()["message"] == "Hanya Owner yang dapat mengubah role Admin"

    def test_admin_removes_member(self, client, owner, admin, member, auth_headers):
        membership_id = _membership_id(client, auth_headers(owner), member)

        assert client.delete(f"{API}/members/{membership_id}", headers=auth_headers(admin)).status_code == 204

        me = client.get(f"{API}/auth/me", headers=auth_headers(member)).json()
        assert me["organization_id"] is None

    def test_cannot_remove_self(self, client, owner, admin, auth_headers):
        membership_id = _membership_id(client, auth_headers(owner), admin)

        response = client.delete(f"{API}/members/{membership_id}", headers=auth_headers(admin))
        assert response.status_code == 403
        assert response.json()["message"] == "Anda tidak dapat menghapus diri sendiri dari organisasi"

    def test_member_cannot_remove(self, client, owner, admin, member, auth_headers):
        membership_id = _membership_id(client, auth_headers(owner), admin)

        response = client.delete(f"{API}/members/{membership_id}", headers=auth_headers(member))
        assert response.status_code == 403

    def test_unknown_membership(self, client, owner, auth_headers):
        response = client.delete(f"{API}/members/00000000-0000-0000-0000-000000000099", headers=auth_headers(owner))
        assert response.status_code == 404


class TestInvitations:

    def test_invite_and_accept(self, client, db_session, owner, org, make_user, auth_headers):
        response = client.post(f"{API}/invitations", headers=auth_headers(owner), json={
            "email": "Rina@MajuJaya.co.id",
            "role": "admin",
        })
        assert response.status_code == 201

        pending = client.get(f"{API}/invitations", headers=auth_headers(owner)).json()
        assert [(i["email"], i["role"], i["invited_by_name"]) for i in pending] == [
            ("rina@majujaya.co.id", "admin", "Budi Santoso"),
        ]

        token = _token_for(db_session, "rina@majujaya.co.id")
        verify = client.get(f"{API}/invitations/verify/{token}").json()
        assert verify == {
            "valid": True,
            "error": None,
            "email": "rina@majujaya.co.id",
            "role": "admin",
            "organization_name": "PT Maju Jaya",
        }

        rina = make_user("rina@majujaya.co.id")
        accepted = client.post(f"{API}/invitations/accept", headers=auth_headers(rina), json={"token": token})
        assert accepted.status_code == 200
        assert accepted.json() == {"success": True, "already_member": False, "organization_id": str(org.id)}

        me = client.get(f"{API}/auth/me", headers=auth_headers(rina)).json()
        assert me["organization_id"] == str(org.id)
        assert me["role"] == "admin"

        reused = client.get(f"{API}/invitations/verify/{token}").json()
        assert reused == {"valid": False, "error": "Undangan sudah digunakan", "email": None, "role": None, "organization_name": None}

    def test_accept_moves_user_between_organizations(self, client, db_session, owner, org, other_owner, make_user, other_org, auth_headers):
        dewi = make_user("dewi@sinarabadi.co.id", org=other_org, role="member")
        client.post(f"{API}/invitations", headers=auth_headers(owner), json={"email": dewi.email})
        token = _token_for(db_session, dewi.email)

        client.post(f"{API}/invitations/accept", headers=auth_headers(dewi), json={"token": token})

        assert client.get(f"{API}/auth/me", headers=auth_headers(dewi)).json()["organization_id"] == str(org.id)
        old_members = client.get(f"{API}/members", headers=auth_headers(other_owner)).json()
        assert dewi.email not in [m["email"] for m in old_members]

    def test_email_mismatch(self, client, db_session, owner, make_user, auth_headers):
        client.post(f"{API}/invitations", headers=auth_headers(owner), json={"email": "rina@majujaya.co.id"})
        token = _token_for(db_session, "rina@majujaya.co.id")
        intruder = make_user("intruder@example.com")

        response = client.post(f"{API}/invitations/accept", headers=auth_headers(intruder), json={"token": token})
        assert response.status_code == 403

    def test_unknown_token(self, client, make_user, auth_headers):
        user = make_user("rina@majujaya.co.id")

        response = client.post(f"{API}/invitations/accept", headers=auth_headers(user), json={"token": "nope"})
        assert response.status_code == 404
        assert client.get(f"{API}/invitations/verify/nope").json()["error"] == "Token undangan tidak valid"

    def test_duplicate_invitations_rejected(self, client, owner, member, auth_headers):
        headers = auth_headers(owner)

        existing = client.post(f"{API}/invitations", headers=headers, json={"email": member.email})
        assert existing.status_code == 409
        assert existing.json()["message"] == "Email ini sudah terdaftar sebagai anggota organisasi"

        client.post(f"{API}/invitations", headers=headers, json={"email": "rina@majujaya.co.id"})
        again = client.post(f"{API}/invitations", headers=headers, json={"email": "rina@majujaya.co.id"})
        assert again.status_code == 409
        assert again.json()["message"] == "Undangan untuk email ini sudah dikirim dan masih aktif"

    def test_member_cannot_invite(self, client, member, auth_headers):
        response = client.post(f"{API}/invitations", headers=auth_headers(member), json={"email": "x@example.com"})
        assert response.status_code == 403

    def test_cancel(self, client, db_session, owner, auth_headers):
        headers = auth_headers(owner)
        invitation_id = client.post(f"{API}/invitations", headers=headers, json={"email": "rina@majujaya.co.id"}).json()["id"]
        token = _token_for(db_session, "rina@majujaya.co.id")

        assert client.post(f"{API}/invitations/{invitation_id}/cancel", headers=headers).status_code == 204
        assert client.get(f"{API}/invitations", headers=headers).json() == []
        assert client.get(f"{API}/invitations/verify/{token}").json()["error"] == "Undangan sudah dibatalkan"

        resend = client.post(f"{API}/invitations/{invitation_id}/resend", headers=headers)
        assert resend.status_code == 409

    def test_resend_rotates_token(self, client, db_session, owner, auth_headers):
        headers = auth_headers(owner)
        invitation_id = client.post(f"{API}/invitations", headers=headers, json={"email": "rina@majujaya.co.id"}).json()["id"]
        old_token = _token_for(db_session, "rina@majujaya.co.id")

        assert client.post(f"{API}/invitations/{invitation_id}/resend", headers=headers).status_code == 204

        new_token = _token_for(db_session, "rina@majujaya.co.id")
        assert new_token != old_token
        assert client.get(f"{API}/invitations/verify/{old_token}").json()["valid"] is False

    def test_expired_invitation(self, client, db_session, owner, make_user, auth_headers):
        client.post(f"{API}/invitations", headers=auth_headers(owner), json={"email": "rina@majujaya.co.id"})
        invitation = db_session.execute(select(Invitation)).scalar_one()
        invitation.expires_at = utcnow() - timedelta(days=1)
        db_session.commit()
        rina = make_user("rina@majujaya.co.id")

        assert client.get(f"{API}/invitations/verify/{invitation.token}").json()["error"] == "Undangan sudah kedaluwarsa"

        response = client.post(f"{API}/invitations/accept", headers=auth_headers(rina), json={"token": invitation.token})
        assert response.status_code == 409
        db_session.refresh(invitation)
        assert invitation.status == "expired"

    def test_cancel_foreign_invitation(self, client, db_session, owner, other_owner, auth_headers):
        invitation_id = client.post(
            f"{API}/invitations", headers=auth_headers(other_owner), json={"email": "rina@example.com"}
        ).json()["id"]

        response = client.post(f"{API}/invitations/{invitation_id}/cancel", headers=auth_headers(owner))
        assert response.status_code == 404

    def test_invitation_mail_uses_organization_smtp(self, client, owner, auth_headers, smtp, mail_html):
        headers = auth_headers(owner)
        client.put(f"{API}/email-settings", headers=headers, json={
            "smtp_host": "smtp.majujaya.co.id",
            "smtp_port": 587,
            "smtp_secure": False,
            "smtp_user": "billing@majujaya.co.id",
            "smtp_password": "rahasia-smtp",
            "sender_name": "PT Maju Jaya",
            "sender_email": "billing@majujaya.co.id",
        })

        client.post(f"{API}/invitations", headers=headers, json={"email": "rina@majujaya.co.id"})

        assert len(smtp.sent) == 1
        assert smtp.sent[0]["To"] == "rina@majujaya.co.id"
        assert "invitationToken=" in mail_html(smtp.sent[0])
