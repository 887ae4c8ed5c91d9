import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from camwatch.models.audit_log import AuditLog
from camwatch.models.client import Client
from camwatch.models.principal import Principal
from camwatch.models.profile import Profile
from camwatch.models.role import AppRole
from camwatch.models.role_assignment import RoleAssignment
from camwatch.models.tenant import Tenant
from camwatch.services.provisioning_service import PASSWORD_ALPHABET, generate_password


def principal_by_email(db_session, email: str) -> Principal | None:
    db_session.expire_all()
    return db_session.query(Principal).filter(Principal.email == email).first()


class TestPartnerProvisioning:
    def test_super_admin_creates_partner_with_new_tenant(self, client, db_session, super_admin, headers_for):
        response = client.post(
            "/api/provisioning/users",
            json={
                "email": "owner@citadel.test",
                "fullName": "Citadel Owner",
                "role": "partner_admin",
                "tenant": {"name": "Citadel CCTV", "email": "hq@citadel.test"},
            },
            headers=headers_for(super_admin),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "owner@citadel.test"
        assert len(data["password"]) == 12

        created = principal_by_email(db_session, "owner@citadel.test")
        tenant = db_session.query(Tenant).filter(Tenant.name == "Citadel CCTV").one()
        assignment = db_session.query(RoleAssignment).filter(RoleAssignment.user_id == created.id).one()
        assert assignment.role == AppRole.PARTNER_ADMIN
        assert assignment.tenant_id == tenant.id
        assert db_session.query(Profile).filter(Profile.user_id == created.id).count() == 1

    def test_new_partner_can_sign_in_with_returned_password(self, client, super_admin, tenant_a, headers_for):
        created = client.post(
            "/api/provisioning/users",
            json={
                "email": "second@acme.test",
                "fullName": "Second Owner",
                "role": "partner_admin",
                "tenantId": tenant_a.id,
            },
            headers=headers_for(super_admin),
        )

        login = client.post(
            "/api/auth/login",
            json={"email": "second@acme.test", "password": created.json()["password"]},
        )

        assert login.status_code == 200
        assert login.json()["redirect_to"] == "/partner/dashboard"

    def test_partner_requires_a_tenant(self, client, super_admin, headers_for):
        response = client.post(
            "/api/provisioning/users",
            json={"email": "lost@test.test", "fullName": "Lost", "role": "partner_admin"},
            headers=headers_for(super_admin),
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unknown_tenant_is_rejected(self, client, db_session, super_admin, headers_for):
        response = client.post(
            "/api/provisioning/users",
            json={"email": "x@test.test", "fullName": "X", "role": "partner_admin", "tenantId": 9999},
            headers=headers_for(super_admin),
        )

        assert response.status_code == 400
        assert principal_by_email(db_session, "x@test.test") is None


class TestClientProvisioning:
    def test_partner_creates_client_user_with_client_record(
        self, client, db_session, partner_a, tenant_a, headers_for
    ):
        response = client.post(
            "/api/provisioning/users",
            json={
                "email": "shop@bakery.test",
                "fullName": "Bakery Shop",
                "role": "client_user",
                "password": "chosen-secret",
                "clientData": {"name": "Bakery", "type": "pj", "phone": "555-0100"},
            },
            headers=headers_for(partner_a),
        )

        assert response.status_code == 200
        assert response.json()["password"] == "chosen-secret"

        created = principal_by_email(db_session, "shop@bakery.test")
        site = db_session.query(Client).filter(Client.principal_id == created.id).one()
        assert site.tenant_id == tenant_a.id
        assert site.name == "Bakery"
        assignment = db_session.query(RoleAssignment).filter(RoleAssignment.user_id == created.id).one()
        assert (assignment.role, assignment.tenant_id) == (AppRole.CLIENT_USER, tenant_a.id)

    def test_new_client_sees_own_dashboard(self, client, partner_a, headers_for):
        created = client.post(
            "/api/provisioning/users",
            json={
                "email": "shop@bakery.test",
                "fullName": "Bakery Shop",
                "role": "client_user",
                "clientData": {"name": "Bakery", "type": "pj"},
            },
            headers=headers_for(partner_a),
        )
        token = client.post(
            "/api/auth/login",
            json={"email": "shop@bakery.test", "password": created.json()["password"]},
        ).json()["access_token"]

        dashboard = client.get("/api/client/dashboard", headers={"Authorization": f"Bearer {token}"})

        assert dashboard.status_code == 200
        assert dashboard.json()["error"] is None

    def test_partner_cannot_place_client_in_other_tenant(
        self, client, db_session, partner_a, tenant_b, headers_for
    ):
        response = client.post(
            "/api/provisioning/users",
            json={
                "email": "sneaky@test.test",
                "fullName": "Sneaky",
                "role": "client_user",
                "tenantId": tenant_b.id,
            },
            headers=headers_for(partner_a),
        )

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert principal_by_email(db_session, "sneaky@test.test") is None


class TestAuthorizationMatrix:
    @pytest.mark.parametrize(
        "caller, role",
        [
            ("partner", "partner_admin"),
            ("viewer", "partner_admin"),
            ("viewer", "client_user"),
            ("admin", "client_user"),
            ("admin", "super_admin"),
        ],
    )
    def test_disallowed_combinations(
        self, client, db_session, make_principal, super_admin, partner_a, tenant_a, headers_for, caller, role
    ):
        callers = {
            "admin": super_admin,
            "partner": partner_a,
            "viewer": make_principal("viewer@acme.test", (AppRole.CLIENT_USER, tenant_a.id)),
        }

        response = client.post(
            "/api/provisioning/users",
            json={"email": "new@test.test", "fullName": "New", "role": role, "tenantId": tenant_a.id},
            headers=headers_for(callers[caller]),
        )

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert set(response.json()) == {"success", "error"}
        assert principal_by_email(db_session, "new@test.test") is None

    def test_anonymous_caller_rejected(self, client):
        response = client.post(
            "/api/provisioning/users",
            json={"email": "new@test.test", "fullName": "New", "role": "client_user"},
        )

        assert response.status_code in (401, 403)


class TestTransactionality:
    def test_duplicate_email_rejected(self, client, super_admin, partner_a, tenant_a, headers_for):
        response = client.post(
            "/api/provisioning/users",
            json={"email": "OWNER@acme.test", "fullName": "Dup", "role": "partner_admin", "tenantId": tenant_a.id},
            headers=headers_for(super_admin),
        )

        assert response.status_code == 400
        assert "already exists" in response.json()["error"]

    def test_failure_rolls_back_every_row(self, client, db_session, super_admin, headers_for):
        headers = headers_for(super_admin)

        with patch(
            "camwatch.services.provisioning_service.AuditLogRepository.add",
            side_effect=OperationalError("INSERT", {}, Exception("disk full")),
        ):
            response = client.post(
                "/api/provisioning/users",
                json={
                    "email": "owner@citadel.test",
                    "fullName": "Citadel Owner",
                    "role": "partner_admin",
                    "tenant": {"name": "Citadel CCTV", "email": "hq@citadel.test"},
                },
                headers=headers,
            )

        assert response.status_code == 400
        assert response.json()["success"] is False
        db_session.expire_all()
        assert principal_by_email(db_session, "owner@citadel.test") is None
        assert db_session.query(Tenant).filter(Tenant.name == "Citadel CCTV").count() == 0
        assert db_session.query(Profile).filter(Profile.email == "owner@citadel.test").count() == 0
        assert db_session.query(RoleAssignment).count() == 1  # the super admin's own

    def test_audit_entry_written(self, client, db_session, partner_a, tenant_a, headers_for):
        client.post(
            "/api/provisioning/users",
            json={"email": "shop@bakery.test", "fullName": "Bakery Shop", "role": "client_user"},
            headers=headers_for(partner_a),
        )

        entry = db_session.query(AuditLog).one()
        assert entry.action == "CREATE_USER"
        assert entry.resource_type == "user"
        assert entry.user_id == partner_a.id
        assert entry.tenant_id == tenant_a.id
        assert entry.metadata_ == {
            "created_user_email": "shop@bakery.test",
            "created_user_role": "client_user",
            "created_user_name": "Bakery Shop",
        }


class TestGeneratePassword:
    def test_length_and_alphabet(self):
        password = generate_password()

        assert len(password) == 12
        assert set(password) <= set(PASSWORD_ALPHABET)

    def test_custom_length(self):
        assert len(generate_password(20)) == 20
