from datetime import datetime, timedelta

from camwatch.models.client import Client
from camwatch.models.ip_authorization import IPAuthorization
from camwatch.models.license import License
from camwatch.models.tenant import Tenant


class TestTenantAdministration:
    def test_create_and_list_tenants(self, client, super_admin, headers_for):
        headers = headers_for(super_admin)

        created = client.post(
            "/api/admin/tenants",
            json={"name": "Citadel CCTV", "email": "hq@citadel.test", "plan": "premium"},
            headers=headers,
        )
        listed = client.get("/api/admin/tenants", headers=headers)

        assert created.status_code == 201
        assert created.json()["status"] == "active"
        assert created.json()["plan"] == "premium"
        assert [t["name"] for t in listed.json()] == ["Citadel CCTV"]

    def test_update_tenant_status(self, client, super_admin, tenant_a, headers_for):
        response = client.patch(
            f"/api/admin/tenants/{tenant_a.id}", json={"status": "suspended"}, headers=headers_for(super_admin)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "suspended"
        assert response.json()["name"] == "Acme Security"

    def test_delete_tenant_cascades(self, client, db_session, super_admin, tenant_a, make_site, headers_for):
        make_site(tenant_a, "Bakery")

        response = client.delete(f"/api/admin/tenants/{tenant_a.id}", headers=headers_for(super_admin))

        assert response.status_code == 200
        assert response.json()["deleted_tenant_id"] == tenant_a.id
        assert db_session.query(Tenant).count() == 0
        assert db_session.query(Client).count() == 0

    def test_missing_tenant_not_found(self, client, super_admin, headers_for):
        response = client.get("/api/admin/tenants/9999", headers=headers_for(super_admin))

        assert response.status_code == 404

    def test_partner_cannot_administer_tenants(self, client, partner_a, headers_for):
        response = client.get("/api/admin/tenants", headers=headers_for(partner_a))

        assert response.status_code == 403
        assert response.json()["detail"] == "super_admin role required"

    def test_invalid_plan_rejected(self, client, super_admin, headers_for):
        response = client.post(
            "/api/admin/tenants",
            json={"name": "Bad", "email": "bad@test.test", "plan": "platinum"},
            headers=headers_for(super_admin),
        )

        assert response.status_code == 422


class TestAdminDashboard:
    def test_dashboard_lists_platform_records(
        self, client, db_session, super_admin, tenant_a, tenant_b, headers_for
    ):
        db_session.add_all(
            [
                License(tenant_id=tenant_a.id, license_type="pro", ai_features=["lpr"]),
                License(tenant_id=tenant_b.id, license_type="basic", is_active=False),
                IPAuthorization(tenant_id=tenant_a.id, ip_address="10.0.0.1"),
            ]
        )
        db_session.commit()

        response = client.get("/api/admin/dashboard", headers=headers_for(super_admin))

        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        assert len(data["tenants"]) == 2
        assert len(data["licenses"]) == 2
        assert data["ip_authorizations"][0]["ip_address"] == "10.0.0.1"
        # the super admin's own session is active
        assert [s["user_id"] for s in data["sessions"]] == [super_admin.id]

    def test_active_licenses_filter(self, client, db_session, super_admin, tenant_a, headers_for):
        db_session.add_all(
            [
                License(tenant_id=tenant_a.id, license_type="pro"),
                License(
                    tenant_id=tenant_a.id,
                    license_type="trial",
                    is_active=False,
                    expires_at=datetime(2026, 1, 1) - timedelta(days=1),
                ),
            ]
        )
        db_session.commit()

        response = client.get(
            "/api/admin/licenses", params={"active_only": True}, headers=headers_for(super_admin)
        )

        assert [lic["license_type"] for lic in response.json()] == ["pro"]

    def test_expired_sessions_are_not_listed(self, client, super_admin, partner_a, make_token, headers_for):
        make_token(partner_a, expired=True)

        response = client.get("/api/admin/sessions", headers=headers_for(super_admin))

        assert [s["user_id"] for s in response.json()] == [super_admin.id]

    def test_super_admin_opens_any_tenant_dashboard(
        self, client, super_admin, tenant_b, make_site, headers_for
    ):
        make_site(tenant_b, "Pharmacy", alerts=3)

        response = client.get(f"/api/admin/tenants/{tenant_b.id}/dashboard", headers=headers_for(super_admin))

        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        assert data["tenant_id"] == tenant_b.id
        assert [c["name"] for c in data["clients"]] == ["Pharmacy"]
        assert len(data["alerts"]) == 3

    def test_client_user_cannot_open_admin_dashboard(self, client, make_principal, tenant_a, headers_for):
        from camwatch.models.role import AppRole

        viewer = make_principal("viewer@acme.test", (AppRole.CLIENT_USER, tenant_a.id))

        response = client.get("/api/admin/dashboard", headers=headers_for(viewer))

        assert response.status_code == 403


class TestPlatformEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "CamWatch API"
