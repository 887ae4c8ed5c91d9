import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from camwatch.core.exceptions import NotFoundException, ValidationException
from camwatch.models.tenant_branding import TenantBranding
from camwatch.models.tenant_domain import TenantDomain
from camwatch.schemas.domain_schemas import DomainCreate
from camwatch.services.branding import build_theme
from camwatch.services.tenant_resolver import TenantResolver, normalize_hostname


@pytest.fixture
def acme_domains(db_session, tenant_a):
    """Two domains for tenant A: the primary and a secondary"""
    primary = TenantDomain(
        tenant_id=tenant_a.id, domain="cameras.acme.test", subdomain="acme.camwatch.test", is_primary=True
    )
    secondary = TenantDomain(tenant_id=tenant_a.id, domain="watch.acme.test", is_primary=False)
    db_session.add_all([primary, secondary])
    db_session.commit()
    return primary, secondary


def primaries(db_session, tenant_id: int) -> list[int]:
    db_session.expire_all()
    return [
        d.id
        for d in db_session.query(TenantDomain).filter(
            TenantDomain.tenant_id == tenant_id, TenantDomain.is_primary.is_(True)
        )
    ]


class TestDetectTenant:
    def test_unknown_host_serves_default_platform(self, db_session):
        detection = TenantResolver(db_session).detect_tenant("app.example.com")

        assert detection.tenant_id is None
        assert detection.domain is None
        assert detection.branding is None

    def test_matches_custom_domain(self, db_session, tenant_a, acme_domains):
        detection = TenantResolver(db_session).detect_tenant("cameras.acme.test")

        assert detection.tenant_id == tenant_a.id
        assert detection.domain.id == acme_domains[0].id

    def test_matches_subdomain_ignoring_case_and_port(self, db_session, tenant_a, acme_domains):
        detection = TenantResolver(db_session).detect_tenant("ACME.camwatch.test:8443")

        assert detection.tenant_id == tenant_a.id

    def test_inactive_domain_is_not_matched(self, db_session, acme_domains):
        _, secondary = acme_domains
        secondary.is_active = False
        db_session.commit()

        assert TenantResolver(db_session).detect_tenant("watch.acme.test").tenant_id is None

    def test_branding_is_returned_with_tenant(self, db_session, tenant_a, acme_domains):
        db_session.add(TenantBranding(tenant_id=tenant_a.id, company_name="Acme", primary_color="#ff0000"))
        db_session.commit()

        detection = TenantResolver(db_session).detect_tenant("cameras.acme.test")

        assert detection.branding.company_name == "Acme"

    def test_store_error_degrades_to_no_tenant(self, db_session, acme_domains):
        resolver = TenantResolver(db_session)
        with patch.object(
            resolver.domain_repo,
            "find_active_by_hostname",
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            detection = resolver.detect_tenant("cameras.acme.test")

        assert detection.tenant_id is None

    def test_normalize_hostname(self):
        assert normalize_hostname(" Cameras.Acme.Test:443 ") == "cameras.acme.test"
        assert normalize_hostname("[::1]:8000") == "[::1]"


class TestPrimaryDomain:
    def test_set_primary_leaves_exactly_one(self, db_session, tenant_a, acme_domains):
        primary, secondary = acme_domains

        result = TenantResolver(db_session).set_primary_domain(tenant_a.id, secondary.id)

        assert result.is_primary
        assert primaries(db_session, tenant_a.id) == [secondary.id]

    def test_failed_update_keeps_previous_primary(self, db_session, tenant_a, acme_domains):
        primary, secondary = acme_domains
        resolver = TenantResolver(db_session)
        real_execute = db_session.execute

        def failing_update(statement, *args, **kwargs):
            if getattr(statement, "is_dml", False):
                raise OperationalError("UPDATE", {}, Exception("db down"))
            return real_execute(statement, *args, **kwargs)

        with patch.object(db_session, "execute", side_effect=failing_update):
            with pytest.raises(OperationalError):
                resolver.set_primary_domain(tenant_a.id, secondary.id)

        assert primaries(db_session, tenant_a.id) == [primary.id]

    def test_other_tenants_primary_is_untouched(self, db_session, tenant_a, tenant_b, acme_domains):
        beacon = TenantDomain(tenant_id=tenant_b.id, domain="beacon.test", is_primary=True)
        db_session.add(beacon)
        db_session.commit()

        TenantResolver(db_session).set_primary_domain(tenant_a.id, acme_domains[1].id)

        assert primaries(db_session, tenant_b.id) == [beacon.id]

    def test_inactive_domain_cannot_become_primary(self, db_session, tenant_a, acme_domains):
        primary, secondary = acme_domains
        secondary.is_active = False
        db_session.commit()

        with pytest.raises(ValidationException):
            TenantResolver(db_session).set_primary_domain(tenant_a.id, secondary.id)

        assert primaries(db_session, tenant_a.id) == [primary.id]
        assert TenantResolver(db_session).get_tenant_url(tenant_a.id) == "https://cameras.acme.test"

    def test_foreign_domain_is_not_found(self, db_session, tenant_b, acme_domains):
        with pytest.raises(NotFoundException):
            TenantResolver(db_session).set_primary_domain(tenant_b.id, acme_domains[0].id)

    def test_tenant_url_uses_primary_domain(self, db_session, tenant_a, tenant_b, acme_domains):
        resolver = TenantResolver(db_session)

        assert resolver.get_tenant_url(tenant_a.id) == "https://cameras.acme.test"
        assert resolver.get_tenant_url(tenant_b.id) is None


class TestDomainManagement:
    def test_first_domain_becomes_primary(self, db_session, tenant_b):
        resolver = TenantResolver(db_session)

        first = resolver.add_domain(tenant_b.id, DomainCreate(domain="Beacon.test"))
        second = resolver.add_domain(tenant_b.id, DomainCreate(domain="alt.beacon.test"))

        assert first.is_primary
        assert first.domain == "beacon.test"
        assert not second.is_primary

    def test_domain_in_use_is_rejected(self, db_session, tenant_b, acme_domains):
        with pytest.raises(ValidationException):
            TenantResolver(db_session).add_domain(tenant_b.id, DomainCreate(domain="cameras.acme.test"))

    def test_toggle_flips_active_flag(self, db_session, tenant_a, acme_domains):
        domain = TenantResolver(db_session).toggle_domain_active(tenant_a.id, acme_domains[1].id)

        assert domain.is_active is False

    def test_inactive_domain_still_claims_its_host(self, db_session, tenant_a, tenant_b):
        resolver = TenantResolver(db_session)
        shop = resolver.add_domain(tenant_a.id, DomainCreate(domain="shop.test"))
        resolver.toggle_domain_active(tenant_a.id, shop.id)

        with pytest.raises(ValidationException):
            resolver.add_domain(tenant_b.id, DomainCreate(domain="shop.test"))

        resolver.toggle_domain_active(tenant_a.id, shop.id)
        assert resolver.detect_tenant("shop.test").tenant_id == tenant_a.id

    def test_reactivation_cannot_take_over_active_host(self, db_session, tenant_a, tenant_b):
        dormant = TenantDomain(tenant_id=tenant_a.id, domain="shop.test", is_active=False)
        live = TenantDomain(tenant_id=tenant_b.id, domain="beacon.test", subdomain="shop.test", is_primary=True)
        db_session.add_all([dormant, live])
        db_session.commit()
        resolver = TenantResolver(db_session)

        with pytest.raises(ValidationException):
            resolver.toggle_domain_active(tenant_a.id, dormant.id)

        db_session.expire_all()
        assert dormant.is_active is False
        assert resolver.detect_tenant("shop.test").tenant_id == tenant_b.id


class TestBuildTheme:
    def test_defaults_without_branding(self):
        theme = build_theme(None)

        assert theme.css_variables == {
            "--primary": "#3b82f6",
            "--secondary": "#1e40af",
            "--accent": "#06b6d4",
        }
        assert theme.company_name is None
        assert theme.logo_url is None

    def test_branding_overrides_defaults(self):
        branding = TenantBranding(
            tenant_id=1,
            primary_color="#ff0000",
            company_name="Acme",
            favicon_url="https://cdn.acme.test/favicon.ico",
            custom_css="body { margin: 0 }",
        )

        theme = build_theme(branding)

        assert theme.css_variables["--primary"] == "#ff0000"
        assert theme.css_variables["--secondary"] == "#1e40af"
        assert theme.company_name == "Acme"
        assert theme.favicon_url == "https://cdn.acme.test/favicon.ico"
        assert theme.custom_css == "body { margin: 0 }"


class TestTenantEndpoints:
    def test_detect_unknown_host(self, client):
        response = client.get("/api/tenant/detect", params={"hostname": "app.example.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["tenant_id"] is None
        assert data["domain"] is None
        assert data["branding"] is None
        assert data["theme"]["css_variables"]["--primary"] == "#3b82f6"

    def test_detect_falls_back_to_host_header(self, client, tenant_a, acme_domains):
        response = client.get("/api/tenant/detect", headers={"Host": "watch.acme.test"})

        assert response.status_code == 200
        assert response.json()["tenant_id"] == tenant_a.id

    def test_tenant_url(self, client, tenant_a, acme_domains):
        response = client.get(f"/api/tenant/url/{tenant_a.id}")

        assert response.json() == {"tenant_id": tenant_a.id, "url": "https://cameras.acme.test"}

    def test_partner_manages_own_domains(self, client, partner_a, headers_for, acme_domains):
        headers = headers_for(partner_a)
        _, secondary = acme_domains

        listed = client.get("/api/tenant/domains", headers=headers)
        promoted = client.post(f"/api/tenant/domains/{secondary.id}/primary", headers=headers)
        relisted = client.get("/api/tenant/domains", headers=headers)

        assert listed.status_code == 200
        assert len(listed.json()) == 2
        assert promoted.status_code == 200
        assert promoted.json()["is_primary"] is True
        assert [d["is_primary"] for d in relisted.json()].count(True) == 1

    def test_partner_cannot_touch_other_tenants_domain(self, client, partner_b, headers_for, acme_domains):
        response = client.post(
            f"/api/tenant/domains/{acme_domains[0].id}/primary", headers=headers_for(partner_b)
        )

        assert response.status_code == 404

    def test_partner_cannot_select_other_tenant(self, client, partner_b, tenant_a, headers_for):
        response = client.get(
            "/api/tenant/domains", params={"tenant_id": tenant_a.id}, headers=headers_for(partner_b)
        )

        assert response.status_code == 403

    def test_add_domain_endpoint(self, client, partner_b, headers_for):
        response = client.post(
            "/api/tenant/domains", json={"domain": "beacon.test"}, headers=headers_for(partner_b)
        )

        assert response.status_code == 201
        assert response.json()["is_primary"] is True

    def test_branding_upsert_and_read(self, client, partner_a, headers_for):
        headers = headers_for(partner_a)

        missing = client.get("/api/tenant/branding", headers=headers)
        created = client.put(
            "/api/tenant/branding", json={"company_name": "Acme", "primary_color": "#123456"}, headers=headers
        )
        updated = client.put("/api/tenant/branding", json={"accent_color": "#abcdef"}, headers=headers)
        theme = client.get("/api/tenant/theme", headers=headers)

        assert missing.status_code == 404
        assert created.status_code == 200
        assert updated.json()["company_name"] == "Acme"
        assert updated.json()["accent_color"] == "#abcdef"
        assert theme.json()["css_variables"]["--primary"] == "#123456"

    def test_invalid_colour_is_rejected(self, client, partner_a, headers_for):
        response = client.put(
            "/api/tenant/branding", json={"primary_color": "red"}, headers=headers_for(partner_a)
        )

        assert response.status_code == 422

    def test_client_user_cannot_manage_domains(self, client, make_principal, tenant_a, headers_for):
        from camwatch.models.role import AppRole

        viewer = make_principal("viewer@acme.test", (AppRole.CLIENT_USER, tenant_a.id))

        response = client.get("/api/tenant/domains", headers=headers_for(viewer))

        assert response.status_code == 403
