from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from camwatch.models.role import AppRole
from camwatch.repositories.role_assignment_repository import RoleAssignmentRepository
from camwatch.services.role_resolver import RoleResolver
from camwatch.services.route_guard import (
    GuardOutcome,
    evaluate_navigation,
    home_for_role,
    is_safe_return_path,
    login_redirect,
    post_login_destination,
    required_role_for,
)
from camwatch.services.session_store import SessionStore


def signed_in(db_session, principal) -> tuple[SessionStore, RoleResolver]:
    session = SessionStore()
    resolver = RoleResolver(RoleAssignmentRepository(db_session), session)
    session.set_session(principal, "token", 1)
    return session, resolver


class TestEvaluateNavigation:
    def test_pending_while_identity_unresolved(self, db_session):
        session = SessionStore()
        resolver = RoleResolver(RoleAssignmentRepository(db_session), session)

        decision = evaluate_navigation("/admin/dashboard", session, resolver)

        assert decision.outcome == GuardOutcome.PENDING
        assert decision.redirect_to is None

    def test_anonymous_redirects_to_login_with_next(self, db_session):
        session = SessionStore()
        session.clear()
        resolver = RoleResolver(RoleAssignmentRepository(db_session), session)

        decision = evaluate_navigation("/admin/dashboard", session, resolver)

        assert decision.outcome == GuardOutcome.UNAUTHENTICATED
        assert decision.redirect_to == "/auth/login?next=%2Fadmin%2Fdashboard"
        assert decision.return_to == "/admin/dashboard"

    def test_missing_role_is_unauthorized(self, db_session, partner_a):
        session, resolver = signed_in(db_session, partner_a)

        decision = evaluate_navigation("/admin/tenants", session, resolver)

        assert decision.outcome == GuardOutcome.UNAUTHORIZED
        assert decision.redirect_to == "/unauthorized"

    def test_role_holder_is_allowed(self, db_session, partner_a):
        session, resolver = signed_in(db_session, partner_a)

        decision = evaluate_navigation("/partner/dashboard", session, resolver)

        assert decision.allowed

    def test_public_path_only_needs_sign_in(self, db_session, make_principal):
        principal = make_principal("noroles@test.test")
        session, resolver = signed_in(db_session, principal)

        assert evaluate_navigation("/settings", session, resolver).allowed

    def test_required_tenant_must_match(self, db_session, partner_a, tenant_a, tenant_b):
        session, resolver = signed_in(db_session, partner_a)

        allowed = evaluate_navigation(
            "/partner/dashboard", session, resolver, required_tenant=tenant_a.id
        )
        denied = evaluate_navigation(
            "/partner/dashboard", session, resolver, required_tenant=tenant_b.id
        )

        assert allowed.allowed
        assert denied.outcome == GuardOutcome.UNAUTHORIZED

    def test_revoked_role_applies_on_next_navigation(self, db_session, partner_a):
        session, resolver = signed_in(db_session, partner_a)
        assert evaluate_navigation("/partner/dashboard", session, resolver).allowed

        for assignment in list(partner_a.role_assignments):
            db_session.delete(assignment)
        db_session.commit()
        resolver.refresh()

        decision = evaluate_navigation("/partner/dashboard", session, resolver)
        assert decision.outcome == GuardOutcome.UNAUTHORIZED

    def test_store_failure_keeps_navigation_pending(self, partner_a):
        session = SessionStore()
        repo = MagicMock()
        repo.get_by_principal.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        resolver = RoleResolver(repo, session)
        session.set_session(partner_a, "token", 1)

        decision = evaluate_navigation("/partner/dashboard", session, resolver)

        assert decision.outcome == GuardOutcome.PENDING


class TestPostLoginDestination:
    def test_returns_preserved_path_when_allowed(self, db_session, super_admin):
        session, resolver = signed_in(db_session, super_admin)

        assert post_login_destination("/admin/dashboard", session, resolver) == "/admin/dashboard"

    def test_falls_back_to_role_home_when_not_allowed(self, db_session, partner_a):
        session, resolver = signed_in(db_session, partner_a)

        assert post_login_destination("/admin/dashboard", session, resolver) == "/partner/dashboard"

    def test_unsafe_next_is_ignored(self, db_session, super_admin):
        session, resolver = signed_in(db_session, super_admin)

        assert post_login_destination("//evil.test/admin", session, resolver) == "/admin/dashboard"
        assert post_login_destination("https://evil.test", session, resolver) == "/admin/dashboard"

    def test_no_role_goes_to_unauthorized(self, db_session, make_principal):
        principal = make_principal("noroles@test.test")
        session, resolver = signed_in(db_session, principal)

        assert post_login_destination(None, session, resolver) == "/unauthorized"
        assert resolver.is_loaded

    def test_role_home_without_next_path(self, db_session, partner_a):
        session, resolver = signed_in(db_session, partner_a)

        assert post_login_destination(None, session, resolver) == "/partner/dashboard"
        assert resolver.is_loaded
        assert resolver.get_primary_role() == AppRole.PARTNER_ADMIN


class TestHelpers:
    def test_required_role_for_prefixes(self):
        assert required_role_for("/admin") == AppRole.SUPER_ADMIN
        assert required_role_for("/admin/tenants/3") == AppRole.SUPER_ADMIN
        assert required_role_for("/partner/cameras") == AppRole.PARTNER_ADMIN
        assert required_role_for("/client/dashboard") == AppRole.CLIENT_USER
        assert required_role_for("/administrator") is None
        assert required_role_for("/") is None

    def test_login_redirect_encodes_query(self):
        assert login_redirect("/client/alerts?id=4") == "/auth/login?next=%2Fclient%2Falerts%3Fid%3D4"

    def test_home_for_role(self):
        assert home_for_role(AppRole.CLIENT_USER) == "/client/dashboard"
        assert home_for_role(None) == "/unauthorized"

    def test_safe_return_paths(self):
        assert is_safe_return_path("/partner/dashboard")
        assert not is_safe_return_path(None)
        assert not is_safe_return_path("")
        assert not is_safe_return_path("//evil.test")
        assert not is_safe_return_path("/\\evil.test")


class TestGuardEndpoint:
    def test_anonymous_guard_check(self, client):
        response = client.get("/api/navigation/guard", params={"path": "/admin/dashboard"})

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "unauthenticated"
        assert data["redirect_to"] == "/auth/login?next=%2Fadmin%2Fdashboard"
        assert data["return_to"] == "/admin/dashboard"

    def test_invalid_token_is_treated_as_anonymous(self, client):
        response = client.get(
            "/api/navigation/guard",
            params={"path": "/partner/dashboard"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "unauthenticated"

    def test_signed_in_guard_check(self, client, partner_a, headers_for):
        headers = headers_for(partner_a)

        allowed = client.get("/api/navigation/guard", params={"path": "/partner/dashboard"}, headers=headers)
        denied = client.get("/api/navigation/guard", params={"path": "/admin/dashboard"}, headers=headers)

        assert allowed.json()["outcome"] == "allowed"
        assert denied.json()["outcome"] == "unauthorized"
        assert denied.json()["redirect_to"] == "/unauthorized"

    def test_login_then_guard_round_trip(self, client, partner_a, password):
        login = client.post("/api/auth/login", json={"email": "owner@acme.test", "password": password})
        body = login.json()
        headers = {"Authorization": f"Bearer {body['access_token']}"}

        home = client.get("/api/navigation/guard", params={"path": body["redirect_to"]}, headers=headers)
        admin = client.get("/api/navigation/guard", params={"path": "/admin/dashboard"}, headers=headers)

        assert login.status_code == 200
        assert body["primary_role"] == "partner_admin"
        assert body["redirect_to"] == "/partner/dashboard"
        assert home.json()["outcome"] == "allowed"
        assert admin.json()["outcome"] == "unauthorized"
