import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from camwatch.database import get_db
from camwatch.models.base import Base
from camwatch.core.security import create_access_token, hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from camwatch.models.principal import Principal
from camwatch.models.profile import Profile
from camwatch.models.role import AppRole
from camwatch.models.role_assignment import RoleAssignment
from camwatch.models.tenant import Tenant
from camwatch.models.tenant_domain import TenantDomain
from camwatch.models.tenant_branding import TenantBranding
from camwatch.models.tenant_stats import TenantStats
from camwatch.models.license import License
from camwatch.models.ip_authorization import IPAuthorization
from camwatch.models.client import Client, ClientType
from camwatch.models.camera import Camera
from camwatch.models.alert import Alert, AlertType, AlertSeverity
from camwatch.models.user_session import UserSession
from camwatch.models.audit_log import AuditLog
# Import FastAPI app AFTER model imports
from camwatch.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse"


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_principal(db_session):
    """
    Factory creating a principal with the given role assignments.

    Usage:
        partner = make_principal("p@acme.test", (AppRole.PARTNER_ADMIN, tenant.id))
    """

    def _make(email: str, *roles: tuple[AppRole, int | None], is_active: bool = True) -> Principal:
        principal = Principal(
            email=email,
            full_name=email.split("@")[0].title(),
            password_hash=hash_password(TEST_PASSWORD),
            is_active=is_active,
        )
        db_session.add(principal)
        db_session.flush()
        db_session.add(Profile(user_id=principal.id, email=email, full_name=principal.full_name))
        for role, tenant_id in roles:
            db_session.add(RoleAssignment(user_id=principal.id, role=role, tenant_id=tenant_id))
        db_session.commit()
        db_session.refresh(principal)
        return principal

    return _make


@pytest.fixture
def make_token(db_session):
    """
    Factory issuing a bearer token backed by a sessions row.

    Args (of the returned callable):
        principal: Principal to sign in
        expired: If True, both token and session are already expired
    """

    def _make(principal: Principal, expired: bool = False) -> str:
        if expired:
            expires_at = datetime.now(UTC) - timedelta(minutes=5)
        else:
            expires_at = datetime.now(UTC) + timedelta(minutes=15)
        record = UserSession(
            user_id=principal.id,
            ip_address="127.0.0.1",
            expires_at=expires_at.replace(tzinfo=None),
        )
        db_session.add(record)
        db_session.commit()
        return create_access_token(principal.id, record.id, expires_at)

    return _make


@pytest.fixture
def headers_for(make_token):
    """Authorization headers for a principal"""

    def _headers(principal: Principal) -> dict:
        return {"Authorization": f"Bearer {make_token(principal)}"}

    return _headers


@pytest.fixture
def tenant_a(db_session):
    tenant = Tenant(name="Acme Security", email="ops@acme.test")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def tenant_b(db_session):
    tenant = Tenant(name="Beacon Watch", email="ops@beacon.test")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def super_admin(make_principal):
    return make_principal("root@platform.test", (AppRole.SUPER_ADMIN, None))


@pytest.fixture
def partner_a(make_principal, tenant_a):
    return make_principal("owner@acme.test", (AppRole.PARTNER_ADMIN, tenant_a.id))


@pytest.fixture
def partner_b(make_principal, tenant_b):
    return make_principal("owner@beacon.test", (AppRole.PARTNER_ADMIN, tenant_b.id))


@pytest.fixture
def make_site(db_session):
    """
    Factory creating a client with one camera and a number of alerts.

    Returns:
        Tuple of (client, camera, alerts)
    """

    def _make(tenant: Tenant, name: str, principal: Principal | None = None, alerts: int = 1):
        site = Client(
            tenant_id=tenant.id,
            principal_id=principal.id if principal else None,
            name=name,
            type=ClientType.PJ,
        )
        db_session.add(site)
        db_session.flush()
        camera = Camera(tenant_id=tenant.id, client_id=site.id, name=f"{name} gate", location="Gate")
        db_session.add(camera)
        db_session.flush()
        created = []
        base = datetime(2026, 1, 1, 12, 0, 0)
        for i in range(alerts):
            alert = Alert(
                tenant_id=tenant.id,
                client_id=site.id,
                camera_id=camera.id,
                type=AlertType.MOVEMENT,
                severity=AlertSeverity.MEDIUM,
                message=f"{name} movement {i}",
                created_at=base + timedelta(minutes=i),
            )
            db_session.add(alert)
            created.append(alert)
        db_session.commit()
        return site, camera, created

    return _make


@pytest.fixture
def password():
    """Plain password of every principal made by make_principal"""
    return TEST_PASSWORD
