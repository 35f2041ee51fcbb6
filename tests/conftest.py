# tests/conftest.py
"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database with foreign keys enforced,
so ON DELETE CASCADE / SET NULL behave as they do in production.
"""
import os

# Must be set before orgpanel.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orgpanel.core.database import create_db_engine, get_db
from orgpanel.models import Base, Company, CompanyStatus, Department, UserRole
from orgpanel.services.auth_service import AuthService, IdentityStore

PASSWORD = "correct-horse-battery"


@pytest.fixture
def engine():
    """In-memory database shared by every connection of one test"""
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def password():
    """Password every factory-made user signs in with"""
    return PASSWORD


# ==================== FACTORIES ====================

@pytest.fixture
def make_company(db):
    def _make_company(name, slug=None, status=CompanyStatus.ACTIVE):
        company = Company(name=name, slug=slug or name.lower().replace(" ", "-"), status=status)
        db.add(company)
        db.commit()
        return company
    return _make_company


@pytest.fixture
def make_department(db):
    def _make_department(company, name):
        department = Department(name=name, company_id=company.id)
        db.add(department)
        db.commit()
        return department
    return _make_department


@pytest.fixture
def make_user(db):
    def _make_user(email, role=UserRole.MEMBER, company=None, department=None, password=PASSWORD, name=None):
        user = IdentityStore.create_credential_user(db, email, password, name or email.split("@")[0].title())
        user.role = role
        user.company_id = company.id if company else None
        user.department_id = department.id if department else None
        db.commit()
        return user
    return _make_user


# ==================== TENANT FIXTURES ====================

@pytest.fixture
def super_user(make_user):
    return make_user("root@example.com", role=UserRole.SUPER_USER)


@pytest.fixture
def acme(make_company):
    return make_company("Acme Corp", "acme-corp")


@pytest.fixture
def globex(make_company):
    return make_company("Globex", "globex")


@pytest.fixture
def acme_engineering(make_department, acme):
    return make_department(acme, "Engineering")


@pytest.fixture
def globex_sales(make_department, globex):
    return make_department(globex, "Sales")


@pytest.fixture
def acme_admin(make_user, acme):
    return make_user("admin@acme.com", role=UserRole.ADMIN, company=acme)


@pytest.fixture
def acme_member(make_user, acme):
    return make_user("member@acme.com", role=UserRole.MEMBER, company=acme)


@pytest.fixture
def globex_admin(make_user, globex):
    return make_user("admin@globex.com", role=UserRole.ADMIN, company=globex)


@pytest.fixture
def globex_member(make_user, globex):
    return make_user("member@globex.com", role=UserRole.MEMBER, company=globex)


@pytest.fixture
def admin_without_company(make_user):
    return make_user("drifter@example.com", role=UserRole.ADMIN)


# ==================== HTTP ====================

@pytest.fixture
def client(db):
    """Test client whose requests run against the test session"""
    from orgpanel.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = AuthService.create_jwt_token(user.id, user.email, UserRole(user.role).value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

