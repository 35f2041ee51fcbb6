# tests/test_user_service.py
import pytest

from orgpanel.models import Account, User, UserRole
from orgpanel.services.auth_service import IdentityStore
from orgpanel.services.company_service import CompanyService
from orgpanel.services.department_service import DepartmentService
from orgpanel.services.user_service import UserService
from orgpanel.utils.exceptions import (
    AdminHasNoCompanyError,
    CompanyNotFoundError,
    EmailTakenError,
    ForbiddenError,
    InvalidDepartmentError,
    NotFoundError,
    PasswordMismatchError,
    PasswordTooShortError,
    SelfDeleteForbiddenError,
    UnauthorizedError,
    ValidationError,
    WrongCurrentPasswordError,
)

NEW_PASSWORD = "a-brand-new-secret"


# ==================== CREATE ====================

class TestCreateUser:

    def test_super_user_creates_admin_in_company(self, db, super_user, acme):
        result = UserService.create_user(db, super_user.id, "Alice Admin", "Alice@Acme.com",
                                         "alice-password", "ADMIN", acme.id)
        assert result["email"] == "alice@acme.com"
        assert result["role"] == "ADMIN"
        assert result["company_id"] == str(acme.id)
        assert result["company_name"] == "Acme Corp"
        assert IdentityStore.verify_credential(db, "alice@acme.com", "alice-password")

    def test_super_user_creates_user_without_company(self, db, super_user):
        result = UserService.create_user(db, super_user.id, "Second Root", "root2@example.com",
                                         "root2-password", UserRole.SUPER_USER)
        assert result["role"] == "SUPER_USER"
        assert result["company_id"] is None

    def test_admin_company_is_forced(self, db, acme_admin, acme, globex):
        result = UserService.create_user(db, acme_admin.id, "Bob", "bob@acme.com",
                                         "bob-password", "MEMBER", globex.id)
        assert result["company_id"] == str(acme.id)

    def test_admin_cannot_create_super_user(self, db, acme_admin):
        with pytest.raises(ForbiddenError) as exc_info:
            UserService.create_user(db, acme_admin.id, "Mallory", "mallory@acme.com",
                                    "mallory-password", "SUPER_USER")
        assert exc_info.value.message == "Admins cannot create Super Users"
        assert db.query(User).filter(User.email == "mallory@acme.com").first() is None

    def test_admin_without_company(self, db, admin_without_company):
        with pytest.raises(AdminHasNoCompanyError):
            UserService.create_user(db, admin_without_company.id, "Nobody", "nobody@example.com", "nobody-password")

    def test_member_is_forbidden(self, db, acme_member):
        with pytest.raises(ForbiddenError):
            UserService.create_user(db, acme_member.id, "Eve", "eve@acme.com", "eve-password")

    def test_department_from_same_company(self, db, acme_admin, acme_engineering):
        result = UserService.create_user(db, acme_admin.id, "Carol", "carol@acme.com", "carol-password",
                                         department_id=acme_engineering.id)
        assert result["department_id"] == str(acme_engineering.id)
        assert result["department_name"] == "Engineering"

    def test_department_from_other_company_as_admin(self, db, acme_admin, globex_sales):
        with pytest.raises(InvalidDepartmentError):
            UserService.create_user(db, acme_admin.id, "Dave", "dave@acme.com", "dave-password",
                                    department_id=globex_sales.id)
        assert db.query(User).filter(User.email == "dave@acme.com").first() is None

    def test_department_from_other_company_as_super_user(self, db, super_user, acme, globex_sales):
        with pytest.raises(InvalidDepartmentError):
            UserService.create_user(db, super_user.id, "Dave", "dave@acme.com", "dave-password",
                                    "MEMBER", acme.id, globex_sales.id)

    def test_department_without_company(self, db, super_user, acme_engineering):
        with pytest.raises(InvalidDepartmentError):
            UserService.create_user(db, super_user.id, "Dave", "dave@example.com", "dave-password",
                                    department_id=acme_engineering.id)

    def test_unknown_company(self, db, super_user):
        with pytest.raises(CompanyNotFoundError):
            UserService.create_user(db, super_user.id, "Dave", "dave@example.com", "dave-password",
                                    "MEMBER", "00000000-0000-0000-0000-000000000000")

    def test_email_taken_ignores_case(self, db, acme_admin, acme_member):
        with pytest.raises(EmailTakenError) as exc_info:
            UserService.create_user(db, acme_admin.id, "Copy", "MEMBER@acme.com", "copy-password")
        assert exc_info.value.status_code == 409

    def test_short_password(self, db, acme_admin):
        with pytest.raises(PasswordTooShortError):
            UserService.create_user(db, acme_admin.id, "Frank", "frank@acme.com", "short")

    def test_invalid_role(self, db, super_user):
        with pytest.raises(ValidationError):
            UserService.create_user(db, super_user.id, "Gina", "gina@acme.com", "gina-password", "OWNER")

    def test_creates_credential_account(self, db, super_user):
        result = UserService.create_user(db, super_user.id, "Hank", "hank@example.com", "hank-password")
        account = db.query(Account).join(User).filter(User.email == "hank@example.com").one()
        assert str(account.user_id) == result["id"]
        assert account.provider_id == "credential"
        assert account.password_hash != "hank-password"


# ==================== UPDATE ====================

class TestUpdateUser:

    def test_admin_updates_member(self, db, acme_admin, acme_member, acme_engineering):
        result = UserService.update_user(db, acme_admin.id, acme_member.id, name="Renamed Member",
                                         role="ADMIN", department_id=str(acme_engineering.id))
        assert result["name"] == "Renamed Member"
        assert result["role"] == "ADMIN"
        assert result["department_name"] == "Engineering"

    def test_department_is_kept_unless_passed(self, db, acme_admin, acme, acme_engineering, make_user):
        engineer = make_user("engineer@acme.com", company=acme, department=acme_engineering)
        result = UserService.update_user(db, acme_admin.id, engineer.id, name="Still Engineering")
        assert result["department_id"] == str(acme_engineering.id)

    def test_none_clears_department(self, db, acme_admin, acme, acme_engineering, make_user):
        engineer = make_user("engineer@acme.com", company=acme, department=acme_engineering)
        result = UserService.update_user(db, acme_admin.id, engineer.id, department_id=None)
        assert result["department_id"] is None

    def test_admin_cannot_promote_to_super_user(self, db, acme_admin, acme_member):
        with pytest.raises(ForbiddenError):
            UserService.update_user(db, acme_admin.id, acme_member.id, role="SUPER_USER")
        db.refresh(acme_member)
        assert acme_member.role == UserRole.MEMBER

    def test_admin_cannot_update_other_company(self, db, acme_admin, globex_member):
        with pytest.raises(ForbiddenError):
            UserService.update_user(db, acme_admin.id, globex_member.id, name="Hijacked")
        db.refresh(globex_member)
        assert globex_member.name == "Member"

    def test_admin_cannot_update_super_user(self, db, acme_admin, super_user):
        with pytest.raises(ForbiddenError):
            UserService.update_user(db, acme_admin.id, super_user.id, name="Demoted")

    def test_cross_tenant_department(self, db, super_user, acme_member, globex_sales):
        with pytest.raises(InvalidDepartmentError):
            UserService.update_user(db, super_user.id, acme_member.id, department_id=globex_sales.id)
        db.refresh(acme_member)
        assert acme_member.department_id is None

    def test_super_user_assigns_any_role(self, db, super_user, acme_admin):
        result = UserService.update_user(db, super_user.id, acme_admin.id, role=UserRole.SUPER_USER)
        assert result["role"] == "SUPER_USER"

    def test_unknown_user(self, db, super_user):
        with pytest.raises(NotFoundError):
            UserService.update_user(db, super_user.id, "00000000-0000-0000-0000-000000000000", name="Ghost")


# ==================== DELETE ====================

class TestDeleteUser:

    def test_admin_deletes_member(self, db, acme_admin, acme_member):
        member_id = acme_member.id
        assert UserService.delete_user(db, acme_admin.id, member_id) is True
        assert db.query(User).filter(User.id == member_id).first() is None
        assert db.query(Account).filter(Account.user_id == member_id).first() is None

    def test_admin_cannot_delete_admin(self, db, acme_admin, make_user, acme):
        other_admin = make_user("admin2@acme.com", role=UserRole.ADMIN, company=acme)
        with pytest.raises(ForbiddenError):
            UserService.delete_user(db, acme_admin.id, other_admin.id)

    def test_admin_cannot_delete_other_company_member(self, db, acme_admin, globex_member):
        with pytest.raises(ForbiddenError):
            UserService.delete_user(db, acme_admin.id, globex_member.id)

    @pytest.mark.parametrize("fixture_name", ["super_user", "acme_admin", "acme_member"])
    def test_nobody_deletes_themselves(self, request, db, fixture_name):
        user = request.getfixturevalue(fixture_name)
        with pytest.raises(SelfDeleteForbiddenError):
            UserService.delete_user(db, user.id, user.id)
        assert db.query(User).filter(User.id == user.id).count() == 1

    def test_super_user_deletes_admin(self, db, super_user, globex_admin):
        admin_id = globex_admin.id
        UserService.delete_user(db, super_user.id, admin_id)
        assert db.query(User).filter(User.id == admin_id).first() is None


# ==================== PASSWORDS ====================

class TestChangePassword:

    def test_own_password_with_current(self, db, acme_member, password):
        result = UserService.change_password(db, acme_member.id, acme_member.id, NEW_PASSWORD,
                                             current_password=password, confirm_password=NEW_PASSWORD)
        assert result == {"message": "Password changed successfully"}
        assert IdentityStore.verify_credential(db, "member@acme.com", NEW_PASSWORD)
        assert not IdentityStore.verify_credential(db, "member@acme.com", password)

    def test_own_password_requires_current(self, db, acme_member, password):
        with pytest.raises(WrongCurrentPasswordError):
            UserService.change_password(db, acme_member.id, acme_member.id, NEW_PASSWORD)
        with pytest.raises(WrongCurrentPasswordError):
            UserService.change_password(db, acme_member.id, acme_member.id, NEW_PASSWORD,
                                        current_password="not-my-password")
        assert IdentityStore.verify_credential(db, "member@acme.com", password)

    def test_confirmation_must_match(self, db, acme_member, password):
        with pytest.raises(PasswordMismatchError):
            UserService.change_password(db, acme_member.id, acme_member.id, NEW_PASSWORD,
                                        current_password=password, confirm_password="something-else")

    def test_minimum_length(self, db, acme_member, password):
        with pytest.raises(PasswordTooShortError) as exc_info:
            UserService.change_password(db, acme_member.id, acme_member.id, "short",
                                        current_password=password, confirm_password="short")
        assert exc_info.value.details == {"min_length": 8}

    def test_admin_resets_member_without_current(self, db, acme_admin, acme_member):
        UserService.change_password(db, acme_admin.id, acme_member.id, NEW_PASSWORD)
        assert IdentityStore.verify_credential(db, "member@acme.com", NEW_PASSWORD)

    def test_admin_cannot_reset_other_admin(self, db, acme_admin, acme, make_user):
        other_admin = make_user("admin2@acme.com", role=UserRole.ADMIN, company=acme)
        with pytest.raises(ForbiddenError):
            UserService.change_password(db, acme_admin.id, other_admin.id, NEW_PASSWORD)

    def test_member_cannot_reset_colleague(self, db, acme_member, acme, make_user):
        colleague = make_user("colleague@acme.com", company=acme)
        with pytest.raises(ForbiddenError):
            UserService.change_password(db, acme_member.id, colleague.id, NEW_PASSWORD)

    def test_super_user_resets_anyone(self, db, super_user, globex_admin):
        UserService.change_password(db, super_user.id, globex_admin.id, NEW_PASSWORD)
        assert IdentityStore.verify_credential(db, "admin@globex.com", NEW_PASSWORD)


# ==================== ADMIN WITHOUT COMPANY ====================

MISSING_USER_ID = "00000000-0000-0000-0000-000000000000"


class TestAdminWithoutCompany:
    """Every tenant-scoped attempt fails the same way, whether or not the target exists"""

    @pytest.mark.parametrize("target", ["missing", "member"])
    def test_change_password(self, db, admin_without_company, acme_member, target):
        user_id = MISSING_USER_ID if target == "missing" else acme_member.id
        with pytest.raises(AdminHasNoCompanyError):
            UserService.change_password(db, admin_without_company.id, user_id, NEW_PASSWORD)

    @pytest.mark.parametrize("target", ["missing", "member"])
    def test_update_user(self, db, admin_without_company, acme_member, target):
        user_id = MISSING_USER_ID if target == "missing" else acme_member.id
        with pytest.raises(AdminHasNoCompanyError):
            UserService.update_user(db, admin_without_company.id, user_id, name="Renamed")

    @pytest.mark.parametrize("target", ["missing", "member"])
    def test_delete_user(self, db, admin_without_company, acme_member, target):
        user_id = MISSING_USER_ID if target == "missing" else acme_member.id
        with pytest.raises(AdminHasNoCompanyError):
            UserService.delete_user(db, admin_without_company.id, user_id)
        assert db.query(User).filter(User.email == "member@acme.com").count() == 1

    def test_list_users(self, db, admin_without_company):
        with pytest.raises(AdminHasNoCompanyError):
            UserService.list_users(db, admin_without_company.id)

    def test_own_password_still_allowed(self, db, admin_without_company, password):
        UserService.change_password(db, admin_without_company.id, admin_without_company.id, NEW_PASSWORD,
                                    current_password=password)
        assert IdentityStore.verify_credential(db, "drifter@example.com", NEW_PASSWORD)


# ==================== LISTING ====================

class TestListUsers:

    def test_admin_sees_own_company(self, db, acme_admin, acme_member, globex_member, super_user):
        emails = {u["email"] for u in UserService.list_users(db, acme_admin.id)}
        assert emails == {"admin@acme.com", "member@acme.com"}

    def test_super_user_sees_everyone(self, db, super_user, acme_member, globex_member):
        assert len(UserService.list_users(db, super_user.id)) == 3

    def test_member_is_forbidden(self, db, acme_member):
        with pytest.raises(ForbiddenError):
            UserService.list_users(db, acme_member.id)

    def test_deleted_session_user(self, db, super_user, acme_member):
        member_id = acme_member.id
        UserService.delete_user(db, super_user.id, member_id)
        with pytest.raises(UnauthorizedError):
            UserService.get_current_user(db, member_id)


# ==================== SCENARIOS ====================

class TestTenantScenario:

    def test_company_onboarding(self, db, super_user):
        """Super user sets up a tenant, its admin builds a team inside it"""
        company = CompanyService.create_company(db, super_user.id, "Acme Corp")
        assert company["slug"] == "acme-corp"

        admin = UserService.create_user(db, super_user.id, "Acme Admin", "admin@acme.com",
                                        "admin-password", "ADMIN", company["id"])
        engineering = DepartmentService.create_department(db, admin["id"], "Engineering")
        assert engineering["company_id"] == company["id"]

        member = UserService.create_user(db, admin["id"], "Engineer", "engineer@acme.com",
                                         "engineer-password", department_id=engineering["id"])
        assert member["company_id"] == company["id"]
        assert member["department_name"] == "Engineering"

        listed = UserService.list_users(db, admin["id"])
        assert {u["email"] for u in listed} == {"admin@acme.com", "engineer@acme.com"}
