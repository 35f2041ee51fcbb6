# tests/test_department_service.py
import pytest

from orgpanel.models import Department, User, UserRole
from orgpanel.services.department_service import DepartmentService
from orgpanel.utils.exceptions import (
    AdminHasNoCompanyError,
    CompanyNotFoundError,
    DuplicateDepartmentError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


class TestCreateDepartment:

    def test_super_user_creates_in_named_company(self, db, super_user, acme):
        result = DepartmentService.create_department(db, super_user.id, "Engineering", acme.id)
        assert result["name"] == "Engineering"
        assert result["company_id"] == str(acme.id)
        assert result["company_name"] == "Acme Corp"

    def test_super_user_must_name_company(self, db, super_user):
        with pytest.raises(ValidationError) as exc_info:
            DepartmentService.create_department(db, super_user.id, "Engineering")
        assert exc_info.value.message == "Company ID is required for Super User"

    def test_unknown_company(self, db, super_user):
        with pytest.raises(CompanyNotFoundError):
            DepartmentService.create_department(db, super_user.id, "Engineering",
                                                "00000000-0000-0000-0000-000000000000")

    def test_malformed_company_id(self, db, super_user):
        with pytest.raises(CompanyNotFoundError):
            DepartmentService.create_department(db, super_user.id, "Engineering", "acme")

    def test_admin_company_is_forced(self, db, acme_admin, acme, globex):
        result = DepartmentService.create_department(db, acme_admin.id, "Support", globex.id)
        assert result["company_id"] == str(acme.id)
        assert db.query(Department).filter(Department.company_id == globex.id).count() == 0

    def test_duplicate_name_in_same_company(self, db, acme_admin, acme_engineering):
        with pytest.raises(DuplicateDepartmentError) as exc_info:
            DepartmentService.create_department(db, acme_admin.id, "Engineering")
        assert exc_info.value.code == "DUPLICATE_NAME"

    def test_same_name_in_another_company(self, db, globex_admin, acme_engineering):
        result = DepartmentService.create_department(db, globex_admin.id, "Engineering")
        assert result["company_name"] == "Globex"

    def test_member_is_forbidden(self, db, acme_member):
        with pytest.raises(ForbiddenError):
            DepartmentService.create_department(db, acme_member.id, "Engineering")

    def test_admin_without_company(self, db, admin_without_company):
        with pytest.raises(AdminHasNoCompanyError):
            DepartmentService.create_department(db, admin_without_company.id, "Engineering")
        assert db.query(Department).count() == 0


class TestUpdateDepartment:

    def test_admin_renames_own_department(self, db, acme_admin, acme_engineering):
        result = DepartmentService.update_department(db, acme_admin.id, acme_engineering.id, "Platform")
        assert result["name"] == "Platform"

    def test_admin_cannot_touch_other_company(self, db, acme_admin, globex_sales):
        with pytest.raises(ForbiddenError):
            DepartmentService.update_department(db, acme_admin.id, globex_sales.id, "Hacked")
        db.refresh(globex_sales)
        assert globex_sales.name == "Sales"

    def test_rename_to_sibling_name(self, db, acme_admin, acme, acme_engineering, make_department):
        make_department(acme, "Marketing")
        with pytest.raises(DuplicateDepartmentError):
            DepartmentService.update_department(db, acme_admin.id, acme_engineering.id, "Marketing")

    def test_keeping_the_same_name(self, db, acme_admin, acme_engineering):
        result = DepartmentService.update_department(db, acme_admin.id, acme_engineering.id, "Engineering")
        assert result["name"] == "Engineering"

    def test_member_is_forbidden_before_lookup(self, db, acme_member):
        with pytest.raises(ForbiddenError):
            DepartmentService.update_department(db, acme_member.id, "missing", "Anything")

    def test_unknown_department(self, db, super_user):
        with pytest.raises(NotFoundError):
            DepartmentService.update_department(db, super_user.id, "missing", "Anything")


class TestDeleteDepartment:

    def test_users_are_detached(self, db, acme_admin, acme, acme_engineering, make_user):
        engineer = make_user("engineer@acme.com", company=acme, department=acme_engineering)
        engineer_id = engineer.id

        assert DepartmentService.delete_department(db, acme_admin.id, acme_engineering.id) is True

        user = db.query(User).filter(User.id == engineer_id).one()
        assert user.department_id is None
        assert user.company_id == acme.id

    def test_admin_cannot_delete_other_company(self, db, acme_admin, globex_sales):
        with pytest.raises(ForbiddenError):
            DepartmentService.delete_department(db, acme_admin.id, globex_sales.id)
        assert db.query(Department).count() == 1


class TestAdminWithoutCompany:

    @pytest.mark.parametrize("target", ["missing", "existing"])
    def test_update_department(self, db, admin_without_company, acme_engineering, target):
        department_id = "00000000-0000-0000-0000-000000000000" if target == "missing" else acme_engineering.id
        with pytest.raises(AdminHasNoCompanyError):
            DepartmentService.update_department(db, admin_without_company.id, department_id, "Renamed")
        db.refresh(acme_engineering)
        assert acme_engineering.name == "Engineering"

    @pytest.mark.parametrize("target", ["missing", "existing"])
    def test_delete_department(self, db, admin_without_company, acme_engineering, target):
        department_id = "00000000-0000-0000-0000-000000000000" if target == "missing" else acme_engineering.id
        with pytest.raises(AdminHasNoCompanyError):
            DepartmentService.delete_department(db, admin_without_company.id, department_id)
        assert db.query(Department).count() == 1

    def test_list_departments(self, db, admin_without_company):
        with pytest.raises(AdminHasNoCompanyError):
            DepartmentService.list_departments(db, admin_without_company.id)


class TestListDepartments:

    def test_admin_sees_own_company_only(self, db, acme_admin, acme_engineering, globex_sales, globex):
        departments = DepartmentService.list_departments(db, acme_admin.id, globex.id)
        assert [d["name"] for d in departments] == ["Engineering"]

    def test_super_user_sees_all_or_filters(self, db, super_user, acme_engineering, globex_sales, globex):
        assert len(DepartmentService.list_departments(db, super_user.id)) == 2
        filtered = DepartmentService.list_departments(db, super_user.id, globex.id)
        assert [d["name"] for d in filtered] == ["Sales"]

    def test_member_is_forbidden(self, db, acme_member):
        with pytest.raises(ForbiddenError):
            DepartmentService.list_departments(db, acme_member.id)
