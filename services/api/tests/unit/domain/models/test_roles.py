import pytest
import todo_api.domain.models as dmod
import todo_api.domain.exceptions as domexc


@pytest.mark.models
@pytest.mark.parametrize("role", list(dmod.UserRole))
def test_from_code_round_trip(role: dmod.UserRole):
    assert dmod.UserRole.from_code(role.code) == role


@pytest.mark.models
@pytest.mark.parametrize("code", [-1, 3, 4, 8, 100, True, '1', 1.0, None])
def test_from_code_rejects_unknown(code):
    with pytest.raises(domexc.InvalidArgument):
        dmod.UserRole.from_code(code)


@pytest.mark.models
def test_codes_are_stable():
    assert [r.code for r in (dmod.UserRole.ADMIN, dmod.UserRole.MANAGER, dmod.UserRole.USER)] == [0, 1, 2]


@pytest.mark.models
def test_manager_privileges():
    manager = dmod.UserRole.from_code(1)
    assert manager is dmod.UserRole.MANAGER
    assert manager.has_manager_privilege() is True
    assert manager.has_admin_privilege() is False


@pytest.mark.models
def test_admin_and_user_privileges():
    assert dmod.UserRole.ADMIN.has_admin_privilege()
    assert dmod.UserRole.ADMIN.has_manager_privilege()
    assert not dmod.UserRole.USER.has_admin_privilege()
    assert not dmod.UserRole.USER.has_manager_privilege()
