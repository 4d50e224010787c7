import pytest, uuid
from pytest_mock import MockerFixture
import todo_api.application.services as svc
import todo_api.application.models as mapp
import todo_api.domain.models as dmod
import todo_api.domain.exceptions as domexc
from tests.mocks import FakeHasher, AsyncHasherAdapter


@pytest.fixture
def hasher() -> AsyncHasherAdapter:
    return AsyncHasherAdapter(FakeHasher())

@pytest.fixture
def user_repo(mocker: MockerFixture):
    repo = mocker.AsyncMock()
    repo.get_by_username.return_value = None
    repo.save.side_effect = lambda user: user
    return repo

def make_user(role: dmod.UserRole = dmod.UserRole.USER, password: str = 'password123', password_initialized: bool = True, username: str = 'someuser') -> dmod.User:
    return dmod.User.create(
        username=username,
        password_hash=FakeHasher().hash(password),
        role=role,
        password_initialized=password_initialized,
    )

def as_current(user: dmod.User) -> mapp.UserResult:
    return mapp.UserResult.model_validate(user, from_attributes=True)


@pytest.mark.asyncio
async def test_user_service_get_user(user_repo, hasher):
    user = make_user()
    user_repo.get_by_id.return_value = user
    service = svc.UserService(user_repo, hasher)
    result = await service.get_user(user.id)
    assert result == as_current(user)
    user_repo.get_by_id.assert_awaited_once_with(user.id)

    user_repo.get_by_id.return_value = None
    with pytest.raises(domexc.UserDoesNotExist, match='provided ID does not exist'):
        await service.get_user(uuid.uuid4())


@pytest.mark.asyncio
async def test_user_service_register(user_repo, hasher):
    service = svc.UserService(user_repo, hasher)
    result = await service.register(mapp.RegisterUserCommand(username='newuser', password='password123', email='new@example.com'))
    assert result.username == 'newuser'
    assert result.role == dmod.UserRole.USER
    assert result.password_initialized is True
    saved: dmod.User = user_repo.save.await_args.args[0]
    assert await hasher.verify('password123', saved.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "password, exc_text",
   [
       ('short', 'Minimal password length'),
       ('', 'Minimal password length'),
       ('ы'*40, 'must not exceed 72 bytes'),
   ]
)
async def test_user_service_register_bad_password(user_repo, hasher, password, exc_text):
    service = svc.UserService(user_repo, hasher)
    with pytest.raises(domexc.UserValueError, match=exc_text):
        await service.register(mapp.RegisterUserCommand(username='newuser', password=password))
    user_repo.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_user_service_register_taken_username(user_repo, hasher):
    user_repo.get_by_username.return_value = make_user(username='taken')
    service = svc.UserService(user_repo, hasher)
    with pytest.raises(domexc.UserAlreadyExists):
        await service.register(mapp.RegisterUserCommand(username='taken', password='password123'))
    user_repo.save.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "current_role, target_role, exc, exc_text",
   [
       (dmod.UserRole.USER, dmod.UserRole.USER, domexc.ActionNotAllowedForRole, 'managers and admins only'),
       (dmod.UserRole.MANAGER, dmod.UserRole.ADMIN, domexc.ActionNotAllowedForRole, 'privileged accounts'),
       (dmod.UserRole.MANAGER, dmod.UserRole.MANAGER, domexc.ActionNotAllowedForRole, 'privileged accounts'),
       (dmod.UserRole.MANAGER, dmod.UserRole.USER, None, None),
       (dmod.UserRole.ADMIN, dmod.UserRole.MANAGER, None, None),
   ]
)
async def test_user_service_admin_create(user_repo, hasher, current_role, target_role, exc, exc_text):
    current_user = as_current(make_user(role=current_role, username='staff'))
    command = mapp.AdminCreateUserCommand(username='created', password='temporary1', role=target_role)
    service = svc.UserService(user_repo, hasher)

    if exc:
        with pytest.raises(exc, match=exc_text):
            await service.admin_create(current_user, command)
        user_repo.save.assert_not_awaited()
    else:
        result = await service.admin_create(current_user, command)
        assert result.role == target_role
        assert result.password_initialized is False
        user_repo.save.assert_awaited_once()


@pytest.mark.asyncio
async def test_user_service_list(user_repo, hasher):
    users = [make_user(username=f'user{i}') for i in range(2)]
    user_repo.list.return_value = users
    service = svc.UserService(user_repo, hasher)

    manager = as_current(make_user(role=dmod.UserRole.MANAGER, username='manager'))
    result = await service.list(manager, 10, 0, filters=None)
    assert [user.username for user in result] == ['user0', 'user1']
    user_repo.list.assert_awaited_once_with(10, 0, None, 'and')

    with pytest.raises(domexc.ActionNotAllowedForRole):
        await service.list(as_current(users[0]))


@pytest.mark.asyncio
async def test_user_service_update_profile(user_repo, hasher):
    user = make_user()
    user.update_email('old@example.com')
    user_repo.get_by_id.return_value = user
    service = svc.UserService(user_repo, hasher)

    result = await service.update_profile(as_current(user), mapp.UpdateProfileCommand(first_name='Taro', last_name='Yamada'))
    assert (result.first_name, result.last_name) == ('Taro', 'Yamada')
    assert result.email == 'old@example.com'

    result = await service.update_profile(as_current(user), mapp.UpdateProfileCommand(email=None))
    assert result.first_name is None
    assert result.email is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "initialized, new_password, exc, exc_text",
   [
       (False, 'temporary1', domexc.UserValueError, 'must not match the temporary one'),
       (False, 'short', domexc.UserValueError, 'Minimal password length'),
       (True, 'brandnew123', domexc.UserStateError, 'already been initialized'),
       (False, 'brandnew123', None, None),
   ]
)
async def test_user_service_initialize_password(user_repo, hasher, initialized, new_password, exc, exc_text):
    user = make_user(password='temporary1', password_initialized=initialized)
    user_repo.get_by_id.return_value = user
    service = svc.UserService(user_repo, hasher)

    if exc:
        with pytest.raises(exc, match=exc_text):
            await service.initialize_password(as_current(user), new_password)
    else:
        result = await service.initialize_password(as_current(user), new_password)
        assert result.password_initialized is True
        assert await hasher.verify(new_password, user.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "old_password, new_password, exc, exc_text",
   [
       ('wrongpass1', 'brandnew123', domexc.UserValueError, 'Old password invalid'),
       ('password123', 'password123', domexc.UserValueError, 'must not match the old one'),
       ('password123', 'short', domexc.UserValueError, 'Minimal password length'),
       ('password123', 'brandnew123', None, None),
   ]
)
async def test_user_service_change_password(user_repo, hasher, old_password, new_password, exc, exc_text):
    user = make_user(password='password123')
    user_repo.get_by_id.return_value = user
    service = svc.UserService(user_repo, hasher)

    if exc:
        with pytest.raises(exc, match=exc_text):
            await service.change_password(as_current(user), old_password, new_password)
        user_repo.save.assert_not_awaited()
    else:
        await service.change_password(as_current(user), old_password, new_password)
        assert await hasher.verify(new_password, user.password_hash)
        user_repo.save.assert_awaited_once_with(user)


@pytest.mark.asyncio
async def test_user_service_admin_reset_password(user_repo, hasher):
    target = make_user(username='target')
    user_repo.get_by_id.return_value = target
    service = svc.UserService(user_repo, hasher)

    with pytest.raises(domexc.ActionNotAllowedForRole, match='for admins only'):
        await service.admin_reset_password(as_current(make_user(role=dmod.UserRole.MANAGER)), target.id, 'temporary2')

    admin = as_current(make_user(role=dmod.UserRole.ADMIN, username='admin'))
    result = await service.admin_reset_password(admin, target.id, 'temporary2')
    assert result.password_initialized is False
    assert await hasher.verify('temporary2', target.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "current_role, same_user, target_exists, new_role, exc, exc_text",
   [
       (dmod.UserRole.MANAGER, False, True, dmod.UserRole.USER, domexc.ActionNotAllowedForRole, 'for admins only'),
       (dmod.UserRole.ADMIN, True, True, dmod.UserRole.USER, domexc.ActionNotAllowedForRole, 'not allowed to change their own role'),
       (dmod.UserRole.ADMIN, False, False, dmod.UserRole.USER, domexc.UserDoesNotExist, 'provided ID does not exist'),
       (dmod.UserRole.ADMIN, False, True, 7, domexc.RoleValueError, 'Unknown role code'),
       (dmod.UserRole.ADMIN, False, True, dmod.UserRole.MANAGER, None, None),
       (dmod.UserRole.ADMIN, False, True, 0, None, None),
   ]
)
async def test_user_service_change_role(user_repo, hasher, current_role, same_user, target_exists, new_role, exc, exc_text):
    current = make_user(role=current_role, username='current')
    target = current if same_user else make_user(username='target')
    user_repo.get_by_id.return_value = target if target_exists else None
    service = svc.UserService(user_repo, hasher)

    if exc:
        with pytest.raises(exc, match=exc_text):
            await service.change_role(as_current(current), target.id, new_role)
    else:
        result = await service.change_role(as_current(current), target.id, new_role)
        assert result.role == dmod.UserRole(new_role)


@pytest.mark.asyncio
async def test_user_service_delete(user_repo, hasher):
    user = make_user()
    user_repo.get_by_id.return_value = user
    service = svc.UserService(user_repo, hasher)
    await service.delete(as_current(user))
    assert user.deleted is True
    user_repo.save.assert_awaited_once_with(user)


@pytest.mark.asyncio
@pytest.mark.parametrize(
   "current_role, same_user, target_exists, exc, exc_text",
   [
       (dmod.UserRole.USER, False, True, domexc.ActionNotAllowedForRole, 'for admins only'),
       (dmod.UserRole.ADMIN, True, True, domexc.ActionNotAllowedForRole, 'delete their own accounts'),
       (dmod.UserRole.ADMIN, False, False, domexc.UserDoesNotExist, 'provided ID does not exist'),
       (dmod.UserRole.ADMIN, False, True, None, None),
   ]
)
async def test_user_service_admin_delete(user_repo, hasher, current_role, same_user, target_exists, exc, exc_text):
    current = make_user(role=current_role, username='current')
    target = current if same_user else make_user(username='target')
    user_repo.get_by_id.return_value = target if target_exists else None
    service = svc.UserService(user_repo, hasher)

    if exc:
        with pytest.raises(exc, match=exc_text):
            await service.admin_delete(as_current(current), target.id)
        user_repo.save.assert_not_awaited()
    else:
        await service.admin_delete(as_current(current), target.id)
        assert target.deleted is True
        user_repo.save.assert_awaited_once_with(target)
