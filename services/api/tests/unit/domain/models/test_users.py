import pytest, uuid, datetime as dt
import todo_api.domain.models as dmod
import todo_api.domain.exceptions as domexc
from tests.mocks import FakeHasher

hasher = FakeHasher()


@pytest.fixture
def valid_user() -> dmod.User:
    return dmod.User.create(
        username='test',
        password_hash=hasher.hash('12341234'),
        role=dmod.UserRole.USER,
        password_initialized=True,
    )

@pytest.fixture
def temp_user() -> dmod.User:
    return dmod.User.create(
        username='newbie',
        password_hash=hasher.hash('temporary'),
        role=dmod.UserRole.USER,
    )


@pytest.mark.models
def test_create_defaults():
    user = dmod.User.create(username='abc', password_hash=hasher.hash('x'), role=dmod.UserRole.MANAGER)
    assert isinstance(user.id, uuid.UUID)
    assert user.password_initialized is False
    assert user.deleted is False
    assert user.version is None
    assert user.is_manager and not user.is_admin


@pytest.mark.models
@pytest.mark.parametrize(
   "fields, expected_error",
   [
       (dict(username=''), 'Username is required'),
       (dict(username='u'*51), 'at most 50 characters long'),
       (dict(password_hash='short'), 'invalid length'),
       (dict(password_hash=''), 'Password hash is required'),
       (dict(role=None), 'Role is required'),
       (dict(role='superuser'), 'not a valid role'),
       (dict(first_name='n'*51), 'first_name must be at most 50'),
       (dict(last_name_ruby='n'*51), 'last_name_ruby must be at most 50'),
       (dict(email='not-an-email'), 'not a valid email'),
       (dict(email='a@b@c'), 'not a valid email'),
   ]
)
def test_create_invalid_user_raises(fields, expected_error):
    data = dict(username='test', password_hash=hasher.hash('12341234'), role=dmod.UserRole.USER) | fields
    with pytest.raises(domexc.InvalidArgument, match=expected_error):
        dmod.User.create(
            data.pop('username'), data.pop('password_hash'), data.pop('role'), **data
        )


@pytest.mark.models
@pytest.mark.parametrize("role", ['admin', 'MANAGER', 2, dmod.UserRole.ADMIN])
def test_role_inputs(valid_user: dmod.User, role):
    valid_user.change_role(role)
    assert isinstance(valid_user.role, dmod.UserRole)


@pytest.mark.models
def test_unknown_role_code(valid_user: dmod.User):
    with pytest.raises(domexc.RoleValueError):
        valid_user.change_role(7)
    assert valid_user.role == dmod.UserRole.USER


@pytest.mark.models
def test_reconstruct_requires_fields(valid_user: dmod.User):
    data = valid_user.model_dump()
    restored = dmod.User.reconstruct(**(data | {'role': 2, 'version': 4}))
    assert restored.role == dmod.UserRole.USER
    assert restored.version == 4
    data.pop('password_hash')
    with pytest.raises(domexc.UserValueError, match='missing fields'):
        dmod.User.reconstruct(**data)


@pytest.mark.models
def test_update_profile(valid_user: dmod.User):
    before = valid_user.updated_at
    valid_user.update_profile('Taro', 'タロウ', 'Yamada', 'ヤマダ')
    assert (valid_user.first_name, valid_user.first_name_ruby) == ('Taro', 'タロウ')
    assert (valid_user.last_name, valid_user.last_name_ruby) == ('Yamada', 'ヤマダ')
    assert valid_user.updated_at >= before

    with pytest.raises(domexc.UserValueError):
        valid_user.update_profile('Jiro', None, 'x'*51, None)
    #nothing is applied when any of the names is invalid
    assert valid_user.first_name == 'Taro'


@pytest.mark.models
def test_update_email(valid_user: dmod.User):
    valid_user.update_email('test@example.com')
    assert valid_user.email == 'test@example.com'
    valid_user.update_email(None)
    assert valid_user.email is None


@pytest.mark.models
def test_password_state_machine(temp_user: dmod.User):
    with pytest.raises(domexc.UserStateError, match='must be initialized'):
        temp_user.change_password(hasher.hash('whatever1'))

    temp_user.initialize_password(hasher.hash('chosen-password'))
    assert temp_user.password_initialized is True
    with pytest.raises(domexc.UserStateError, match='already been initialized'):
        temp_user.initialize_password(hasher.hash('again-and-again'))

    temp_user.change_password(hasher.hash('another-one'))
    assert hasher.verify('another-one', temp_user.password_hash)

    temp_user.reset_password(hasher.hash('temporary-2'))
    assert temp_user.password_initialized is False


@pytest.mark.models
def test_change_password_requires_fixed_length_hash(valid_user: dmod.User):
    with pytest.raises(domexc.UserValueError):
        valid_user.change_password('plain-password')
    with pytest.raises(domexc.UserValueError):
        valid_user.change_password('')


@pytest.mark.models
@pytest.mark.parametrize(
   "mutate",
   [
       lambda u: u.update_profile('a', None, None, None),
       lambda u: u.update_email('a@b.c'),
       lambda u: u.change_password(hasher.hash('new-password')),
       lambda u: u.reset_password(hasher.hash('new-password')),
       lambda u: u.change_role(dmod.UserRole.ADMIN),
       lambda u: u.delete(),
   ]
)
def test_deleted_user_mutators_fail(valid_user: dmod.User, mutate):
    valid_user.delete()
    with pytest.raises(domexc.UserStateError):
        mutate(valid_user)


@pytest.mark.models
@pytest.mark.parametrize("field", ['id', 'created_at'])
def test_immutable_fields(valid_user: dmod.User, field):
    with pytest.raises(domexc.UserStateError):
        setattr(valid_user, field, getattr(valid_user, field))


@pytest.mark.models
def test_privileges():
    for role, admin, manager in [(dmod.UserRole.ADMIN, True, True), (dmod.UserRole.MANAGER, False, True), (dmod.UserRole.USER, False, False)]:
        user = dmod.User.create(username='u', password_hash=hasher.hash('p'), role=role)
        assert user.is_admin is admin
        assert user.is_manager is manager


@pytest.mark.models
def test_timestamps_are_utc(valid_user: dmod.User):
    assert valid_user.created_at.tzinfo is not None
    assert valid_user.created_at.utcoffset() == dt.timedelta(0)
