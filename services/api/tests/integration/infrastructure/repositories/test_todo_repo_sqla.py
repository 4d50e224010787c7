import pytest, uuid
import todo_api.infrastructure.dependencies as ideps
import todo_api.domain.models as dmod
import todo_api.domain.exceptions as domexc
import todo_api.domain.repositories as repos
from tests.mocks import FakeHasher
from tests.helpers.todos import make_todo


@pytest.fixture
async def owner(user_repo: ideps.UserRepository, uow) -> dmod.User:
    user = await user_repo.save(dmod.User.create(username='owner', password_hash=FakeHasher().hash('pw'), role=dmod.UserRole.USER))
    await uow.commit()
    return user


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_insert_and_get(todo_repo: ideps.TodoRepository, uow, owner):
    todo = make_todo(owner.id, descriptions='2 bottles')
    saved = await todo_repo.save(todo)
    await uow.commit()
    assert saved.version == 0

    found = await todo_repo.get_by_id(todo.id)
    assert found.title == 'Buy milk'
    assert found.descriptions == '2 bottles'
    assert found.completed is False
    assert found.user_id == owner.id
    assert found.created_at == todo.created_at
    assert await todo_repo.get_by_id(uuid.uuid4()) is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_unknown_owner(todo_repo: ideps.TodoRepository, uow):
    with pytest.raises(domexc.UserDoesNotExist):
        await todo_repo.save(make_todo(uuid.uuid4()))
    await uow.rollback()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_update(todo_repo: ideps.TodoRepository, uow, owner):
    todo = await todo_repo.save(make_todo(owner.id))
    await uow.commit()

    todo.mark_as_completed()
    todo.update_descriptions('semi-skimmed')
    updated = await todo_repo.save(todo)
    await uow.commit()
    assert updated.version == 1
    assert updated.completed is True

    found = await todo_repo.get_by_id(todo.id)
    assert found.completed is True
    assert found.descriptions == 'semi-skimmed'
    assert found.updated_at >= found.created_at


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_stale_update(todo_repo: ideps.TodoRepository, uow, owner):
    todo = await todo_repo.save(make_todo(owner.id))
    await uow.commit()

    first = await todo_repo.get_by_id(todo.id)
    second = await todo_repo.get_by_id(todo.id)
    first.update_title('first')
    await todo_repo.save(first)
    await uow.commit()

    second.update_title('second')
    with pytest.raises(domexc.VersionConflict):
        await todo_repo.save(second)
    assert (await todo_repo.get_by_id(todo.id)).title == 'first'


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_logical_delete(todo_repo: ideps.TodoRepository, uow, owner):
    todo = await todo_repo.save(make_todo(owner.id))
    await uow.commit()

    await todo_repo.delete(todo.id)
    await uow.commit()
    assert await todo_repo.get_by_id(todo.id) is None
    assert await todo_repo.list_by_owner(owner.id) == []
    assert await todo_repo.count_by_owner(owner.id) == 0

    stored = await todo_repo.get_by_id(todo.id, include_deleted=True)
    assert stored.deleted is True
    assert stored.version == 1

    with pytest.raises(domexc.TodoDoesNotExist):
        await todo_repo.delete(todo.id)
    with pytest.raises(domexc.TodoDoesNotExist):
        await todo_repo.delete(uuid.uuid4())


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_saving_deleted_entity(todo_repo: ideps.TodoRepository, uow, owner):
    todo = await todo_repo.save(make_todo(owner.id))
    todo.delete()
    await todo_repo.save(todo)
    await uow.commit()
    assert await todo_repo.get_by_id(todo.id) is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_todo_repo_listing_is_per_owner_and_ordered(todo_repo: ideps.TodoRepository, user_repo: ideps.UserRepository, uow, owner):
    stranger = await user_repo.save(dmod.User.create(username='stranger', password_hash=FakeHasher().hash('pw'), role=dmod.UserRole.USER))
    for i in range(5):
        await todo_repo.save(make_todo(owner.id, title=f'todo {i}'))
    await todo_repo.save(make_todo(stranger.id, title='foreign'))
    await uow.commit()

    todos = await todo_repo.list_by_owner(owner.id)
    assert [todo.title for todo in todos] == [f'todo {i}' for i in range(5)]
    page = await todo_repo.list_by_owner(owner.id, limit=2, offset=3)
    assert [todo.title for todo in page] == ['todo 3', 'todo 4']
    assert len(await todo_repo.list_by_owner(owner.id, limit=None)) == 5
    assert await todo_repo.count_by_owner(owner.id) == 5
    assert [todo.title for todo in await todo_repo.list_by_owner(stranger.id)] == ['foreign']


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize(
   "filters, expected",
   [
       (repos.TodoFilter(completed=True), ['Buy milk']),
       (repos.TodoFilter(completed=False), ['Call mom', 'Fix 100% bug']),
       (repos.TodoFilter(search='MILK'), ['Buy milk']),
       (repos.TodoFilter(search='weekend'), ['Call mom']),
       (repos.TodoFilter(search='100%'), ['Fix 100% bug']),
       (repos.TodoFilter(search='_'), []),
       (repos.TodoFilter(completed=True, search='mom'), []),
   ]
)
async def test_todo_repo_filters(todo_repo: ideps.TodoRepository, uow, owner, filters, expected):
    milk = make_todo(owner.id, title='Buy milk')
    milk.mark_as_completed()
    await todo_repo.save(milk)
    await todo_repo.save(make_todo(owner.id, title='Call mom', descriptions='On the weekend'))
    await todo_repo.save(make_todo(owner.id, title='Fix 100% bug'))
    await uow.commit()

    todos = await todo_repo.list_by_owner(owner.id, filters)
    assert [todo.title for todo in todos] == expected
    assert await todo_repo.count_by_owner(owner.id, filters) == len(expected)
