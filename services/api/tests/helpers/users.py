import httpx
import todo_api.infrastructure.dependencies as ideps
import todo_api.domain.models as dmod

DEFAULT_PASSWORD = 'password123'


async def create_user(
        uow: ideps.UnitOfWork,
        username: str = 'someuser',
        password: str = DEFAULT_PASSWORD,
        role: dmod.UserRole = dmod.UserRole.USER,
        password_initialized: bool = True,
    ) -> dmod.User:
    """Stores a user with a real bcrypt hash and commits it"""
    repo = ideps.UserRepository(uow)
    user = dmod.User.create(
        username=username,
        password_hash=await ideps.PasswordHasherType().hash(password),
        role=role,
        password_initialized=password_initialized,
    )
    saved = await repo.save(user)
    await uow.commit()
    return saved


async def login(client: httpx.AsyncClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = await client.post('/auth/login', data=dict(username=username, password=password))
    assert response.status_code == 200, response.text
    return response.json()


async def auth_headers(client: httpx.AsyncClient, username: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
    tokens = await login(client, username, password)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


async def user_with_headers(client, uow, username: str = 'someuser', role: dmod.UserRole = dmod.UserRole.USER, password_initialized: bool = True):
    user = await create_user(uow, username=username, role=role, password_initialized=password_initialized)
    return user, await auth_headers(client, username)
