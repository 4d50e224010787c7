import uuid
import todo_api.domain.models as dmod


def make_todo(user_id: uuid.UUID | None = None, title: str = 'Buy milk', descriptions: str | None = None) -> dmod.Todo:
    return dmod.Todo.create(title=title, descriptions=descriptions, user_id=user_id or uuid.uuid4())


async def create_todo(client, headers, title: str = 'Buy milk', descriptions: str | None = None) -> dict:
    response = await client.post('/todos', json=dict(title=title, descriptions=descriptions), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()['data']
