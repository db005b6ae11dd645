import os

os.environ["DB_URL"] = "sqlite+aiosqlite://"
os.environ["CREATE_TABLES"] = "false"

from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import DatabaseManager
from components.core.init_db import get_db
from components.plan.models import GroupMember, Role
from main import app


class Api:
    """Shortcuts for setting up users, plans and budget data through the API."""

    def __init__(self, client: AsyncClient, db: DatabaseManager):
        self.client = client
        self.db = db

    async def register(self, email: str, password: str = "secret123", name: str = "Test User") -> dict:
        response = await self.client.post(
            "/auth/register", json={"email": email, "password": password, "name": name}
        )
        assert response.status_code == 201, response.text
        user = response.json()
        user["headers"] = {"Authorization": f"Bearer {user['access_token']}"}
        return user

    async def create_plan(self, user: dict, name: str = "Household") -> int:
        response = await self.client.post("/budgets", json={"name": name}, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()["id"]

    async def add_member(self, plan_id: int, user: dict, role: Role) -> None:
        async with self.db.get_db() as session:
            session.add(GroupMember(plan_id=plan_id, user_id=user["id"], role=role))
            await session.commit()

    async def create_account(
        self,
        user: dict,
        plan_id: int,
        name: str = "Checking",
        balance: float = 0,
        type: str = "CHECKING",
    ) -> dict:
        response = await self.client.post(
            "/accounts",
            params={"plan_id": plan_id},
            json={"name": name, "type": type, "balance": balance},
            headers=user["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()

    async def create_group(self, user: dict, plan_id: int, name: str = "Bills") -> dict:
        response = await self.client.post(
            "/categories", params={"plan_id": plan_id}, json={"name": name}, headers=user["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()

    async def create_category(self, user: dict, plan_id: int, group_id: int, name: str) -> dict:
        response = await self.client.post(
            f"/categories/{group_id}/categories",
            params={"plan_id": plan_id},
            json={"name": name},
            headers=user["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()

    async def post_transaction(
        self,
        user: dict,
        plan_id: int,
        amount: float,
        from_account_id: int,
        to_account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        date: str = "2024-03-15",
    ):
        return await self.client.post(
            "/transactions",
            params={"plan_id": plan_id},
            json={
                "date": date,
                "amount": amount,
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "category_id": category_id,
            },
            headers=user["headers"],
        )

    async def summary(self, user: dict, plan_id: int, month: str = "2024-03") -> dict:
        response = await self.client.get(
            "/budgets", params={"plan_id": plan_id, "month": month}, headers=user["headers"]
        )
        assert response.status_code == 200, response.text
        return response.json()

    async def account(self, user: dict, plan_id: int, account_id: int) -> dict:
        response = await self.client.get(
            f"/accounts/{account_id}", params={"plan_id": plan_id}, headers=user["headers"]
        )
        assert response.status_code == 200, response.text
        return response.json()


@pytest.fixture
async def db_manager():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    manager = DatabaseManager(engine=engine)
    await manager.create_all()
    yield manager
    await engine.dispose()


@pytest.fixture
async def client(db_manager):
    async def override_get_db():
        async with db_manager.get_db() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def api(client, db_manager):
    return Api(client, db_manager)


@pytest.fixture
async def owner(api):
    return await api.register("owner@example.com", name="Olivia Owner")


@pytest.fixture
async def plan_id(api, owner):
    return await api.create_plan(owner)
