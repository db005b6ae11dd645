from components.plan.models import Role


async def test_viewer_cannot_create_account(api, owner, plan_id):
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    response = await api.client.post(
        "/accounts",
        params={"plan_id": plan_id},
        json={"name": "Sneaky", "type": "CASH", "balance": 10},
        headers=viewer["headers"],
    )
    assert response.status_code == 403
    body = response.json()
    assert body["user_role"] == "VIEWER"
    assert body["plan_id"] == plan_id
    assert "error" in body

    accounts = await api.client.get("/accounts", params={"plan_id": plan_id}, headers=owner["headers"])
    assert accounts.json() == []


async def test_viewer_cannot_budget_or_post_transactions(api, owner, plan_id):
    account = await api.create_account(owner, plan_id, balance=100)
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Rent")
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    response = await api.client.put(
        f"/budgets/{category['id']}",
        params={"plan_id": plan_id},
        json={"budgeted": 50},
        headers=viewer["headers"],
    )
    assert response.status_code == 403
    assert response.json()["user_role"] == "VIEWER"

    response = await api.post_transaction(viewer, plan_id, -10, account["id"])
    assert response.status_code == 403
    assert (await api.account(owner, plan_id, account["id"]))["balance"] == 100


async def test_viewer_can_read_budget(api, owner, plan_id):
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    summary = await api.summary(viewer, plan_id)
    assert summary["user_role"] == "VIEWER"
    assert summary["plan_id"] == plan_id


async def test_editor_can_change_budget_data(api, owner, plan_id):
    account = await api.create_account(owner, plan_id, balance=100)
    editor = await api.register("editor@example.com")
    await api.add_member(plan_id, editor, Role.EDITOR)

    response = await api.post_transaction(editor, plan_id, 40, account["id"])
    assert response.status_code == 201
    assert (await api.account(owner, plan_id, account["id"]))["balance"] == 60


async def test_editor_cannot_change_plan_settings(api, owner, plan_id):
    editor = await api.register("editor@example.com")
    await api.add_member(plan_id, editor, Role.EDITOR)

    response = await api.client.patch(f"/groups/{plan_id}", json={"name": "Mine now"}, headers=editor["headers"])
    assert response.status_code == 403
    assert response.json()["user_role"] == "EDITOR"


async def test_non_member_is_denied(api, owner, plan_id):
    stranger = await api.register("stranger@example.com")
    await api.create_plan(stranger, "Own plan")

    response = await api.client.get("/budgets", params={"plan_id": plan_id}, headers=stranger["headers"])
    assert response.status_code == 403
    assert response.json()["plan_id"] == plan_id


async def test_user_without_plan_gets_not_found(api):
    user = await api.register("fresh@example.com")
    response = await api.client.get("/budgets", headers=user["headers"])
    assert response.status_code == 404
    assert "error" in response.json()


async def test_missing_token_is_unauthorized(client):
    response = await client.get("/accounts")
    assert response.status_code == 401
    assert "error" in response.json()


async def test_viewer_can_write_notes(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    response = await api.client.post(
        "/notes",
        params={"plan_id": plan_id},
        json={"content": "Check the water bill", "category_group_id": group["id"]},
        headers=viewer["headers"],
    )
    assert response.status_code == 201
    assert response.json()["category_group_id"] == group["id"]
