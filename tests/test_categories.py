async def _groups(api, user, plan_id, include_hidden=False):
    response = await api.client.get(
        "/categories",
        params={"plan_id": plan_id, "include_hidden": include_hidden},
        headers=user["headers"],
    )
    assert response.status_code == 200
    return response.json()


async def test_sort_order_appends(api, owner, plan_id):
    first = await api.create_group(owner, plan_id, "First")
    second = await api.create_group(owner, plan_id, "Second")
    a = await api.create_category(owner, plan_id, first["id"], "A")
    b = await api.create_category(owner, plan_id, first["id"], "B")

    assert second["sort_order"] == first["sort_order"] + 1
    assert b["sort_order"] == a["sort_order"] + 1


async def test_move_places_category_last(api, owner, plan_id):
    source = await api.create_group(owner, plan_id, "Source")
    target = await api.create_group(owner, plan_id, "Target")
    moving = await api.create_category(owner, plan_id, source["id"], "Moving")
    for name in ("One", "Two", "Three"):
        await api.create_category(owner, plan_id, target["id"], name)

    response = await api.client.post(
        "/categories/move",
        params={"plan_id": plan_id},
        json={"category_id": moving["id"], "target_group_id": target["id"]},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["category_group_id"] == target["id"]
    assert response.json()["sort_order"] == 4

    groups = {group["name"]: group for group in await _groups(api, owner, plan_id)}
    assert groups["Source"]["categories"] == []
    assert [c["name"] for c in groups["Target"]["categories"]] == ["One", "Two", "Three", "Moving"]


async def test_move_within_same_group_is_rejected(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Stay")

    response = await api.client.post(
        "/categories/move",
        params={"plan_id": plan_id},
        json={"category_id": category["id"], "target_group_id": group["id"]},
        headers=owner["headers"],
    )
    assert response.status_code == 400


async def test_update_category_sets_budget(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Rent")

    response = await api.client.put(
        f"/categories/{group['id']}/categories/{category['id']}",
        params={"plan_id": plan_id},
        json={"name": "Rent & Fees", "budgeted": 700, "month": "2024-03"},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Rent & Fees"

    summary = await api.summary(owner, plan_id)
    assert summary["total_budgeted"] == 700


async def test_hidden_categories_leave_summary(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    shown = await api.create_category(owner, plan_id, group["id"], "Shown")
    hidden = await api.create_category(owner, plan_id, group["id"], "Hidden")
    await api.client.put(
        f"/categories/{group['id']}/categories/{hidden['id']}",
        params={"plan_id": plan_id},
        json={"is_hidden": True},
        headers=owner["headers"],
    )

    summary = await api.summary(owner, plan_id)
    names = [c["name"] for g in summary["category_groups"] for c in g["categories"]]
    assert names == ["Shown"]

    everything = await _groups(api, owner, plan_id, include_hidden=True)
    assert {c["id"] for c in everything[0]["categories"]} == {shown["id"], hidden["id"]}


async def test_delete_group_uncategorizes_transactions(api, owner, plan_id):
    account = await api.create_account(owner, plan_id, balance=100)
    group = await api.create_group(owner, plan_id, "Doomed")
    category = await api.create_category(owner, plan_id, group["id"], "Gone")
    txn = (await api.post_transaction(owner, plan_id, -10, account["id"], category_id=category["id"])).json()

    response = await api.client.delete(f"/categories/{group['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 200
    assert await _groups(api, owner, plan_id) == []

    response = await api.client.get(f"/transactions/{txn['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.json()["category_id"] is None
    assert (await api.account(owner, plan_id, account["id"]))["balance"] == 110


async def test_delete_category_from_wrong_group(api, owner, plan_id):
    first = await api.create_group(owner, plan_id, "First")
    second = await api.create_group(owner, plan_id, "Second")
    category = await api.create_category(owner, plan_id, first["id"], "Mine")

    response = await api.client.delete(
        f"/categories/{second['id']}/categories/{category['id']}",
        params={"plan_id": plan_id},
        headers=owner["headers"],
    )
    assert response.status_code == 404


async def test_account_with_transactions_cannot_be_deleted(api, owner, plan_id):
    used = await api.create_account(owner, plan_id, "Used", balance=50)
    unused = await api.create_account(owner, plan_id, "Unused")
    await api.post_transaction(owner, plan_id, -5, used["id"])

    response = await api.client.delete(f"/accounts/{used['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 400

    response = await api.client.delete(f"/accounts/{unused['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 200

    accounts = await api.client.get("/accounts", params={"plan_id": plan_id}, headers=owner["headers"])
    assert [account["name"] for account in accounts.json()] == ["Used"]


async def test_liability_flag(api, owner, plan_id):
    card = await api.create_account(owner, plan_id, "Visa", balance=-300, type="CREDIT_CARD")
    assert card["is_liability"] is True
    assert card["balance"] == -300
