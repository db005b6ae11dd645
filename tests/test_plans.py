from components.plan.models import Role


async def test_new_plan_copies_category_structure(api, owner, plan_id):
    bills = await api.create_group(owner, plan_id, "Bills")
    await api.create_category(owner, plan_id, bills["id"], "Rent")
    await api.create_category(owner, plan_id, bills["id"], "Power")
    account = await api.create_account(owner, plan_id, balance=100)

    second = await api.create_plan(owner, "Vacation")
    response = await api.client.get("/categories", params={"plan_id": second}, headers=owner["headers"])
    groups = response.json()
    assert [group["name"] for group in groups] == ["Bills"]
    assert [category["name"] for category in groups[0]["categories"]] == ["Rent", "Power"]
    assert groups[0]["id"] != bills["id"]

    # Accounts stay in the first plan and still feed the income of the second
    summary = await api.summary(owner, second)
    assert summary["total_income"] == 100
    assert [acc["id"] for acc in summary["accounts"]] == [account["id"]]


async def test_plan_deletion_keeps_last_plan(api, owner, plan_id):
    response = await api.client.delete(f"/budgets/{plan_id}/plan", headers=owner["headers"])
    assert response.status_code == 400
    assert response.json()["plan_id"] == plan_id

    detail = await api.client.get(f"/groups/{plan_id}", headers=owner["headers"])
    assert detail.status_code == 200


async def test_plan_deletion_removes_plan_data(api, owner, plan_id):
    second = await api.create_plan(owner, "Side project")
    group = await api.create_group(owner, second, "Ideas")
    await api.create_category(owner, second, group["id"], "Tools")

    response = await api.client.delete(f"/budgets/{second}/plan", headers=owner["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await api.client.get("/categories", params={"plan_id": second}, headers=owner["headers"])
    assert response.status_code == 403


async def test_deleting_first_plan_unwinds_postings_of_other_plans(api, owner, plan_id):
    checking = await api.create_account(owner, plan_id, balance=1000)
    second = await api.create_plan(owner, "Household")
    savings = await api.create_account(owner, second, "Savings", type="SAVINGS")
    group = await api.create_group(owner, second, "Food")
    food = await api.create_category(owner, second, group["id"], "Groceries")

    response = await api.post_transaction(owner, second, -50, checking["id"], category_id=food["id"])
    assert response.status_code == 201
    response = await api.post_transaction(owner, second, 200, checking["id"], to_account_id=savings["id"])
    assert response.status_code == 201
    assert (await api.account(owner, second, savings["id"]))["balance"] == 200

    response = await api.client.delete(f"/budgets/{plan_id}/plan", headers=owner["headers"])
    assert response.status_code == 200

    response = await api.client.get("/transactions", params={"plan_id": second}, headers=owner["headers"])
    assert response.json() == []
    assert (await api.account(owner, second, savings["id"]))["balance"] == 0

    summary = await api.summary(owner, second)
    line = summary["category_groups"][0]["categories"][0]
    assert line["id"] == food["id"]
    assert line["activity"] == 0
    assert line["available"] == 0


async def test_only_owner_deletes_plan(api, owner, plan_id):
    editor = await api.register("editor@example.com")
    await api.create_plan(editor, "Editor's own")
    await api.add_member(plan_id, editor, Role.EDITOR)

    response = await api.client.delete(f"/budgets/{plan_id}/plan", headers=editor["headers"])
    assert response.status_code == 403


async def test_update_plan_settings(api, owner, plan_id):
    response = await api.client.put(
        f"/budgets/{plan_id}/plan",
        json={"name": "  Family  ", "currency": "eur"},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Family"
    assert response.json()["currency"] == "EUR"


async def test_rename_rejects_blank_name(api, owner, plan_id):
    response = await api.client.patch(f"/groups/{plan_id}", json={"name": "   "}, headers=owner["headers"])
    assert response.status_code == 400


async def test_group_detail_reports_role_and_members(api, owner, plan_id):
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    response = await api.client.get(f"/groups/{plan_id}", headers=viewer["headers"])
    assert response.json()["user_role"] == "VIEWER"
    assert response.json()["member_count"] == 2


async def test_members_ordered_by_role(api, owner, plan_id):
    viewer = await api.register("viewer@example.com")
    editor = await api.register("editor@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)
    await api.add_member(plan_id, editor, Role.EDITOR)

    response = await api.client.get(f"/groups/{plan_id}/members", headers=owner["headers"])
    body = response.json()
    assert [member["role"] for member in body["members"]] == ["OWNER", "EDITOR", "VIEWER"]
    assert body["current_user_role"] == "OWNER"


async def test_last_owner_cannot_be_removed(api, owner, plan_id):
    co_owner = await api.register("co@example.com")
    await api.add_member(plan_id, co_owner, Role.OWNER)

    response = await api.client.delete(f"/groups/{plan_id}/members/{co_owner['id']}", headers=owner["headers"])
    assert response.status_code == 200

    # The remaining owner cannot be removed, not even by themselves
    response = await api.client.delete(f"/groups/{plan_id}/members/{owner['id']}", headers=owner["headers"])
    assert response.status_code == 400

    members = await api.client.get(f"/groups/{plan_id}/members", headers=owner["headers"])
    owners = [member for member in members.json()["members"] if member["role"] == "OWNER"]
    assert len(owners) == 1


async def test_removing_unknown_member(api, owner, plan_id):
    response = await api.client.delete(f"/groups/{plan_id}/members/9999", headers=owner["headers"])
    assert response.status_code == 404


async def test_removed_member_loses_access(api, owner, plan_id):
    editor = await api.register("editor@example.com")
    await api.add_member(plan_id, editor, Role.EDITOR)

    await api.client.delete(f"/groups/{plan_id}/members/{editor['id']}", headers=owner["headers"])
    response = await api.client.get("/accounts", params={"plan_id": plan_id}, headers=editor["headers"])
    assert response.status_code == 403
