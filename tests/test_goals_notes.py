from components.plan.models import Role


async def _create_goals(api, user, plan_id, target, category_ids=(), group_ids=()):
    return await api.client.post(
        "/goals",
        params={"plan_id": plan_id},
        json={
            "name": "Save up",
            "target": target,
            "category_ids": list(category_ids),
            "category_group_ids": list(group_ids),
        },
        headers=user["headers"],
    )


async def test_goal_created_per_target(api, owner, plan_id):
    group = await api.create_group(owner, plan_id, "Savings")
    first = await api.create_category(owner, plan_id, group["id"], "Car")
    second = await api.create_category(owner, plan_id, group["id"], "Trip")

    response = await _create_goals(
        api, owner, plan_id,
        {"type": "TARGET_BALANCE_BY_DATE", "target_amount": 2500, "target_date": "2024-12-01"},
        category_ids=[first["id"], second["id"]],
        group_ids=[group["id"]],
    )
    assert response.status_code == 201
    goals = response.json()
    assert len(goals) == 3
    assert {goal["target"]["type"] for goal in goals} == {"TARGET_BALANCE_BY_DATE"}
    assert goals[0]["target"]["target_date"] == "2024-12-01"
    assert sorted(goal["category_group_id"] is None for goal in goals) == [False, True, True]


async def test_periodic_goal_round_trips_its_shape(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Gym")

    response = await _create_goals(
        api, owner, plan_id,
        {"type": "PERIODIC_FUNDING", "period": "WEEKLY", "amount": 15, "weekly_day": 2},
        category_ids=[category["id"]],
    )
    [goal] = response.json()
    fetched = await api.client.get(f"/goals/{goal['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert fetched.json()["target"] == {"type": "PERIODIC_FUNDING", "period": "WEEKLY", "amount": 15.0, "weekly_day": 2}


async def test_goal_type_change_clears_old_fields(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    response = await _create_goals(
        api, owner, plan_id, {"type": "TARGET_BALANCE", "target_amount": 100}, group_ids=[group["id"]]
    )
    [goal] = response.json()

    response = await api.client.put(
        f"/goals/{goal['id']}",
        params={"plan_id": plan_id},
        json={"target": {"type": "PERCENT_OF_INCOME", "percentage": 10}, "current_amount": 40},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["target"] == {"type": "PERCENT_OF_INCOME", "percentage": 10.0}
    assert response.json()["current_amount"] == 40


async def test_goal_shape_is_validated(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)

    response = await _create_goals(api, owner, plan_id, {"type": "TARGET_BALANCE"}, group_ids=[group["id"]])
    assert response.status_code == 400

    response = await _create_goals(
        api, owner, plan_id,
        {"type": "PERIODIC_FUNDING", "period": "MONTHLY", "amount": 10, "weekly_day": 3},
        group_ids=[group["id"]],
    )
    assert response.status_code == 400

    response = await _create_goals(api, owner, plan_id, {"type": "CUSTOM"})
    assert response.status_code == 400


async def test_goal_targets_must_belong_to_plan(api, owner, plan_id):
    other = await api.register("other@example.com")
    other_plan = await api.create_plan(other, "Other")
    foreign = await api.create_group(other, other_plan, "Theirs")

    response = await _create_goals(api, owner, plan_id, {"type": "CUSTOM"}, group_ids=[foreign["id"]])
    assert response.status_code == 400


async def test_viewer_cannot_create_goals(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    viewer = await api.register("viewer@example.com")
    await api.add_member(plan_id, viewer, Role.VIEWER)

    response = await _create_goals(api, viewer, plan_id, {"type": "CUSTOM"}, group_ids=[group["id"]])
    assert response.status_code == 403


async def test_goal_delete(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    [goal] = (await _create_goals(api, owner, plan_id, {"type": "CUSTOM"}, group_ids=[group["id"]])).json()

    response = await api.client.delete(f"/goals/{goal['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 200
    listed = await api.client.get("/goals", params={"plan_id": plan_id}, headers=owner["headers"])
    assert listed.json() == []


async def test_note_needs_exactly_one_target(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Rent")

    response = await api.client.post(
        "/notes",
        params={"plan_id": plan_id},
        json={"content": "both", "category_id": category["id"], "category_group_id": group["id"]},
        headers=owner["headers"],
    )
    assert response.status_code == 400

    response = await api.client.post(
        "/notes", params={"plan_id": plan_id}, json={"content": "neither"}, headers=owner["headers"]
    )
    assert response.status_code == 400


async def test_note_lifecycle(api, owner, plan_id):
    group = await api.create_group(owner, plan_id)
    category = await api.create_category(owner, plan_id, group["id"], "Rent")

    response = await api.client.post(
        "/notes",
        params={"plan_id": plan_id},
        json={"content": "Due on the 1st", "category_id": category["id"]},
        headers=owner["headers"],
    )
    note = response.json()

    response = await api.client.put(
        f"/notes/{note['id']}",
        params={"plan_id": plan_id},
        json={"content": "Due on the 3rd"},
        headers=owner["headers"],
    )
    assert response.json()["content"] == "Due on the 3rd"

    listed = await api.client.get(
        "/notes", params={"plan_id": plan_id, "category_id": category["id"]}, headers=owner["headers"]
    )
    assert [n["id"] for n in listed.json()] == [note["id"]]

    response = await api.client.delete(f"/notes/{note['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 200
    response = await api.client.get(f"/notes/{note['id']}", params={"plan_id": plan_id}, headers=owner["headers"])
    assert response.status_code == 404
