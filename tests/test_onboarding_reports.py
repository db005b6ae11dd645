from components.onboarding.schemas import OnboardingAnswers
from components.onboarding.seed import category_layout
from components.plan.models import Role


def _answers(**overrides):
    values = {"name": "Sam"}
    values.update(overrides)
    return OnboardingAnswers(**values)


def test_layout_follows_answers():
    layout = dict(category_layout(_answers(
        housing_type="rent",
        expense_categories=["groceries", "internet"],
        has_debt="no",
        debt_types=["credit_card"],
        subscriptions=["streaming", "music"],
    )))
    assert layout["Housing & Utilities"][:2] == ["Rent", "Renter's Insurance"]
    assert "Internet" in layout["Housing & Utilities"]
    assert layout["Food & Dining"] == ["Groceries"]
    assert layout["Subscriptions & Digital"] == ["Streaming Services", "Music Streaming"]
    assert "Debt Payments" not in layout


def test_layout_skipped_is_empty():
    assert category_layout(_answers(skipped=True, housing_type="rent")) == []


def test_layout_with_housing_only():
    assert category_layout(_answers(housing_type="dormitory")) == [("Housing & Utilities", ["Dormitory Fees", "Meal Plan"])]
    assert category_layout(_answers(housing_type="unknown")) == [("Housing & Utilities", [
        "Electricity", "Gas", "Water/Sewer", "Trash/Recycling",
    ])]


async def test_complete_onboarding_creates_plan(api):
    user = await api.register("sam@example.com")
    response = await api.client.post(
        "/onboarding/complete",
        json={"name": "Sam", "housing_type": "rent", "savings_goals": ["vacation", "emergency_fund"]},
        headers=user["headers"],
    )
    assert response.status_code == 200
    result = response.json()
    assert result["category_group_count"] == 2

    profile = await api.client.get("/user/profile", headers=user["headers"])
    assert profile.json()["has_completed_onboarding"] is True
    assert profile.json()["name"] == "Sam"

    summary = (await api.client.get("/budgets", headers=user["headers"])).json()
    assert summary["plan_id"] == result["plan_id"]
    assert summary["plan_name"] == "Sam's Budget"
    assert [group["name"] for group in summary["category_groups"]] == ["Housing & Utilities", "Savings & Investments"]


async def test_spending_report(api, owner, plan_id):
    checking = await api.create_account(owner, plan_id, balance=1000)
    savings = await api.create_account(owner, plan_id, "Savings", type="SAVINGS")
    group = await api.create_group(owner, plan_id, "Food")
    groceries = await api.create_category(owner, plan_id, group["id"], "Groceries")
    dining = await api.create_category(owner, plan_id, group["id"], "Dining")

    await api.post_transaction(owner, plan_id, -60, checking["id"], category_id=groceries["id"])
    await api.post_transaction(owner, plan_id, -15, checking["id"], category_id=groceries["id"])
    await api.post_transaction(owner, plan_id, -25, checking["id"], category_id=dining["id"])
    await api.post_transaction(owner, plan_id, -100, checking["id"])
    # Neither income nor transfers count as spending
    await api.post_transaction(owner, plan_id, 500, checking["id"], category_id=groceries["id"])
    await api.post_transaction(owner, plan_id, -300, checking["id"], to_account_id=savings["id"])

    response = await api.client.get(
        "/reports/spending", params={"plan_id": plan_id, "month": "2024-03"}, headers=owner["headers"]
    )
    assert response.status_code == 200
    report = response.json()
    assert report["total_spending"] == 200
    assert report["transaction_count"] == 4

    by_category = {row["category_name"]: row for row in report["by_category"]}
    assert by_category["Uncategorized"]["amount"] == 100
    assert by_category["Uncategorized"]["category_id"] is None
    assert by_category["Groceries"]["amount"] == 75
    assert by_category["Groceries"]["transaction_count"] == 2
    assert by_category["Dining"]["percentage"] == 12.5
    assert report["by_category"][0]["category_name"] == "Uncategorized"

    by_group = {row["category_group_name"]: row["amount"] for row in report["by_group"]}
    assert by_group == {"Food": 100, "Uncategorized": 100}


async def test_empty_spending_report(api, owner, plan_id):
    response = await api.client.get(
        "/reports/spending", params={"plan_id": plan_id, "month": "2023-01"}, headers=owner["headers"]
    )
    assert response.json()["total_spending"] == 0
    assert response.json()["by_category"] == []


async def test_bad_month_is_rejected(api, owner, plan_id):
    response = await api.client.get(
        "/reports/spending", params={"plan_id": plan_id, "month": "March"}, headers=owner["headers"]
    )
    assert response.status_code == 400


async def test_delete_user_with_solo_plan(api, owner, plan_id):
    await api.create_account(owner, plan_id, balance=10)
    response = await api.client.delete("/user/delete", headers=owner["headers"])
    assert response.status_code == 200

    response = await api.client.get("/user/profile", headers=owner["headers"])
    assert response.status_code == 401


async def test_last_owner_of_shared_plan_cannot_delete_account(api, owner, plan_id):
    member = await api.register("member@example.com")
    await api.add_member(plan_id, member, Role.EDITOR)

    response = await api.client.delete("/user/delete", headers=owner["headers"])
    assert response.status_code == 400
    assert response.json()["plan_id"] == plan_id


async def test_health_check(client):
    response = await client.get("/health_check/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
