import csv
import io
from datetime import datetime, timedelta

from sqlalchemy import select, update

from components.core.config import get_settings
from components.message.models import Message
from components.plan.models import Role

CLEANUP_HEADERS = {"Authorization": f"Bearer {get_settings().CLEANUP_TOKEN}"}


async def _post(api, user, plan_id, content, reply_to_id=None):
    return await api.client.post(
        "/messages",
        params={"plan_id": plan_id},
        json={"content": content, "reply_to_id": reply_to_id},
        headers=user["headers"],
    )


async def test_messages_listed_newest_first_and_marked_read(api, owner, plan_id):
    member = await api.register("member@example.com", name="Max Member")
    await api.add_member(plan_id, member, Role.VIEWER)
    first = (await _post(api, owner, plan_id, "Rent is paid")).json()
    reply = (await _post(api, member, plan_id, "Thanks!", reply_to_id=first["id"])).json()
    assert reply["reply_to_id"] == first["id"]
    assert reply["sender_name"] == "Max Member"

    response = await api.client.get("/messages", params={"plan_id": plan_id}, headers=owner["headers"])
    assert [m["content"] for m in response.json()] == ["Thanks!", "Rent is paid"]

    async with api.db.get_db() as session:
        result = await session.execute(select(Message.id, Message.is_read).order_by(Message.id))
        read = dict(result.all())
    # Only the other member's message was read by the owner
    assert read == {first["id"]: False, reply["id"]: True}


async def test_reply_to_message_of_other_plan(api, owner, plan_id):
    other = await api.register("other@example.com")
    other_plan = await api.create_plan(other, "Other")
    foreign = (await _post(api, other, other_plan, "hello")).json()

    response = await _post(api, owner, plan_id, "reply", reply_to_id=foreign["id"])
    assert response.status_code == 404


async def test_blank_message_is_rejected(api, owner, plan_id):
    response = await _post(api, owner, plan_id, "   ")
    assert response.status_code == 400


async def test_owner_exports_csv(api, owner, plan_id):
    await _post(api, owner, plan_id, "first, with a comma")
    await _post(api, owner, plan_id, "second")

    response = await api.client.get(
        "/messages/export", params={"plan_id": plan_id, "format": "csv"}, headers=owner["headers"]
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["content"] for row in rows] == ["first, with a comma", "second"]
    assert rows[0]["sender_email"] == "owner@example.com"


async def test_export_json(api, owner, plan_id):
    await _post(api, owner, plan_id, "hello")
    response = await api.client.get("/messages/export", params={"plan_id": plan_id}, headers=owner["headers"])
    body = response.json()
    assert body["plan_id"] == plan_id
    assert body["message_count"] == 1
    assert body["messages"][0]["content"] == "hello"


async def test_member_export_follows_policy(api, owner, plan_id):
    member = await api.register("member@example.com")
    await api.add_member(plan_id, member, Role.EDITOR)

    response = await api.client.get("/messages/export", params={"plan_id": plan_id}, headers=member["headers"])
    assert response.status_code == 403

    response = await api.client.post(
        "/messages/export",
        params={"plan_id": plan_id},
        json={"anonymized_retention_hours": 48, "allow_member_export": True},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["anonymized_retention_hours"] == 48

    response = await api.client.get("/messages/export", params={"plan_id": plan_id}, headers=member["headers"])
    assert response.status_code == 200


async def test_only_owner_sets_retention(api, owner, plan_id):
    member = await api.register("member@example.com")
    await api.add_member(plan_id, member, Role.EDITOR)

    response = await api.client.post(
        "/messages/export",
        params={"plan_id": plan_id},
        json={"allow_member_export": True},
        headers=member["headers"],
    )
    assert response.status_code == 403


async def test_cleanup_requires_token(client):
    assert (await client.get("/messages/cleanup")).status_code == 401
    response = await client.post("/messages/cleanup", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


async def test_deleted_user_messages_are_anonymized_then_cleaned(api, owner, plan_id):
    member = await api.register("member@example.com", name="Max Member")
    await api.add_member(plan_id, member, Role.EDITOR)
    kept = (await _post(api, owner, plan_id, "welcome")).json()
    leaving = (await _post(api, member, plan_id, "bye", reply_to_id=kept["id"])).json()
    await _post(api, owner, plan_id, "see you", reply_to_id=leaving["id"])

    response = await api.client.delete("/user/delete", headers=member["headers"])
    assert response.status_code == 200

    listed = await api.client.get("/messages", params={"plan_id": plan_id}, headers=owner["headers"])
    anonymized = [m for m in listed.json() if m["id"] == leaving["id"]][0]
    assert anonymized["sender_id"] is None
    assert anonymized["is_anonymized"] is True
    assert anonymized["sender_name"] == "Max Member"

    status = await api.client.get("/messages/cleanup", headers=CLEANUP_HEADERS)
    assert status.json()["total_anonymized"] == 1
    assert status.json()["due_for_deletion"] == 0

    async with api.db.get_db() as session:
        await session.execute(
            update(Message)
            .where(Message.id == leaving["id"])
            .values(scheduled_delete=datetime.utcnow() - timedelta(minutes=1))
        )
        await session.commit()

    response = await api.client.post("/messages/cleanup", headers=CLEANUP_HEADERS)
    assert response.json()["deleted_count"] == 1
    assert response.json()["groups_processed"] == 1

    listed = await api.client.get("/messages", params={"plan_id": plan_id}, headers=owner["headers"])
    assert [m["content"] for m in listed.json()] == ["see you", "welcome"]
    assert listed.json()[0]["reply_to_id"] is None


async def test_cleanup_with_nothing_due(client):
    response = await client.post("/messages/cleanup", headers=CLEANUP_HEADERS)
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 0
