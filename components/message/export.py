"""Render exported chat history as JSON or CSV."""

import json
from datetime import datetime
from typing import List, Tuple

import pandas as pd

from components.message.models import Message

EXPORT_COLUMNS = [
    "id",
    "created_at",
    "sender_name",
    "sender_email",
    "content",
    "reply_to_id",
    "is_anonymized",
]


def messages_frame(messages: List[Message]) -> pd.DataFrame:
    """Messages as a DataFrame with one row per message."""
    records = [
        {
            "id": message.id,
            "created_at": message.created_at,
            "sender_name": message.sender_name or ("Deleted user" if message.is_anonymized else None),
            "sender_email": None if message.is_anonymized else message.sender_email,
            "content": message.content,
            "reply_to_id": message.reply_to_id,
            "is_anonymized": message.is_anonymized,
        }
        for message in messages
    ]
    df = pd.DataFrame.from_records(records, columns=EXPORT_COLUMNS)
    # Keep ids as integers when some replies are missing
    df["reply_to_id"] = df["reply_to_id"].astype("Int64")
    return df


def render_export(plan_id: int, messages: List[Message], fmt: str = "json") -> Tuple[str, str, str]:
    """
    Render messages for download.

    Returns (body, media type, file name).
    """
    stamp = datetime.utcnow().strftime("%Y%m%d")
    df = messages_frame(messages)
    if fmt == "csv":
        body = df.to_csv(index=False, date_format="%Y-%m-%dT%H:%M:%S")
        return body, "text/csv", f"plan-{plan_id}-messages-{stamp}.csv"

    records = json.loads(df.to_json(orient="records", date_format="iso"))
    body = json.dumps({
        "plan_id": plan_id,
        "exported_at": datetime.utcnow().isoformat(),
        "message_count": len(records),
        "messages": records,
    })
    return body, "application/json", f"plan-{plan_id}-messages-{stamp}.json"
