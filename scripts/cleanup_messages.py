"""Script to purge anonymized chat messages past their retention window.

Meant to be run by a scheduler (cron, systemd timer) as an alternative to
calling ``POST /messages/cleanup``.
"""

import asyncio
import logging

from components.core.config import get_settings
from components.core.init_db import get_db
from components.message.repository import MessageRepository

settings = get_settings()
logger = logging.getLogger("scripts.cleanup_messages")


async def cleanup_messages():
    """Delete due anonymized messages and report what was done."""
    async for db in get_db():
        status = await MessageRepository(db).cleanup_status()
        logger.info(
            "%s anonymized messages, %s due for deletion",
            status.total_anonymized, status.due_for_deletion,
        )
        result = await MessageRepository(db).cleanup()
        logger.info(result.message)
        return result


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(cleanup_messages())
