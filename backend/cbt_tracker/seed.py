# seed script: creates indexes and a demo user with a few mood entries
# run once: python -m cbt_tracker.seed

import asyncio
import logging
import os
from datetime import datetime, timedelta, timezone

from cbt_tracker.config import settings
from cbt_tracker.services.db import db
from cbt_tracker.services.auth_service import hash_password

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# seed password from env
DEFAULT_PASSWORD = os.getenv("SEED_PASSWORD")

DEMO_ENTRIES = [
    {
        "situation": "Team meeting ran over and my update was cut short",
        "automatic_thought": "Nobody cares about my work",
        "emotion": "Sadness",
        "emotion_intensity": 7,
        "cognitive_distortion": "Mind reading",
        "rational_response": "The agenda was packed, two others were also cut short",
        "outcome": "Sent my update by email, felt lighter",
    },
    {
        "situation": "Presentation to the client tomorrow",
        "automatic_thought": "I'll freeze and embarrass everyone",
        "emotion": "Anxiety",
        "emotion_intensity": 8,
        "cognitive_distortion": "Catastrophizing",
        "rational_response": "I have presented this material twice before",
        "outcome": "",
    },
    {
        "situation": "Friend did not reply to my message",
        "automatic_thought": "They must be annoyed with me",
        "emotion": "Worry",
        "emotion_intensity": 4,
        "cognitive_distortion": "Jumping to conclusions",
        "rational_response": "They mentioned a busy week at work",
        "outcome": "They replied in the evening",
    },
]


async def seed():
    """create indexes and, if SEED_PASSWORD is set, the demo user and entries. skips existing"""
    await db.connect()
    await db.ensure_indexes()

    if not DEFAULT_PASSWORD:
        logger.info("SEED_PASSWORD not set, skipping demo user")
        await db.close()
        return

    email = settings.SEED_DEMO_EMAIL
    existing = await db.users.find_one({"email": email})
    if existing:
        logger.info(f"Demo user already exists: {email} (id: {existing['_id']})")
        await db.close()
        return

    now = datetime.now(timezone.utc)
    result = await db.users.insert_one({
        "email": email,
        "hashed_password": hash_password(DEFAULT_PASSWORD),
        "created_at": now.isoformat(),
    })
    user_id = str(result.inserted_id)
    logger.info(f"Created demo user: {email} (id: {user_id})")

    # one entry per day, oldest first
    for offset, entry in enumerate(DEMO_ENTRIES):
        created = now - timedelta(days=len(DEMO_ENTRIES) - offset)
        await db.entries.insert_one({**entry, "user_id": user_id, "created_at": created.isoformat()})
    logger.info(f"Created {len(DEMO_ENTRIES)} demo entries")

    logger.info("Seed complete!")
    await db.close()


if __name__ == "__main__":
    asyncio.run(seed())
