"""Seed script — populates the database with sample users for testing."""

import asyncio
from datetime import date

from care4u.config import settings
from care4u.database.engine import build_engine, build_session_factory, init_db
from care4u.database.repository import IdentityStore
from care4u.services.auth_service import calculate_bmi

# One fully onboarded user and one who has only requested a code.
COMPLETE_PROFILE = {
    "first_name": "Alice",
    "last_name": "Johnson",
    "contact_number": "+15551234567",
    "birth_date": date(1990, 4, 12),
    "gender": "female",
    "height": 165,
    "weight": 60,
    "emergency_contact_name": "Bob Johnson",
    "emergency_contact_number": "+15559876543",
    "dietary_preference": "veg",
    "calorie_intake_goal": 1800,
    "calorie_burn_goal": 400,
}

SAMPLE_USERS = [
    ("alice@example.com", COMPLETE_PROFILE),
    ("carol@example.com", None),
]


async def seed() -> None:
    """Insert sample users into the database."""
    engine = build_engine(settings.database_url)
    await init_db(engine)
    async with build_session_factory(engine)() as session:
        store = IdentityStore(session)
        for email, profile in SAMPLE_USERS:
            user = await store.find_user_by_email(email) or await store.create_user(email)
            if profile:
                fields = dict(profile, bmi=calculate_bmi(profile["height"], profile["weight"]))
                await store.upsert_profile(user.id, fields)
    await engine.dispose()
    print(f"✅ Seeded {len(SAMPLE_USERS)} users into the database.")


if __name__ == "__main__":
    asyncio.run(seed())
