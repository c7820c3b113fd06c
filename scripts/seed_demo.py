"""
Seed a demo account with a scored tender.

Creates a user, one project, a tender with balanced categories and three
bidders whose category scores are already stored and finalised, so the
comparison endpoint has something to show.

Usage:
    python scripts/seed_demo.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from api.auth.password import hash_password
from database.connection import get_db_context, init_db, close_db
from database.models import User
from schemas.tender import CategoryScore
from services.evaluation import finalize_bidder
from services.tender_storage import get_tender_storage


DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo1234"

DEMO_CATEGORIES = [
    {"name": "Technical", "weight": 40, "description": "Method statement and programme"},
    {"name": "Financial", "weight": 35, "description": "Priced bill of quantities"},
    {"name": "Experience", "weight": 25, "description": "Comparable completed projects"},
]

# Category name -> score per bidder
DEMO_BIDDERS = [
    {
        "name": "Atlas Contracting",
        "country": "United Arab Emirates",
        "scores": {"Technical": 92, "Financial": 84, "Experience": 86},
    },
    {
        "name": "Brightline Builders",
        "country": "Saudi Arabia",
        "scores": {"Technical": 70, "Financial": 78, "Experience": 66},
    },
    {
        "name": "Cedar Construction",
        "country": "Jordan",
        "scores": {"Technical": 58, "Financial": 66, "Experience": 60},
    },
]


async def get_or_create_user() -> User:
    async with get_db_context() as db:
        result = await db.execute(select(User).where(User.email == DEMO_EMAIL))
        user = result.scalar_one_or_none()
        if user:
            print(f"User '{DEMO_EMAIL}' already exists")
            return user

        user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
        db.add(user)
        await db.commit()
        print(f"Created user: {DEMO_EMAIL} / {DEMO_PASSWORD}")
        return user


async def seed_demo():
    """Seed the demo project, tender and bidders."""
    await init_db()
    user = await get_or_create_user()
    storage = get_tender_storage(str(user.id))

    project = await storage.create_project(
        name="Marina Heights Tower",
        description="32-storey residential tower with podium retail",
        type="residential",
        location="Dubai Marina",
    )
    print(f"Created project: {project.ref_no}")

    tender = await storage.create_tender(
        project.id,
        name="Main Contractor Works",
        discipline="Civil & Structural",
        currency="AED",
        value=185000000,
        status="open",
    )
    print(f"Created tender: {tender.ref_no}")

    categories = {}
    for data in DEMO_CATEGORIES:
        category = await storage.add_category(tender.id, **data)
        categories[category.name] = category

    for data in DEMO_BIDDERS:
        bidder = await storage.add_bidder(tender.id, name=data["name"], country=data["country"])
        for category_name, score in data["scores"].items():
            await storage.save_category_score(
                bidder.id,
                categories[category_name].id,
                CategoryScore(score=score, summary=f"{category_name} submission reviewed.")
            )

        tender = await storage.get_tender_by_id(tender.id)
        evaluation = await finalize_bidder(storage, tender, bidder.id)
        print(f"Evaluated {bidder.name}: {evaluation.overall_score}/100")

    await close_db()
    print("\n✅ Demo data seeded successfully!")


if __name__ == "__main__":
    asyncio.run(seed_demo())
