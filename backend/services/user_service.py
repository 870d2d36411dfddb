"""
user_service.py - Demo identity
The dashboard runs as a single fixed user; this resolves (or creates) it.
"""

from config import DEMO_EMAIL
from models.user import User
from services.store import Store


async def get_demo_user(store: Store, email: str = DEMO_EMAIL) -> User:
    existing = await store.users.find_first(email=email)
    if existing:
        return existing

    user = await store.users.create({"email": email})
    await store.feature_selections.create({"user_id": user.id})
    return user
