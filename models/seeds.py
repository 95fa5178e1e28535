"""
Default categories shared by every user (user_id NULL, is_default True).
Seeding is idempotent: existing defaults are matched by name and left alone.
"""
import logging

from models.category import Category, CategoryType

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Food", CategoryType.EXPENSE),
    ("Transport", CategoryType.EXPENSE),
    ("Health", CategoryType.EXPENSE),
    ("Entertainment", CategoryType.EXPENSE),
    ("Bills", CategoryType.EXPENSE),
    ("Salary", CategoryType.INCOME),
]


def seed_default_categories(storage) -> int:
    session = storage.session
    existing = {
        name
        for (name,) in session.query(Category.name).filter(
            Category.is_default.is_(True), Category.user_id.is_(None)
        )
    }
    created = 0
    for name, category_type in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        storage.new(Category(name=name, type=category_type, is_default=True, user_id=None))
        created += 1
    if created:
        storage.save()
        logger.info("Seeded %d default categories", created)
    return created
