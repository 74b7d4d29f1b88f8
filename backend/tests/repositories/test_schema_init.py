"""Schema Initialisation — verifies idempotent creation and storage-level referential rules.

Tests:
    - create_schema twice is a no-op returning the same tables
    - Deleting a user cascades to owned rows
    - Deleting a category nulls services' category_id (services survive)
    - init_schema command fails fast without DATABASE_URL
"""

from datetime import datetime, timezone

from sqlalchemy import func, select

from fedlink.db import init_schema
from fedlink.db.schema import create_schema
from fedlink.models import (
    Category, Comment, Instance, Post, Reaction, Service, UserSkill, Skill, WorkExperience,
)

EXPECTED_TABLES = {
    "users", "work_experiences", "educations", "skills", "user_skills", "categories",
    "services", "posts", "comments", "reactions", "instances", "federated_instances",
    "activities", "session",
}


async def test_create_schema_is_idempotent(test_engine):
    """Creating the schema twice is a no-op."""
    first = await create_schema(test_engine)
    second = await create_schema(test_engine)
    assert set(first) == EXPECTED_TABLES
    assert first == second


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_user_delete_cascades(test_db, make_user):
    """Deleting a user removes every row they own."""
    owner = await make_user("owner")
    other = await make_user("other")
    skill = Skill(name="Python")
    test_db.add(skill)
    await test_db.flush()
    post = Post(user_id=owner.id, content="hello")
    test_db.add_all([
        post,
        WorkExperience(
            user_id=owner.id, company="Acme", title="Dev",
            start_date=datetime(2020, 1, 1, tzinfo=timezone.utc),
        ),
        UserSkill(user_id=owner.id, skill_id=skill.id),
        Service(user_id=owner.id, title="Consulting", description="Advice"),
        Instance(name="Owner's", admin_id=owner.id),
    ])
    await test_db.flush()
    test_db.add_all([
        Comment(post_id=post.id, user_id=other.id, content="hi"),
        Reaction(post_id=post.id, user_id=other.id, type="like"),
    ])
    await test_db.commit()

    await test_db.delete(owner)
    await test_db.commit()
    test_db.expunge_all()

    for model in (Post, Comment, Reaction, WorkExperience, UserSkill, Service, Instance):
        assert await _count(test_db, model) == 0, model.__tablename__
    assert await _count(test_db, Skill) == 1


async def test_category_delete_sets_null_at_storage_level(test_db, make_user):
    """The storage engine nulls services.category_id on category delete."""
    owner = await make_user()
    category = Category(name="Design")
    test_db.add(category)
    await test_db.flush()
    test_db.add(Service(
        user_id=owner.id, category_id=category.id, title="Logo", description="Logos",
    ))
    await test_db.commit()

    await test_db.delete(category)
    await test_db.commit()
    test_db.expunge_all()

    service = (await test_db.execute(select(Service))).unique().scalar_one()
    assert service.category_id is None


def test_init_schema_fails_without_database_url(monkeypatch):
    """The init command exits 1 when DATABASE_URL is missing."""
    class _Settings:
        log_level = "INFO"
        log_format = "text"

        def require_database_url(self):
            from fedlink.core.errors import ConfigurationError
            raise ConfigurationError("DATABASE_URL environment variable is not set")

    monkeypatch.setattr(init_schema, "get_settings", lambda: _Settings())
    assert init_schema.main() == 1


async def test_init_schema_run_creates_tables(tmp_path):
    """The init command creates every table in a file database."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'init.db'}"
    assert set(await init_schema.run(url)) == EXPECTED_TABLES
    assert set(await init_schema.run(url)) == EXPECTED_TABLES
