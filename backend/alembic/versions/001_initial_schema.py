"""Initial schema — users, profile history, skills, services, feed, instances, sessions.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer, primary_key=True, autoincrement=True)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def _fk(column: str, target: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        column, sa.Integer, sa.ForeignKey(target, ondelete=ondelete), nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.Text, nullable=False, unique=True),
        sa.Column("email", sa.Text, nullable=False, unique=True),
        sa.Column("first_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("headline", sa.Text, nullable=True),
        sa.Column("profile_image_url", sa.Text, nullable=True),
        sa.Column("activity_pub_id", sa.Text, nullable=True, unique=True),
        sa.Column("actor_url", sa.Text, nullable=True, unique=True),
        sa.Column("inbox_url", sa.Text, nullable=True, unique=True),
        sa.Column("outbox_url", sa.Text, nullable=True, unique=True),
        _created_at(),
    )

    for table, columns in (
        ("work_experiences", [
            sa.Column("company", sa.Text, nullable=False),
            sa.Column("title", sa.Text, nullable=False),
            sa.Column("location", sa.Text, nullable=True),
        ]),
        ("educations", [
            sa.Column("school", sa.Text, nullable=False),
            sa.Column("degree", sa.Text, nullable=True),
            sa.Column("field_of_study", sa.Text, nullable=True),
        ]),
    ):
        op.create_table(
            table,
            _id(),
            _fk("user_id", "users.id"),
            *columns,
            sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("current", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("description", sa.Text, nullable=True),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "skills",
        _id(),
        sa.Column("name", sa.Text, nullable=False, unique=True),
    )
    op.create_table(
        "user_skills",
        _id(),
        _fk("user_id", "users.id"),
        _fk("skill_id", "skills.id"),
        sa.Column("endorsements", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("user_id", "skill_id", name="uq_user_skills_user_id_skill_id"),
    )

    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("color", sa.Text, nullable=True),
    )
    op.create_table(
        "services",
        _id(),
        _fk("user_id", "users.id"),
        _fk("category_id", "categories.id", ondelete="SET NULL", nullable=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("price", sa.Text, nullable=True),
        sa.Column("location", sa.Text, nullable=True),
        sa.Column("remote", sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_services_user_id", "services", ["user_id"])

    op.create_table(
        "posts",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("media_url", sa.Text, nullable=True),
        sa.Column("activity_id", sa.Text, nullable=True),
        _created_at(),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_table(
        "comments",
        _id(),
        _fk("post_id", "posts.id"),
        _fk("user_id", "users.id"),
        sa.Column("content", sa.Text, nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_table(
        "reactions",
        _id(),
        _fk("post_id", "posts.id"),
        _fk("user_id", "users.id"),
        sa.Column("type", sa.String(32), nullable=False),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_reactions_post_id_user_id"),
    )

    op.create_table(
        "instances",
        _id(),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _fk("admin_id", "users.id"),
        sa.Column("domain", sa.Text, nullable=True, unique=True),
        sa.Column("logo", sa.Text, nullable=True),
        sa.Column("registration_type", sa.String(20), nullable=False, server_default="open"),
        sa.Column("content_moderation", sa.JSON, nullable=False),
        sa.Column("required_fields", sa.JSON, nullable=False),
        sa.Column("federation_rules", sa.JSON, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_instances_admin_id", "instances", ["admin_id"])
    op.create_table(
        "federated_instances",
        _id(),
        _fk("instance_id", "instances.id"),
        _fk("fed_with_instance_id", "instances.id"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _created_at(),
        sa.UniqueConstraint(
            "instance_id", "fed_with_instance_id",
            name="uq_federated_instances_instance_id_fed_with_instance_id",
        ),
    )
    op.create_table(
        "activities",
        _id(),
        _fk("instance_id", "instances.id"),
        sa.Column("type", sa.String(50), nullable=False),
        _fk("actor_id", "users.id", ondelete="SET NULL", nullable=True),
        sa.Column("object_id", sa.Text, nullable=True),
        sa.Column("target_id", sa.Text, nullable=True),
        sa.Column("payload", sa.JSON, nullable=False),
        _created_at(),
    )
    op.create_index("ix_activities_instance_id", "activities", ["instance_id"])

    op.create_table(
        "session",
        sa.Column("sid", sa.String(128), primary_key=True),
        sa.Column("sess", sa.JSON, nullable=False),
        sa.Column("expire", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_session_expire", "session", ["expire"])


def downgrade() -> None:
    op.drop_index("ix_session_expire", table_name="session")
    op.drop_table("session")
    op.drop_index("ix_activities_instance_id", table_name="activities")
    op.drop_table("activities")
    op.drop_table("federated_instances")
    op.drop_index("ix_instances_admin_id", table_name="instances")
    op.drop_table("instances")
    op.drop_table("reactions")
    op.drop_index("ix_comments_post_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_posts_user_id", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_services_user_id", table_name="services")
    op.drop_table("services")
    op.drop_table("categories")
    op.drop_table("user_skills")
    op.drop_table("skills")
    for table in ("educations", "work_experiences"):
        op.drop_index(f"ix_{table}_user_id", table_name=table)
        op.drop_table(table)
    op.drop_table("users")
