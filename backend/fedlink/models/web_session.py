"""Web Session ORM — the `session` table backing cookie authentication.

Invariants:
    - sid is the primary key (opaque token held by the client)
    - sess holds the serialized session payload ({"user_id": ..., "username": ...})
    - expire is advisory at the schema level; SessionStore.load ignores expired rows
      and the reaper deletes them
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from fedlink.db.base import Base


class WebSession(Base):
    __tablename__ = "session"

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)
    sess: Mapped[dict] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
