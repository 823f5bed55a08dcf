"""
db/models/user.py

User model: default record source for the bulk import.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """
    An application user exported to the remote user directory.

    Either email or the primary key identifies the user remotely; name is
    sent only when set.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    email: Mapped[str | None] = mapped_column(
        String(320),
        nullable=True,
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (Index("ix_users_email", "email"),)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
