from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogsite.db.base import Base
from blogsite.models.common import TimestampMixin, UUIDPrimaryKeyMixin


class Blog(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A blog post with its comment thread embedded as a JSON document.

    ``comments`` holds ``[{"id": str, "text": str, "replies": [str, ...]}, ...]`` in the
    order they were posted. The list is always replaced, never mutated in place, so the
    ORM sees the change.
    """

    __tablename__ = "blogs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Owner email, not a foreign key.
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    comments: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
