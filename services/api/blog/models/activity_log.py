"""ActivityLog model.

Audit trail row written in the same transaction as the post it refers to.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from blog.stores.postgres import Base


class ActivityAction(str, Enum):
    NEW_POST = "new_post"


class ActivityLog(Base):
    """Audit log entry."""

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(primary_key=True)

    action: Mapped[str] = mapped_column(String(32))
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"), index=True)

    logged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<ActivityLog {self.action} post={self.post_id}>"
