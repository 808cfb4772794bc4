"""SQLAlchemy ORM models.

Models represent database tables:
- posts: Blog posts with tags and a full-text search vector
- activity_logs: Audit trail, one "new_post" row per created post
"""

from blog.models.activity_log import ActivityAction, ActivityLog
from blog.models.post import Post

__all__ = ["ActivityAction", "ActivityLog", "Post"]
