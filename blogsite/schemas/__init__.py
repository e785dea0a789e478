from blogsite.schemas.auth import UserCreate, UserRead
from blogsite.schemas.blog import BlogRead, CommentRead, DashboardRead

__all__ = [
    "UserCreate",
    "UserRead",
    "CommentRead",
    "BlogRead",
    "DashboardRead",
]
