from blogsite.models.blog import Blog
from blogsite.models.user import User

__all__ = ["User", "Blog"]
