class BlogsiteError(Exception):
    """Base class for domain failures raised by the service layer."""


class NotFoundError(BlogsiteError):
    pass


class BlogNotFound(NotFoundError):
    pass


class CommentNotFound(NotFoundError):
    pass


class CommentIndexOutOfRange(CommentNotFound, IndexError):
    pass


class DuplicateEmail(BlogsiteError, ValueError):
    pass


class InvalidCredentials(BlogsiteError):
    pass


class InvalidToken(BlogsiteError, ValueError):
    pass


class ConcurrentModification(BlogsiteError):
    """Another request changed the record between our read and our write."""


class LoginRequired(BlogsiteError):
    pass
