import copy
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from blogsite.core.errors import BlogNotFound, CommentIndexOutOfRange, CommentNotFound, ConcurrentModification
from blogsite.models.blog import Blog
from blogsite.models.common import new_id

logger = logging.getLogger(__name__)


def _commit(db: Session, blog: Blog) -> Blog:
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConcurrentModification(f"Blog {blog.id} was modified by another request") from exc
    db.refresh(blog)
    return blog


def create_blog(db: Session, title: str, description: str, image: str | None, owner_email: str) -> Blog:
    blog = Blog(title=title, description=description, image=image, created_by=owner_email, comments=[])
    db.add(blog)
    db.commit()
    db.refresh(blog)
    logger.info("blog_created", extra={"blog_id": blog.id, "owner": owner_email})
    return blog


def get_blog(db: Session, blog_id: str) -> Blog:
    blog = db.get(Blog, blog_id)
    if not blog:
        raise BlogNotFound("Blog not found")
    return blog


def list_blogs_by_owner(db: Session, owner_email: str) -> list[Blog]:
    rows = db.scalars(select(Blog).where(Blog.created_by == owner_email).order_by(Blog.created_at.asc()))
    return list(rows.all())


def update_blog(db: Session, blog_id: str, title: str, description: str, image: str | None = None) -> Blog:
    """Overwrite title and description; the image only changes when a new reference is given.

    Storing the new file and removing the old one is the caller's job.
    """
    blog = get_blog(db, blog_id)
    blog.title = title
    blog.description = description
    if image is not None:
        blog.image = image
    return _commit(db, blog)


def delete_blog(db: Session, blog_id: str) -> None:
    """Remove the record. The caller deletes the stored image beforehand."""
    blog = get_blog(db, blog_id)
    db.delete(blog)
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConcurrentModification(f"Blog {blog_id} was modified by another request") from exc
    logger.info("blog_deleted", extra={"blog_id": blog_id})


def append_comment(db: Session, blog_id: str, text: str) -> Blog:
    blog = get_blog(db, blog_id)
    comment = {"id": new_id(), "text": text, "replies": []}
    blog.comments = [*copy.deepcopy(blog.comments or []), comment]
    _commit(db, blog)
    logger.info("comment_added", extra={"blog_id": blog_id, "comment_id": comment["id"]})
    return blog


def _append_reply_to(db: Session, blog: Blog, position: int, text: str) -> Blog:
    comments = copy.deepcopy(blog.comments)
    comments[position]["replies"] = [*comments[position].get("replies", []), text]
    blog.comments = comments
    _commit(db, blog)
    logger.info("reply_added", extra={"blog_id": blog.id, "comment_id": comments[position]["id"]})
    return blog


def append_reply(db: Session, blog_id: str, comment_id: str, text: str) -> Blog:
    blog = get_blog(db, blog_id)
    for position, comment in enumerate(blog.comments or []):
        if comment.get("id") == comment_id:
            return _append_reply_to(db, blog, position, text)
    raise CommentNotFound("Comment not found")


def append_reply_at(db: Session, blog_id: str, comment_index: int, text: str) -> Blog:
    """Positional variant of :func:`append_reply`; negative indexes are out of range."""
    blog = get_blog(db, blog_id)
    if not 0 <= comment_index < len(blog.comments or []):
        raise CommentIndexOutOfRange(f"No comment at index {comment_index}")
    return _append_reply_to(db, blog, comment_index, text)
