import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from blogsite.core.config import Settings
from blogsite.core.errors import BlogNotFound
from blogsite.db.session import get_db
from blogsite.models.blog import Blog
from blogsite.models.user import User
from blogsite.routers.deps import get_app_settings, get_current_user, get_storage
from blogsite.schemas.auth import UserRead
from blogsite.schemas.blog import BlogRead, DashboardRead
from blogsite.services.blogs import (
    append_comment,
    append_reply,
    append_reply_at,
    create_blog,
    delete_blog,
    get_blog,
    list_blogs_by_owner,
    update_blog,
)
from blogsite.services.storage import UploadStorage

router = APIRouter(tags=["blogs"])
logger = logging.getLogger(__name__)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _has_file(upload: UploadFile | None) -> bool:
    # Browsers post an empty, unnamed part when no file was chosen.
    return upload is not None and bool(upload.filename)


def _load_blog(db: Session, blog_id: str, user: User, settings: Settings) -> Blog:
    blog = get_blog(db, blog_id)
    if settings.enforce_blog_ownership and blog.created_by != user.email:
        raise BlogNotFound("Blog not found")
    return blog


@router.get("/dashboard", response_model=DashboardRead)
def dashboard(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> DashboardRead:
    blogs = list_blogs_by_owner(db, current_user.email)
    return DashboardRead(
        user=UserRead.model_validate(current_user),
        blogs=[BlogRead.model_validate(blog) for blog in blogs],
    )


@router.post("/blog/create")
async def create(
    title: str = Form(...),
    description: str = Form(""),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> RedirectResponse:
    image_ref = None
    if _has_file(image):
        try:
            image_ref = await storage.store(image)
        except OSError as exc:
            logger.exception("blog_image_store_failed")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to store uploaded file.") from exc
    await run_in_threadpool(create_blog, db, title, description, image_ref, current_user.email)
    return _redirect("/dashboard")


@router.get("/blog/edit/{blog_id}", response_model=BlogRead)
def edit(
    blog_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_user),
) -> Blog:
    return _load_blog(db, blog_id, current_user, settings)


@router.post("/blog/update/{blog_id}")
async def update(
    blog_id: str,
    title: str = Form(...),
    description: str = Form(""),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    storage: UploadStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> RedirectResponse:
    blog = await run_in_threadpool(_load_blog, db, blog_id, current_user, settings)
    image_ref = None
    if _has_file(image):
        try:
            image_ref = await storage.replace(blog.image, image)
        except OSError as exc:
            logger.exception("blog_image_store_failed", extra={"blog_id": blog_id})
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to store uploaded file.") from exc
    await run_in_threadpool(update_blog, db, blog.id, title, description, image_ref)
    return _redirect("/dashboard")


@router.get("/blog/delete/{blog_id}")
def delete(
    blog_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    storage: UploadStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
) -> RedirectResponse:
    blog = _load_blog(db, blog_id, current_user, settings)
    storage.delete(blog.image)
    delete_blog(db, blog.id)
    return _redirect("/dashboard")


@router.get("/blog/view/{blog_id}", response_model=BlogRead)
def view(
    blog_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_user),
) -> Blog:
    return _load_blog(db, blog_id, current_user, settings)


@router.post("/blog/comment/{blog_id}")
def comment(
    blog_id: str,
    text: str = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_user),
) -> RedirectResponse:
    blog = _load_blog(db, blog_id, current_user, settings)
    append_comment(db, blog.id, text)
    return _redirect(f"/blog/view/{blog.id}")


@router.post("/blog/reply/{blog_id}/{comment_ref}")
def reply(
    blog_id: str,
    comment_ref: str,
    reply: str = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(get_current_user),
) -> RedirectResponse:
    """Reply to a comment addressed by its id, or by position when ``comment_ref`` is a plain number."""
    blog = _load_blog(db, blog_id, current_user, settings)
    if comment_ref.isdecimal():
        append_reply_at(db, blog.id, int(comment_ref), reply)
    else:
        append_reply(db, blog.id, comment_ref, reply)
    return _redirect(f"/blog/view/{blog.id}")
