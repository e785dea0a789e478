import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from blogsite.core.config import Settings
from blogsite.core.errors import DuplicateEmail, InvalidCredentials
from blogsite.core.security import TokenService
from blogsite.db.session import get_db
from blogsite.routers.deps import get_app_settings, get_storage, get_token_service
from blogsite.schemas.auth import UserCreate
from blogsite.services.storage import UploadStorage
from blogsite.services.users import authenticate, create_user, find_user_by_email

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


@router.get("/")
def root() -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/signup")
def signup_form() -> FileResponse:
    return FileResponse(STATIC_DIR / "signup.html")


@router.get("/login")
def login_form() -> FileResponse:
    return FileResponse(STATIC_DIR / "login.html")


@router.post("/signup")
async def signup(
    email: str = Form(...),
    password: str = Form(...),
    profile_image: UploadFile = File(..., alias="profileImage"),
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
) -> RedirectResponse:
    try:
        payload = UserCreate(email=email, password=password)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password") from exc
    # Lookups and bcrypt hashing block, so they run in the threadpool.
    if await run_in_threadpool(find_user_by_email, db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already registered")

    try:
        profile_ref = await storage.store(profile_image)
    except OSError as exc:
        logger.exception("signup_upload_failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Signup error") from exc

    try:
        await run_in_threadpool(create_user, db, payload.email, payload.password, profile_ref)
    except DuplicateEmail as exc:
        storage.delete(profile_ref)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/login")
def login(
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    try:
        user = authenticate(db, email, password)
    except InvalidCredentials as exc:
        logger.info("login_failed")
        return PlainTextResponse(str(exc), status_code=status.HTTP_401_UNAUTHORIZED)

    response = RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.session_cookie_name,
        tokens.issue(user.id),
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    logger.info("login_succeeded", extra={"user_id": user.id})
    return response


@router.get("/logout")
def logout(settings: Settings = Depends(get_app_settings)) -> RedirectResponse:
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.session_cookie_name)
    return response
