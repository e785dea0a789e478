from fastapi import Depends, Request
from sqlalchemy.orm import Session

from blogsite.core.config import Settings
from blogsite.core.errors import InvalidToken, LoginRequired
from blogsite.core.security import TokenService
from blogsite.db.session import get_db
from blogsite.models.user import User
from blogsite.services.storage import UploadStorage
from blogsite.services.users import find_user_by_id


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_storage(request: Request) -> UploadStorage:
    return request.app.state.storage


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """Session guard: resolve the cookie to a user or send the browser back to /login."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise LoginRequired("Missing session cookie")
    try:
        user_id = tokens.verify(token)
    except InvalidToken as exc:
        raise LoginRequired("Invalid session token") from exc
    user = find_user_by_id(db, user_id)
    if not user:
        raise LoginRequired("Session user no longer exists")
    request.state.user_id = user.id
    return user
