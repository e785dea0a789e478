import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogsite.core.errors import DuplicateEmail, InvalidCredentials
from blogsite.core.security import hash_password, verify_password
from blogsite.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def find_user_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def create_user(db: Session, email: str, password: str, profile_image: str) -> User:
    normalized = normalize_email(email)
    if find_user_by_email(db, normalized):
        raise DuplicateEmail("Email is already registered")

    user = User(email=normalized, password_hash=hash_password(password), profile_image=profile_image)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same address.
        db.rollback()
        raise DuplicateEmail("Email is already registered") from exc
    db.refresh(user)
    logger.info("user_created", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = find_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials("Invalid credentials")
    return user
