from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from blogsite.core.config import Settings
from blogsite.core.errors import InvalidToken

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


class TokenService:
    """Issues and verifies the signed session token stored in the login cookie.

    One instance is built per application from its settings, so the signing secret is
    injected configuration rather than a module global.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int | None = None) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.access_token_expire_minutes)

    def issue(self, user_id: str, expires_delta: timedelta | None = None) -> str:
        payload: dict = {"sub": user_id}
        if expires_delta is None and self._expire_minutes is not None:
            expires_delta = timedelta(minutes=self._expire_minutes)
        if expires_delta is not None:
            payload["exp"] = datetime.now(timezone.utc) + expires_delta
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidToken("Invalid token") from exc
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("Token carries no subject")
        return subject
