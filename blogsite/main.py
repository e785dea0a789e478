import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from blogsite.core.config import Settings, get_settings
from blogsite.core.errors import ConcurrentModification, LoginRequired, NotFoundError
from blogsite.core.logging import configure_logging
from blogsite.core.security import TokenService
from blogsite.db.base import Base
from blogsite.db.session import engine
from blogsite.routers import auth, blogs
from blogsite.services.storage import UPLOADS_URL_PREFIX, LocalUploadStorage

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
        logger.info("session_rejected", extra={"path": request.url.path, "reason": str(exc)})
        response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
        if request.cookies.get(app.state.settings.session_cookie_name):
            response.delete_cookie(app.state.settings.session_cookie_name)
        return response

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(ConcurrentModification)
    async def conflict_handler(request: Request, exc: ConcurrentModification) -> JSONResponse:
        logger.warning("concurrent_modification", extra={"path": request.url.path})
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_409_CONFLICT)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging()
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    storage = LocalUploadStorage(settings.upload_dir)
    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(blogs.router)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=storage.ensure_root()), name="uploads")

    @app.on_event("startup")
    def startup() -> None:
        if settings.auto_create_tables:
            Base.metadata.create_all(bind=engine)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
