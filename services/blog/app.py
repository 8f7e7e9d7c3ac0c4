"""Blog service FastAPI application.

Exposes the FastAPI app, attaches tracing and CORS middleware, installs the
JSON error envelope, includes the account and post routes, serves uploaded
images from `/uploads`, and initializes the database on startup.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from packages.common.config import get_settings
from packages.common.errors import install_error_handlers
from packages.common.tracing import trace_middleware
from .accounts import router as accounts_router
from .routes import router as posts_router
from .repo import init_db


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Initialize service dependencies at application startup."""
    await init_db()
    yield


def create_app() -> FastAPI:
    s = get_settings()
    Path(s.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    app = FastAPI(title="Blog Service", version="1.0.0", lifespan=_lifespan)
    app.middleware("http")(trace_middleware)
    origins = s.allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Wildcard origins cannot be combined with credentials.
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    install_error_handlers(app)
    app.include_router(accounts_router)
    app.include_router(posts_router)
    app.mount("/uploads", StaticFiles(directory=s.UPLOAD_DIR), name="uploads")

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
