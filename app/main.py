import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import Settings
from app.database import build_engine, build_sessionmaker
from app.error_handlers import register_exception_handlers
from app.middleware import TimingMiddleware
from app.routers import articles, auth, comments, images, products, users

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting in %s mode", app.state.settings.APP_ENV)
    yield
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """
    Build the application.

    Settings, the database engine and the session factory are created once
    here and kept on ``app.state``; request dependencies read them from
    there.  Tests pass their own *settings* and *engine*.
    """
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = engine or build_engine(settings)

    app = FastAPI(
        title="Market Board API",
        description="Articles, comments, likes, products and favorites over a REST API",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)

    # Middleware
    app.add_middleware(TimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(articles.router)
    app.include_router(comments.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(images.router)

    public_dir = Path(settings.PUBLIC_PATH)
    public_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.STATIC_PATH, StaticFiles(directory=public_dir), name="public")

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    return app


def run() -> None:
    settings = Settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.PORT,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    run()
