"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from locallibrary.api.authors import router as authors_router
from locallibrary.api.book_instances import router as book_instances_router
from locallibrary.api.books import router as books_router
from locallibrary.api.catalog import router as catalog_router
from locallibrary.api.genres import router as genres_router
from locallibrary.core.config import get_settings
from locallibrary.core.database import engine, init_db
from locallibrary.core.errors import register_exception_handlers
from locallibrary.core.tracing import setup_tracing, shutdown_tracing

STATIC_DIR = Path(__file__).resolve().parent / "static"

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await engine.dispose()
    shutdown_tracing()


app = FastAPI(
    title="Local Library",
    description="Catalog of authors, books, genres and the library's copies of them",
    version="0.1.0",
    lifespan=lifespan,
)

# Setup OpenTelemetry tracing (must be done before adding routes)
setup_tracing(app)

register_exception_handlers(app)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(catalog_router)
app.include_router(authors_router)
app.include_router(books_router)
app.include_router(genres_router)
app.include_router(book_instances_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "locallibrary.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
