"""Catalog home page."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from locallibrary.api.rendering import templates
from locallibrary.models import Author, Book, BookInstance, BookInstanceStatus, Genre
from locallibrary.services.store import CatalogStore, fetch_all, get_store

router = APIRouter(tags=["catalog"])


@router.get("/")
async def index():
    """Send visitors to the catalog home page."""
    return RedirectResponse(url="/catalog/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/catalog/", response_class=HTMLResponse, name="catalog_home")
async def catalog_home(
    request: Request,
    store: CatalogStore = Depends(get_store),
):
    """Home page with record counts."""
    counts = await fetch_all(
        book_count=store.count(Book),
        book_instance_count=store.count(BookInstance),
        book_instance_available_count=store.count(
            BookInstance, BookInstance.status == BookInstanceStatus.AVAILABLE
        ),
        author_count=store.count(Author),
        genre_count=store.count(Genre),
    )

    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": "Local Library Home", "data": counts},
    )
