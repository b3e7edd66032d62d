"""Generic list/detail/create/update/delete pages for a catalog entity."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from locallibrary.api.rendering import templates
from locallibrary.core.database import Base
from locallibrary.core.errors import NotFoundError
from locallibrary.services.store import CatalogStore, fetch_all, get_store
from locallibrary.services.validation import MAX_INTEGER, FieldChain, ValidationResult, validate

logger = logging.getLogger(__name__)

RecordId = Annotated[int, Path(ge=1, le=MAX_INTEGER)]


@dataclass
class Resource:
    """Everything the generic workflow needs to know about one entity.

    Attributes:
        model: The SQLAlchemy model.
        name: Singular path segment and template prefix, e.g. ``author``.
        plural: List path segment, e.g. ``authors``.
        label: Human-readable name used in page titles.
        rules: Validation chains for the create and update forms.
        list_records: Loads the records for the list page, already sorted.
        to_values: Maps validated form values to model attributes.
        to_form: Maps a stored record to form field values.
        dependents: Loads the records that would be orphaned by a delete.
        detail_populate: References to populate on the detail and delete pages.
        form_populate: References to populate when seeding the update form.
        form_sources: Extra lookups the form needs, keyed by template name.
        find_existing: Returns an existing record to use instead of creating.
        detail_title: Page title for a detail page.
    """

    model: type[Base]
    name: str
    plural: str
    label: str
    rules: list[FieldChain]
    list_records: Callable[[CatalogStore], Awaitable[list]]
    to_values: Callable[[dict[str, Any]], dict[str, Any]]
    to_form: Callable[[Any], dict[str, Any]]
    dependents: Callable[[CatalogStore, int], Awaitable[list]] | None = None
    detail_populate: tuple[str, ...] = ()
    form_populate: tuple[str, ...] = ()
    form_sources: Callable[[CatalogStore], dict[str, Awaitable[Any]]] = field(
        default=lambda store: {}
    )
    find_existing: Callable[[CatalogStore, dict[str, Any]], Awaitable[Any]] | None = None
    detail_title: Callable[[Any], str] | None = None

    @property
    def list_path(self) -> str:
        return f"/catalog/{self.plural}"

    async def load_with_dependents(
        self, store: CatalogStore, record_id: int
    ) -> tuple[Any | None, list]:
        """Fetch a record and, concurrently, its dependents."""
        operations = {"record": store.get(self.model, record_id, populate=self.detail_populate)}
        if self.dependents is not None:
            operations["dependents"] = self.dependents(store, record_id)
        results = await fetch_all(**operations)
        return results["record"], results.get("dependents", [])


def see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def build_router(resource: Resource) -> APIRouter:
    """Create the eight catalog routes for an entity."""
    router = APIRouter(prefix="/catalog", tags=[resource.name])
    r = resource

    def render_form(
        request: Request,
        title: str,
        context: dict[str, Any],
        form: dict[str, Any],
        result: ValidationResult | None = None,
    ) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            f"{r.name}_form.html",
            {
                "title": title,
                "form": form,
                "errors": result.errors if result else [],
                **context,
            },
        )

    def render_delete(
        request: Request,
        record: Any,
        dependents: list,
        blocked: bool = False,
    ) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            f"{r.name}_delete.html",
            {
                "title": f"Delete {r.label}",
                r.name: record,
                "dependents": dependents,
                "blocked": blocked,
            },
        )

    @router.get(f"/{r.plural}", response_class=HTMLResponse, name=f"{r.name}_list")
    async def list_view(request: Request, store: CatalogStore = Depends(get_store)):
        records = await r.list_records(store)
        return templates.TemplateResponse(
            request,
            f"{r.name}_list.html",
            {"title": f"{r.label} List", f"{r.name}_list": records},
        )

    @router.get(f"/{r.name}/create", response_class=HTMLResponse, name=f"{r.name}_create")
    async def create_page(request: Request, store: CatalogStore = Depends(get_store)):
        context = await fetch_all(**r.form_sources(store))
        return render_form(request, f"Create {r.label}", context, form={})

    @router.post(f"/{r.name}/create", name=f"{r.name}_create_post")
    async def create_submit(request: Request, store: CatalogStore = Depends(get_store)):
        result = validate(await request.form(), r.rules)
        if not result.is_valid:
            context = await fetch_all(**r.form_sources(store))
            return render_form(request, f"Create {r.label}", context, result.submitted, result)

        values = r.to_values(result.values)
        if r.find_existing is not None:
            existing = await r.find_existing(store, values)
            if existing is not None:
                logger.info(f"{r.label} already exists as {existing!r}, not creating a duplicate")
                return see_other(existing.url)

        record = await store.create(r.model, values)
        return see_other(record.url)

    @router.get(f"/{r.name}/{{record_id}}", response_class=HTMLResponse, name=f"{r.name}_detail")
    async def detail_page(
        request: Request,
        record_id: RecordId,
        store: CatalogStore = Depends(get_store),
    ):
        record, dependents = await r.load_with_dependents(store, record_id)
        if record is None:
            raise NotFoundError(f"{r.label} not found")

        title = r.detail_title(record) if r.detail_title else f"{r.label} Detail"
        return templates.TemplateResponse(
            request,
            f"{r.name}_detail.html",
            {"title": title, r.name: record, "dependents": dependents},
        )

    @router.get(
        f"/{r.name}/{{record_id}}/delete", response_class=HTMLResponse, name=f"{r.name}_delete"
    )
    async def delete_page(
        request: Request,
        record_id: RecordId,
        store: CatalogStore = Depends(get_store),
    ):
        record, dependents = await r.load_with_dependents(store, record_id)
        if record is None:
            return see_other(r.list_path)
        return render_delete(request, record, dependents)

    @router.post(f"/{r.name}/{{record_id}}/delete", name=f"{r.name}_delete_post")
    async def delete_submit(
        request: Request,
        record_id: RecordId,
        store: CatalogStore = Depends(get_store),
    ):
        # Dependents are checked again here; the confirmation page may be stale.
        record, dependents = await r.load_with_dependents(store, record_id)
        if record is not None and dependents:
            logger.info(
                f"Refusing to delete {record!r}: {len(dependents)} dependent record(s) remain"
            )
            return render_delete(request, record, dependents, blocked=True)

        if record is not None:
            await store.delete(r.model, record_id)
        return see_other(r.list_path)

    @router.get(
        f"/{r.name}/{{record_id}}/update", response_class=HTMLResponse, name=f"{r.name}_update"
    )
    async def update_page(
        request: Request,
        record_id: RecordId,
        store: CatalogStore = Depends(get_store),
    ):
        context = await fetch_all(
            record=store.get(r.model, record_id, populate=r.form_populate),
            **r.form_sources(store),
        )
        record = context.pop("record")
        if record is None:
            raise NotFoundError(f"{r.label} not found")
        return render_form(request, f"Update {r.label}", context, r.to_form(record))

    @router.post(f"/{r.name}/{{record_id}}/update", name=f"{r.name}_update_post")
    async def update_submit(
        request: Request,
        record_id: RecordId,
        store: CatalogStore = Depends(get_store),
    ):
        result = validate(await request.form(), r.rules)
        if not result.is_valid:
            context = await fetch_all(**r.form_sources(store))
            return render_form(request, f"Update {r.label}", context, result.submitted, result)

        record = await store.replace(r.model, record_id, r.to_values(result.values))
        if record is None:
            raise NotFoundError(f"{r.label} not found")
        return see_other(record.url)

    return router
