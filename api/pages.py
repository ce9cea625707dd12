from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from core.config import get_settings
from core.services.pages import DOCUMENT_TEMPLATE, PAGES, UnknownPage, fragment_template, page_context

router = APIRouter(tags=["pages"], include_in_schema=False)


@lru_cache(maxsize=4)
def get_templates(web_root: str) -> Jinja2Templates:
    return Jinja2Templates(directory=str(Path(web_root) / "templates"))


def _document_endpoint(key: str):
    def endpoint(request: Request) -> HTMLResponse:
        templates = get_templates(get_settings().web_root)
        return templates.TemplateResponse(request, DOCUMENT_TEMPLATE, page_context(key))

    endpoint.__name__ = f"{key}_page"
    return endpoint


for _page in PAGES.values():
    router.add_api_route(_page.path, _document_endpoint(_page.key), methods=["GET"], response_class=HTMLResponse)


@router.get("/partials/{page}", response_class=HTMLResponse)
def page_fragment(request: Request, page: str):
    try:
        name = fragment_template(page)
    except UnknownPage:
        raise HTTPException(status_code=404, detail="Page not found")
    return get_templates(get_settings().web_root).TemplateResponse(request, name, {})
