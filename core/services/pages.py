"""Page registry for the server-rendered frontend.

Templates live under ``web/templates``: ``layout.html`` holds the navbar and
scripts, ``page.html`` extends it with one ``pages/<key>.html`` fragment. The
client router fetches bare fragments from ``/partials/<key>`` and swaps them
into the content container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DOCUMENT_TEMPLATE = "page.html"


@dataclass(frozen=True)
class PageRoute:
    key: str
    title: str
    path: str


PAGES: dict[str, PageRoute] = {
    route.key: route
    for route in (
        PageRoute("dashboard", "Dashboard", "/"),
        PageRoute("practice", "Practice", "/practice"),
        PageRoute("roster", "Team Roster", "/roster"),
        PageRoute("drills", "Drill Library", "/drills"),
        PageRoute("videos", "Video Library", "/videos"),
        PageRoute("analytics", "Analytics", "/analytics"),
    )
}


class UnknownPage(LookupError):
    pass


def get_page(key: str) -> PageRoute:
    try:
        return PAGES[key]
    except KeyError:
        raise UnknownPage(key) from None


def document_title(page: PageRoute) -> str:
    return f"PracTrac - {page.title}"


def fragment_template(key: str) -> str:
    return f"pages/{get_page(key).key}.html"


def page_context(key: str) -> dict[str, Any]:
    """Template variables for a full document; the nav loops over ``pages``."""
    page = get_page(key)
    return {"page": page, "pages": list(PAGES.values()), "title": document_title(page)}
