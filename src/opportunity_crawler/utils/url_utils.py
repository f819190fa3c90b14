from __future__ import annotations

from urllib.parse import urljoin


def resolve_url(href: str | None, base_url: str) -> str:
    """Resolve a scraped href against the page it was found on.

    The query string is kept as-is; on many portals it carries the document id.
    """
    value = (href or "").strip()
    if not value or value.startswith("#") or value.lower().startswith("javascript:"):
        return base_url
    return urljoin(base_url, value)
