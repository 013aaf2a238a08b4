"""Redirect targets for identity pages."""

import logging
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def local_url(url: str | None) -> str:
    """Return ``url`` if it stays on this site, otherwise "/".

    Guards every redirect to a caller-supplied return URL.
    """
    if not url:
        return "/"
    if url.startswith("/") and not url.startswith(("//", "/\\")):
        return url
    logger.warning(f"Rejected non-local return URL: {url!r}")
    return "/"


def page_url(path: str, **params: str | None) -> str:
    """Build ``path`` with query parameters, skipping unset ones."""
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return f"{path}?{query}" if query else path
