"""Page retrieval, head extraction and favicon candidate harvesting."""

from __future__ import annotations

import logging
from typing import List, Tuple
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from .config import FetchConfig
from .errors import FetchError, NoHeaderSection
from .utils import ALLOWED_SCHEMES

logger = logging.getLogger("favicon_fetch")

ICON_TYPES = frozenset(
    {
        "icon",
        "shortcut icon",
        "apple-touch-icon",
        "favicon",
        "mask-icon",
        "fluid-icon",
        "image",
    }
)
DEFAULT_FAVICON_PATH = "/favicon.ico"


def get_web_page(
    url: str,
    session: requests.Session,
    config: FetchConfig,
) -> Tuple[str, str]:
    """Download a page and return its markup and the final URL after redirects."""
    logger.info("Loading %s", url)
    try:
        resp = session.get(url, headers=config.headers(), timeout=config.timeout)
        html = resp.text
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch {url}: {exc}") from exc
    except LookupError as exc:
        raise FetchError(f"Failed to decode page body from {url}: {exc}") from exc
    if resp.status_code >= 400:
        logger.warning("%s answered with HTTP %s", url, resp.status_code)
    return html, resp.url or url


def get_page_head_section(page: str) -> BeautifulSoup:
    """Isolate the first <head> element as a standalone fragment.

    The document is parsed with lxml so that a head implied by leading
    <title>/<meta>/<link> elements is created even when the tag is omitted.
    """
    document = BeautifulSoup(page, "lxml")
    head = document.find("head")
    if head is None:
        raise NoHeaderSection("No header section found")
    return BeautifulSoup(head.decode_contents(), "html.parser")


def _is_icon_type(value: str) -> bool:
    return any(icon_type in value for icon_type in ICON_TYPES)


def _resolve(base_url: str, value: str) -> str | None:
    value = value.strip()
    if not value:
        return None
    try:
        resolved = urljoin(base_url, value)
        parts = urlsplit(resolved)
    except ValueError:
        return None
    if parts.scheme not in ALLOWED_SCHEMES or not parts.netloc:
        return None
    return resolved


def get_favicon_urls_from_header(head: BeautifulSoup, base_url: str) -> List[str]:
    """Collect absolute icon URLs from <link> and <meta> elements.

    Link candidates come first, then meta candidates, each in document order.
    Duplicates are kept. When nothing matches, the conventional
    ``/favicon.ico`` location is returned so the list is never empty.
    """
    urls: List[str] = []

    for link in head.select("link[href]"):
        rel = link.get("rel") or ""
        if isinstance(rel, list):
            rel = " ".join(rel)
        if not _is_icon_type(rel):
            continue
        url = _resolve(base_url, link["href"])
        if url:
            urls.append(url)

    for meta in head.select("meta[content]"):
        content = meta["content"]
        if not _is_icon_type(content):
            continue
        url = _resolve(base_url, content)
        if url:
            urls.append(url)

    if not urls:
        # No declared icons, try the default location
        return [urljoin(base_url, DEFAULT_FAVICON_PATH)]
    return urls
