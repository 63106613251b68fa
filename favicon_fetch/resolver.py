"""High-level orchestration for locating and validating a site's favicon."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import List, Optional

import requests

from .config import FetchConfig
from .content import get_favicon_urls_from_header, get_page_head_section, get_web_page
from .errors import DecodeError, NoFaviconFound
from .favicon import FaviconAsset
from .models import ImageSize, OutputFormat
from .utils import add_www_to_host, normalize_url

logger = logging.getLogger("favicon_fetch")


def fetch_favicon_from_url(
    url: str,
    session: requests.Session,
    config: FetchConfig,
) -> FaviconAsset:
    """Download a single candidate and decode it."""
    resp = session.get(url, headers=config.headers(), timeout=config.timeout)
    resp.raise_for_status()
    data = resp.content
    if len(data) > config.max_image_bytes:
        raise DecodeError(
            f"Image at {url} is larger than {config.max_image_bytes} bytes"
        )
    return FaviconAsset.build(url, data)


def _run_candidate(
    future: Future,
    slots: threading.BoundedSemaphore,
    url: str,
    session: requests.Session,
    config: FetchConfig,
) -> None:
    with slots:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(fetch_favicon_from_url(url, session, config))
        except Exception as exc:  # pylint: disable=broad-except
            future.set_exception(exc)


def fetch_all_favicons(
    urls: List[str],
    session: requests.Session,
    config: FetchConfig,
) -> FaviconAsset:
    """Fetch every candidate concurrently and return the first valid one.

    "First" means first in candidate order, not first to finish: results are
    collected in submission order, so a slow early candidate still beats a
    fast later one. At most ``config.max_concurrency`` fetches run at once.
    Once a winner is known, waiting fetches are cancelled and running ones
    are abandoned on daemon threads, so they block neither the caller nor
    interpreter exit.
    """
    if not urls:
        raise NoFaviconFound("No favicon candidates to fetch")

    slots = threading.BoundedSemaphore(max(1, config.max_concurrency))
    futures: List[Future] = []
    for index, url in enumerate(urls):
        future = Future()
        futures.append(future)
        threading.Thread(
            target=_run_candidate,
            args=(future, slots, url, session, config),
            name=f"favicon-fetch-{index}",
            daemon=True,
        ).start()

    try:
        for url, future in zip(urls, futures):
            try:
                favicon = future.result()
            except (requests.RequestException, DecodeError) as exc:
                logger.debug("Skipping %s: %s", url, exc)
                continue
            logger.info("Found favicon at %s", url)
            return favicon
    finally:
        for future in futures:
            future.cancel()

    raise NoFaviconFound(f"No favicon found among {len(urls)} candidate(s)")


def fetch_and_validate_favicon(
    url: str,
    session: requests.Session,
    config: FetchConfig,
) -> FaviconAsset:
    """Run the full pipeline for an already normalized site URL."""
    url = add_www_to_host(url)
    page, final_url = get_web_page(url, session, config)
    head = get_page_head_section(page)
    candidates = get_favicon_urls_from_header(head, final_url)
    logger.info("Found %d favicon candidate(s) on %s", len(candidates), final_url)
    return fetch_all_favicons(candidates, session, config)


def resolve(
    site_url: str,
    session: Optional[requests.Session] = None,
    config: Optional[FetchConfig] = None,
) -> FaviconAsset:
    """Fetch the favicon for ``site_url``; a scheme is optional."""
    config = config or FetchConfig.from_env()
    url = normalize_url(site_url)
    if session is not None:
        return fetch_and_validate_favicon(url, session, config)
    with requests.Session() as own_session:
        return fetch_and_validate_favicon(url, own_session, config)


def fetch(
    site_url: str,
    size: ImageSize,
    fmt: OutputFormat,
    path: Path,
    session: Optional[requests.Session] = None,
    config: Optional[FetchConfig] = None,
) -> FaviconAsset:
    """Fetch a favicon, resize it and save it to ``path``."""
    if not size.is_default:
        size.dimensions()
    logger.info("Fetching favicon from %s", site_url)
    favicon = resolve(site_url, session=session, config=config).resize(size)
    favicon.export(path, fmt)
    return favicon
