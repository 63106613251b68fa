"""Utility helpers for URL normalization and string handling."""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import urlsplit, urlunsplit

from .errors import InvalidUrl

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
ALLOWED_SCHEMES = ("http", "https")


def slugify(value: str, fallback: str = "favicon") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def normalize_url(raw: str) -> str:
    """Turn user input into an absolute http(s) URL, defaulting to https."""
    value = raw.strip()
    if not value.lower().startswith(("http://", "https://")):
        if SCHEME_PATTERN.match(value):
            raise InvalidUrl(f"Unsupported URL scheme in {raw!r}")
        value = "https://" + value
    try:
        parts = urlsplit(value)
        # Raises ValueError for malformed ports.
        parts.port
    except ValueError as exc:
        raise InvalidUrl(f"Failed to parse URL {raw!r}: {exc}") from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidUrl(f"Failed to parse URL {raw!r}")
    if any(char.isspace() for char in parts.netloc):
        raise InvalidUrl(f"Failed to parse URL {raw!r}: whitespace in host")
    return urlunsplit(parts)


def _is_bare_host(host: str) -> bool:
    if host == "localhost" or "." not in host:
        return True
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def add_www_to_host(url: str) -> str:
    """Prefix the host with ``www.``; some sites only serve static files there."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(f"Failed to parse URL {url!r}: {exc}") from exc
    host = parts.hostname
    if not host:
        raise InvalidUrl(f"No host found in {url!r}")
    if host.startswith("www.") or _is_bare_host(host):
        return url

    netloc = f"www.{host}"
    if port is not None:
        netloc = f"{netloc}:{port}"
    userinfo, separator, _ = parts.netloc.rpartition("@")
    if separator:
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit(parts._replace(netloc=netloc))
