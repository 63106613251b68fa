"""Exceptions raised while resolving and transforming favicons."""

from __future__ import annotations


class FaviconError(Exception):
    """Base class for every error surfaced by favicon_fetch."""


class InvalidUrl(FaviconError, ValueError):
    """The site URL could not be normalized into an absolute http(s) URL."""


class FetchError(FaviconError):
    """The site page could not be retrieved."""


class NoHeaderSection(FaviconError):
    """The page markup has no <head> element."""


class NoFaviconFound(FaviconError):
    """Every candidate failed to fetch or decode."""


class InvalidSize(FaviconError, ValueError):
    """A resize was requested with an invalid or non-positive size."""


class DecodeError(FaviconError):
    """Bytes could not be decoded as an image."""


class EncodeError(FaviconError):
    """The image cannot be represented in the requested output format."""


class ExportError(FaviconError):
    """Encoded image bytes could not be written out."""
