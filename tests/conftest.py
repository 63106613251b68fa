from __future__ import annotations

import io
from typing import Callable, Dict, List, Union

import pytest
import requests
from PIL import Image


def make_image_bytes(
    size=(48, 48),
    fmt: str = "PNG",
    mode: str = "RGBA",
    color=(200, 30, 30, 255),
) -> bytes:
    if mode == "RGB" and len(color) == 4:
        color = color[:3]
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class FakeResponse:
    def __init__(self, url: str, content: bytes = b"", status_code: int = 200, text=None):
        self.url = url
        self.content = content
        self.status_code = status_code
        self._text = text

    @property
    def text(self) -> str:
        if self._text is not None:
            return self._text
        return self.content.decode("utf-8", "replace")

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} for {self.url}", response=self)


Route = Union[FakeResponse, Exception, Callable[[str], FakeResponse]]


class FakeSession:
    """Stand-in for ``requests.Session`` that serves canned responses."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.calls: List[str] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(url)
        return route


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()
