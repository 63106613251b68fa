"""The favicon asset returned to callers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from .errors import EncodeError, ExportError
from .images import decode_image, encode_image, native_output_format, resize_image
from .models import ImageSize, OutputFormat

logger = logging.getLogger("favicon_fetch")


@dataclass(frozen=True)
class FaviconAsset:
    """A fetched favicon whose bytes are known to decode as an image.

    ``data`` and ``image`` always describe the same picture: instances are
    created through :meth:`build` or :meth:`resize` and never mutated.
    """

    url: str
    data: bytes = field(repr=False)
    image: Image.Image = field(repr=False, compare=False)
    format: str = "PNG"

    @classmethod
    def build(cls, url: str, data: bytes) -> "FaviconAsset":
        """Decode ``data`` fetched from ``url``; raises ``DecodeError``."""
        image, format_name = decode_image(data)
        return cls(url=url, data=bytes(data), image=image, format=format_name)

    @property
    def size(self):
        return self.image.size

    def resize(self, size: ImageSize) -> "FaviconAsset":
        """Return a copy scaled to ``size``; ``DEFAULT`` returns ``self``."""
        if size.is_default:
            return self
        width, height = size.dimensions()
        resized = resize_image(self.image, width, height)
        target = native_output_format(self.format)
        try:
            data = encode_image(resized, target)
        except EncodeError:
            logger.debug("Re-encoding %s as %s failed, using PNG", self.url, target.value)
            target = OutputFormat.PNG
            data = encode_image(resized, target)
        return FaviconAsset(
            url=self.url,
            data=data,
            image=resized,
            format=target.pillow_name,
        )

    def reformat(self, fmt: OutputFormat) -> bytes:
        """Encode the image into another container; raises ``EncodeError``."""
        return encode_image(self.image, fmt)

    def export(self, path: Path, fmt: OutputFormat) -> Path:
        """Write the image to ``path`` encoded as ``fmt``."""
        data = self.reformat(fmt)
        path = Path(path)
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise ExportError(
                f"Failed to save image from {self.url} to {path}: {exc}"
            ) from exc
        logger.info("Saved favicon to %s", path)
        return path

    def write_to(self, stream: BinaryIO, fmt: OutputFormat) -> None:
        """Write the image encoded as ``fmt`` to a binary stream."""
        data = self.reformat(fmt)
        try:
            stream.write(data)
            stream.flush()
        except OSError as exc:
            raise ExportError(f"Failed to write image from {self.url}: {exc}") from exc
