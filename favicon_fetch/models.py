"""Data models used throughout the favicon pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidSize


class SizeKind(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    CUSTOM = "custom"
    DEFAULT = "default"
    INVALID = "invalid"


_PRESET_DIMENSIONS = {
    SizeKind.SMALL: (16, 16),
    SizeKind.MEDIUM: (32, 32),
    SizeKind.LARGE: (64, 64),
}


@dataclass(frozen=True)
class ImageSize:
    """Requested output size for a favicon.

    ``SMALL``, ``MEDIUM`` and ``LARGE`` are 16x16, 32x32 and 64x64.
    ``CUSTOM`` carries its own width and height, ``DEFAULT`` keeps the
    original image and ``INVALID`` records a string that did not parse.
    """

    kind: SizeKind
    width: int = 0
    height: int = 0
    raw: Optional[str] = None

    @classmethod
    def small(cls) -> "ImageSize":
        return cls(SizeKind.SMALL, 16, 16)

    @classmethod
    def medium(cls) -> "ImageSize":
        return cls(SizeKind.MEDIUM, 32, 32)

    @classmethod
    def large(cls) -> "ImageSize":
        return cls(SizeKind.LARGE, 64, 64)

    @classmethod
    def custom(cls, width: int, height: int) -> "ImageSize":
        return cls(SizeKind.CUSTOM, width, height)

    @classmethod
    def default(cls) -> "ImageSize":
        return cls(SizeKind.DEFAULT)

    @classmethod
    def parse(cls, value: str) -> "ImageSize":
        """Parse ``small``/``medium``/``large``/``default`` or ``<w>,<h>``.

        Never raises: anything unrecognised becomes the ``INVALID`` variant.
        """
        text = value.strip().lower()
        for kind in (SizeKind.SMALL, SizeKind.MEDIUM, SizeKind.LARGE):
            if text == kind.value:
                width, height = _PRESET_DIMENSIONS[kind]
                return cls(kind, width, height)
        if text == SizeKind.DEFAULT.value:
            return cls.default()
        parts = text.split(",")
        if len(parts) == 2:
            try:
                width, height = (int(part.strip()) for part in parts)
            except ValueError:
                return cls(SizeKind.INVALID, raw=value)
            return cls.custom(width, height)
        return cls(SizeKind.INVALID, raw=value)

    @property
    def is_default(self) -> bool:
        return self.kind is SizeKind.DEFAULT

    def dimensions(self) -> Tuple[int, int]:
        """Return the target ``(width, height)``, rejecting unusable sizes."""
        if self.kind is SizeKind.INVALID:
            raise InvalidSize(f"Invalid image size {self.raw!r}")
        if self.kind is SizeKind.DEFAULT:
            raise InvalidSize("The default size has no fixed dimensions")
        if self.width <= 0 or self.height <= 0:
            raise InvalidSize(
                f"Image size must be positive, got {self.width}x{self.height}"
            )
        return self.width, self.height

    def __str__(self) -> str:
        if self.kind is SizeKind.CUSTOM:
            return f"{self.width},{self.height}"
        if self.kind is SizeKind.INVALID:
            return self.raw or ""
        return self.kind.value


class OutputFormat(Enum):
    """Containers a favicon can be exported to."""

    PNG = "png"
    ICO = "ico"
    JPEG = "jpeg"
    GIF = "gif"
    BMP = "bmp"
    WEBP = "webp"
    TIFF = "tiff"

    @classmethod
    def parse(cls, value: str) -> "OutputFormat":
        text = value.strip().lower().lstrip(".")
        if text == "jpg":
            text = "jpeg"
        elif text == "tif":
            text = "tiff"
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported output format {value!r} (choose from {choices})"
            ) from None

    @property
    def pillow_name(self) -> str:
        return self.name

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value
