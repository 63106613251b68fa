"""Image decoding, resizing and encoding utilities."""

from __future__ import annotations

import io
import logging
from typing import Optional, Tuple

from filetype import guess
from PIL import Image, ImageOps

from .errors import DecodeError, EncodeError
from .models import OutputFormat

logger = logging.getLogger("favicon_fetch")

MAX_ICO_SIDE = 256
RESAMPLE_MODES = {"RGB", "RGBA", "L", "LA"}


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def decode_image(data: bytes) -> Tuple[Image.Image, str]:
    """Decode bytes into a Pillow image, sniffing the format from the content.

    Returns the image and Pillow's name for the detected container.
    """
    if not data:
        raise DecodeError("Empty response body")
    kind = guess(data)
    if kind is not None and not kind.mime.startswith("image/"):
        raise DecodeError(f"Content is {kind.mime}, not an image")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Can't decode image: {exc}") from exc
    if image.width <= 0 or image.height <= 0:
        raise DecodeError("Decoded image has no pixels")
    return image, image.format or "PNG"


def has_alpha(image: Image.Image) -> bool:
    if image.mode in ("RGBA", "LA", "PA", "RGBa", "La"):
        return True
    return image.mode == "P" and "transparency" in image.info


def resize_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """Resize to exactly ``width`` x ``height``, cropping to fill the frame."""
    if image.mode not in RESAMPLE_MODES:
        # Palette and bilevel images would otherwise fall back to nearest-neighbour.
        image = image.convert("RGBA" if has_alpha(image) else "RGB")
    return ImageOps.fit(image, (width, height), method=Image.Resampling.LANCZOS)


def _prepare_for_jpeg(image: Image.Image) -> Image.Image:
    if has_alpha(image):
        raise EncodeError(
            f"JPEG cannot store the alpha channel of a {image.mode} image"
        )
    if image.mode not in ("RGB", "L", "CMYK"):
        return image.convert("RGB")
    return image


def has_partial_alpha(image: Image.Image) -> bool:
    """True when some pixel is neither fully opaque nor fully transparent."""
    if not has_alpha(image):
        return False
    histogram = image.convert("RGBA").getchannel("A").histogram()
    return any(histogram[1:255])


def encode_image(image: Image.Image, fmt: OutputFormat) -> bytes:
    """Encode an image into ``fmt``, refusing conversions that would lose data."""
    save_kwargs = {}
    if fmt is OutputFormat.JPEG:
        image = _prepare_for_jpeg(image)
        save_kwargs["quality"] = 95
    elif fmt is OutputFormat.GIF:
        if has_partial_alpha(image):
            raise EncodeError(
                "GIF only stores on/off transparency, image has partial alpha"
            )
    elif fmt is OutputFormat.ICO:
        if image.width > MAX_ICO_SIDE or image.height > MAX_ICO_SIDE:
            raise EncodeError(
                f"ICO supports at most {MAX_ICO_SIDE}x{MAX_ICO_SIDE}, "
                f"image is {image.width}x{image.height}"
            )
        save_kwargs["sizes"] = [image.size]

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=fmt.pillow_name, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode image as {fmt.value}: {exc}") from exc
    data = buffer.getvalue()
    if not data:
        raise EncodeError(f"Encoding as {fmt.value} produced no data")
    return data


def native_output_format(format_name: str) -> OutputFormat:
    """Map a Pillow format name to an output format, defaulting to PNG."""
    try:
        return OutputFormat.parse(format_name)
    except ValueError:
        logger.debug("No encoder for %s, falling back to PNG", format_name)
        return OutputFormat.PNG
