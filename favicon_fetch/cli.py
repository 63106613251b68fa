"""Command-line entry point for favicon-fetch."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence
from urllib.parse import urlsplit

from .config import FetchConfig
from .errors import (
    EncodeError,
    ExportError,
    FetchError,
    InvalidSize,
    InvalidUrl,
    NoFaviconFound,
    NoHeaderSection,
)
from .models import ImageSize, OutputFormat, SizeKind
from .resolver import resolve
from .utils import normalize_url, slugify

logger = logging.getLogger("favicon_fetch.cli")

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2
EXIT_FETCH = 3
EXIT_EXPORT = 4


def _parse_size(value: str) -> ImageSize:
    size = ImageSize.parse(value)
    if size.kind is SizeKind.INVALID:
        raise argparse.ArgumentTypeError(
            f"invalid size {value!r} (use small, medium, large, default or W,H)"
        )
    return size


def _parse_format(value: str) -> OutputFormat:
    try:
        return OutputFormat.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="favicon-fetch",
        description="Find a website's favicon and save it as an image file.",
    )
    parser.add_argument("url", help="URL of the website (https:// is assumed)")
    parser.add_argument(
        "--size",
        "-s",
        type=_parse_size,
        default=ImageSize.default(),
        help="small (16x16), medium (32x32), large (64x64), default or W,H",
    )
    parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        type=_parse_format,
        default=OutputFormat.PNG,
        help="Output image format (png, ico, jpeg, gif, bmp, webp, tiff)",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--path",
        "-p",
        type=Path,
        default=None,
        help="Where to save the favicon (default: <host>.<format> in the current directory)",
    )
    target.add_argument(
        "--stdout",
        action="store_true",
        help="Write the favicon bytes to STDOUT",
    )
    target.add_argument(
        "--url-only",
        action="store_true",
        help="Only print the URL of the favicon",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of favicon candidates fetched at once",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)
    if args.concurrency is not None and args.concurrency < 1:
        parser.error("--concurrency must be at least 1")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")
    return args


def default_output_path(site_url: str, fmt: OutputFormat) -> Path:
    """Derive ``<host>.<ext>`` from the site URL."""
    host = urlsplit(normalize_url(site_url)).hostname or ""
    return Path(f"{slugify(host)}.{fmt.extension}")


def _build_config(args: argparse.Namespace) -> FetchConfig:
    config = FetchConfig.from_env()
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.concurrency is not None:
        config.max_concurrency = args.concurrency
    return config


def run(args: argparse.Namespace) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.stdout and not args.verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = _build_config(args)
    start = time.perf_counter()
    try:
        if not args.size.is_default:
            args.size.dimensions()
        favicon = resolve(args.url, config=config)
        logger.debug(
            "Resolved %s in %.2fs (%s, %dx%d)",
            favicon.url,
            time.perf_counter() - start,
            favicon.format,
            *favicon.size,
        )
        if args.url_only:
            sys.stdout.write(favicon.url + "\n")
            sys.stdout.flush()
            return EXIT_OK

        favicon = favicon.resize(args.size)
        if args.stdout:
            favicon.write_to(sys.stdout.buffer, args.output_format)
        else:
            path = args.path or default_output_path(args.url, args.output_format)
            favicon.export(path, args.output_format)
    except (InvalidUrl, InvalidSize) as exc:
        logger.error("%s", exc)
        return EXIT_USAGE
    except (FetchError, NoHeaderSection) as exc:
        logger.error("%s", exc)
        return EXIT_FETCH
    except NoFaviconFound as exc:
        logger.error("%s", exc)
        return EXIT_NOT_FOUND
    except (EncodeError, ExportError) as exc:
        logger.error("%s", exc)
        return EXIT_EXPORT
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
