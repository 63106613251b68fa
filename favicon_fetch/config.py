"""Configuration objects and constants for favicon fetching."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger("favicon_fetch")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/118.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 15.0
DEFAULT_MAX_CONCURRENCY = 10
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


@dataclass
class FetchConfig:
    """Settings that control page and candidate fetching."""

    timeout: float = DEFAULT_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    user_agent: str = DEFAULT_USER_AGENT

    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/*,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """Build a config, applying ``FAVICON_FETCH_*`` environment overrides."""
        config = cls()
        timeout = os.getenv("FAVICON_FETCH_TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                logger.warning(
                    "FAVICON_FETCH_TIMEOUT is set to %r which is not a number; using %s",
                    timeout,
                    config.timeout,
                )
        concurrency = os.getenv("FAVICON_FETCH_MAX_CONCURRENCY")
        if concurrency:
            try:
                value = int(concurrency)
                if value < 1:
                    raise ValueError(value)
                config.max_concurrency = value
            except ValueError:
                logger.warning(
                    "FAVICON_FETCH_MAX_CONCURRENCY is set to %r which is not a positive integer; using %s",
                    concurrency,
                    config.max_concurrency,
                )
        user_agent = os.getenv("FAVICON_FETCH_USER_AGENT")
        if user_agent:
            config.user_agent = user_agent
        return config
