"""Settings read from the environment (and a ``.env`` file when present)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 1000
DEFAULT_HTTP_TIMEOUT = 45
DEFAULT_PLAY_TIMEOUT = 30.0
DEFAULT_LANGUAGE = "en"


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {name}")
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric value for {name}")
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration of the lootbox client and claim sessions.

    Attributes
    ----------
    base_fqdn : Optional[str]
        Host name of the lootbox service (``LOOTBOX_API_BASE_FQDN``).
    api_key : Optional[str]
        Bearer token sent with every request (``LOOTBOX_API_KEY``).
    history_limit : int
        Number of history records fetched per load (``LOOTBOX_HISTORY_LIMIT``).
    http_timeout : int
        Seconds before an HTTP request is abandoned (``LOOTBOX_HTTP_TIMEOUT``).
    play_timeout : float
        Seconds a claim waits for the play call (``LOOTBOX_PLAY_TIMEOUT``).
    language : str
        Default translation language (``LOOTBOX_LANGUAGE``).
    """

    base_fqdn: Optional[str] = None
    api_key: Optional[str] = None
    history_limit: int = DEFAULT_HISTORY_LIMIT
    http_timeout: int = DEFAULT_HTTP_TIMEOUT
    play_timeout: float = DEFAULT_PLAY_TIMEOUT
    language: str = DEFAULT_LANGUAGE

    @property
    def base_url(self) -> Optional[str]:
        if not self.base_fqdn:
            return None
        return f"https://{self.base_fqdn}".rstrip("/")


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from environment variables."""

    if use_dotenv:
        load_dotenv()
    return Settings(
        base_fqdn=os.getenv("LOOTBOX_API_BASE_FQDN") or None,
        api_key=os.getenv("LOOTBOX_API_KEY") or None,
        history_limit=_get_int("LOOTBOX_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        http_timeout=_get_int("LOOTBOX_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        play_timeout=_get_float("LOOTBOX_PLAY_TIMEOUT", DEFAULT_PLAY_TIMEOUT),
        language=os.getenv("LOOTBOX_LANGUAGE") or DEFAULT_LANGUAGE,
    )


__all__ = ["Settings", "load_settings"]
