import logging
from typing import Any, Mapping, Optional
from urllib.parse import urljoin

import requests

from ..config import Settings, load_settings
from ..errors import ConfigurationError, RemoteAPIError
from ..models import HistoryRecord, MiniGame
from .protocol import PlayResult

logger = logging.getLogger(__name__)


class LootboxClient:
    """HTTP client for the lootbox service, implementing :class:`GameAPI`."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or load_settings()
        base_url = self.settings.base_url
        if not base_url:
            raise ConfigurationError("Environment variable 'LOOTBOX_API_BASE_FQDN' is not set")

        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = self.settings.http_timeout

    # -------- headers --------
    @property
    def headers(self) -> Mapping[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        try:
            r = self.session.request(
                method=method.upper(),
                url=url,
                headers=self.headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            # Do not log headers; they carry the API key.
            logger.warning(f"{method.upper()} {path} failed: {e}")
            raise RemoteAPIError(f"{method.upper()} {path} failed: {e}") from e
        return r.json() if r.content else None

    # -------- API callers --------
    def list_mini_games(self) -> list[MiniGame]:
        payload = self._request("GET", "/api/v1/mini-games") or []
        return [MiniGame.from_api(item) for item in payload]

    def list_history(
        self, template_id: int, limit: int, offset: int = 0
    ) -> list[HistoryRecord]:
        payload = self._request(
            "GET",
            f"/api/v1/mini-games/{template_id}/history",
            params={"limit": limit, "offset": offset},
        )
        return [HistoryRecord.from_api(item) for item in payload or []]

    def play(self, template_id: int) -> PlayResult:
        payload = self._request("POST", f"/api/v1/mini-games/{template_id}/play")
        if not isinstance(payload, dict):
            raise RemoteAPIError(f"Unexpected play response: {payload!r}")
        return PlayResult.from_api(payload)

    def get_translations(self, language: str) -> dict[str, str]:
        payload = self._request("GET", f"/api/v1/translations/{language.upper()}")
        if not isinstance(payload, dict):
            return {}
        return dict(payload.get("translations") or {})


__all__ = ["LootboxClient"]
