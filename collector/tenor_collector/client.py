"""Tenor API クライアント."""

from __future__ import annotations

import logging
from typing import Any

import requests

from tenor_collector.config import (
    MAX_PAGE_SIZE,
    REQUEST_TIMEOUT,
    TENOR_API_KEY,
    TENOR_BASE_URL,
    TENOR_BASE_URL_V1,
    TENOR_CLIENT_KEY,
)
from tenor_collector.models import STICKER

logger = logging.getLogger(__name__)


class TenorApiError(RuntimeError):
    """Tenor API 呼び出しの失敗（通信エラー・非 2xx）."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


def clamp_page_size(limit: int | None) -> int:
    """search の limit を 1〜50 に収める."""
    if not limit:
        return MAX_PAGE_SIZE
    return max(1, min(int(limit), MAX_PAGE_SIZE))


class TenorClient:
    """Tenor v2 API の GET エンドポイントを呼び出す.

    search / posts はリトライしない。失敗はすべて TenorApiError として呼び出し元に伝える。
    """

    def __init__(
        self,
        api_key: str = TENOR_API_KEY,
        base_url: str = TENOR_BASE_URL,
        base_url_v1: str = TENOR_BASE_URL_V1,
        client_key: str = TENOR_CLIENT_KEY,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        if not api_key:
            raise RuntimeError("TENOR_API_KEY が設定されていません")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.base_url_v1 = base_url_v1.rstrip("/")
        self.client_key = client_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, endpoint: str, params: dict[str, Any], base_url: str | None = None) -> dict:
        url = f"{base_url or self.base_url}/{endpoint}"
        query = {"key": self.api_key, "client_key": self.client_key}
        query.update({k: v for k, v in params.items() if v not in (None, "")})

        try:
            resp = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Tenor API 通信失敗: endpoint=%s, error=%s", endpoint, e)
            raise TenorApiError(f"Tenor API 通信失敗: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.error("Tenor API エラー: endpoint=%s, status=%s", endpoint, resp.status_code)
            raise TenorApiError(
                f"Tenor API エラー: status={resp.status_code}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise TenorApiError("Tenor API の応答が JSON ではありません", resp.status_code, resp.text) from e

    def search(
        self,
        q: str,
        limit: int | None = None,
        pos: str | None = None,
        media_kind: str = "gif",
    ) -> dict:
        """キーワード検索 1 ページ分を取得する.

        Returns:
            {"results": [...], "next": str}
        """
        params: dict[str, Any] = {
            "q": q,
            "limit": clamp_page_size(limit),
            "pos": pos,
            "contentfilter": "off",
            "media_filter": "gif",
        }
        if media_kind == STICKER:
            params["searchfilter"] = "sticker"
            params["type"] = "sticker"
        return self._get("search", params)

    def featured(self, limit: int | None = None, pos: str | None = None) -> dict:
        """トレンド（featured）1 ページ分を取得する.

        v2 が失敗した場合は v1 の trending を 1 回だけ試す。
        """
        params = {
            "limit": clamp_page_size(limit),
            "pos": pos,
            "contentfilter": "off",
            "media_filter": "minimal",
        }
        try:
            return self._get("featured", params)
        except TenorApiError as e:
            logger.warning("v2 featured 失敗、v1 trending で再試行: %s", e)
            return self._get("trending", params, base_url=self.base_url_v1)

    def posts(self, item_id: str, media_kind: str = "gif") -> dict:
        """ID 指定で素材を取得する."""
        params = {
            "ids": item_id,
            "media_filter": "minimal" if media_kind == STICKER else "gif",
        }
        return self._get("posts", params)
