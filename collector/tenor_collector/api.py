"""読み取り専用 API ハンドラ.

ルーティング層（server.py）から呼ばれ、(HTTP ステータス, JSON 本文) を返す。
必須パラメータ不足・入力不正は 400、それ以外のエラーは詳細をログに残し
汎用メッセージで 500 を返す。
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Mapping

from tenor_collector.collector import fetch_channel
from tenor_collector.config import RANK_MAX_TAGS, TAG_RANK_MAX_PAGES
from tenor_collector.identifiers import InvalidInputError
from tenor_collector.models import GIF, STICKER
from tenor_collector.ranker import find_tag_ranks

logger = logging.getLogger(__name__)

CHANNEL_ERROR = "Tenor チャンネルデータの取得に失敗しました。しばらくしてから再度お試しください。"
TAG_RANK_ERROR = "タグ順位を取得できませんでした。しばらくしてから再度お試しください。"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _positive_int(raw: str | None, default: int) -> int:
    """1 以上の整数に変換する. 数値でない・0 のときは default."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(1, value or default)


def channel_endpoint(params: Mapping[str, str]) -> tuple[int, dict]:
    """チャンネルの GIF・ステッカーと共有数合計を返す.

    params: value（必須, URL またはユーザー名）, limit（任意, 1 ページ件数）
    """
    value = (params.get("value") or "").strip()
    if not value:
        return 400, {"error": "Tenor チャンネルの URL またはユーザー名が必要です"}

    limit = params.get("limit")
    page_size = None
    if limit:
        try:
            page_size = int(limit)
        except ValueError:
            return 400, {"error": "limit は整数で指定してください"}

    try:
        result = fetch_channel(value, page_size)
    except InvalidInputError as e:
        return 400, {"error": str(e)}
    except Exception:
        logger.exception("チャンネル API エラー: value=%s", value)
        return 500, {"error": CHANNEL_ERROR}

    return 200, {
        "username": result.username,
        "totalGifs": len(result.gifs),
        "totalStickers": len(result.stickers),
        "totalGifShares": result.total_gif_shares,
        "totalStickerShares": result.total_sticker_shares,
        "totalShares": result.total_shares,
        "fetchedAt": _now(),
        "gifs": [g.to_dict() for g in result.gifs],
        "stickers": [s.to_dict() for s in result.stickers],
    }


def tag_ranks_endpoint(params: Mapping[str, str]) -> tuple[int, dict]:
    """素材のタグ別検索順位を返す.

    params: gifId（必須）, tags（任意, カンマ区切り）, maxPages, maxTags, type（gif / sticker）
    """
    gif_id = (params.get("gifId") or "").strip()
    if not gif_id:
        return 400, {"error": "gifId is required"}

    tags = [t.strip() for t in (params.get("tags") or "").split(",") if t.strip()]
    media_kind = STICKER if params.get("type") == STICKER else GIF

    try:
        report = find_tag_ranks(
            gif_id,
            tags=tags,
            page_cap_per_tag=_positive_int(params.get("maxPages"), TAG_RANK_MAX_PAGES),
            max_tags=_positive_int(params.get("maxTags"), RANK_MAX_TAGS),
            media_kind=media_kind,
        )
    except InvalidInputError as e:
        return 400, {"error": str(e)}
    except Exception:
        logger.exception("タグ順位 API エラー: gifId=%s", gif_id)
        return 500, {"error": TAG_RANK_ERROR}

    body = report.to_dict()
    body["fetchedAt"] = _now()
    return 200, body
