"""キーワード検索での順位計測モジュール.

処理フロー:
  1. 素材指定（ID・URL・共有リンク）を数値 ID に正規化
  2. キーワードで search をページングし、先頭からの通し番号で順位を数える
  3. タグ別順位は素材詳細からタグを解決し、タグごとに 2 を直列で実行
"""

from __future__ import annotations

import logging

from tenor_collector.client import TenorClient
from tenor_collector.collector import get_item_details
from tenor_collector.config import MAX_PAGE_SIZE, RANK_MAX_PAGES, RANK_MAX_TAGS, TAG_RANK_MAX_PAGES
from tenor_collector.identifiers import InvalidInputError, normalize_item_ref
from tenor_collector.models import GIF, MediaItem, RankResult, TagRank, TagRankReport
from tenor_collector.pacing import Pacer

logger = logging.getLogger(__name__)


class ItemNotFoundError(LookupError):
    """素材 ID から素材詳細を取得できなかった."""


def locate_rank(
    keyword: str,
    target_ref: str,
    page_cap: int = RANK_MAX_PAGES,
    media_kind: str = GIF,
    client: TenorClient | None = None,
    pacer: Pacer | None = None,
) -> RankResult | None:
    """キーワード検索結果の中で指定素材の順位を探す.

    最大 page_cap ページまで調べ、見つかった時点で打ち切る。

    Returns:
        RankResult。調べた範囲に無ければ None（圏外）。

    Raises:
        InvalidInputError: キーワードまたは素材 ID が空
        TenorApiError: API 呼び出しの失敗
    """
    if not keyword:
        raise InvalidInputError("順位計測にはキーワードが必要です")

    target_id = normalize_item_ref(target_ref)
    if not target_id:
        raise InvalidInputError("素材 ID を特定できません")

    client = client or TenorClient()
    pacer = pacer or Pacer()
    logger.info("順位計測: keyword=%s, id=%s, kind=%s", keyword, target_id, media_kind)

    pos = ""
    page = 0
    rank = 0

    while page < page_cap:
        page += 1
        data = client.search(keyword, limit=MAX_PAGE_SIZE, pos=pos or None, media_kind=media_kind)
        results = data.get("results") or []
        if not results:
            break

        for raw in results:
            rank += 1
            if str(raw.get("id") or "") == target_id:
                item = MediaItem.from_raw(raw)
                item.category = media_kind
                logger.info("  → %d 位 (page %d)", rank, page)
                return RankResult(rank=rank, item=item, keyword=keyword)

        pos = data.get("next") or ""
        if not pos or page >= page_cap:
            break
        pacer.pause("rank_page")

    logger.info("  → 圏外 (%d 件中)", rank)
    return None


def _unique_tags(tags: list[str], max_tags: int) -> list[str]:
    """空文字を除き、出現順を保って重複を除去し、先頭 max_tags 件に絞る."""
    return list(dict.fromkeys(t for t in tags if t))[:max_tags]


def find_tag_ranks(
    item_ref: str,
    tags: list[str] | None = None,
    page_cap_per_tag: int = TAG_RANK_MAX_PAGES,
    max_tags: int = RANK_MAX_TAGS,
    media_kind: str = GIF,
    client: TenorClient | None = None,
    pacer: Pacer | None = None,
) -> TagRankReport:
    """素材のタグごとの検索順位を調べる.

    tags を省略した場合は素材自身のタグを使う。

    Raises:
        InvalidInputError: 素材 ID が空
        ItemNotFoundError: 素材詳細が取得できない
        TenorApiError: API 呼び出しの失敗
    """
    target_id = normalize_item_ref(item_ref)
    if not target_id:
        raise InvalidInputError("タグ順位の取得には素材 ID が必要です")

    client = client or TenorClient()
    pacer = pacer or Pacer()

    item = get_item_details(target_id, media_kind=media_kind, client=client)
    if item is None:
        raise ItemNotFoundError(f"素材詳細を取得できません: {target_id}")

    unique_tags = _unique_tags(tags or item.tags, max_tags)
    report = TagRankReport(item=item)
    if not unique_tags:
        logger.warning("素材 %s に調べるタグがありません", target_id)
        return report

    for tag in unique_tags:
        result = locate_rank(
            tag,
            target_id,
            page_cap=page_cap_per_tag,
            media_kind=media_kind,
            client=client,
            pacer=pacer,
        )
        report.ranks.append(TagRank(tag=tag, rank=result.rank if result else None, found=result is not None))
        pacer.pause("tag")

    return report
