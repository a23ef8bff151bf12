"""チャンネル素材の収集モジュール.

処理フロー:
  1. チャンネル指定（URL・@ハンドル・ユーザー名）をユーザー名に正規化
  2. GIF → ステッカーの順に search をカーソルで最後までページング
  3. 先頭 SCRAPE_BUDGET 件のみ素材ページから共有数を取得
  4. カテゴリ別の素材リストと共有数合計を ChannelResult として返す
"""

from __future__ import annotations

import logging
from typing import Callable

from tenor_collector.client import TenorClient
from tenor_collector.config import (
    MAX_PAGE_SIZE,
    SCRAPE_BUDGET,
    SEARCH_MAX_ITEMS,
    TRENDING_MAX_ITEMS,
)
from tenor_collector.identifiers import InvalidInputError, normalize_channel_ref
from tenor_collector.models import GIF, STICKER, ChannelResult, MediaItem, NoSignal, Signal
from tenor_collector.pacing import Pacer
from tenor_collector.scraper import scrape_share_signal

logger = logging.getLogger(__name__)

ScrapeFunc = Callable[[str], Signal | NoSignal]


class ScrapeBudget:
    """共有数スクレイピングの残り回数. チャンネル取得 1 回で GIF・ステッカー共通."""

    def __init__(self, limit: int = SCRAPE_BUDGET) -> None:
        self.remaining = limit

    def take(self) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


def walk_collection(
    client: TenorClient,
    username: str,
    category: str,
    page_size: int = MAX_PAGE_SIZE,
    pacer: Pacer | None = None,
    budget: ScrapeBudget | None = None,
    scrape: ScrapeFunc = scrape_share_signal,
) -> list[MediaItem]:
    """チャンネルの 1 カテゴリ分の素材をカーソルが尽きるまで取得する.

    Args:
        client: Tenor API クライアント
        username: 正規化済みユーザー名
        category: "gif" or "sticker"
        page_size: 1 ページの件数（最大 50）
        pacer: ページ間・スクレイピング後の待機
        budget: 共有数スクレイピングの残り回数（None ならスクレイピングしない）
        scrape: 共有数取得関数

    Returns:
        取得順の素材リスト
    """
    pacer = pacer or Pacer()
    label = "ステッカー" if category == STICKER else "GIF"
    logger.info("%s 取得開始: @%s", label, username)

    items: list[MediaItem] = []
    pos = ""
    page = 0

    while True:
        page += 1
        data = client.search(f"@{username}", limit=page_size, pos=pos or None, media_kind=category)
        results = data.get("results") or []
        if not results:
            logger.info("%s はこれ以上ありません (page=%d)", label, page)
            break

        for raw in results:
            item = MediaItem.from_raw(raw)
            item.category = category
            if budget is not None and item.url and budget.take():
                _apply_share_signal(item, scrape)
                pacer.pause("scrape")
            items.append(item)

        logger.info("%s page %d: %d 件取得 (累計 %d 件)", label, page, len(results), len(items))

        pos = data.get("next") or ""
        if not pos:
            break
        pacer.pause("page")

    return items


def _apply_share_signal(item: MediaItem, scrape: ScrapeFunc) -> None:
    """共有数を取得し、正の値なら shares を上書きする."""
    signal = scrape(item.url)
    if isinstance(signal, Signal) and signal.count > 0:
        item.shares = signal.count
        logger.info("  共有数 %d: %s", signal.count, item.id)


def fetch_channel(
    raw_ref: str,
    page_size: int | None = None,
    client: TenorClient | None = None,
    pacer: Pacer | None = None,
    scrape: ScrapeFunc = scrape_share_signal,
) -> ChannelResult:
    """チャンネルの GIF・ステッカーを全件取得する.

    GIF → ステッカーの順に直列で取得する。途中で API エラーが起きた場合は
    例外をそのまま送出し、部分的な結果は返さない。

    Raises:
        InvalidInputError: チャンネル指定が空
        TenorApiError: API 呼び出しの失敗
    """
    username = normalize_channel_ref(raw_ref)
    if not username:
        raise InvalidInputError("Tenor チャンネルの URL またはユーザー名を指定してください")

    client = client or TenorClient()
    pacer = pacer or Pacer()
    budget = ScrapeBudget(SCRAPE_BUDGET)
    result = ChannelResult(username=username)

    logger.info("=== チャンネル取得 開始: @%s ===", username)
    for category in (GIF, STICKER):
        items = walk_collection(
            client,
            username,
            category,
            page_size=page_size or MAX_PAGE_SIZE,
            pacer=pacer,
            budget=budget,
            scrape=scrape,
        )
        for item in items:
            result.add(item)

    logger.info(
        "=== チャンネル取得 完了: GIF %d 件, ステッカー %d 件, 共有数合計 %d ===",
        len(result.gifs), len(result.stickers), result.total_shares,
    )
    return result


def _walk_capped(fetch_page: Callable[[str | None], dict], max_items: int, pacer: Pacer) -> list[MediaItem]:
    """件数上限付きでカーソルをたどる."""
    items: list[MediaItem] = []
    pos = ""
    while True:
        data = fetch_page(pos or None)
        results = data.get("results") or []
        if not results:
            break
        items.extend(MediaItem.from_raw(raw) for raw in results)

        pos = data.get("next") or ""
        if not pos or len(items) >= max_items:
            break
        pacer.pause("page")
    return items


def fetch_by_search_term(
    search_term: str,
    max_items: int = SEARCH_MAX_ITEMS,
    client: TenorClient | None = None,
    pacer: Pacer | None = None,
) -> list[MediaItem]:
    """キーワード検索の結果を max_items 件程度まで取得する."""
    if not search_term:
        raise InvalidInputError("検索キーワードを指定してください")

    client = client or TenorClient()
    logger.info("キーワード取得: %s", search_term)
    items = _walk_capped(
        lambda pos: client.search(search_term, limit=MAX_PAGE_SIZE, pos=pos),
        max_items,
        pacer or Pacer(),
    )
    logger.info("キーワード取得 完了: %d 件", len(items))
    return items


def fetch_trending(
    max_items: int = TRENDING_MAX_ITEMS,
    client: TenorClient | None = None,
    pacer: Pacer | None = None,
) -> list[MediaItem]:
    """トレンド（featured）を max_items 件程度まで取得する."""
    client = client or TenorClient()
    logger.info("トレンド取得 開始")
    items = _walk_capped(
        lambda pos: client.featured(limit=MAX_PAGE_SIZE, pos=pos),
        max_items,
        pacer or Pacer(),
    )
    logger.info("トレンド取得 完了: %d 件", len(items))
    return items


def get_item_details(
    item_id: str,
    media_kind: str = GIF,
    client: TenorClient | None = None,
) -> MediaItem | None:
    """ID 指定で素材 1 件を取得する. 見つからなければ None."""
    client = client or TenorClient()
    data = client.posts(item_id, media_kind=media_kind)
    results = data.get("results") or []
    if not results:
        return None
    item = MediaItem.from_raw(results[0])
    item.category = STICKER if media_kind == STICKER else GIF
    return item
