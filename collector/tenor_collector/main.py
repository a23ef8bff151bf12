"""Tenor チャンネル取得・順位計測 — メインエントリーポイント.

使い方:
  tenor-collector <channel_url | @username | username>
  tenor-collector search <search_term>
  tenor-collector trending
  tenor-collector gifid <gif_id>
  tenor-collector rank "<search_term>" <gif_id_or_url>
  tenor-collector tagrank <gif_id_or_url> [tag1 tag2 ...]
  tenor-collector serve

取得系モード（channel / search / trending / gifid）は結果を JSON・CSV に保存する。
"""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime

from tenor_collector.collector import (
    fetch_by_search_term,
    fetch_channel,
    fetch_trending,
    get_item_details,
)
from tenor_collector.config import (
    LOG_DIR,
    OUTPUT_CSV,
    OUTPUT_JSON,
    OUTPUT_STICKER_CSV,
    RANK_MAX_PAGES,
    RANK_MAX_TAGS,
    TAG_RANK_MAX_PAGES,
)
from tenor_collector.export import save_items_csv, save_json
from tenor_collector.models import ChannelResult, MediaItem
from tenor_collector.ranker import find_tag_ranks, locate_rank
from tenor_collector.stats import summarize

MODES = {"channel", "username", "url", "search", "trending", "gifid", "rank", "tagrank", "serve"}

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def parse_args(args: list[str]) -> tuple[str, list[str]]:
    """モードと残りの引数に分ける.

    先頭がモード名でなければチャンネル指定とみなす。
    """
    if not args:
        return "", []
    first = args[0].lower()
    if first in MODES:
        return first, args[1:]
    return "channel", args


def _items_result(items: list[MediaItem], label: str) -> ChannelResult:
    """キーワード・トレンド取得結果を出力用の ChannelResult に詰める."""
    result = ChannelResult(username=label)
    for item in items:
        result.add(item)
    return result


def log_summary(result: ChannelResult) -> None:
    """集計結果をログに出す."""
    s = summarize(result)
    logger.info("GIF: %d 件, 共有数 %d", s["total_gifs"], s["total_gif_shares"])
    logger.info("ステッカー: %d 件, 共有数 %d", s["total_stickers"], s["total_sticker_shares"])
    logger.info("共有数合計: %d", s["total_shares"])
    if s["total_gifs"]:
        logger.info(
            "GIF 共有数 平均 %.2f / 最大 %d / 最小 %d",
            s["avg_gif_shares"], s["max_gif_shares"], s["min_gif_shares"],
        )
        for i, gif in enumerate(s["top_gifs"], start=1):
            logger.info("  %2d. %-42s | %d shares", i, gif.title[:40], gif.shares)


def save_outputs(result: ChannelResult) -> None:
    save_json(result, OUTPUT_JSON)
    save_items_csv(result.gifs, OUTPUT_CSV)
    save_items_csv(result.stickers, OUTPUT_STICKER_CSV)


def run(argv: list[str] | None = None) -> int:
    """メイン処理. 終了コードを返す."""
    setup_logging()
    mode, rest = parse_args(sys.argv[1:] if argv is None else argv)
    start_time = time.time()

    if mode == "":
        logger.error(__doc__)
        return 1

    try:
        result: ChannelResult | None = None

        if mode in ("channel", "username", "url"):
            if not rest:
                logger.error("チャンネルの URL またはユーザー名を指定してください")
                return 1
            result = fetch_channel(rest[0])

        elif mode == "search":
            if not rest:
                logger.error("検索キーワードを指定してください")
                return 1
            result = _items_result(fetch_by_search_term(rest[0]), rest[0])

        elif mode == "trending":
            result = _items_result(fetch_trending(), "trending")

        elif mode == "gifid":
            if not rest:
                logger.error("GIF ID を指定してください")
                return 1
            item = get_item_details(rest[0])
            result = _items_result([item] if item else [], rest[0])

        elif mode == "rank":
            if len(rest) < 2:
                logger.error('使い方: tenor-collector rank "<search_term>" <gif_id_or_url>')
                return 1
            found = locate_rank(rest[0], rest[1], page_cap=RANK_MAX_PAGES)
            if found:
                logger.info('GIF "%s" は "%s" で %d 位', found.item.title, rest[0], found.rank)
            else:
                logger.warning('"%s" の調査範囲内に GIF が見つかりませんでした', rest[0])

        elif mode == "tagrank":
            if not rest:
                logger.error("使い方: tenor-collector tagrank <gif_id_or_url> [tag1 tag2 ...]")
                return 1
            tags = rest[1:]
            report = find_tag_ranks(
                rest[0],
                tags=tags,
                page_cap_per_tag=TAG_RANK_MAX_PAGES,
                max_tags=len(tags) if tags else RANK_MAX_TAGS,
            )
            logger.info('タグ順位: "%s" (%s)', report.item.title, report.item.id)
            if not report.ranks:
                logger.warning("調べるタグがありません")
            for entry in report.ranks:
                logger.info("  • %s: %s", entry.tag, f"#{entry.rank}" if entry.found else "圏外")

        elif mode == "serve":
            from tenor_collector.server import serve

            serve()

        if result is not None:
            if result.gifs or result.stickers:
                log_summary(result)
                save_outputs(result)
            else:
                logger.warning("GIF・ステッカーが見つかりませんでした")

    except Exception as e:
        logger.error("致命的なエラー: %s", e)
        return 1

    logger.info("所要時間: %.1f 秒", time.time() - start_time)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
