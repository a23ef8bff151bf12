"""JSON / CSV ファイル出力."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from tenor_collector.models import ChannelResult, MediaItem

logger = logging.getLogger(__name__)

CSV_HEADER = ["ID", "Title", "URL", "Shares", "Created", "Tags", "MediaURL"]


def save_json(result: ChannelResult, path: str | Path) -> Path:
    """取得結果を JSON で保存する."""
    path = Path(path)
    path.write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("JSON 保存: %s", path)
    return path


def save_items_csv(items: list[MediaItem], path: str | Path) -> Path | None:
    """素材リストを CSV で保存する. 空なら何もしない."""
    if not items:
        logger.info("CSV 出力対象なし: %s", path)
        return None

    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(CSV_HEADER)
        for item in items:
            writer.writerow([
                item.id,
                item.title,
                item.url,
                item.shares,
                item.created,
                ";".join(item.tags),
                item.asset_url,
            ])
    logger.info("CSV 保存: %s (%d 件)", path, len(items))
    return path
