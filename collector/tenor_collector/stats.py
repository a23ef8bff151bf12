"""チャンネル取得結果の集計."""

from __future__ import annotations

from tenor_collector.models import ChannelResult


def summarize(result: ChannelResult, top_n: int = 10) -> dict:
    """件数・共有数合計・GIF 共有数の平均/最大/最小・共有数上位を集計する."""
    summary = {
        "username": result.username,
        "total_gifs": len(result.gifs),
        "total_stickers": len(result.stickers),
        "total_gif_shares": result.total_gif_shares,
        "total_sticker_shares": result.total_sticker_shares,
        "total_shares": result.total_shares,
        "avg_gif_shares": 0.0,
        "max_gif_shares": 0,
        "min_gif_shares": 0,
        "top_gifs": [],
    }
    if not result.gifs:
        return summary

    shares = [g.shares for g in result.gifs]
    summary["avg_gif_shares"] = round(result.total_gif_shares / len(result.gifs), 2)
    summary["max_gif_shares"] = max(shares)
    summary["min_gif_shares"] = min(shares)
    summary["top_gifs"] = sorted(result.gifs, key=lambda g: g.shares, reverse=True)[:top_n]
    return summary
