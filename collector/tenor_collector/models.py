"""データモデル定義."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from tenor_collector.config import TENOR_VIEW_URL_TEMPLATE

GIF = "gif"
STICKER = "sticker"
CATEGORIES = (GIF, STICKER)

NO_TITLE = "No title"


def _as_int(value: Any) -> int:
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return 0


def _format_url(formats: dict, *names: str) -> str:
    """media_formats から最初に見つかった形式の URL を返す."""
    for name in names:
        entry = formats.get(name)
        if isinstance(entry, dict) and entry.get("url"):
            return entry["url"]
    return ""


@dataclass
class MediaItem:
    """GIF / ステッカー 1 件を表す."""

    id: str
    title: str
    url: str  # 公開ページ URL
    created: str | float  # API の UNIX 秒。欠けていれば取得時刻 (ISO 8601)
    tags: list[str] = field(default_factory=list)
    shares: int = 0
    has_audio: bool = False
    media: dict[str, str] = field(default_factory=dict)  # gif / tinygif / mp4 / preview
    category: str = GIF

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> MediaItem:
        """API の生レコードから MediaItem を組み立てる.

        v2 (media_formats) と v1 (media) の両形式に対応する。
        v1 の media は形式 dict のリストなので先頭要素を使う。
        """
        formats = raw.get("media_formats") or raw.get("media") or {}
        if isinstance(formats, list):
            formats = formats[0] if formats else {}

        item_id = str(raw.get("id") or "")
        tags = raw.get("tags") or raw.get("searchterm") or []
        if isinstance(tags, str):
            tags = [tags]

        return cls(
            id=item_id,
            title=raw.get("title") or raw.get("content_description") or raw.get("h1_title") or NO_TITLE,
            url=raw.get("itemurl") or raw.get("url") or TENOR_VIEW_URL_TEMPLATE.format(id=item_id),
            created=raw.get("created") or datetime.now(timezone.utc).isoformat(),
            tags=list(tags),
            shares=_as_int(raw.get("shares")),
            has_audio=bool(raw.get("hasaudio")),
            media={
                "gif": _format_url(formats, "gif", "mediumgif"),
                "tinygif": _format_url(formats, "tinygif", "nanogif"),
                "mp4": _format_url(formats, "mp4", "tinymp4"),
                "preview": _format_url(formats, "gifpreview", "tinygif"),
            },
        )

    @property
    def asset_url(self) -> str:
        """CSV 出力用の代表メディア URL."""
        return self.media.get("gif") or self.media.get("tinygif") or self.media.get("mp4") or ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChannelResult:
    """チャンネル取得 1 回分の結果.

    取得のたびに新しく生成され、前回の結果を引き継がない。
    """

    username: str
    gifs: list[MediaItem] = field(default_factory=list)
    stickers: list[MediaItem] = field(default_factory=list)
    total_gif_shares: int = 0
    total_sticker_shares: int = 0
    fetched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def add(self, item: MediaItem) -> None:
        """カテゴリに応じて追加し、共有数を 1 回だけ加算する."""
        if item.category == STICKER:
            self.stickers.append(item)
            self.total_sticker_shares += item.shares
        else:
            self.gifs.append(item)
            self.total_gif_shares += item.shares

    @property
    def total_shares(self) -> int:
        return self.total_gif_shares + self.total_sticker_shares

    def to_dict(self) -> dict:
        """API レスポンス・JSON 出力用の dict."""
        return {
            "total_gifs": len(self.gifs),
            "total_stickers": len(self.stickers),
            "total_gif_shares": self.total_gif_shares,
            "total_sticker_shares": self.total_sticker_shares,
            "total_shares": self.total_shares,
            "fetched_at": self.fetched_at,
            "gifs": [g.to_dict() for g in self.gifs],
            "stickers": [s.to_dict() for s in self.stickers],
        }


@dataclass
class RankResult:
    """キーワード検索内での順位."""

    rank: int  # 1 始まり
    item: MediaItem
    keyword: str


@dataclass
class TagRank:
    """タグ 1 件分の順位."""

    tag: str
    rank: int | None  # None = 圏外
    found: bool


@dataclass
class TagRankReport:
    """素材のタグ別順位レポート."""

    item: MediaItem
    ranks: list[TagRank] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "gif": self.item.to_dict(),
            "ranks": [asdict(r) for r in self.ranks],
        }


@dataclass(frozen=True)
class Signal:
    """スクレイピングで得た共有数."""

    count: int


@dataclass(frozen=True)
class NoSignal:
    """共有数を取得できなかったことを表す."""

    reason: str
