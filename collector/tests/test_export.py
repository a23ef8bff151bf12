"""export / stats モジュールのテスト."""

import csv
import json

from tenor_collector.export import CSV_HEADER, save_items_csv, save_json
from tenor_collector.models import STICKER, ChannelResult, MediaItem
from tenor_collector.stats import summarize


def _result():
    result = ChannelResult(username="duck")
    for i, shares in enumerate([5, 20, 1, 8], start=1):
        result.add(MediaItem(
            id=str(i),
            title=f'duck "{i}"',
            url=f"https://tenor.com/view/duck-{i}",
            created="2026-01-01T00:00:00+00:00",
            tags=["duck", "race"],
            shares=shares,
            media={"gif": f"https://media.tenor.com/{i}.gif"},
        ))
    result.add(MediaItem(id="9", title="s", url="u", created="c", shares=3, category=STICKER))
    return result


class TestSaveJson:

    def test_totals(self, tmp_path):
        path = save_json(_result(), tmp_path / "out.json")
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["total_gifs"] == 4
        assert data["total_stickers"] == 1
        assert data["total_gif_shares"] == 34
        assert data["total_sticker_shares"] == 3
        assert data["total_shares"] == 37
        assert len(data["gifs"]) == 4


class TestSaveItemsCsv:

    def test_rows(self, tmp_path):
        path = save_items_csv(_result().gifs, tmp_path / "gifs.csv")
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "1",
            'duck "1"',
            "https://tenor.com/view/duck-1",
            "5",
            "2026-01-01T00:00:00+00:00",
            "duck;race",
            "https://media.tenor.com/1.gif",
        ]
        assert len(rows) == 5

    def test_empty_skipped(self, tmp_path):
        assert save_items_csv([], tmp_path / "none.csv") is None
        assert not (tmp_path / "none.csv").exists()


class TestSummarize:

    def test_summary(self):
        s = summarize(_result(), top_n=2)

        assert s["total_shares"] == 37
        assert s["avg_gif_shares"] == 8.5
        assert s["max_gif_shares"] == 20
        assert s["min_gif_shares"] == 1
        assert [g.id for g in s["top_gifs"]] == ["2", "4"]

    def test_no_gifs(self):
        s = summarize(ChannelResult(username="empty"))
        assert s["avg_gif_shares"] == 0.0
        assert s["top_gifs"] == []
