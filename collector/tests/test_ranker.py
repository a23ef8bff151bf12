"""ranker モジュールのユニットテスト."""

from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeClient, page, raw_item
from tenor_collector.client import TenorApiError
from tenor_collector.identifiers import InvalidInputError
from tenor_collector.models import STICKER, RankResult
from tenor_collector.ranker import ItemNotFoundError, find_tag_ranks, locate_rank


class TestLocateRank:
    """locate_rank のテスト."""

    def test_rank_on_second_page(self, pacer):
        """50 件 × 2 ページで 63 番目にある素材は 63 位、リクエストは 2 回."""
        client = FakeClient(pages=[
            page(range(1000, 1050), "p2"),
            page([*range(2000, 2012), 777, *range(3000, 3037)], "p3"),
            page([5000], ""),
        ])
        result = locate_rank("duck", "777", page_cap=20, client=client, pacer=pacer)

        assert result.rank == 63
        assert result.item.id == "777"
        assert result.keyword == "duck"
        assert len(client.search_calls) == 2
        assert pacer.steps == ["rank_page"]

    def test_page_cap(self, pacer):
        """ページ上限 1 で 2 ページ目にしか無ければ 1 回で圏外."""
        client = FakeClient(pages=[page([1, 2], "p2"), page([777], "")])
        result = locate_rank("duck", "777", page_cap=1, client=client, pacer=pacer)

        assert result is None
        assert len(client.search_calls) == 1

    def test_first_position(self, pacer):
        client = FakeClient(pages=[page([777, 1, 2], "p2")])
        result = locate_rank("duck", "777", client=client, pacer=pacer)

        assert isinstance(result, RankResult)
        assert result.rank == 1
        assert len(client.search_calls) == 1

    def test_cursor_exhausted(self, pacer):
        client = FakeClient(pages=[page([1, 2], "")])
        assert locate_rank("duck", "777", client=client, pacer=pacer) is None
        assert len(client.search_calls) == 1

    def test_target_from_url(self, pacer):
        client = FakeClient(pages=[page([1, 25478352], "")])
        result = locate_rank(
            "duck",
            "https://tenor.com/view/duck-race-gif-25478352",
            client=client,
            pacer=pacer,
        )
        assert result.rank == 2

    def test_sticker_kind(self, pacer):
        client = FakeClient(pages=[page([1], "")])
        locate_rank("duck", "1", media_kind=STICKER, client=client, pacer=pacer)
        assert client.search_calls[0]["media_kind"] == STICKER

    @pytest.mark.parametrize("keyword, target", [("", "123"), ("duck", ""), ("duck", "   ")])
    def test_invalid_input(self, keyword, target, pacer):
        client = FakeClient()
        with pytest.raises(InvalidInputError):
            locate_rank(keyword, target, client=client, pacer=pacer)
        assert client.search_calls == []

    def test_api_error_propagates(self, pacer):
        client = MagicMock()
        client.search.side_effect = TenorApiError("boom", status=500)
        with pytest.raises(TenorApiError):
            locate_rank("duck", "1", client=client, pacer=pacer)


class TestFindTagRanks:
    """find_tag_ranks のテスト."""

    def test_dedup_item_tags(self, pacer):
        """素材のタグ ["a","a","b"] は重複を除いて a, b の順に調べること."""
        client = FakeClient(
            posts={"results": [raw_item(777, tags=["a", "a", "b"])]},
            pages_by_query={
                "a": [page([1, 777], "")],
                "b": [page([1, 2], "")],
            },
        )
        report = find_tag_ranks("777", tags=[], max_tags=10, client=client, pacer=pacer)

        assert report.item.id == "777"
        assert [(r.tag, r.rank, r.found) for r in report.ranks] == [
            ("a", 2, True),
            ("b", None, False),
        ]
        assert [c["q"] for c in client.search_calls] == ["a", "b"]
        assert pacer.steps == ["tag", "tag"]

    def test_explicit_tags_win(self, pacer):
        client = FakeClient(
            posts={"results": [raw_item(777, tags=["a", "b"])]},
            pages_by_query={"z": [page([777], "")]},
        )
        report = find_tag_ranks("777", tags=["z", "", "z"], client=client, pacer=pacer)

        assert [(r.tag, r.rank) for r in report.ranks] == [("z", 1)]

    def test_max_tags(self, pacer):
        client = FakeClient(posts={"results": [raw_item(777, tags=["a", "b", "c"])]})
        report = find_tag_ranks("777", max_tags=2, client=client, pacer=pacer)

        assert [r.tag for r in report.ranks] == ["a", "b"]

    def test_page_cap_per_tag(self, pacer):
        client = FakeClient(
            posts={"results": [raw_item(777, tags=["a"])]},
            pages_by_query={"a": [page([1], "p2"), page([777], "")]},
        )
        with patch("tenor_collector.ranker.locate_rank", wraps=locate_rank) as spy:
            report = find_tag_ranks("777", page_cap_per_tag=1, client=client, pacer=pacer)

        assert report.ranks[0].found is False
        assert spy.call_args.kwargs["page_cap"] == 1

    def test_no_tags(self, pacer):
        client = FakeClient(posts={"results": [raw_item(777, tags=[])]})
        report = find_tag_ranks("777", client=client, pacer=pacer)

        assert report.ranks == []
        assert client.search_calls == []

    def test_item_not_found(self, pacer):
        with pytest.raises(ItemNotFoundError):
            find_tag_ranks("777", client=FakeClient(), pacer=pacer)

    def test_empty_id(self, pacer):
        client = FakeClient()
        with pytest.raises(InvalidInputError):
            find_tag_ranks("", client=client, pacer=pacer)
        assert client.posts_calls == []

    def test_to_dict(self, pacer):
        client = FakeClient(
            posts={"results": [raw_item(777, tags=["a"])]},
            pages_by_query={"a": [page([777], "")]},
        )
        data = find_tag_ranks("777", client=client, pacer=pacer).to_dict()

        assert data["gif"]["id"] == "777"
        assert data["ranks"] == [{"tag": "a", "rank": 1, "found": True}]
