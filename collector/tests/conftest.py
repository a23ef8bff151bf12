"""テスト共通のフィクスチャ."""

import pytest

from tenor_collector.pacing import Pacer


class FakeClient:
    """search / posts / featured の応答を順に返す TenorClient の代役."""

    def __init__(self, pages=None, posts=None, pages_by_query=None):
        self.pages = list(pages or [])
        self.pages_by_query = {k: list(v) for k, v in (pages_by_query or {}).items()}
        self.posts_response = posts if posts is not None else {"results": []}
        self.search_calls = []
        self.featured_calls = []
        self.posts_calls = []

    def search(self, q, limit=None, pos=None, media_kind="gif"):
        self.search_calls.append({"q": q, "limit": limit, "pos": pos, "media_kind": media_kind})
        queue = self.pages_by_query.get(q, self.pages)
        if not queue:
            return {"results": [], "next": ""}
        return queue.pop(0)

    def featured(self, limit=None, pos=None):
        self.featured_calls.append({"limit": limit, "pos": pos})
        if not self.pages:
            return {"results": [], "next": ""}
        return self.pages.pop(0)

    def posts(self, item_id, media_kind="gif"):
        self.posts_calls.append({"item_id": item_id, "media_kind": media_kind})
        return self.posts_response


def raw_item(item_id, **extra):
    """API の生レコード."""
    record = {
        "id": str(item_id),
        "title": f"gif {item_id}",
        "itemurl": f"https://tenor.com/view/duck-gif-{item_id}",
        "created": 1700000000.0,
        "tags": ["duck"],
        "media_formats": {"gif": {"url": f"https://media.tenor.com/{item_id}.gif"}},
    }
    record.update(extra)
    return record


def page(ids, next_pos=""):
    return {"results": [raw_item(i) for i in ids], "next": next_pos}


@pytest.fixture
def pacer():
    """待機せず、呼ばれたステップを記録する Pacer."""
    p = Pacer.disabled()
    p.steps = []
    original = p.pause

    def pause(step):
        p.steps.append(step)
        return original(step)

    p.pause = pause
    return p
