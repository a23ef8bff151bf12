"""素材ページからの共有数スクレイピングモジュール.

API は共有数を返さないため、公開ページの HTML から推定する。

取得戦略:
  1. 共有数を表す正規表現 5 種を順に試す（主戦略）
  2. JSON-LD (schema.org InteractionCounter / ShareAction) パース（フォールバック）

いずれも失敗した場合は NoSignal を返し、例外は外に出さない。
"""

from __future__ import annotations

import json
import logging
import re

import requests
from bs4 import BeautifulSoup

from tenor_collector.config import PC_USER_AGENT, SCRAPE_TIMEOUT
from tenor_collector.models import NoSignal, Signal

logger = logging.getLogger(__name__)

_SHARE_PATTERNS = [
    re.compile(r"\"shares[\"']:\s*(\d+)", re.IGNORECASE),
    re.compile(r"data-shares=[\"'](\d+)[\"']", re.IGNORECASE),
    re.compile(r"\"shareCount[\"']:\s*(\d+)", re.IGNORECASE),
    re.compile(r"shares:\s*(\d+)", re.IGNORECASE),
    re.compile(r"\"share_count[\"']:\s*(\d+)", re.IGNORECASE),
]


def scrape_share_signal(url: str, session: requests.Session | None = None) -> Signal | NoSignal:
    """素材ページを取得して共有数を抽出する.

    Returns:
        見つかれば Signal(count)、ページ取得・抽出に失敗すれば NoSignal。
    """
    if not url:
        return NoSignal("URL なし")

    headers = {"User-Agent": PC_USER_AGENT}
    getter = session.get if session is not None else requests.get
    try:
        resp = getter(url, headers=headers, timeout=SCRAPE_TIMEOUT)
        resp.raise_for_status()
        html = resp.text
    except requests.RequestException as e:
        logger.debug("共有数ページ取得失敗: url=%s, error=%s", url, e)
        return NoSignal(f"取得失敗: {e}")

    count = parse_share_count(html)
    if count is None:
        logger.debug("共有数が見つかりません: url=%s", url)
        return NoSignal("共有数なし")
    return Signal(count)


def parse_share_count(html: str) -> int | None:
    """HTML から共有数を抽出する. 見つからなければ None."""
    if not isinstance(html, str) or not html:
        return None

    for pattern in _SHARE_PATTERNS:
        m = pattern.search(html)
        if m:
            return int(m.group(1))

    return _parse_from_json_ld(html)


def _parse_from_json_ld(html: str) -> int | None:
    """JSON-LD の interactionStatistic から ShareAction の件数を抽出する."""
    soup = BeautifulSoup(html, "html.parser")

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string)
        except (json.JSONDecodeError, TypeError):
            continue

        entries = data if isinstance(data, list) else [data]
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            stats = entry.get("interactionStatistic") or []
            if isinstance(stats, dict):
                stats = [stats]
            for stat in stats:
                if not isinstance(stat, dict):
                    continue
                interaction = _interaction_type(stat.get("interactionType"))
                if "ShareAction" not in interaction:
                    continue
                try:
                    return int(stat.get("userInteractionCount"))
                except (TypeError, ValueError):
                    continue

    return None


def _interaction_type(value) -> str:
    """interactionType は文字列または {"@type": ...} のどちらか."""
    if isinstance(value, dict):
        return str(value.get("@type", ""))
    return str(value or "")
