"""リクエスト間隔の制御.

Tenor の無認証枠は共有のレート上限があるため、全リクエストを直列にし、
ステップごとに決められた間隔を空ける。
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable

from tenor_collector.config import PACING_INTERVALS, PACING_JITTER

logger = logging.getLogger(__name__)


class Pacer:
    """ステップ名ごとの待機秒数を管理し、待機を行う.

    Args:
        intervals: ステップ名 -> 待機秒数
        jitter: 待機秒数に加える 0〜jitter 秒のランダム幅
        sleep: 待機関数（テストでは記録用の関数を渡す）
    """

    def __init__(
        self,
        intervals: dict[str, float] | None = None,
        jitter: float = PACING_JITTER,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.intervals = dict(PACING_INTERVALS if intervals is None else intervals)
        self.jitter = jitter
        self._sleep = sleep

    @classmethod
    def disabled(cls) -> Pacer:
        """待機しない Pacer."""
        return cls(intervals={}, jitter=0.0, sleep=lambda _: None)

    def interval(self, step: str) -> float:
        base = self.intervals.get(step, 0.0)
        if base > 0 and self.jitter > 0:
            base += random.uniform(0, self.jitter)
        return base

    def pause(self, step: str) -> float:
        """指定ステップの間隔だけ待機し、待機秒数を返す."""
        seconds = self.interval(step)
        if seconds > 0:
            logger.debug("待機: step=%s, %.2f 秒", step, seconds)
            self._sleep(seconds)
        return seconds
