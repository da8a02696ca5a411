"""요청 간격 조절 스킬

요청 직전에 균등 분포 랜덤 지연을 넣어 봇 탐지를 피한다.
"""

from __future__ import annotations

import asyncio
import random


class PacingSkill:
    """[min_delay, max_delay] 균등 분포 지연"""

    __slots__ = ("_min_delay", "_max_delay")

    def __init__(self, min_delay: float = 3.0, max_delay: float = 8.0) -> None:
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("지연 범위가 올바르지 않습니다")
        self._min_delay = min_delay
        self._max_delay = max_delay

    @property
    def bounds(self) -> tuple[float, float]:
        return self._min_delay, self._max_delay

    def next_delay(self) -> float:
        """다음 지연(초) 계산"""
        return random.uniform(self._min_delay, self._max_delay)

    async def wait(self) -> float:
        """랜덤 지연만큼 대기하고 실제 지연을 반환"""
        delay = self.next_delay()
        await asyncio.sleep(delay)
        return delay
