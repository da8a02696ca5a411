"""예약 작업 유틸리티

- RepeatingTimer: 고정 주기로 비동기 콜백을 실행하는 반복 타이머
- Countdown: 1초 단위 카운트다운 (좌석 홀드 만료 표시용)

두 타이머 모두 실행 중인 이벤트 루프가 필요하다.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger("tcdd.utils.timer")


class RepeatingTimer:
    """고정 주기 반복 타이머

    각 틱은 독립된 태스크로 실행되므로 틱이 오래 걸려도 다음 틱은
    제 시간에 발사된다. cancel()이 True를 반환한 뒤에는 새 틱이
    발사되지 않는다 (이미 실행 중인 틱 태스크는 끝까지 진행).
    """

    __slots__ = ("_interval", "_callback", "_name", "_runner", "_ticks", "_active")

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[None]],
        name: str = "timer",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval은 0보다 커야 합니다")
        self._interval = interval
        self._callback = callback
        self._name = name
        self._runner: Optional[asyncio.Task[None]] = None
        self._ticks: set[asyncio.Task[None]] = set()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def pending_ticks(self) -> int:
        return len(self._ticks)

    def start(self, immediate: bool = True) -> None:
        """타이머 시작. immediate=True면 첫 틱을 바로 발사."""
        if self._active:
            return
        loop = asyncio.get_running_loop()
        self._active = True
        self._runner = loop.create_task(self._run(immediate), name=self._name)

    def cancel(self) -> bool:
        """타이머 중지. 실제로 중지했으면 True."""
        if not self._active:
            return False
        self._active = False
        if self._runner is not None and self._runner is not asyncio.current_task():
            self._runner.cancel()
        self._runner = None
        return True

    async def _run(self, immediate: bool) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time() if immediate else loop.time() + self._interval
        while True:
            delay = next_at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            if not self._active:
                return
            self._spawn_tick()
            next_at += self._interval
            # 루프가 밀렸으면 놓친 틱은 건너뛴다
            now = loop.time()
            while next_at <= now:
                next_at += self._interval

    def _spawn_tick(self) -> None:
        task = asyncio.ensure_future(self._callback())
        self._ticks.add(task)
        task.add_done_callback(self._on_tick_done)

    def _on_tick_done(self, task: asyncio.Future[None]) -> None:
        self._ticks.discard(task)  # type: ignore[arg-type]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "%s 틱 실행 중 예외: %s", self._name, exc, exc_info=exc,
            )


class Countdown:
    """초 단위 카운트다운

    시작 시 on_tick(전체 초)을 호출하고, 1초마다 남은 초로 on_tick을,
    0에 도달하면 on_expire를 호출한다. 콜백 안에서 cancel()해도 안전하다.
    """

    __slots__ = (
        "_remaining", "_tick", "_on_tick", "_on_expire",
        "_task", "_cancelled",
    )

    def __init__(
        self,
        seconds: int,
        on_tick: Optional[Callable[[int], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
        tick: float = 1.0,
    ) -> None:
        self._remaining = max(int(seconds), 0)
        self._tick = tick
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._task: Optional[asyncio.Task[None]] = None
        self._cancelled = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def active(self) -> bool:
        return (
            self._task is not None
            and not self._task.done()
            and not self._cancelled
        )

    def start(self) -> None:
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name="countdown")

    def cancel(self) -> bool:
        """카운트다운 중지. 실제로 중지했으면 True."""
        if not self.active:
            return False
        self._cancelled = True
        if self._task is not asyncio.current_task():
            self._task.cancel()  # type: ignore[union-attr]
        return True

    async def _run(self) -> None:
        self._emit_tick()
        while self._remaining > 0:
            await asyncio.sleep(self._tick)
            if self._cancelled:
                return
            self._remaining -= 1
            self._emit_tick()
            if self._cancelled:
                return
        if self._on_expire is not None:
            self._on_expire()

    def _emit_tick(self) -> None:
        if self._on_tick is not None:
            self._on_tick(self._remaining)


def format_remaining(seconds: int) -> str:
    """남은 초 → 'MM:SS'"""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"
