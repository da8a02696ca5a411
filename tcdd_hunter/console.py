"""콘솔 표시 계층

SearchObserver 구현. 상태/로그/결과를 터미널에 출력하고,
좌석 발견·홀드 시 알림을 보내며, 홀드 만료 카운트다운을 관리한다.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Sequence, TextIO

from tcdd_hunter.agent.allocation import AllocationTracker
from tcdd_hunter.agent.observer import SearchObserver
from tcdd_hunter.models.events import StatusCategory
from tcdd_hunter.models.seat import Allocation
from tcdd_hunter.models.train import FilterResult, TrainCandidate
from tcdd_hunter.skills.notifier import NotifierSkill
from tcdd_hunter.utils.timer import Countdown, format_remaining

logger = logging.getLogger("tcdd.console")

MSG_EXPIRED = "⚠️ Koltuk tutma süresi doldu."

_ICONS = {
    StatusCategory.WAITING: "⏸",
    StatusCategory.SEARCHING: "🔍",
    StatusCategory.FOUND: "✅",
    StatusCategory.ERROR: "❌",
}


class ConsoleObserver(SearchObserver):
    """터미널 출력 옵저버"""

    def __init__(
        self,
        notifier: Optional[NotifierSkill] = None,
        stream: Optional[TextIO] = None,
        max_log_entries: int = 100,
        countdown_tick: float = 1.0,
    ) -> None:
        self._notifier = notifier
        self._stream = stream or sys.stdout
        self._max_log_entries = max_log_entries
        self._countdown_tick = countdown_tick
        self._tracker: Optional[AllocationTracker] = None
        self._countdown: Optional[Countdown] = None
        self._log_buffer: list[str] = []
        self._last_status: tuple[str, str] = ("", StatusCategory.WAITING)
        self._alert_pending = False
        self._tasks: set[asyncio.Task[object]] = set()

    def attach(self, tracker: AllocationTracker) -> None:
        """만료 시 clear()를 호출할 트래커 연결"""
        self._tracker = tracker

    # ── Properties ──

    @property
    def last_status(self) -> tuple[str, str]:
        return self._last_status

    @property
    def log_entries(self) -> list[str]:
        return list(self._log_buffer)

    @property
    def countdown(self) -> Optional[Countdown]:
        return self._countdown

    # ── SearchObserver ──

    def on_status_change(self, message: str, category: str) -> None:
        if (message, category) == self._last_status:
            return
        self._last_status = (message, category)
        self._print(f"  {_ICONS.get(category, '•')} {message}")
        if category == StatusCategory.FOUND:
            self._alert_pending = True

    def on_log(self, message: str) -> None:
        self._log_buffer.append(message)
        if len(self._log_buffer) > self._max_log_entries:
            half = self._max_log_entries // 2
            self._log_buffer = self._log_buffer[half:]
        self._print(f"    {message}")

    def on_results_update(self, candidates: Sequence[TrainCandidate]) -> None:
        for train in candidates:
            self._print(f"      - {train.display()}")

        if self._alert_pending:
            self._alert_pending = False
            if self._notifier is not None:
                result = FilterResult(
                    found=True,
                    trains=tuple(candidates),
                    total_selected_seats=sum(t.selected_seats for t in candidates),
                )
                self._spawn(self._notifier.send_found(result))

    def on_allocation_established(self, allocation: Allocation) -> None:
        self._print("")
        self._print("  🎫 KOLTUK TUTULDU")
        self._print(f"     Tren    : {allocation.train_name} "
                    f"({allocation.departure_time}→{allocation.arrival_time})")
        self._print(f"     Vagon   : {allocation.wagon_label} ({allocation.car_name})")
        self._print(f"     Koltuk  : {allocation.seat_number} "
                    f"- {allocation.cabin_class_name}")
        self._print(f"     Süre    : {allocation.hold_minutes} dakika")
        self._print("")

        self._cancel_countdown()
        self._countdown = Countdown(
            allocation.hold_seconds,
            on_tick=self._on_countdown_tick,
            on_expire=self._on_countdown_expire,
            tick=self._countdown_tick,
        )
        self._countdown.start()

        if self._notifier is not None:
            self._spawn(self._notifier.send_allocation(allocation))

    def on_allocation_cleared(self) -> None:
        self._cancel_countdown()
        self._print("  🔓 Tutulan koltuk bırakıldı")

    # ── Countdown ──

    def _on_countdown_tick(self, remaining: int) -> None:
        # 매 분, 그리고 마지막 10초만 표시
        if remaining % 60 == 0 or remaining <= 10:
            self._print(f"     ⏳ Kalan süre: {format_remaining(remaining)}")

    def _on_countdown_expire(self) -> None:
        self._countdown = None
        if self._tracker is not None:
            self._tracker.clear()
        self.on_log(MSG_EXPIRED)

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # ── Internals ──

    def _print(self, line: str) -> None:
        print(line, file=self._stream, flush=True)

    def _spawn(self, coro: object) -> None:
        task = asyncio.ensure_future(coro)  # type: ignore[arg-type]
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[object]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("알림 발송 실패: %s", task.exception())

    async def drain(self) -> None:
        """진행 중인 알림 발송 대기"""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def close(self) -> None:
        self._cancel_countdown()
