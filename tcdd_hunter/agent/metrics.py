"""검색 세션 런타임 메트릭 수집"""

from __future__ import annotations

from time import monotonic

import psutil


class SessionMetrics:
    """런타임 메트릭 수집"""

    __slots__ = (
        "total_polls", "successful_polls", "failed_polls", "skipped_ticks",
        "seats_detected_count", "allocations_made", "allocations_failed",
        "_response_times", "peak_memory_mb", "_start_time",
    )

    def __init__(self) -> None:
        self.total_polls: int = 0
        self.successful_polls: int = 0
        self.failed_polls: int = 0
        self.skipped_ticks: int = 0
        self.seats_detected_count: int = 0
        self.allocations_made: int = 0
        self.allocations_failed: int = 0
        self._response_times: list[float] = []
        self.peak_memory_mb: float = 0.0
        self._start_time: float = monotonic()

    @property
    def avg_response_time_ms(self) -> float:
        if not self._response_times:
            return 0.0
        return sum(self._response_times) / len(self._response_times)

    @property
    def session_duration_s(self) -> float:
        return monotonic() - self._start_time

    def record_poll(self, success: bool, elapsed_ms: float) -> None:
        self.total_polls += 1
        if success:
            self.successful_polls += 1
        else:
            self.failed_polls += 1
        self._response_times.append(elapsed_ms)
        # 최근 100개만 유지
        if len(self._response_times) > 100:
            self._response_times = self._response_times[-50:]

    def record_skip(self) -> None:
        self.skipped_ticks += 1

    def record_detection(self) -> None:
        self.seats_detected_count += 1

    def record_allocation(self, success: bool) -> None:
        if success:
            self.allocations_made += 1
        else:
            self.allocations_failed += 1

    def update_memory(self) -> float:
        mem_mb = psutil.Process().memory_info().rss / (1024 * 1024)
        self.peak_memory_mb = max(self.peak_memory_mb, mem_mb)
        return mem_mb

    def summary(self) -> str:
        duration = self.session_duration_s
        success_rate = (
            self.successful_polls / max(self.total_polls, 1) * 100
        )
        return (
            f"=== 세션 요약 ===\n"
            f"  경과 시간: {duration / 60:.1f}분\n"
            f"  총 조회: {self.total_polls}회 "
            f"(성공률: {success_rate:.1f}%, 건너뛴 틱: {self.skipped_ticks})\n"
            f"  좌석 감지: {self.seats_detected_count}회\n"
            f"  좌석 홀드: 성공 {self.allocations_made} / "
            f"실패 {self.allocations_failed}\n"
            f"  평균 응답: {self.avg_response_time_ms:.0f}ms\n"
            f"  최대 메모리: {self.peak_memory_mb:.1f}MB"
        )
