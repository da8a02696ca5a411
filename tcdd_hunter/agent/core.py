"""검색 루프 컨트롤러

상태 머신(IDLE → SEARCHING → STOPPED) 기반으로 주기적 가용성 조회,
결과 필터링, 좌석 발견 시 자동 홀드를 조율한다.
모든 사용자 표시는 SearchObserver를 통해서만 나간다.
"""

from __future__ import annotations

import logging
from datetime import datetime
from time import monotonic
from typing import Optional

from tcdd_hunter.agent.allocation import AllocationTracker
from tcdd_hunter.agent.metrics import SessionMetrics
from tcdd_hunter.agent.observer import NullObserver, SearchObserver
from tcdd_hunter.agent.state import SessionState, validate_transition
from tcdd_hunter.models.config import HunterConfig
from tcdd_hunter.models.events import StatusCategory
from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.models.train import FilterResult
from tcdd_hunter.skills.result_filter import ResultFilterSkill
from tcdd_hunter.skills.tcdd_client import BUSY, TCDDClient
from tcdd_hunter.skills.validation import ValidationSkill
from tcdd_hunter.utils.timer import RepeatingTimer

logger = logging.getLogger("tcdd.agent")

MSG_STARTED = "Arama başlatıldı..."
MSG_STOPPED = "Arama durduruldu."
MSG_CHECKING = "Kontrol ediliyor..."
MSG_NOT_FOUND = (
    "Belirtilen saat aralığında boş koltuk bulunamadı. Arama devam ediyor..."
)


def _now() -> str:
    return datetime.now().strftime("%H:%M:%S")


class SearchController:
    """TCDD 좌석 검색 루프"""

    __slots__ = (
        "_client", "_tracker", "_observer", "_config",
        "_filter", "_validator", "_metrics",
        "_state", "_criteria", "_timer", "_is_first_request",
        "_session_id", "_last_result",
    )

    def __init__(
        self,
        client: TCDDClient,
        tracker: AllocationTracker,
        observer: Optional[SearchObserver] = None,
        config: Optional[HunterConfig] = None,
        result_filter: Optional[ResultFilterSkill] = None,
        validator: Optional[ValidationSkill] = None,
    ) -> None:
        self._client = client
        self._tracker = tracker
        self._observer = observer or NullObserver()
        self._config = config or HunterConfig()
        self._filter = result_filter or ResultFilterSkill()
        self._validator = validator or ValidationSkill()
        self._metrics = SessionMetrics()
        self._state = SessionState.IDLE
        self._criteria: Optional[SearchCriteria] = None
        self._timer: Optional[RepeatingTimer] = None
        self._is_first_request = True
        self._session_id = 0
        self._last_result: Optional[FilterResult] = None

    # ── Properties ──

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_searching(self) -> bool:
        return self._state is SessionState.SEARCHING

    @property
    def criteria(self) -> Optional[SearchCriteria]:
        return self._criteria

    @property
    def metrics(self) -> SessionMetrics:
        return self._metrics

    @property
    def last_result(self) -> Optional[FilterResult]:
        return self._last_result

    @property
    def is_first_request(self) -> bool:
        return self._is_first_request

    @property
    def observer(self) -> SearchObserver:
        return self._observer

    @observer.setter
    def observer(self, observer: SearchObserver) -> None:
        self._observer = observer

    # ── State Machine ──

    def _transition(self, new_state: SessionState) -> bool:
        old = self._state
        if not validate_transition(old, new_state):
            logger.warning(
                "잘못된 상태 전이 시도: %s → %s", old.name, new_state.name,
            )
            return False
        self._state = new_state
        logger.info("[상태] %s → %s", old.name, new_state.name)
        return True

    def _halt(self) -> None:
        """타이머 취소 + STOPPED"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._transition(SessionState.STOPPED)

    def _is_current(self, session_id: int) -> bool:
        return (
            session_id == self._session_id
            and self._state is SessionState.SEARCHING
        )

    # ── Lifecycle ──

    def start(self, criteria: SearchCriteria) -> bool:
        """검색 시작. 이미 검색 중이면 아무것도 하지 않는다.

        첫 조회는 즉시(지연 없이) 실행되고, 이후 check_interval 주기로 반복된다.
        실행 중인 이벤트 루프 안에서 호출해야 한다.
        """
        if self._state is SessionState.SEARCHING:
            return False

        self._criteria = criteria
        self._is_first_request = True
        self._last_result = None
        self._tracker.clear()
        self._transition(SessionState.SEARCHING)
        self._session_id += 1
        self._metrics = SessionMetrics()

        self._observer.on_status_change(MSG_STARTED, StatusCategory.SEARCHING)
        self._observer.on_log(f"🔍 Arama başlatıldı: {criteria.summary()}")
        logger.info(
            "검색 시작: %s (간격=%.1fs, 지연=%.1f~%.1fs)",
            criteria.summary(), self._config.check_interval,
            self._config.min_pacing_delay, self._config.max_pacing_delay,
        )

        self._timer = RepeatingTimer(
            self._config.check_interval,
            self.poll,
            name=f"search-{self._session_id}",
        )
        self._timer.start(immediate=True)
        return True

    def stop(self) -> bool:
        """검색 중지. 좌석 홀드는 해제하지 않는다."""
        if self._state is not SessionState.SEARCHING:
            return False
        self._halt()
        self._observer.on_status_change(MSG_STOPPED, StatusCategory.WAITING)
        self._observer.on_log(f"⏹ Arama durduruldu ({_now()})")
        return True

    # ── Polling ──

    async def poll(self) -> None:
        """타이머 틱 1회: 조회 → 필터 → (발견 시) 중지 + 자동 홀드"""
        if self._state is not SessionState.SEARCHING or self._criteria is None:
            return
        if self._client.in_flight:
            self._metrics.record_skip()
            logger.debug("이전 요청 진행 중 - 틱 건너뜀")
            return

        session_id = self._session_id
        try:
            criteria = self._validator.validate(self._criteria)
        except ValueError as e:
            logger.warning("검색 조건 검증 실패: %s", e)
            self._halt()
            self._observer.on_status_change(f"❌ {e}", StatusCategory.ERROR)
            self._observer.on_log(f"⚠️ {e} ({_now()})")
            return

        self._observer.on_status_change(MSG_CHECKING, StatusCategory.SEARCHING)
        skip_delay = self._is_first_request
        self._is_first_request = False

        ts = monotonic()
        try:
            data = await self._client.check_availability(
                criteria, skip_delay=skip_delay,
            )
        except Exception as e:
            self._metrics.record_poll(False, (monotonic() - ts) * 1000)
            if self._is_current(session_id):
                self._report_error(e)
            return
        if data is BUSY:
            self._metrics.record_skip()
            return
        self._metrics.record_poll(True, (monotonic() - ts) * 1000)
        self._metrics.update_memory()

        if not self._is_current(session_id):
            logger.debug("중지/교체된 세션의 응답 폐기")
            return

        try:
            result = self._filter.filter(
                data,
                criteria.window_start,
                criteria.window_end,
                criteria.selected_classes,
            )
            self._last_result = result
            await self._handle_result(result, criteria, session_id)
        except Exception as e:
            self._report_error(e)

    def _report_error(self, error: Exception) -> None:
        logger.warning(
            "조회 실패: %s", error,
            exc_info=logger.isEnabledFor(logging.DEBUG),
        )
        self._observer.on_status_change(f"❌ Hata: {error}", StatusCategory.ERROR)
        self._observer.on_log(f"⚠️ Hata: {error} ({_now()})")

    async def _handle_result(
        self,
        result: FilterResult,
        criteria: SearchCriteria,
        session_id: int,
    ) -> None:
        if not result.found:
            self._observer.on_status_change(MSG_NOT_FOUND, StatusCategory.SEARCHING)
            self._observer.on_results_update(result.trains)
            return

        total = result.total_selected_seats
        if total <= 0:
            # 필터 단계 사이에 매진된 경우
            self._observer.on_status_change(
                f"{len(result.trains)} sefer bulundu ancak seçtiğiniz "
                f"sınıflarda koltuk TÜKENDİ. Arama devam ediyor...",
                StatusCategory.SEARCHING,
            )
            self._observer.on_results_update(result.trains)
            return

        self._halt()
        self._metrics.record_detection()
        logger.info("좌석 발견: %d석", total)
        self._observer.on_status_change(
            f"✅ YER BULUNDU! {total} yer mevcut", StatusCategory.FOUND,
        )
        self._observer.on_log(f"🎉 KOLTUK BULUNDU: {total} yer ({_now()})")
        self._observer.on_results_update(result.trains)

        if self._tracker.has_allocation:
            self._observer.on_log("ℹ️ Zaten tutulmuş bir koltuk var.")
            return

        target = result.available_trains[0]
        self._observer.on_log(f"🎫 Otomatik koltuk tutuluyor... ({target.name})")
        outcome = await self._tracker.allocate(target, criteria)
        if session_id != self._session_id:
            logger.info("교체된 세션의 좌석 홀드 결과: %s", outcome.message)
            return
        self._metrics.record_allocation(outcome.success)
        if outcome.success:
            self._observer.on_log(f"✅ BAŞARILI: {outcome.message}")
        else:
            self._observer.on_log(f"⚠️ Koltuk tutulamadı: {outcome.message}")
