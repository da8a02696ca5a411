"""좌석 홀드 트래커

프로세스당 최대 하나의 좌석 홀드(Allocation)를 소유한다.
홀드 만료 카운트다운은 표시 계층이 담당하며, 만료 시 clear()를 호출한다.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tcdd_hunter.agent.observer import NullObserver, SearchObserver
from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.models.seat import (
    Allocation, AllocationOutcome, ReleaseOutcome, SeatRequest,
)
from tcdd_hunter.models.train import TrainCandidate
from tcdd_hunter.skills.seat_locator import SeatLocatorSkill
from tcdd_hunter.skills.tcdd_client import TCDDClient

logger = logging.getLogger("tcdd.agent.allocation")

MSG_ALREADY_HELD = "Zaten tutulmuş bir koltuk var"
MSG_IN_PROGRESS = "Koltuk tutma işlemi zaten devam ediyor"
MSG_NO_SEAT_MAP = "Koltuk haritası alınamadı"
MSG_NO_SEAT = "Seçilen kategorilerde boş koltuk bulunamadı"
MSG_ALLOCATE_FAILED = "Koltuk tutma işlemi başarısız oldu"
MSG_ALLOCATED = "Koltuk başarıyla tutuldu"
MSG_NOT_HELD = "Tutulmuş koltuk bulunamadı"
MSG_RELEASE_BUSY = "Başka bir istek devam ediyor, lütfen tekrar deneyin"
MSG_RELEASED = "Koltuk başarıyla serbest bırakıldı"
MSG_STALE = "Önceki aramanın koltuk tutma sonucu yok sayıldı"


class AllocationTracker:
    """좌석 홀드 수명 관리"""

    __slots__ = (
        "_client", "_observer", "_locator",
        "_allocation", "_allocating", "_default_hold_minutes", "_generation",
    )

    def __init__(
        self,
        client: TCDDClient,
        observer: Optional[SearchObserver] = None,
        locator: Optional[SeatLocatorSkill] = None,
        default_hold_minutes: int = 10,
    ) -> None:
        self._client = client
        self._observer = observer or NullObserver()
        self._locator = locator or SeatLocatorSkill()
        self._allocation: Optional[Allocation] = None
        self._allocating = False
        self._default_hold_minutes = default_hold_minutes
        # clear()마다 증가. 진행 중이던 홀드 결과가 이전 세대면 폐기한다
        self._generation = 0

    # ── Properties ──

    @property
    def observer(self) -> SearchObserver:
        return self._observer

    @observer.setter
    def observer(self, observer: SearchObserver) -> None:
        self._observer = observer

    @property
    def allocation(self) -> Optional[Allocation]:
        return self._allocation

    @property
    def has_allocation(self) -> bool:
        return self._allocation is not None

    @property
    def allocating(self) -> bool:
        return self._allocating

    # ── Operations ──

    async def allocate(
        self,
        train: TrainCandidate,
        criteria: SearchCriteria,
    ) -> AllocationOutcome:
        """열차의 첫 빈 좌석을 홀드. 실패는 예외 대신 결과로 반환."""
        # 확인과 선점 사이에 await가 없어야 한다
        if self._allocation is not None:
            return AllocationOutcome(False, MSG_ALREADY_HELD)
        if self._allocating:
            return AllocationOutcome(False, MSG_IN_PROGRESS)
        self._allocating = True
        generation = self._generation
        try:
            return await self._allocate(train, criteria, generation)
        except Exception as e:
            logger.exception("좌석 홀드 중 예외 (train=%s)", train.train_id)
            return AllocationOutcome(False, f"Hata: {e}")
        finally:
            self._allocating = False

    async def _allocate(
        self,
        train: TrainCandidate,
        criteria: SearchCriteria,
        generation: int,
    ) -> AllocationOutcome:
        seat_map = await self._client.check_seat_map(
            train.train_id,
            criteria.departure_station_id,
            criteria.arrival_station_id,
        )
        if not seat_map or not seat_map.get("seatMaps"):
            return AllocationOutcome(False, MSG_NO_SEAT_MAP)

        seat = self._locator.locate(seat_map["seatMaps"], criteria.selected_classes)
        if seat is None:
            return AllocationOutcome(False, MSG_NO_SEAT)
        logger.info(
            "빈 좌석 발견: %s %s. vagon %s", train.name, seat.wagon_label,
            seat.seat_number,
        )

        result = await self._client.allocate_seat(SeatRequest(
            train_car_id=seat.car_id,
            from_station_id=criteria.departure_station_id,
            to_station_id=criteria.arrival_station_id,
            seat_number=seat.seat_number,
        ))
        if not result or not result.get("allocationId"):
            return AllocationOutcome(False, MSG_ALLOCATE_FAILED)
        if generation != self._generation:
            logger.warning(
                "이전 세션의 좌석 홀드 결과 폐기: seat=%s, allocation=%s",
                seat.seat_number, result["allocationId"],
            )
            return AllocationOutcome(False, MSG_STALE)

        allocation = Allocation(
            train_name=train.name,
            train_id=train.train_id,
            departure_time=train.departure_time,
            arrival_time=train.arrival_time,
            seat_number=seat.seat_number,
            car_id=seat.car_id,
            car_name=seat.car_name,
            wagon_label=seat.wagon_label,
            cabin_class_name=seat.cabin_class_name,
            allocation_id=result["allocationId"],
            hold_minutes=self._hold_minutes(result.get("lockFor")),
        )
        self._allocation = allocation
        logger.info(
            "좌석 홀드 성공: %s (allocation=%s, %d분)",
            allocation.seat_number, allocation.allocation_id,
            allocation.hold_minutes,
        )
        self._observer.on_allocation_established(allocation)
        return AllocationOutcome(True, MSG_ALLOCATED, allocation)

    async def release(self) -> ReleaseOutcome:
        """서버에 홀드 해제 요청. 전송 실패(TransportError)는 호출자에게 전파."""
        allocation = self._allocation
        if allocation is None:
            return ReleaseOutcome(False, MSG_NOT_HELD)

        result = await self._client.deallocate_seat(allocation.release_request())
        if not result:
            return ReleaseOutcome(False, MSG_RELEASE_BUSY)

        if self._allocation is allocation:
            self._allocation = None
            self._observer.on_allocation_cleared()
        logger.info("좌석 해제 완료: %s", allocation.seat_number)
        return ReleaseOutcome(True, MSG_RELEASED)

    def clear(self) -> Optional[Allocation]:
        """네트워크 호출 없이 홀드 폐기 (새 세션 시작, 만료)"""
        self._generation += 1
        allocation, self._allocation = self._allocation, None
        if allocation is not None:
            logger.info("좌석 홀드 폐기: %s", allocation.seat_number)
            self._observer.on_allocation_cleared()
        return allocation

    def _hold_minutes(self, lock_for: Any) -> int:
        if isinstance(lock_for, (int, float)) and not isinstance(lock_for, bool):
            if lock_for > 0:
                return int(lock_for)
        return self._default_hold_minutes
