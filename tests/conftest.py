"""pytest 공통 픽스처

모든 테스트에서 공유하는 샘플 조건, 응답 팩토리, 기록용 옵저버를 제공한다.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional, Sequence

import pytest

from tcdd_hunter.agent.observer import SearchObserver
from tcdd_hunter.models.config import HunterConfig
from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.models.seat import Allocation
from tcdd_hunter.models.train import TrainCandidate
from tcdd_hunter.skills.parser import TURKEY_TZ

KONYA_ID = 796
ANKARA_GAR_ID = 98


def epoch_ms(hhmm: str, day: date = date(2026, 3, 1)) -> int:
    """터키 현지 'HH:MM' → epoch 밀리초"""
    hour, minute = (int(p) for p in hhmm.split(":"))
    dt = datetime(day.year, day.month, day.day, hour, minute, tzinfo=TURKEY_TZ)
    return int(dt.timestamp() * 1000)


class RecordingObserver(SearchObserver):
    """호출 내역을 기록하는 옵저버"""

    def __init__(self) -> None:
        self.statuses: list[tuple[str, str]] = []
        self.logs: list[str] = []
        self.results: list[list[TrainCandidate]] = []
        self.established: list[Allocation] = []
        self.cleared = 0

    def on_status_change(self, message: str, category: str) -> None:
        self.statuses.append((message, category))

    def on_log(self, message: str) -> None:
        self.logs.append(message)

    def on_results_update(self, candidates: Sequence[TrainCandidate]) -> None:
        self.results.append(list(candidates))

    def on_allocation_established(self, allocation: Allocation) -> None:
        self.established.append(allocation)

    def on_allocation_cleared(self) -> None:
        self.cleared += 1

    @property
    def categories(self) -> list[str]:
        return [c for _, c in self.statuses]


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def sample_criteria() -> SearchCriteria:
    """표준 테스트용 조건 (Konya → Ankara Gar, 내일, 08:00~12:00, ECONOMY)"""
    return SearchCriteria(
        departure_station_id=KONYA_ID,
        departure_station_name="Konya",
        arrival_station_id=ANKARA_GAR_ID,
        arrival_station_name="Ankara Gar",
        departure_date=date.today() + timedelta(days=1),
        time_start=time(8, 0),
        time_end=time(12, 0),
        selected_classes=("ECONOMY",),
    )


@pytest.fixture
def fast_config() -> HunterConfig:
    """테스트용 빠른 설정 (간격 0.05초, 지연 없음, 알림 없음)"""
    return HunterConfig(
        check_interval=0.05,
        min_pacing_delay=0.0,
        max_pacing_delay=0.0,
        notification_methods=[],
        webhook_url="",
        auth_token="test-token",
    )


TrainFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def make_train() -> TrainFactory:
    """가용성 응답의 train 항목 팩토리

    cabins: [(cabinClass.id, availabilityCount), ...]
    """
    def factory(
        departure: str = "09:15",
        arrival: str = "11:05",
        cabins: Sequence[tuple[int, int]] = ((2, 3),),
        train_id: int = 1001,
        name: Optional[str] = "YHT 81002",
    ) -> dict[str, Any]:
        return {
            "id": train_id,
            "commercialName": name,
            "name": "81002",
            "segments": [
                {"departureTime": epoch_ms(departure), "arrivalTime": epoch_ms("10:00")},
                {"departureTime": epoch_ms("10:05"), "arrivalTime": epoch_ms(arrival)},
            ],
            "cabinClassAvailabilities": [
                {
                    "cabinClass": {"id": class_id},
                    "availabilityCount": count,
                    "minPrice": {"parsedValue": 450.0},
                }
                for class_id, count in cabins
            ],
        }
    return factory


@pytest.fixture
def make_response() -> Callable[..., dict[str, Any]]:
    """trainLegs[0].trainAvailabilities[0].trains 로 감싼 응답 팩토리"""
    def factory(*trains: dict[str, Any]) -> dict[str, Any]:
        return {"trainLegs": [{"trainAvailabilities": [{"trains": list(trains)}]}]}
    return factory


@pytest.fixture
def seat_map_response() -> dict[str, Any]:
    """차량 1대: 1A(ECONOMY, 점유), WC, 1B(BUSINESS), 2A(ECONOMY, 빈자리)"""
    return {
        "seatMaps": [
            {
                "trainCarId": 5501,
                "allocationSeats": [{"seatNumber": "1A"}],
                "seatMapTemplate": {
                    "description": "YHT CAF 3. VAGON EKONOMİ",
                    "name": "CAF EKO",
                    "car": {"name": "C3"},
                    "seatMaps": [
                        {"seatNumber": "1A", "item": {"saleable": True, "cabinClassId": 2, "id": 1}},
                        {"seatNumber": None, "item": {"saleable": False, "cabinClassId": None, "id": 2}},
                        {"seatNumber": "1B", "item": {"saleable": True, "cabinClassId": 1, "id": 3}},
                        {"seatNumber": "2A", "item": {"saleable": True, "cabinClassId": 2, "id": 4}},
                    ],
                },
            },
        ],
    }
