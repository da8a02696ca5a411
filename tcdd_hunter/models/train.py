"""데이터 모델: 열차 후보, 객실 가용성, 필터 결과"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class CabinAvailability:
    """열차 한 편의 객실 등급별 가용성"""

    class_key: str
    class_name: str
    availability: int
    price: Optional[float]
    is_selected: bool

    def display(self) -> str:
        price = f" {self.price:.2f} TL" if self.price is not None else ""
        mark = "*" if self.is_selected else " "
        return f"{mark}{self.class_name}: {self.availability}{price}"


@dataclass(frozen=True, slots=True)
class TrainCandidate:
    """시간 범위를 통과한 열차 후보 (매 폴링마다 새로 생성)"""

    train_id: int
    name: str
    departure_time: str
    arrival_time: str
    cabins: tuple[CabinAvailability, ...]

    @property
    def selected_seats(self) -> int:
        return sum(c.availability for c in self.cabins if c.is_selected)

    @property
    def has_selected_availability(self) -> bool:
        return any(c.is_selected and c.availability > 0 for c in self.cabins)

    def display(self) -> str:
        cabins = " / ".join(c.display() for c in self.cabins)
        return (
            f"{self.name} {self.departure_time}→{self.arrival_time} "
            f"({cabins})"
        )


@dataclass(frozen=True, slots=True)
class FilterResult:
    """가용성 응답 필터링 결과"""

    found: bool
    trains: tuple[TrainCandidate, ...]
    total_selected_seats: int

    @property
    def available_trains(self) -> tuple[TrainCandidate, ...]:
        return tuple(t for t in self.trains if t.has_selected_availability)


EMPTY_RESULT = FilterResult(found=False, trains=(), total_selected_seats=0)
