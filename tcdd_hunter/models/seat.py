"""데이터 모델: 좌석 후보, 좌석 홀드(Allocation), 요청/결과"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class SeatCandidate:
    """좌석 지도에서 찾은 빈 좌석 하나"""

    car_id: int
    seat_number: str
    car_name: str
    wagon_label: str
    cabin_class_name: str
    item_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SeatRequest:
    """좌석 홀드 요청 (select-seat)"""

    train_car_id: int
    from_station_id: int
    to_station_id: int
    seat_number: str
    gender: str = "M"
    passenger_type_id: int = 0
    total_passenger_count: int = 1
    fare_family_id: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "trainCarId": self.train_car_id,
            "fromStationId": self.from_station_id,
            "toStationId": self.to_station_id,
            "gender": self.gender,
            "seatNumber": self.seat_number,
            "passengerTypeId": self.passenger_type_id,
            "totalPassengerCount": self.total_passenger_count,
            "fareFamilyId": self.fare_family_id,
        }


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """좌석 홀드 해제 요청 (release-seat)"""

    train_car_id: int
    allocation_id: str
    seat_number: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "trainCarId": self.train_car_id,
            "allocationId": self.allocation_id,
            "seatNumber": self.seat_number,
        }


@dataclass(frozen=True, slots=True)
class Allocation:
    """서버에 홀드된 좌석. 프로세스당 최대 1개."""

    train_name: str
    train_id: int
    departure_time: str
    arrival_time: str
    seat_number: str
    car_id: int
    car_name: str
    wagon_label: str
    cabin_class_name: str
    allocation_id: str
    hold_minutes: int = 10

    @property
    def hold_seconds(self) -> int:
        return self.hold_minutes * 60

    def release_request(self) -> ReleaseRequest:
        return ReleaseRequest(
            train_car_id=self.car_id,
            allocation_id=self.allocation_id,
            seat_number=self.seat_number,
        )

    def display(self) -> str:
        return (
            f"{self.train_name} {self.departure_time}→{self.arrival_time} "
            f"{self.wagon_label}. Vagon Koltuk {self.seat_number} "
            f"({self.cabin_class_name}, {self.hold_minutes} dk)"
        )


@dataclass(frozen=True, slots=True)
class AllocationOutcome:
    """좌석 홀드 시도 결과"""

    success: bool
    message: str
    allocation: Optional[Allocation] = None


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    """좌석 홀드 해제 결과"""

    success: bool
    message: str
