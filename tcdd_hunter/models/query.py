"""데이터 모델: 검색 조건

모든 모델은 frozen=True + slots=True로 불변성과 메모리 효율을 보장한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from tcdd_hunter.skills.cabin_classes import CABIN_CLASSES


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """불변 검색 조건 객체"""

    departure_station_id: int
    departure_station_name: str
    arrival_station_id: int
    arrival_station_name: str
    departure_date: date
    time_start: time
    time_end: time
    selected_classes: tuple[str, ...] = ("ECONOMY",)

    def __post_init__(self) -> None:
        if self.departure_station_id == self.arrival_station_id:
            raise ValueError("Kalkış ve varış istasyonu aynı olamaz")
        if self.time_start > self.time_end:
            raise ValueError("Başlangıç saati, bitiş saatinden önce olmalıdır")
        if not self.selected_classes:
            raise ValueError("En az bir sınıf seçmelisiniz")
        unknown = [k for k in self.selected_classes if k not in CABIN_CLASSES]
        if unknown:
            raise ValueError(f"Bilinmeyen sınıf: {', '.join(unknown)}")

    @property
    def window_start(self) -> str:
        return f"{self.time_start:%H:%M}"

    @property
    def window_end(self) -> str:
        return f"{self.time_end:%H:%M}"

    def summary(self) -> str:
        return (
            f"{self.departure_station_name}→{self.arrival_station_name} "
            f"{self.departure_date:%d.%m.%Y} "
            f"{self.window_start}~{self.window_end} "
            f"[{', '.join(self.selected_classes)}]"
        )
