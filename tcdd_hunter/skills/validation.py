"""입력 검증 스킬

비즈니스 규칙에 따라 입력값을 검증하고 SearchCriteria를 생성한다.
검색 중에는 매 폴링마다 validate()로 조건을 다시 확인한다.
"""

from __future__ import annotations

from datetime import date, time
from typing import Any, Callable, Optional

from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.skills.station_data import Station


class ValidationSkill:
    """입력 검증 스킬"""

    __slots__ = ("_today",)

    def __init__(self, today: Optional[Callable[[], date]] = None) -> None:
        self._today = today or date.today

    def validate_query(self, data: dict[str, Any]) -> SearchCriteria:
        """전체 검증 후 불변 SearchCriteria 반환. 실패 시 ValueError."""
        dep: Optional[Station] = data.get("departure")
        arr: Optional[Station] = data.get("arrival")
        dep_date: Optional[date] = data.get("date")
        time_start: Optional[time] = data.get("time_start")
        time_end: Optional[time] = data.get("time_end")
        classes = tuple(data.get("classes") or ())

        # 필수 필드 체크
        if dep is None:
            raise ValueError("Kalkış istasyonu seçilmedi")
        if arr is None:
            raise ValueError("Varış istasyonu seçilmedi")
        if dep_date is None:
            raise ValueError("Tarih seçilmedi")
        if time_start is None or time_end is None:
            raise ValueError("Saat aralığı seçilmedi")

        if dep.id == arr.id:
            raise ValueError("Kalkış ve varış istasyonu aynı olamaz")
        self.validate_date(dep_date)
        self.validate_time_range(time_start, time_end)
        if not classes:
            raise ValueError("En az bir sınıf seçmelisiniz")

        return SearchCriteria(
            departure_station_id=dep.id,
            departure_station_name=dep.name,
            arrival_station_id=arr.id,
            arrival_station_name=arr.name,
            departure_date=dep_date,
            time_start=time_start,
            time_end=time_end,
            selected_classes=classes,
        )

    def validate(self, criteria: SearchCriteria) -> SearchCriteria:
        """실행 중 재검증 (날짜가 지났을 수 있다)"""
        self.validate_date(criteria.departure_date)
        return criteria

    def validate_date(self, d: date) -> None:
        """과거 날짜 검증 (오늘은 허용)"""
        if d < self._today():
            raise ValueError("Geçmiş bir tarih seçemezsiniz")

    @staticmethod
    def validate_time_range(start: time, end: time) -> None:
        """시작 <= 종료 검증 (같은 시각 허용)"""
        if start > end:
            raise ValueError("Başlangıç saati, bitiş saatinden önce olmalıdır")
