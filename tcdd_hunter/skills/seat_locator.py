"""좌석 탐색 스킬

좌석 지도 응답에서 선택 객실 등급의 빈 좌석 하나를 고른다.
서버가 준 순서(차량 → 좌석 템플릿)를 그대로 따르며 첫 번째 일치를 반환한다.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from tcdd_hunter.models.seat import SeatCandidate
from tcdd_hunter.skills.cabin_classes import UNKNOWN_CLASS_NAME, by_id, ids_for

# 예: "YHT CAF 1. VAGON BUSINESS", "CAF 2.VAGON ENGELLİ"
_WAGON_RE = re.compile(r"(\d+)\s*[.\s]*VAGON", re.IGNORECASE)

UNKNOWN_WAGON = "?"


class SeatLocatorSkill:
    """좌석 지도 → SeatCandidate"""

    def locate(
        self,
        seat_maps: Any,
        selected_classes: Sequence[str],
    ) -> Optional[SeatCandidate]:
        """첫 번째 빈 좌석. 없으면 None (오류 아님)."""
        if not isinstance(seat_maps, list):
            return None
        selected_ids = ids_for(selected_classes)

        for car in seat_maps:
            if not isinstance(car, dict):
                continue
            template = car.get("seatMapTemplate")
            if not isinstance(template, dict):
                continue
            items = template.get("seatMaps")
            if not isinstance(items, list):
                continue

            occupied = _occupied_seats(car.get("allocationSeats"))
            for seat in items:
                if not isinstance(seat, dict):
                    continue
                item = seat.get("item")
                if not isinstance(item, dict) or not item.get("saleable"):
                    continue
                if item.get("cabinClassId") not in selected_ids:
                    continue
                number = seat.get("seatNumber")
                if not number or number in occupied:
                    continue

                cabin = by_id(item.get("cabinClassId"))
                return SeatCandidate(
                    car_id=car.get("trainCarId"),
                    seat_number=number,
                    car_name=_car_name(template),
                    wagon_label=wagon_label(template),
                    cabin_class_name=(
                        cabin.display_name if cabin else UNKNOWN_CLASS_NAME
                    ),
                    item_id=item.get("id"),
                )
        return None


def _occupied_seats(allocations: Any) -> frozenset[str]:
    if not isinstance(allocations, list):
        return frozenset()
    return frozenset(
        a["seatNumber"] for a in allocations
        if isinstance(a, dict) and a.get("seatNumber")
    )


def _car_name(template: dict[str, Any]) -> str:
    car = template.get("car")
    if isinstance(car, dict) and car.get("name"):
        return str(car["name"])
    return str(template.get("name") or "")


def wagon_label(template: dict[str, Any]) -> str:
    """차량 설명/이름에서 'N. VAGON' 의 번호 추출"""
    text = template.get("description") or template.get("name") or ""
    match = _WAGON_RE.search(str(text))
    return match.group(1) if match else UNKNOWN_WAGON
