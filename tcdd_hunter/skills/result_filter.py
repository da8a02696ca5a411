"""가용성 응답 필터 스킬

trainLegs[0].trainAvailabilities[*].trains[*] 구조를 단계별로 따라가며
시간 범위와 선택 객실 등급에 맞는 열차 후보를 만든다.
어느 단계든 필드가 없거나 타입이 맞지 않으면 "후보 없음"으로 처리한다.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Optional, Sequence

from tcdd_hunter.models.train import (
    EMPTY_RESULT, CabinAvailability, FilterResult, TrainCandidate,
)
from tcdd_hunter.skills.cabin_classes import by_id
from tcdd_hunter.skills.parser import format_time, is_in_time_range

logger = logging.getLogger("tcdd.skill.result_filter")


class ResultFilterSkill:
    """가용성 응답 → FilterResult"""

    def filter(
        self,
        raw: Any,
        time_start: str,
        time_end: str,
        selected_classes: Sequence[str],
    ) -> FilterResult:
        selected = frozenset(selected_classes)
        trains: list[TrainCandidate] = []
        found = False
        total = 0

        for train in _iter_trains(raw):
            candidate = _build_candidate(train, time_start, time_end, selected)
            if candidate is None:
                continue
            if not any(c.is_selected for c in candidate.cabins):
                continue
            trains.append(candidate)
            total += candidate.selected_seats
            if candidate.has_selected_availability:
                found = True

        if not trains:
            return EMPTY_RESULT
        return FilterResult(
            found=found,
            trains=tuple(trains),
            total_selected_seats=total,
        )


# ── 응답 단계별 추출 ──

def _as_dict(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _first_leg(raw: Any) -> Optional[dict[str, Any]]:
    data = _as_dict(raw)
    if data is None:
        return None
    legs = _as_list(data.get("trainLegs"))
    return _as_dict(legs[0]) if legs else None


def _iter_trains(raw: Any) -> Iterator[dict[str, Any]]:
    leg = _first_leg(raw)
    if leg is None:
        return
    for group in _as_list(leg.get("trainAvailabilities")):
        group = _as_dict(group)
        if group is None:
            continue
        for train in _as_list(group.get("trains")):
            train = _as_dict(train)
            if train is not None:
                yield train


def _segment_time(segment: Any, key: str) -> Optional[str]:
    seg = _as_dict(segment)
    if seg is None:
        return None
    value = seg.get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    return format_time(value)


def _build_candidate(
    train: dict[str, Any],
    time_start: str,
    time_end: str,
    selected: frozenset[str],
) -> Optional[TrainCandidate]:
    train_id = train.get("id")
    if not _is_int(train_id):
        return None
    segments = _as_list(train.get("segments"))
    if not segments:
        return None

    departure = _segment_time(segments[0], "departureTime")
    if departure is None or not is_in_time_range(departure, time_start, time_end):
        return None
    arrival = _segment_time(segments[-1], "arrivalTime") or "--:--"

    cabins = tuple(_iter_cabins(train.get("cabinClassAvailabilities"), selected))
    if not cabins:
        return None

    return TrainCandidate(
        train_id=train_id,
        name=train.get("commercialName") or train.get("name") or "",
        departure_time=departure,
        arrival_time=arrival,
        cabins=cabins,
    )


def _iter_cabins(
    entries: Any,
    selected: frozenset[str],
) -> Iterable[CabinAvailability]:
    for entry in _as_list(entries):
        entry = _as_dict(entry)
        if entry is None:
            continue
        cabin_class = _as_dict(entry.get("cabinClass"))
        if cabin_class is None:
            continue
        catalog = by_id(cabin_class.get("id"))
        if catalog is None:
            logger.debug("알 수 없는 객실 등급 무시: %s", cabin_class.get("id"))
            continue
        count = entry.get("availabilityCount")
        yield CabinAvailability(
            class_key=catalog.key,
            class_name=catalog.display_name,
            availability=count if isinstance(count, int) and count > 0 else 0,
            price=_resolve_price(entry),
            is_selected=catalog.key in selected,
        )


def _resolve_price(entry: dict[str, Any]) -> Optional[float]:
    """minPrice.parsedValue → minPrice(숫자) → bookingClass[0].price.parsedValue"""
    min_price = entry.get("minPrice")
    if isinstance(min_price, dict):
        value = min_price.get("parsedValue")
        if _is_number(value):
            return float(value)
    elif _is_number(min_price):
        return float(min_price)

    bookings = _as_list(entry.get("bookingClassAvailabilities"))
    first = _as_dict(bookings[0]) if bookings else None
    price = _as_dict(first.get("price")) if first else None
    if price is not None and _is_number(price.get("parsedValue")):
        return float(price["parsedValue"])
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
