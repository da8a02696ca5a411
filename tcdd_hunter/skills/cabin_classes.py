"""TCDD 객실 등급 카탈로그

API의 cabinClass.id 와 사용자 선택 키(ECONOMY 등)를 매핑한다.
프로세스 전역 상수이며 변경하지 않는다.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True, slots=True)
class CabinClass:
    key: str
    id: int
    code: str
    name: str
    display_name: str


CABIN_CLASSES: Mapping[str, CabinClass] = MappingProxyType({
    "ECONOMY": CabinClass("ECONOMY", 2, "Y1", "Ekonomi", "Ekonomi Sınıfı"),
    "BUSINESS": CabinClass("BUSINESS", 1, "C", "Business", "Business Sınıfı"),
    "SLEEPER": CabinClass("SLEEPER", 3, "SL", "Yataklı", "Yataklı (Kuşet)"),
    "COUCHETTE": CabinClass(
        "COUCHETTE", 6, "CT", "Örtülü Kuşet", "Örtülü Kuşet",
    ),
    "LOCA": CabinClass("LOCA", 11, "L", "Loca", "Loca (Özel Kabin)"),
    "DISABLED": CabinClass(
        "DISABLED", 12, "DSB", "Tekerlekli Sandalye",
        "Engelli (Tekerlekli Sandalye)",
    ),
})

_BY_ID: Mapping[int, CabinClass] = MappingProxyType(
    {c.id: c for c in CABIN_CLASSES.values()}
)

UNKNOWN_CLASS_NAME = "Bilinmeyen"


def by_id(class_id: object) -> Optional[CabinClass]:
    """API cabinClass.id → CabinClass (모르는 id면 None)"""
    if not isinstance(class_id, int) or isinstance(class_id, bool):
        return None
    return _BY_ID.get(class_id)


def by_key(key: str) -> CabinClass:
    """선택 키 → CabinClass. 모르는 키면 ValueError."""
    try:
        return CABIN_CLASSES[key.strip().upper()]
    except KeyError:
        raise ValueError(f"Bilinmeyen sınıf: {key}") from None


def ids_for(keys: Iterable[str]) -> frozenset[int]:
    """선택 키 목록 → id 집합 (모르는 키는 무시)"""
    return frozenset(
        CABIN_CLASSES[k].id for k in keys if k in CABIN_CLASSES
    )
