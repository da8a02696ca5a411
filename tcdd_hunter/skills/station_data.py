"""역 디렉터리

TCDD 역 목록(id ↔ 이름)을 관리한다. 목록은 CDN 또는 JSON 파일에서
읽어오며 로드 후에는 읽기 전용으로 취급한다.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

# 터키어 문자 → ASCII (예: 'Eskisehir' 로 'Eskişehir' 검색)
_TURKISH_CHAR_MAP = str.maketrans({
    "ş": "s", "Ş": "s",
    "ı": "i", "İ": "i", "I": "i",
    "ğ": "g", "Ğ": "g",
    "ü": "u", "Ü": "u",
    "ö": "o", "Ö": "o",
    "ç": "c", "Ç": "c",
})


def normalize_turkish(text: str) -> str:
    """터키어 문자를 ASCII 소문자로 정규화"""
    return " ".join(text.translate(_TURKISH_CHAR_MAP).lower().split())


@dataclass(frozen=True, slots=True)
class Station:
    """TCDD 역"""

    id: int
    name: str
    pairs: tuple[int, ...] = field(default_factory=tuple)
    ticket_sale_active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Station:
        return cls(
            id=int(data.get("id", 0)),
            name=str(data.get("name", "")),
            pairs=tuple(data.get("pairs") or ()),
            ticket_sale_active=bool(data.get("ticketSaleActive", True)),
        )

    def __str__(self) -> str:
        return self.name


class StationDirectory:
    """읽기 전용 역 조회 (id / 이름)"""

    __slots__ = ("_by_id", "_by_name")

    def __init__(self, stations: Iterable[Station]) -> None:
        self._by_id: dict[int, Station] = {}
        self._by_name: dict[str, Station] = {}
        for station in stations:
            self._by_id[station.id] = station
            self._by_name.setdefault(normalize_turkish(station.name), station)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> StationDirectory:
        return cls(Station.from_dict(r) for r in records if isinstance(r, dict))

    @classmethod
    def from_file(cls, path: str | Path) -> StationDirectory:
        """JSON 파일 (CDN 응답과 같은 형식)에서 로드"""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"İstasyon dosyası liste olmalı: {path}")
        return cls.from_records(data)

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, station_id: int) -> Optional[Station]:
        return self._by_id.get(station_id)

    def find(self, name: str) -> Optional[Station]:
        return self._by_name.get(normalize_turkish(name))

    def search(self, query: str, limit: int = 10) -> list[Station]:
        """부분 일치 검색 (이름순 정렬)"""
        needle = normalize_turkish(query)
        hits = [s for key, s in self._by_name.items() if needle in key]
        return sorted(hits, key=lambda s: normalize_turkish(s.name))[:limit]

    def resolve(self, value: str) -> Station:
        """역 id 또는 이름 → Station. 찾지 못하면 ValueError."""
        value = value.strip()
        if not value:
            raise ValueError("İstasyon girilmedi")
        station = self.get(int(value)) if value.isdigit() else self.find(value)
        if station is None:
            suggestions = ", ".join(s.name for s in self.search(value, 5))
            hint = f" (öneriler: {suggestions})" if suggestions else ""
            raise ValueError(f"İstasyon bulunamadı: '{value}'{hint}")
        return station

    def sorted_names(self) -> list[str]:
        return sorted(
            (s.name for s in self._by_id.values()), key=normalize_turkish,
        )
