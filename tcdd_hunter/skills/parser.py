"""입력 파싱 및 TCDD 날짜/시간 변환

CLI 입력 문자열과 API 형식(DD-MM-YYYY, epoch ms) 사이를 변환한다.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from tcdd_hunter.skills.cabin_classes import by_key

# 터키 표준시 (UTC+3, 서머타임 없음)
TURKEY_TZ = timezone(timedelta(hours=3), "TRT")


def parse_date(s: str) -> date:
    """YYYY-MM-DD, YYYYMMDD 또는 DD.MM.YYYY 형식의 날짜 파싱"""
    s = s.strip()
    if "." in s:
        return datetime.strptime(s, "%d.%m.%Y").date()
    s = s.replace("-", "")
    if len(s) != 8 or not s.isdigit():
        raise ValueError(f"Geçersiz tarih: '{s}' (YYYY-MM-DD)")
    return date(int(s[:4]), int(s[4:6]), int(s[6:8]))


def parse_time(s: str) -> time:
    """HH:MM 또는 HHMM 형식의 시간 파싱"""
    s = s.strip().replace(":", "")
    if not s.isdigit() or len(s) > 4:
        raise ValueError(f"Geçersiz saat: '{s}' (HH:MM)")
    if len(s) < 4:
        s = s.ljust(4, "0")
    return time(int(s[:2]), int(s[2:4]))


def parse_classes(s: str) -> tuple[str, ...]:
    """콤마 구분 객실 키 → 정규화된 키 튜플 (중복 제거, 순서 유지)"""
    keys: list[str] = []
    for part in s.split(","):
        if not part.strip():
            continue
        key = by_key(part).key
        if key not in keys:
            keys.append(key)
    return tuple(keys)


def to_api_date(iso: str) -> str:
    """'2025-03-05' → '05-03-2025'"""
    year, month, day = iso.split("-")
    return f"{day}-{month}-{year}"


def from_api_date(api: str) -> str:
    """'05-03-2025' → '2025-03-05'"""
    day, month, year = api.split("-")
    return f"{year}-{month}-{day}"


def format_time(epoch_ms: int | float) -> str:
    """epoch 밀리초 → 터키 현지 'HH:MM'"""
    dt = datetime.fromtimestamp(epoch_ms / 1000, tz=TURKEY_TZ)
    return f"{dt:%H:%M}"


def is_in_time_range(hhmm: str, start: str, end: str) -> bool:
    """'HH:MM' 문자열 비교 (양 끝 포함)"""
    return start <= hhmm <= end
