"""옵저버에 전달되는 상태 카테고리"""

from __future__ import annotations


class StatusCategory:
    """상태 메시지 카테고리 상수"""

    WAITING = "waiting"
    SEARCHING = "searching"
    FOUND = "found"
    ERROR = "error"
