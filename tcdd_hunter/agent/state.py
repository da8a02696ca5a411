"""검색 세션 상태 머신

상태 전이 규칙을 정의하고 검증한다.
"""

from __future__ import annotations

from enum import Enum, auto


class SessionState(Enum):
    IDLE = auto()
    SEARCHING = auto()
    STOPPED = auto()


# 허용된 상태 전이 맵: {현재상태: {허용되는 다음 상태들}}
# STOPPED는 재시작 관점에서 IDLE과 같다.
_VALID_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.SEARCHING}),
    SessionState.SEARCHING: frozenset({SessionState.STOPPED}),
    SessionState.STOPPED: frozenset({SessionState.SEARCHING}),
}


def validate_transition(current: SessionState, target: SessionState) -> bool:
    """상태 전이가 유효한지 검증"""
    allowed = _VALID_TRANSITIONS.get(current, frozenset())
    return target in allowed
