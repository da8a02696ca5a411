"""검색 에이전트 패키지

  SearchController  - 검색 루프 (상태 머신 + 반복 타이머)
  AllocationTracker - 좌석 홀드 수명 관리
  SearchObserver    - 표시 계층 인터페이스
  AppContext        - 의존성 컨테이너
"""

from tcdd_hunter.agent.allocation import AllocationTracker
from tcdd_hunter.agent.context import AppContext
from tcdd_hunter.agent.core import SearchController
from tcdd_hunter.agent.observer import NullObserver, SearchObserver
from tcdd_hunter.agent.state import SessionState

__all__ = [
    "AllocationTracker",
    "AppContext",
    "SearchController",
    "NullObserver",
    "SearchObserver",
    "SessionState",
]
