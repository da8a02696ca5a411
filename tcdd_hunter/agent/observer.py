"""검색/좌석 홀드 이벤트 옵저버 인터페이스

코어(컨트롤러, 홀드 트래커)는 이 인터페이스만 호출한다.
표시 계층(콘솔 등)이 구현한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from tcdd_hunter.models.seat import Allocation
from tcdd_hunter.models.train import TrainCandidate


class SearchObserver(ABC):
    """코어 → 표시 계층 알림"""

    @abstractmethod
    def on_status_change(self, message: str, category: str) -> None:
        """상태 메시지 변경 (category: StatusCategory 값)"""

    @abstractmethod
    def on_log(self, message: str) -> None:
        """로그 한 줄"""

    @abstractmethod
    def on_results_update(self, candidates: Sequence[TrainCandidate]) -> None:
        """최신 열차 후보 목록"""

    @abstractmethod
    def on_allocation_established(self, allocation: Allocation) -> None:
        """좌석 홀드 성공"""

    @abstractmethod
    def on_allocation_cleared(self) -> None:
        """좌석 홀드 해제/폐기"""


class NullObserver(SearchObserver):
    """아무것도 하지 않는 옵저버"""

    def on_status_change(self, message: str, category: str) -> None:
        pass

    def on_log(self, message: str) -> None:
        pass

    def on_results_update(self, candidates: Sequence[TrainCandidate]) -> None:
        pass

    def on_allocation_established(self, allocation: Allocation) -> None:
        pass

    def on_allocation_cleared(self) -> None:
        pass
