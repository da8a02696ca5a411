"""애플리케이션 컨텍스트

클라이언트, 좌석 홀드 트래커, 검색 컨트롤러를 한 번씩 생성해 소유한다.
모듈 전역 싱글턴 대신 이 객체를 통해 필요한 곳에 전달한다.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import aiohttp

from tcdd_hunter.agent.allocation import AllocationTracker
from tcdd_hunter.agent.core import SearchController
from tcdd_hunter.agent.observer import NullObserver, SearchObserver
from tcdd_hunter.models.config import HunterConfig
from tcdd_hunter.skills.notifier import NotifierSkill
from tcdd_hunter.skills.station_data import StationDirectory
from tcdd_hunter.skills.tcdd_client import TCDDClient, TransportError

logger = logging.getLogger("tcdd.agent.context")


class AppContext:
    """의존성 컨테이너"""

    __slots__ = (
        "config", "client", "tracker", "controller", "notifier", "stations",
    )

    def __init__(
        self,
        config: Optional[HunterConfig] = None,
        observer: Optional[SearchObserver] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config or HunterConfig()
        observer = observer or NullObserver()
        self.client = TCDDClient(self.config, session=session)
        self.tracker = AllocationTracker(
            self.client,
            observer,
            default_hold_minutes=self.config.default_hold_minutes,
        )
        self.controller = SearchController(
            self.client, self.tracker, observer, self.config,
        )
        self.notifier = NotifierSkill(
            methods=self.config.notification_methods,
            webhook_url=self.config.webhook_url,
        )
        self.stations: Optional[StationDirectory] = None

    def attach(self, observer: SearchObserver) -> None:
        """컨트롤러와 트래커에 같은 옵저버 연결"""
        self.tracker.observer = observer
        self.controller.observer = observer

    @property
    def busy(self) -> bool:
        """검색 중이거나 좌석을 홀드하고 있으면 True"""
        return self.controller.is_searching or self.tracker.has_allocation

    async def load_stations(
        self,
        path: Optional[str | Path] = None,
    ) -> StationDirectory:
        """역 목록 로드 (파일 우선, 없으면 CDN)"""
        if path:
            self.stations = StationDirectory.from_file(path)
        else:
            self.stations = StationDirectory.from_records(
                await self.client.fetch_stations()
            )
        logger.info("역 %d개 사용 가능", len(self.stations))
        return self.stations

    async def close(self, release: bool = False) -> None:
        """검색 중지, (선택) 좌석 해제, HTTP 세션 종료"""
        self.controller.stop()
        if release and self.tracker.has_allocation:
            try:
                outcome = await self.tracker.release()
                logger.info("종료 시 좌석 해제: %s", outcome.message)
            except TransportError as e:
                logger.error("종료 시 좌석 해제 실패: %s", e)
        await self.client.close()

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
