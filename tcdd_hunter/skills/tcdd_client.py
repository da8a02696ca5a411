"""TCDD 가용성 클라이언트 스킬

TCDD 웹 API(web-api-prod-ytp)로 가용성 조회, 좌석 지도 조회,
좌석 홀드/해제 요청을 보낸다. 로그인 불필요 (고정 토큰).

클라이언트 인스턴스당 동시에 하나의 요청만 진행된다. 진행 중에 들어온
호출은 대기열에 쌓이지 않고 즉시 BUSY(또는 None)로 반환된다.
"""

from __future__ import annotations

import asyncio
import logging
from time import monotonic
from typing import Any, ClassVar, Optional

import aiohttp

from tcdd_hunter.models.config import HunterConfig
from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.models.seat import ReleaseRequest, SeatRequest
from tcdd_hunter.skills.pacing import PacingSkill
from tcdd_hunter.skills.parser import to_api_date

logger = logging.getLogger("tcdd.skill.client")

AVAILABILITY_PATH = "/tms/train/train-availability"
SEAT_MAP_PATH = "/tms/seat-maps/load-by-train-id"
SELECT_SEAT_PATH = "/tms/inventory/select-seat"
RELEASE_SEAT_PATH = "/tms/inventory/release-seat"

# 모든 엔드포인트 공통 쿼리 파라미터
_API_PARAMS: dict[str, str] = {"environment": "dev", "userId": "1"}


class _Busy:
    """다른 요청이 진행 중임을 나타내는 센티넬 (거짓 값)"""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "BUSY"


BUSY: Any = _Busy()


class TransportError(RuntimeError):
    """HTTP 오류 상태 또는 네트워크 실패"""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class TCDDClient:
    """TCDD 웹 API 클라이언트"""

    USER_AGENT: ClassVar[str] = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )

    def __init__(
        self,
        config: Optional[HunterConfig] = None,
        pacing: Optional[PacingSkill] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._config = config or HunterConfig()
        self._pacing = pacing or PacingSkill(
            self._config.min_pacing_delay,
            self._config.max_pacing_delay,
        )
        self._session = session
        self._owns_session = session is None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": "tr",
            "Authorization": self._config.auth_token,
            "User-Agent": self.USER_AGENT,
            "unit-id": self._config.unit_id,
            "Content-Type": "application/json",
            "Origin": self._config.origin,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self._config.request_timeout,
                connect=self._config.connect_timeout,
            )
            connector = aiohttp.TCPConnector(
                limit=self._config.max_connections,
                ttl_dns_cache=300,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=self._headers(),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _claim(self) -> bool:
        """진행 중 플래그 선점. await 이전에 호출되어야 한다."""
        if self._in_flight:
            return False
        self._in_flight = True
        return True

    # ── Public API ──

    async def check_availability(
        self,
        criteria: SearchCriteria,
        skip_delay: bool = False,
    ) -> Any:
        """가용성 조회. 다른 요청 진행 중이면 BUSY, 실패 시 TransportError."""
        if not self._claim():
            logger.debug("이전 요청 진행 중 - 조회 건너뜀")
            return BUSY
        try:
            if not skip_delay:
                delay = await self._pacing.wait()
                logger.debug("요청 전 지연 %.2fs", delay)
            body = self.build_availability_body(criteria)
            return await self._post(AVAILABILITY_PATH, body)
        finally:
            self._in_flight = False

    async def check_seat_map(
        self,
        train_id: int,
        from_station_id: int,
        to_station_id: int,
    ) -> Optional[dict[str, Any]]:
        """좌석 지도 조회. 모든 실패는 로그 후 None."""
        if not self._claim():
            logger.warning("좌석 지도 조회 생략: 다른 요청 진행 중")
            return None
        body = {
            "fromStationId": from_station_id,
            "toStationId": to_station_id,
            "trainId": train_id,
            "legIndex": 0,
        }
        try:
            data = await self._post(SEAT_MAP_PATH, body)
        except TransportError as e:
            logger.warning("좌석 지도 조회 실패 (train=%s): %s", train_id, e)
            return None
        finally:
            self._in_flight = False
        if not isinstance(data, dict):
            logger.warning("좌석 지도 응답 형식 오류 (train=%s)", train_id)
            return None
        return data

    async def allocate_seat(self, request: SeatRequest) -> Optional[dict[str, Any]]:
        """좌석 홀드. 모든 실패는 로그 후 None."""
        if not self._claim():
            logger.warning("좌석 홀드 생략: 다른 요청 진행 중")
            return None
        try:
            data = await self._post(
                SELECT_SEAT_PATH,
                request.to_payload(),
                extra_headers={"Priority": "u=0"},
            )
        except TransportError as e:
            logger.warning(
                "좌석 홀드 실패 (car=%s, seat=%s): %s",
                request.train_car_id, request.seat_number, e,
            )
            return None
        finally:
            self._in_flight = False
        if not isinstance(data, dict):
            logger.warning("좌석 홀드 응답 형식 오류")
            return None
        return data

    async def deallocate_seat(self, request: ReleaseRequest) -> Any:
        """좌석 홀드 해제. 진행 중이면 BUSY, 실패 시 TransportError."""
        if not self._claim():
            logger.warning("좌석 해제 생략: 다른 요청 진행 중")
            return BUSY
        try:
            await self._post(RELEASE_SEAT_PATH, request.to_payload(), parse=False)
        except TransportError as e:
            logger.error(
                "좌석 해제 실패 (allocation=%s): %s", request.allocation_id, e,
            )
            raise
        finally:
            self._in_flight = False
        return {"success": True}

    async def fetch_stations(self) -> list[dict[str, Any]]:
        """CDN에서 역 목록 조회 (세션 시작 전 1회)"""
        session = await self._get_session()
        try:
            async with session.get(self._config.stations_url) as resp:
                if resp.status >= 400:
                    raise TransportError(
                        f"HTTP {resp.status}: istasyon listesi alınamadı",
                        status=resp.status,
                    )
                data = await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise TransportError(f"Ağ hatası: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError("Zaman aşımı: istasyon listesi") from e
        except ValueError as e:
            raise TransportError(f"Geçersiz JSON: {e}") from e
        if not isinstance(data, list):
            raise TransportError("İstasyon listesi beklenen formatta değil")
        logger.info("역 목록 %d개 로드", len(data))
        return data

    # ── Internals ──

    async def _post(
        self,
        path: str,
        body: dict[str, Any],
        extra_headers: Optional[dict[str, str]] = None,
        parse: bool = True,
    ) -> Any:
        session = await self._get_session()
        url = f"{self._config.api_base_url}{path}"
        ts = monotonic()
        try:
            async with session.post(
                url,
                params=_API_PARAMS,
                json=body,
                headers=extra_headers,
            ) as resp:
                if resp.status >= 400:
                    detail = (await resp.text())[:200]
                    logger.debug("API 오류 응답 %s: %s", path, detail)
                    raise TransportError(
                        f"HTTP {resp.status}: API isteği başarısız",
                        status=resp.status,
                    )
                data = await resp.json(content_type=None) if parse else None
        except aiohttp.ClientError as e:
            raise TransportError(f"Ağ hatası: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError("Zaman aşımı") from e
        except ValueError as e:
            raise TransportError(f"Geçersiz JSON: {e}") from e
        logger.debug("POST %s %.0fms", path, (monotonic() - ts) * 1000)
        return data

    @staticmethod
    def build_availability_body(criteria: SearchCriteria) -> dict[str, Any]:
        """가용성 조회 요청 본문 구성"""
        api_date = to_api_date(criteria.departure_date.isoformat())
        return {
            "searchRoutes": [{
                "departureStationId": criteria.departure_station_id,
                "departureStationName": criteria.departure_station_name,
                "arrivalStationId": criteria.arrival_station_id,
                "arrivalStationName": criteria.arrival_station_name,
                "departureDate": f"{api_date} 00:00:00",
            }],
            "passengerTypeCounts": [{"id": 0, "count": 1}],
            "searchReservation": False,
            "searchType": "DOMESTIC",
            "blTrainTypes": ["TURISTIK_TREN"],
        }
