"""헌터 설정 모델"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# TCDD 웹 클라이언트에 내장된 고정 토큰 ("Bearer" 접두사 없이 전송)
DEFAULT_AUTH_TOKEN = (
    "eyJhbGciOiJSUzI1NiIsInR5cCIgOiAiSldUIiwia2lkIiA6ICJlVFFicDhDMmpiakp1cn"
    "UzQVk2a0ZnV196U29MQXZIMmJ5bTJ2OUg5THhRIn0.eyJleHAiOjE3MjEzODQ0NzAsImlh"
    "dCI6MTcyMTM4NDQxMCwianRpIjoiYWFlNjVkNzgtNmRkZS00ZGY4LWEwZWYtYjRkNzZiYj"
    "ZlODNjIiwiaXNzIjoiaHR0cDovL3l0cC1wcm9kLW1hc3RlcjEudGNkZHRhc2ltYWNpbGlr"
    "Lmdvdi50cjo4MDgwL3JlYWxtcy9tYXN0ZXIiLCJhdWQiOiJhY2NvdW50Iiwic3ViIjoiMD"
    "AzNDI3MmMtNTc2Yi00OTBlLWJhOTgtNTFkMzc1NWNhYjA3IiwidHlwIjoiQmVhcmVyIiwi"
    "YXpwIjoidG1zIiwic2Vzc2lvbl9zdGF0ZSI6IjAwYzM4NTJiLTg1YjEtNDMxNS04OGIwLW"
    "Q0MWMxMTcyYzA0MSIsImFjciI6IjEiLCJyZWFsbV9hY2Nlc3MiOnsicm9sZXMiOlsiZGVm"
    "YXVsdC1yb2xlcy1tYXN0ZXIiLCJvZmZsaW5lX2FjY2VzcyIsInVtYV9hdXRob3JpemF0aW"
    "9uIl19LCJyZXNvdXJjZV9hY2Nlc3MiOnsiYWNjb3VudCI6eyJyb2xlcyI6WyJtYW5hZ2Ut"
    "YWNjb3VudCIsIm1hbmFnZS1hY2NvdW50LWxpbmtzIiwidmlldy1wcm9maWxlIl19fSwic2"
    "NvcGUiOiJvcGVuaWQgZW1haWwgcHJvZmlsZSIsInNpZCI6IjAwYzM4NTJiLTg1YjEtNDMx"
    "NS04OGIwLWQ0MWMxMTcyYzA0MSIsImVtYWlsX3ZlcmlmaWVkIjpmYWxzZSwicHJlZmVycm"
    "VkX3VzZXJuYW1lIjoid2ViIiwiZ2l2ZW5fbmFtZSI6IiIsImZhbWlseV9uYW1lIjoiIn0."
    "AIW_4Qws2wfwxyVg8dgHRT9jB3qNavob2C4mEQIQGl3urzW2jALPx-e51ZwHUb-TXB-X2R"
    "PHakonxKnWG6tDIP5aKhiidzXDcr6pDDoYU5DnQhMg1kywyOaMXsjLFjuYN5PAyGUMh6YS"
    "OVsg1PzNh-5GrJF44pS47JnB9zk03Pr08napjsZPoRB-5N4GQ49cnx7ePC82Y7YIc-gTew"
    "2baqKQPz9_v381Gbm2V38PZDH9KldlcWut7kqQYJFMJ7dkM_entPJn9lFk7R5h5j_06OlQ"
    "EpWRMQTn9SQ1AYxxmZxBu5XYMKDkn4rzIIVCkdTPJNCt5PvjENjClKFeUA1DOg")


@dataclass
class HunterConfig:
    """헌터 설정 - 폴링/요청/알림 파라미터"""

    # 폴링 설정 (초)
    check_interval: float = 5.0
    min_pacing_delay: float = 3.0
    max_pacing_delay: float = 8.0

    # TCDD API
    api_base_url: str = "https://web-api-prod-ytp.tcddtasimacilik.gov.tr"
    stations_url: str = (
        "https://cdn-api-prod-ytp.tcddtasimacilik.gov.tr"
        "/datas/station-pairs-INTERNET.json"
    )
    origin: str = "https://ebilet.tcddtasimacilik.gov.tr"
    auth_token: str = field(
        default_factory=lambda: os.environ.get(
            "TCDD_AUTH_TOKEN", DEFAULT_AUTH_TOKEN,
        )
    )
    unit_id: str = "3895"

    # 좌석 홀드
    default_hold_minutes: int = 10

    # 로그 버퍼
    max_log_entries: int = 100

    # 알림 설정
    notification_methods: list[str] = field(
        default_factory=lambda: ["desktop", "sound"]
    )
    webhook_url: str = field(
        default_factory=lambda: os.environ.get("TCDD_WEBHOOK_URL", "")
    )

    # HTTP 설정
    request_timeout: float = 15.0
    connect_timeout: float = 5.0
    max_connections: int = 3

    def __post_init__(self) -> None:
        if self.check_interval <= 0:
            raise ValueError("check_interval은 0보다 커야 합니다")
        if self.min_pacing_delay < 0 or self.max_pacing_delay < self.min_pacing_delay:
            raise ValueError("지연 범위가 올바르지 않습니다 (0 <= min <= max)")
