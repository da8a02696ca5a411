"""알림 스킬: Desktop / Sound / Webhook

좌석 발견과 좌석 홀드 성공을 여러 채널로 동시에 알린다.
개별 채널 실패는 다른 채널에 영향을 주지 않는다.
"""

from __future__ import annotations

import asyncio
import logging
import platform
import subprocess
from dataclasses import dataclass
from typing import Optional

import aiohttp

from tcdd_hunter.models.seat import Allocation
from tcdd_hunter.models.train import FilterResult

logger = logging.getLogger("tcdd.skill.notifier")

APP_ID = "TCDD Seat Hunter"


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    """알림 페이로드"""

    title: str
    message: str
    summary: str
    urgency: str = "high"


class NotifierSkill:
    """다채널 알림 스킬"""

    __slots__ = ("_methods", "_webhook_url")

    def __init__(
        self,
        methods: Optional[list[str]] = None,
        webhook_url: str = "",
    ) -> None:
        self._methods = methods if methods is not None else ["desktop", "sound"]
        self._webhook_url = webhook_url

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def send_found(self, result: FilterResult) -> Optional[NotificationPayload]:
        """빈 좌석 발견 알림"""
        available = result.available_trains
        if not available:
            return None

        lines = [f"  {t.name} {t.departure_time}→{t.arrival_time} "
                 f"({t.selected_seats} yer)" for t in available[:5]]
        payload = NotificationPayload(
            title="TCDD: YER BULUNDU!",
            message="\n".join(lines),
            summary=f"{result.total_selected_seats} yer mevcut",
        )
        await self.dispatch(payload)
        return payload

    async def send_allocation(self, allocation: Allocation) -> NotificationPayload:
        """좌석 홀드 성공 알림"""
        payload = NotificationPayload(
            title="TCDD: Koltuk tutuldu",
            message=allocation.display(),
            summary=f"{allocation.hold_minutes} dakika içinde ödeme yapın",
        )
        await self.dispatch(payload)
        return payload

    async def dispatch(self, payload: NotificationPayload) -> None:
        tasks: list[asyncio.Task[None]] = []
        for method in self._methods:
            if method == "desktop":
                tasks.append(
                    asyncio.ensure_future(self._desktop_notify(payload))
                )
            elif method == "sound":
                tasks.append(
                    asyncio.ensure_future(self._sound_notify())
                )
            elif method == "webhook":
                tasks.append(
                    asyncio.ensure_future(
                        self._webhook_notify(payload, self._webhook_url)
                    )
                )
            else:
                logger.warning("알 수 없는 알림 방법: %s", method)

        if not tasks:
            return
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for method, res in zip(self._methods, results):
            if isinstance(res, Exception):
                logger.warning("%s 알림 실패: %s", method, res)

    @staticmethod
    async def _desktop_notify(payload: NotificationPayload) -> None:
        """OS 데스크톱 알림"""
        system = platform.system()
        body = f"{payload.summary}\n{payload.message}"

        if system == "Windows":
            from winotify import Notification  # type: ignore[import-untyped]

            toast = Notification(
                app_id=APP_ID,
                title=payload.title,
                msg=body[:200],
            )
            toast.show()

        elif system == "Darwin":
            text = body[:150].replace('"', "'")
            subprocess.Popen(  # noqa: S603
                [
                    "osascript", "-e",
                    f'display notification "{text}" '
                    f'with title "{payload.title}" sound name "Glass"',
                ],
            )

        elif system == "Linux":
            subprocess.Popen(  # noqa: S603
                [
                    "notify-send", payload.title,
                    body[:200],
                    "-u", "critical",
                ],
            )

    @staticmethod
    async def _sound_notify() -> None:
        """알림음 재생"""
        if platform.system() == "Windows":
            import winsound  # type: ignore[import-not-found]

            for _ in range(3):
                winsound.Beep(1000, 500)
                await asyncio.sleep(0.3)
        else:
            print("\a" * 3, end="", flush=True)

    @staticmethod
    async def _webhook_notify(
        payload: NotificationPayload,
        webhook_url: str,
    ) -> None:
        """Webhook 알림 (Slack/Discord)"""
        if not webhook_url:
            return

        async with aiohttp.ClientSession() as session:
            async with session.post(
                webhook_url,
                json={
                    "text": f"*{payload.title}*\n{payload.summary}\n"
                            f"{payload.message}",
                    "content": f"**{payload.title}**\n{payload.summary}\n"
                               f"{payload.message}",
                },
                timeout=aiohttp.ClientTimeout(total=10),
            ) as resp:
                resp.raise_for_status()
