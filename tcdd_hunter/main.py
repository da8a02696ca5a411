"""TCDD 좌석 헌터 - CLI 진입점

사용 예시:
    tcdd-hunter --departure Konya --arrival "Ankara Gar" \
        --date 2026-11-02 --time-start 08:00 --time-end 12:00 \
        --classes ECONOMY,BUSINESS

    tcdd-hunter (대화형 모드)
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Any, Optional

from tcdd_hunter.agent.context import AppContext
from tcdd_hunter.console import ConsoleObserver
from tcdd_hunter.models.config import HunterConfig
from tcdd_hunter.models.query import SearchCriteria
from tcdd_hunter.skills.cabin_classes import CABIN_CLASSES
from tcdd_hunter.skills.parser import parse_classes, parse_date, parse_time
from tcdd_hunter.skills.station_data import StationDirectory
from tcdd_hunter.skills.tcdd_client import TransportError
from tcdd_hunter.skills.validation import ValidationSkill
from tcdd_hunter.utils.logging_config import setup_logging


BANNER = r"""
  ╔══════════════════════════════════════════════╗
  ║   TCDD Boş Koltuk Avcısı v1.0.0              ║
  ║   TCDD Seat Hunter                           ║
  ╚══════════════════════════════════════════════╝
"""


def _arg_type(fn: Any) -> Any:
    """ValueError → argparse 오류 메시지"""
    def convert(s: str) -> Any:
        try:
            return fn(s)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from e
    convert.__name__ = fn.__name__
    return convert


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="TCDD boş koltuk avcısı",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "예시:\n"
            "  tcdd-hunter -d Konya -a 'Ankara Gar' --date 2026-11-02 "
            "--time-start 08:00 --time-end 12:00\n"
            "  tcdd-hunter  (대화형 모드)"
        ),
    )
    p.add_argument("-d", "--departure", help="출발역 (이름 또는 id)")
    p.add_argument("-a", "--arrival", help="도착역 (이름 또는 id)")
    p.add_argument("--date", type=_arg_type(parse_date), help="출발 날짜 (YYYY-MM-DD)")
    p.add_argument("--time-start", type=_arg_type(parse_time), help="시작 시각 (HH:MM)")
    p.add_argument("--time-end", type=_arg_type(parse_time), help="종료 시각 (HH:MM)")
    p.add_argument(
        "--classes",
        type=_arg_type(parse_classes),
        default=("ECONOMY",),
        help=f"객실 등급 콤마 구분 ({','.join(CABIN_CLASSES)}; 기본: ECONOMY)",
    )
    p.add_argument("--stations", default=None, help="역 목록 JSON 파일 (기본: CDN)")
    p.add_argument(
        "--interval",
        type=float,
        default=5.0,
        help="조회 간격 초 (기본: 5)",
    )
    p.add_argument("--min-delay", type=float, default=3.0, help="최소 요청 지연 초")
    p.add_argument("--max-delay", type=float, default=8.0, help="최대 요청 지연 초")
    p.add_argument(
        "--notify",
        default="desktop,sound",
        help="알림 방법 (desktop,sound,webhook 콤마 구분)",
    )
    p.add_argument(
        "--release-on-exit",
        action="store_true",
        help="종료 시 홀드한 좌석을 서버에서 해제",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    p.add_argument("--log-file", default=None, help="로그 파일 경로")
    return p


def _prompt(label: str, parse: Any, validator: Any = None) -> Any:
    while True:
        try:
            value = parse(input(f"  {label}: ").strip())
            if validator is not None:
                validator(value)
            return value
        except ValueError as e:
            print(f"  [Hata] {e}\n")


def interactive_input(
    stations: StationDirectory,
    validator: ValidationSkill,
) -> SearchCriteria:
    """대화형 입력으로 SearchCriteria 생성"""
    print(BANNER)
    print("  Etkileşimli mod - arama bilgilerini girin\n")
    print(f"  Sınıflar: {', '.join(CABIN_CLASSES)}\n")

    while True:
        dep = _prompt("Kalkış istasyonu", stations.resolve)
        arr = _prompt("Varış istasyonu", stations.resolve)
        dep_date = _prompt("Tarih (YYYY-MM-DD)", parse_date, validator.validate_date)
        time_start = _prompt("Başlangıç saati (HH:MM)", parse_time)
        time_end = _prompt("Bitiş saati (HH:MM)", parse_time)
        classes = _prompt(
            "Sınıflar (virgülle, boş = ECONOMY)",
            lambda s: parse_classes(s or "ECONOMY"),
        )
        try:
            return validator.validate_query({
                "departure": dep,
                "arrival": arr,
                "date": dep_date,
                "time_start": time_start,
                "time_end": time_end,
                "classes": classes,
            })
        except ValueError as e:
            print(f"  [Hata] {e}\n")


def build_criteria_from_args(
    args: argparse.Namespace,
    stations: StationDirectory,
    validator: ValidationSkill,
) -> SearchCriteria:
    """CLI 인자로부터 SearchCriteria 생성. 실패 시 ValueError."""
    return validator.validate_query({
        "departure": stations.resolve(args.departure),
        "arrival": stations.resolve(args.arrival),
        "date": args.date,
        "time_start": args.time_start,
        "time_end": args.time_end,
        "classes": args.classes,
    })


def _has_full_args(args: argparse.Namespace) -> bool:
    return all((
        args.departure, args.arrival, args.date,
        args.time_start, args.time_end,
    ))


async def release_held(ctx: AppContext) -> bool:
    """홀드한 좌석을 서버에서 해제하고 결과를 출력. 해제했으면 True."""
    try:
        outcome = await ctx.tracker.release()
    except TransportError as e:
        print(f"  ⚠️ Koltuk bırakılamadı: {e}")
        return False
    if outcome.success:
        print(f"  🔓 {outcome.message}")
    else:
        print(f"  ⚠️ Koltuk bırakılamadı: {outcome.message}")
    return outcome.success


class InterruptHandler:
    """SIGINT/SIGTERM 처리

    좌석 홀드 중 첫 입력은 서버에 해제를 요청하고 대기를 유지한다.
    홀드가 없거나 이미 해제를 시도했으면 종료 이벤트를 세운다.
    """

    __slots__ = ("_ctx", "_stop_event", "_release_task")

    def __init__(self, ctx: AppContext, stop_event: asyncio.Event) -> None:
        self._ctx = ctx
        self._stop_event = stop_event
        self._release_task: Optional[asyncio.Task[bool]] = None

    @property
    def release_task(self) -> Optional[asyncio.Task[bool]]:
        return self._release_task

    def __call__(self) -> None:
        if self._ctx.tracker.has_allocation and self._release_task is None:
            print("\n\n  Ctrl+C algılandı - tutulan koltuk bırakılıyor...")
            print("  Çıkmak için tekrar Ctrl+C")
            self._release_task = asyncio.ensure_future(release_held(self._ctx))
            return
        print("\n\n  Ctrl+C algılandı - durduruluyor...")
        self._stop_event.set()


async def run(args: argparse.Namespace, config: HunterConfig) -> int:
    """AppContext 기반 실행. 종료 코드를 반환."""
    ctx = AppContext(config)
    observer = ConsoleObserver(
        notifier=ctx.notifier,
        max_log_entries=config.max_log_entries,
    )
    ctx.attach(observer)
    observer.attach(ctx.tracker)
    validator = ValidationSkill()

    try:
        stations = await ctx.load_stations(args.stations)
        if _has_full_args(args):
            criteria = build_criteria_from_args(args, stations, validator)
        else:
            criteria = interactive_input(stations, validator)
    except (TransportError, OSError, ValueError) as e:
        print(f"\n  [Hata] {e}")
        await ctx.close()
        return 2

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    handler = InterruptHandler(ctx, stop_event)

    if sys.platform != "win32":
        loop.add_signal_handler(signal.SIGINT, handler)
        loop.add_signal_handler(signal.SIGTERM, handler)

    print(f"\n  Arama: {criteria.summary()}")
    print("  Durdurmak için Ctrl+C\n")

    ctx.controller.start(criteria)
    try:
        # 검색 중이거나 좌석 홀드 카운트다운 중이면 대기
        while ctx.busy and not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
    finally:
        metrics = ctx.controller.metrics
        metrics.update_memory()
        if handler.release_task is not None and not handler.release_task.done():
            await handler.release_task
        print(f"\n{metrics.summary()}")
        await observer.drain()
        observer.close()
        await ctx.close(release=args.release_on_exit)
        held = ctx.tracker.allocation
        if held is not None:
            print(
                f"  ⚠️ Koltuk {held.seat_number} sunucuda tutulmaya devam ediyor "
                "(süre dolunca düşer)"
            )
    return 0


def cli_entry() -> None:
    """CLI 진입점 (pyproject.toml scripts에서 호출)"""
    main()


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
    )

    notify_methods = [m.strip() for m in args.notify.split(",") if m.strip()]
    try:
        config = HunterConfig(
            check_interval=args.interval,
            min_pacing_delay=args.min_delay,
            max_pacing_delay=args.max_delay,
            notification_methods=notify_methods,
        )
    except ValueError as e:
        parser.error(str(e))

    if _has_full_args(args):
        print(BANNER)

    try:
        sys.exit(asyncio.run(run(args, config)))
    except KeyboardInterrupt:
        print("\n  Program sonlandırıldı")
        sys.exit(0)


if __name__ == "__main__":
    main()
