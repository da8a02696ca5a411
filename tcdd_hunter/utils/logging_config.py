"""로깅 설정

콘솔(컬러) + 회전 파일 로깅을 구성한다.
애플리케이션 로거는 모두 "tcdd." 접두사를 쓴다.
"""

from __future__ import annotations

import copy
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_PREFIX = "tcdd"

# ANSI 컬러 코드
_COLORS = {
    "DEBUG": "\033[36m",     # Cyan
    "INFO": "\033[32m",      # Green
    "WARNING": "\033[33m",   # Yellow
    "ERROR": "\033[31m",     # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}


class ColorFormatter(logging.Formatter):
    """레벨별 컬러 포매터 (원본 레코드는 건드리지 않음)"""

    def format(self, record: logging.LogRecord) -> str:
        colored = copy.copy(record)
        color = _COLORS.get(record.levelname, "")
        colored.levelname = f"{color}{record.levelname:<8}{_COLORS['RESET']}"
        return super().format(colored)


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """로깅 초기화

    Args:
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)
        log_file: 로그 파일 경로 (None이면 콘솔만)
        max_bytes: 파일 회전 크기
        backup_count: 보관할 회전 파일 수

    Returns:
        애플리케이션 루트 로거 ("tcdd")
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    fmt = "%(asctime)s %(levelname)s %(name)s │ %(message)s"
    if sys.stderr.isatty():
        console.setFormatter(ColorFormatter(fmt=fmt, datefmt="%H:%M:%S"))
    else:
        console.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        fh.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root.addHandler(fh)

    # aiohttp / asyncio 내부 로그는 경고 이상만
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return logging.getLogger(LOGGER_PREFIX)
