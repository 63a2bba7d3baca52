"""
credscache/cli/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로그 설정을 위한 함수들
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import LogConfig

# botocore 노이즈 로그 제한
logging.getLogger("botocore.httpchecksum").setLevel(logging.WARNING)
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)


def get_console(stderr: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스 (로그/진단 메시지는 stderr)
console = get_console()
err_console = get_console(stderr=True)


def get_logger(name: str = "credscache", level: str = "INFO") -> logging.Logger:
    """Rich 핸들러가 설정된 logger를 반환합니다.

    Args:
        name: logger 이름 (기본값: "credscache")
        level: 로그 레벨 이름

    Returns:
        logging.Logger: 설정된 logger 인스턴스
    """
    logger = logging.getLogger(name)

    # 이미 Rich 핸들러가 설정되어 있으면 레벨만 갱신
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.setLevel(level)
        return logger

    logger.setLevel(level)
    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)

    return logger


def configure_logging(config: LogConfig | None = None) -> logging.Logger:
    """LogConfig에 따라 credscache 패키지 logger 설정"""
    config = config or LogConfig.from_env()
    return get_logger("credscache", level=config.level)


# =============================================================================
# 표준 출력 스타일
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    err_console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    err_console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    err_console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")


def print_table(title: str, rows: list[tuple[str, str]]) -> None:
    """2열(항목/값) 테이블 출력

    Args:
        title: 테이블 제목
        rows: (항목, 값) 목록
    """
    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)
