"""
credscache/config.py - 중앙 설정 관리

패키지 전역 기본값(Settings), 환경변수 헬퍼, 로그 설정(LogConfig),
그리고 FileCacheProvider에 명시적으로 전달되는 FileCacheOptions를 정의합니다.

설계 원칙:
- 전역 가변 기본값을 두지 않음 (Settings는 frozen)
- FileCacheProvider는 환경변수를 직접 읽지 않음
  → 필요하면 FileCacheOptions.from_env()로 만들어 생성자에 전달

Usage:
    from credscache.config import FileCacheOptions, settings

    options = FileCacheOptions(cache_dir=settings.AWS_CLI_CACHE_DIR)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """패키지 전역 기본값 (불변)"""

    # 캐시
    DEFAULT_CACHE_DIR: str = ""
    DEFAULT_EXPIRY_WINDOW_SECONDS: int = 60
    AWS_CLI_CACHE_DIR: str = str(Path.home() / ".aws" / "cli" / "cache")
    CACHE_FILE_SUFFIX: str = ".json"
    CACHE_FILE_MODE: int = 0o600
    CACHE_DIR_MODE: int = 0o700

    # AWS
    DEFAULT_REGION: str = "us-east-1"
    API_TIMEOUT: int = 30
    API_RETRY_COUNT: int = 3
    DEFAULT_ROLE_SESSION_NAME_PREFIX: str = "credscache"


settings = Settings()


# =============================================================================
# 환경변수 헬퍼
# =============================================================================

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환 (해석 불가 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default

    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def get_env_int(name: str, default: int = 0) -> int:
    """환경변수를 int로 변환 (해석 불가 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default

    try:
        return int(value)
    except ValueError:
        return default


def get_default_profile() -> str | None:
    """AWS_PROFILE → AWS_DEFAULT_PROFILE 순으로 프로파일 이름 반환"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


def get_default_region() -> str:
    """AWS_REGION → AWS_DEFAULT_REGION → Settings.DEFAULT_REGION"""
    return (
        os.environ.get("AWS_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
        or settings.DEFAULT_REGION
    )


def get_aws_cli_cache_dir() -> str:
    """AWS CLI가 assume role 자격증명을 캐시하는 디렉토리

    ~ 는 호출 시점의 HOME 기준으로 확장합니다.
    """
    return str(Path("~/.aws/cli/cache").expanduser())


@lru_cache(maxsize=1)
def get_version() -> str:
    """설치된 패키지 메타데이터에서 버전을 읽음"""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("credscache")
    except PackageNotFoundError:
        from . import __version__

        return __version__


# =============================================================================
# 로그 설정
# =============================================================================


@dataclass
class LogConfig:
    """로그 설정

    Attributes:
        level: 로그 레벨 이름
        format: logging 포맷 문자열
        date_format: 시간 포맷
    """

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> "LogConfig":
        """LOG_LEVEL, LOG_FORMAT 환경변수에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
            date_format=default.date_format,
        )


# =============================================================================
# FileCacheOptions
# =============================================================================


def _default_expiry_window() -> timedelta:
    return timedelta(seconds=settings.DEFAULT_EXPIRY_WINDOW_SECONDS)


@dataclass(frozen=True)
class FileCacheOptions:
    """FileCacheProvider 설정

    Attributes:
        cache_dir: 캐시 디렉토리 ("" 이면 현재 작업 디렉토리)
        expiry_window: 만료 전 갱신 여유 시간 (기본 1분)
    """

    cache_dir: str = settings.DEFAULT_CACHE_DIR
    expiry_window: timedelta = field(default_factory=_default_expiry_window)

    def __post_init__(self):
        if self.cache_dir is None:
            object.__setattr__(self, "cache_dir", settings.DEFAULT_CACHE_DIR)
        object.__setattr__(self, "cache_dir", os.fspath(self.cache_dir))
        if self.expiry_window < timedelta(0):
            raise ValueError(f"expiry_window must not be negative: {self.expiry_window}")

    @classmethod
    def from_env(cls) -> "FileCacheOptions":
        """CREDSCACHE_DIR, CREDSCACHE_EXPIRY_WINDOW_SECONDS 환경변수에서 로드"""
        window = get_env_int(
            "CREDSCACHE_EXPIRY_WINDOW_SECONDS",
            default=settings.DEFAULT_EXPIRY_WINDOW_SECONDS,
        )
        return cls(
            cache_dir=os.environ.get("CREDSCACHE_DIR", settings.DEFAULT_CACHE_DIR),
            expiry_window=timedelta(seconds=window),
        )

    @classmethod
    def aws_cli(cls, expiry_window: timedelta | None = None) -> "FileCacheOptions":
        """AWS CLI 공유 캐시 디렉토리를 사용하는 설정"""
        if expiry_window is None:
            return cls(cache_dir=get_aws_cli_cache_dir())
        return cls(cache_dir=get_aws_cli_cache_dir(), expiry_window=expiry_window)
