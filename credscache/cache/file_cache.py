"""
credscache/cache/file_cache.py - 자격증명 캐시 파일 저장/로드

AWS CLI와 호환되는 형식으로 저장됩니다.
캐시 파일 위치: {cache_dir}/{cache_key}.json

파일 형식:
    {
      "Credentials": {
        "AccessKeyId": "...",
        "SecretAccessKey": "...",
        "SessionToken": "...",
        "Expiration": "2006-01-02T15:04:05Z"
      }
    }

설계 원칙:
- 파일은 소유자만 읽기/쓰기 (0600), 디렉토리는 필요 시 0700으로 생성
- 같은 디렉토리의 임시 파일에 쓴 뒤 rename → 중간에 죽어도 깨진 파일이 남지 않음
- 로드할 때마다 새 인스턴스를 반환 (공유 가변 상태 없음)
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

from botocore.utils import parse_timestamp

from ..config import settings
from ..exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    CacheNotFoundError,
    CacheReadError,
    CacheWriteError,
    InvalidCacheKeyError,
)
from ..provider.base import Credentials, to_utc

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_CACHE_KEY_PATTERN = re.compile(r"[0-9a-f]{40}")


def format_timestamp(value: datetime) -> str:
    """RFC3339 UTC 문자열 ("Z" 접미사, 마이크로초는 있을 때만)"""
    value = to_utc(value)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_expiration(value: str) -> datetime:
    """Expiration 문자열 파싱

    RFC3339("...Z", "+00:00"), 나노초 정밀도, AWS CLI의 "...UTC" 형식을 모두 허용합니다.
    시간대가 없으면 UTC로 간주합니다.
    """
    return to_utc(parse_timestamp(value))


# =============================================================================
# Cached Credentials
# =============================================================================


@dataclass
class CachedCredentials:
    """캐시 파일의 Credentials 항목

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰
        expires: 만료 시각 (UTC)
    """

    access_key_id: str
    secret_access_key: str
    session_token: str
    expires: datetime

    def __post_init__(self):
        self.expires = to_utc(self.expires)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (JSON 저장용)"""
        return {
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
            "SessionToken": self.session_token,
            "Expiration": format_timestamp(self.expires),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CachedCredentials":
        """딕셔너리에서 생성 (JSON 로드용)

        Raises:
            KeyError, TypeError, ValueError: 스키마 불일치
        """
        for key in ("AccessKeyId", "SecretAccessKey", "Expiration"):
            if not isinstance(data[key], str):
                raise TypeError(f"{key} must be a string")

        session_token = data.get("SessionToken") or ""
        if not isinstance(session_token, str):
            raise TypeError("SessionToken must be a string")

        return cls(
            access_key_id=data["AccessKeyId"],
            secret_access_key=data["SecretAccessKey"],
            session_token=session_token,
            expires=parse_expiration(data["Expiration"]),
        )


# =============================================================================
# File Cache
# =============================================================================


@dataclass
class FileCache:
    """캐시 파일 한 개에 대응하는 레코드"""

    credentials: CachedCredentials

    def to_dict(self) -> Dict[str, Any]:
        return {"Credentials": self.credentials.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> "FileCache":
        if not isinstance(data, dict) or not isinstance(data.get("Credentials"), dict):
            raise TypeError("cache must be an object with a 'Credentials' object")
        return cls(credentials=CachedCredentials.from_dict(data["Credentials"]))

    @classmethod
    def from_credentials(cls, creds: Credentials) -> "FileCache":
        """Provider 자격증명에서 생성

        Raises:
            ValueError: 만료 시각이 없는 경우
        """
        if creds.expires is None:
            raise ValueError("credentials without an expiry cannot be cached")
        return cls(
            credentials=CachedCredentials(
                access_key_id=creds.access_key_id,
                secret_access_key=creds.secret_access_key,
                session_token=creds.session_token,
                expires=creds.expires,
            )
        )

    def to_credentials(self, source: str = "") -> Credentials:
        """Provider 자격증명으로 변환 (항상 만료형)"""
        return Credentials.expiring(
            access_key_id=self.credentials.access_key_id,
            secret_access_key=self.credentials.secret_access_key,
            session_token=self.credentials.session_token,
            expires=self.credentials.expires,
            source=source,
        )

    @classmethod
    def load(cls, path: PathLike) -> "FileCache":
        """캐시 파일을 읽어 새 인스턴스로 반환

        Raises:
            CacheNotFoundError: 파일이 없는 경우
            CacheReadError: 그 외 읽기 실패
            CacheDecodeError: JSON/스키마 불일치
        """
        path_str = os.fspath(path)
        try:
            with open(path_str, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError as e:
            raise CacheNotFoundError(path_str, cause=e) from e
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(path_str, cause=e) from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CacheDecodeError(path_str, cause=e) from e

        try:
            return cls.from_dict(data)
        except (KeyError, TypeError, ValueError, OverflowError, RuntimeError) as e:
            raise CacheDecodeError(path_str, "캐시 스키마 불일치", cause=e) from e

    def store(self, path: PathLike) -> None:
        """캐시 파일로 저장 (기존 내용은 덮어씀)

        Raises:
            CacheEncodeError: 직렬화 실패
            CacheWriteError: 디렉토리 생성/파일 쓰기 실패
        """
        path_str = os.fspath(path)
        try:
            data = json.dumps(self.to_dict())
        except (TypeError, ValueError) as e:
            raise CacheEncodeError(path_str, cause=e) from e

        directory = os.path.dirname(path_str)
        if directory and not os.path.isdir(directory):
            try:
                os.makedirs(directory, mode=settings.CACHE_DIR_MODE, exist_ok=True)
            except OSError as e:
                raise CacheWriteError(path_str, operation="mkdir", cause=e) from e

        _write_atomic(path_str, data)
        logger.debug("캐시 파일 저장: %s", path_str)


def _write_atomic(path: str, data: str) -> None:
    directory = os.path.dirname(path) or "."
    name = os.path.basename(path)

    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=directory)
    except OSError as e:
        raise CacheWriteError(path, cause=e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, settings.CACHE_FILE_MODE)
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise CacheWriteError(path, cause=e) from e


# =============================================================================
# Credentials 단위 헬퍼
# =============================================================================


def validate_cache_key(cache_key: str) -> str:
    """캐시 키 형식 검증 (SHA-1 hex digest, 소문자 40자)

    Raises:
        InvalidCacheKeyError: 형식이 맞지 않는 경우 (경로 구분자, "..", 대문자 등)
    """
    if not isinstance(cache_key, str) or not _CACHE_KEY_PATTERN.fullmatch(cache_key):
        raise InvalidCacheKeyError(cache_key)
    return cache_key


def cache_file_path(cache_dir: PathLike, cache_key: str) -> str:
    """{cache_dir}/{cache_key}.json ("" 이면 현재 디렉토리 기준 상대 경로)

    Raises:
        InvalidCacheKeyError: 캐시 키 형식 오류
    """
    validate_cache_key(cache_key)
    filename = f"{cache_key}{settings.CACHE_FILE_SUFFIX}"
    cache_dir = os.fspath(cache_dir)
    if not cache_dir:
        return filename
    return str(Path(cache_dir) / filename)


def load_credentials(path: PathLike, source: str = "") -> Credentials:
    """캐시 파일에서 자격증명을 로드"""
    return FileCache.load(path).to_credentials(source)


def store_credentials(path: PathLike, creds: Credentials) -> None:
    """자격증명을 캐시 파일로 저장

    Raises:
        CacheEncodeError: 만료 시각이 없는 자격증명
        CacheWriteError: 쓰기 실패
    """
    try:
        cache = FileCache.from_credentials(creds)
    except ValueError as e:
        raise CacheEncodeError(os.fspath(path), cause=e) from e
    cache.store(path)
