"""
credscache/exceptions.py - 통합 예외 계층 구조

자격증명 캐시 전체에서 사용되는 예외 클래스들을 정의합니다.
모든 예외는 원인 예외(cause)를 보존하여 호출자가 원래 에러를 구조적으로
판별할 수 있도록 합니다.

예외 계층 구조:
    CredsCacheError (베이스)
    ├── NilInputError (필수 협력 객체 누락)
    ├── CacheKeyError (캐시 키 해시 실패)
    │   └── InvalidCacheKeyError (형식 오류, ValueError)
    ├── CacheFileError (캐시 파일 입출력)
    │   ├── CacheNotFoundError
    │   ├── CacheReadError
    │   ├── CacheDecodeError
    │   ├── CacheEncodeError
    │   └── CacheWriteError
    └── ProviderError (Provider 실패)
        └── FileCacheProviderError

Usage:
    from credscache.exceptions import FileCacheProviderError, find_cause
    from botocore.exceptions import ClientError

    try:
        creds = provider.retrieve()
    except FileCacheProviderError as e:
        client_error = find_cause(e, ClientError)
        if client_error is not None:
            print(client_error.response["Error"]["Code"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .provider.base import Credentials

E = TypeVar("E", bound=BaseException)

# =============================================================================
# 베이스 예외
# =============================================================================


class CredsCacheError(Exception):
    """credscache 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


class NilInputError(CredsCacheError):
    """필수 입력(협력 객체)이 누락되었을 때 발생하는 에러

    생성 시점에 즉시 실패시키기 위해 사용합니다.

    Attributes:
        argument: 누락된 인자 이름
    """

    def __init__(self, argument: str):
        super().__init__(f"필수 입력이 누락되었습니다: {argument}")
        self.argument = argument
        self.details["argument"] = argument


class CacheKeyError(CredsCacheError):
    """캐시 키 생성(해시) 실패"""


class InvalidCacheKeyError(CacheKeyError, ValueError):
    """캐시 파일 이름으로 쓸 수 없는 캐시 키

    캐시 키는 SHA-1 hex digest (소문자 40자)만 허용합니다.
    경로 구분자나 ".." 이 섞인 키가 캐시 디렉토리 밖을 가리키지 않도록 막습니다.

    Attributes:
        cache_key: 거부된 키
    """

    def __init__(self, cache_key: str):
        super().__init__(f"잘못된 캐시 키입니다 (소문자 hex 40자): {cache_key!r}")
        self.cache_key = cache_key
        self.details["cache_key"] = cache_key


# =============================================================================
# 캐시 파일 관련 예외
# =============================================================================


class CacheFileError(CredsCacheError):
    """캐시 파일 입출력 관련 예외

    Attributes:
        path: 대상 캐시 파일 경로
        operation: 실패한 작업 이름 (read, decode, encode, mkdir, write)
    """

    def __init__(
        self,
        path: str,
        operation: str,
        message: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.path = path
        self.operation = operation
        self.details.update({"path": path, "operation": operation})


class CacheNotFoundError(CacheFileError):
    """캐시 파일이 존재하지 않음

    원인 예외로 FileNotFoundError를 그대로 보존합니다.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        super().__init__(path, "read", "캐시 파일이 없습니다", cause)


class CacheReadError(CacheFileError):
    """캐시 파일 읽기 실패 (권한 등)"""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        super().__init__(path, "read", "캐시 파일 읽기 실패", cause)


class CacheDecodeError(CacheFileError):
    """캐시 파일 내용이 스키마와 맞지 않음"""

    def __init__(
        self,
        path: str,
        reason: str = "캐시 JSON 디코딩 실패",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(path, "decode", reason, cause)


class CacheEncodeError(CacheFileError):
    """캐시 레코드 직렬화 실패"""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        super().__init__(path, "encode", "캐시 JSON 인코딩 실패", cause)


class CacheWriteError(CacheFileError):
    """캐시 디렉토리 생성 또는 파일 쓰기 실패"""

    def __init__(
        self,
        path: str,
        operation: str = "write",
        cause: Optional[BaseException] = None,
    ):
        message = "캐시 디렉토리 생성 실패" if operation == "mkdir" else "캐시 파일 쓰기 실패"
        super().__init__(path, operation, message, cause)


# =============================================================================
# Provider 관련 예외
# =============================================================================


class ProviderError(CredsCacheError):
    """Provider에서 발생하는 에러

    Provider 이름과 실패한 작업 정보를 포함하여 디버깅을 용이하게 합니다.
    에러 메시지 형식: "[provider] operation: message"

    Attributes:
        provider: 에러가 발생한 Provider 이름
        operation: 실패한 작업 이름 (예: "load", "retrieve", "store")
    """

    def __init__(
        self,
        provider: str,
        operation: str,
        message: str,
        cause: Optional[BaseException] = None,
    ):
        full_message = f"[{provider}] {operation}: {message}"
        super().__init__(full_message, cause)
        self.provider = provider
        self.operation = operation
        self.details.update({"provider": provider, "operation": operation})


class FileCacheProviderError(ProviderError):
    """FileCacheProvider 실패

    상위 Provider 실패, 캐시 로드/저장 실패를 모두 이 예외로 감쌉니다.
    credentials 속성에는 source만 채워진 빈 자격증명이 담기며,
    로깅/디버깅 용도일 뿐 유효한 자격증명으로 사용하면 안 됩니다.

    Attributes:
        credentials: source만 설정된 자격증명 껍데기
    """

    def __init__(
        self,
        operation: str,
        message: str,
        cause: Optional[BaseException] = None,
        credentials: Optional["Credentials"] = None,
    ):
        from .provider.base import FILE_CACHE_PROVIDER_NAME, Credentials

        super().__init__(FILE_CACHE_PROVIDER_NAME, operation, message, cause)
        self.credentials = credentials or Credentials(source=FILE_CACHE_PROVIDER_NAME)


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def find_cause(error: BaseException, exc_type: Type[E]) -> Optional[E]:
    """예외 체인에서 지정한 타입의 예외를 찾아 반환

    error 자신부터 시작해 cause / __cause__ 를 따라가며 검사합니다.

    Args:
        error: 시작 예외
        exc_type: 찾을 예외 타입

    Returns:
        일치하는 예외 또는 None
    """
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        if isinstance(current, exc_type):
            return current
        seen.add(id(current))
        current = getattr(current, "cause", None) or current.__cause__
    return None


def has_cause(error: BaseException, exc_type: Type[BaseException]) -> bool:
    """예외 체인에 지정한 타입이 포함되어 있는지 확인"""
    return find_cause(error, exc_type) is not None


def is_not_found(error: BaseException) -> bool:
    """캐시 파일 없음 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        캐시 파일이 없어서 발생한 오류이면 True
    """
    return has_cause(error, CacheNotFoundError) or has_cause(error, FileNotFoundError)
