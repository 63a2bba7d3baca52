"""
credscache/provider/base.py - 자격증명 타입과 Provider 인터페이스

포함 항목:
    - Credentials: Provider가 반환하는 자격증명 (고정/만료형 구분)
    - CredentialsProvider: 자격증명 조회 능력 (retrieve)
    - Expirer: 만료 시각 보고 능력 (expires_at)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

FILE_CACHE_PROVIDER_NAME = "FileCacheProvider"


def to_utc(value: datetime) -> datetime:
    """datetime을 UTC aware 값으로 맞춤 (naive는 UTC로 간주)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Credentials
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """AWS 자격증명

    can_expire=False 이면 고정(정적) 자격증명, True 이면 expires 시각에
    만료되는 임시 자격증명입니다.

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰 (고정 자격증명은 빈 문자열일 수 있음)
        source: 자격증명을 반환한 Provider 이름
        can_expire: 만료 가능 여부
        expires: 만료 시각 (UTC)
    """

    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""
    source: str = ""
    can_expire: bool = False
    expires: Optional[datetime] = None

    def __post_init__(self):
        if self.expires is not None:
            object.__setattr__(self, "expires", to_utc(self.expires))

    def __repr__(self) -> str:
        # 시크릿은 repr에 노출하지 않음
        return (
            f"Credentials(access_key_id={self.access_key_id!r}, source={self.source!r}, "
            f"can_expire={self.can_expire!r}, expires={self.expires!r})"
        )

    @classmethod
    def fixed(
        cls,
        access_key_id: str,
        secret_access_key: str,
        session_token: str = "",
        source: str = "",
    ) -> "Credentials":
        """만료되지 않는 고정 자격증명"""
        return cls(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            source=source,
            can_expire=False,
            expires=None,
        )

    @classmethod
    def expiring(
        cls,
        access_key_id: str,
        secret_access_key: str,
        session_token: str,
        expires: datetime,
        source: str = "",
    ) -> "Credentials":
        """expires 시각에 만료되는 임시 자격증명"""
        return cls(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            source=source,
            can_expire=True,
            expires=expires,
        )

    def with_source(self, source: str) -> "Credentials":
        """source만 바꾼 복사본"""
        return replace(self, source=source)

    def has_keys(self) -> bool:
        """액세스 키와 시크릿이 모두 있는지"""
        return bool(self.access_key_id) and bool(self.secret_access_key)

    def expired(self, window: timedelta = timedelta(0), now: Optional[datetime] = None) -> bool:
        """window 여유를 두고 만료되었는지 확인

        고정 자격증명은 만료되지 않습니다.
        """
        if not self.can_expire:
            return False
        if self.expires is None:
            return True
        now = to_utc(now) if now else datetime.now(timezone.utc)
        return not self.expires > now + window


# =============================================================================
# Provider Interfaces
# =============================================================================


class CredentialsProvider(ABC):
    """자격증명 조회 능력

    Example:
        class MyProvider(CredentialsProvider):
            def retrieve(self) -> Credentials:
                return Credentials.fixed("AKIA...", "secret", source=self.name())
    """

    @abstractmethod
    def retrieve(self) -> Credentials:
        """자격증명을 조회합니다.

        Raises:
            Exception: 구현체별 실패 (원인 그대로 전파)
        """

    def name(self) -> str:
        """Provider 이름(Credentials.source에 기록됨)"""
        return type(self).__name__


class Expirer(ABC):
    """자격증명 만료 시각을 보고하는 능력

    Credentials.expires를 채우지 않는 Provider를 위해 마지막으로 조회한
    자격증명의 만료 시각을 제공합니다.
    """

    @abstractmethod
    def expires_at(self) -> Optional[datetime]:
        """마지막으로 조회한 자격증명의 만료 시각 (없으면 None)"""

    def is_expired(self, window: timedelta = timedelta(0)) -> bool:
        expires = self.expires_at()
        if expires is None:
            return True
        return not to_utc(expires) > datetime.now(timezone.utc) + window
