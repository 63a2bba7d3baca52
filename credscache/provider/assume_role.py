"""
credscache/provider/assume_role.py - STS AssumeRole Provider

boto3 STS 클라이언트로 AssumeRole을 호출하여 임시 자격증명을 발급받습니다.
FileCacheProvider의 상위 Provider로 사용하는 것이 일반적입니다.

MFA:
    serial_number를 지정하면 token_provider()가 반환한 코드를 TokenCode로 전달합니다.
    대화형 입력이 필요하면 stdin_token_provider를 사용합니다.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

import boto3
import click
from botocore.config import Config

from ..cache.file_cache import parse_expiration
from ..cachekey.assume_role import AssumeRoleCacheKeyGenerator
from ..config import get_default_region, settings
from ..exceptions import CacheKeyError, NilInputError
from .base import Credentials, CredentialsProvider, Expirer, to_utc

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str]


def stdin_token_provider() -> str:
    """표준 입력에서 MFA 토큰 코드를 읽음 (프롬프트는 stderr)"""
    return click.prompt("Assume Role MFA token code", err=True).strip()


def default_client_config() -> Config:
    """STS 호출용 botocore 설정 (타임아웃/재시도)"""
    return Config(
        connect_timeout=settings.API_TIMEOUT,
        read_timeout=settings.API_TIMEOUT,
        retries={"max_attempts": settings.API_RETRY_COUNT, "mode": "standard"},
    )


class AssumeRoleProvider(CredentialsProvider, Expirer):
    """STS AssumeRole 자격증명 Provider

    Args:
        role_arn: 대상 역할 ARN
        client: STS 클라이언트 (없으면 session으로 생성)
        session: 클라이언트 생성에 사용할 boto3 Session (없으면 기본 Session)
        role_session_name: 세션 이름 (없으면 자동 생성, 캐시 키에는 포함되지 않음)
        external_id: External ID
        serial_number: MFA 디바이스 시리얼
        duration: 세션 유지 시간
        token_provider: MFA 토큰 코드 공급 함수 (serial_number 지정 시 필수)
        policy: 세션 정책 JSON (지정하면 캐시 키를 만들 수 없음, 캐시 없이 사용)

    Raises:
        NilInputError: role_arn이 없거나, MFA 사용 시 token_provider가 없는 경우
    """

    def __init__(
        self,
        role_arn: str,
        *,
        client: Any = None,
        session: Optional[boto3.Session] = None,
        role_session_name: str = "",
        external_id: Optional[str] = None,
        serial_number: Optional[str] = None,
        duration: Optional[timedelta] = None,
        token_provider: Optional[TokenProvider] = None,
        policy: Optional[str] = None,
    ):
        if not role_arn:
            raise NilInputError("role_arn")
        if serial_number is not None and token_provider is None:
            raise NilInputError("token_provider")

        self._role_arn = role_arn
        self._client = client
        self._session = session
        self._role_session_name = role_session_name or ""
        self._external_id = external_id
        self._serial_number = serial_number
        self._duration = duration
        self._token_provider = token_provider
        self._policy = policy
        self._expires: Optional[datetime] = None

    @property
    def role_arn(self) -> str:
        return self._role_arn

    def cache_key_generator(self) -> AssumeRoleCacheKeyGenerator:
        """이 Provider의 요청 파라미터로 캐시 키 생성기를 만듦

        Raises:
            CacheKeyError: 세션 정책(policy)이 지정된 경우. 정책은 키에 반영되지 않아
                정책이 다른 요청끼리 같은 캐시 파일을 공유하게 되므로 거부합니다.
        """
        if self._policy is not None:
            raise CacheKeyError("세션 정책(Policy)이 지정된 요청은 캐시 키를 만들 수 없습니다")
        return self._request_params()

    def _request_params(self) -> AssumeRoleCacheKeyGenerator:
        return AssumeRoleCacheKeyGenerator(
            role_arn=self._role_arn,
            role_session_name=self._role_session_name,
            external_id=self._external_id,
            serial_number=self._serial_number,
            duration=self._duration,
        )

    def _get_client(self):
        if self._client is None:
            session = self._session or boto3.Session()
            self._client = session.client(
                "sts",
                region_name=session.region_name or get_default_region(),
                config=default_client_config(),
            )
        return self._client

    def _build_params(self) -> dict:
        params = self._request_params().to_assume_role_params()
        params.setdefault(
            "RoleSessionName",
            f"{settings.DEFAULT_ROLE_SESSION_NAME_PREFIX}-{time.time_ns()}",
        )
        if self._policy is not None:
            params["Policy"] = self._policy
        if self._serial_number is not None:
            params["TokenCode"] = self._token_provider()
        return params

    def retrieve(self) -> Credentials:
        """AssumeRole 호출

        Raises:
            botocore.exceptions.ClientError: STS API 오류 (그대로 전파)
            botocore.exceptions.BotoCoreError: 네트워크/설정 오류 (그대로 전파)
        """
        params = self._build_params()
        logger.debug("AssumeRole 호출: %s", self._role_arn)

        response = self._get_client().assume_role(**params)
        creds = response["Credentials"]

        expiration = creds["Expiration"]
        if isinstance(expiration, str):
            expiration = parse_expiration(expiration)
        self._expires = to_utc(expiration)
        return Credentials.expiring(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expires=self._expires,
            source=self.name(),
        )

    def expires_at(self) -> Optional[datetime]:
        return self._expires
