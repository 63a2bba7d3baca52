"""
credscache/session.py - boto3/botocore 연동

Provider를 botocore 자격증명 체인에 명시적으로 연결합니다.
이미 만들어진 체인 내부를 바꾸지 않고, 생성 시점에 조합합니다.

    AssumeRoleProvider ─▶ FileCacheProvider ─▶ FileCacheCredentialProvider
                                                   └─▶ botocore Session ─▶ boto3.Session

Usage:
    from credscache.session import new_cached_assume_role_session
    from credscache.provider import stdin_token_provider

    session = new_cached_assume_role_session(
        "arn:aws:iam::123456789012:role/Admin",
        serial_number="arn:aws:iam::123456789012:mfa/me",
        token_provider=stdin_token_provider,
        options=FileCacheOptions.aws_cli(),
    )
    session.client("sts").get_caller_identity()
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import boto3
import botocore.credentials
import botocore.session

from .cache.file_cache import format_timestamp
from .config import FileCacheOptions
from .exceptions import NilInputError
from .provider.assume_role import AssumeRoleProvider, TokenProvider
from .provider.base import Credentials, CredentialsProvider
from .provider.file_cache import FileCacheProvider

logger = logging.getLogger(__name__)

CREDENTIALS_METHOD = "credscache"


def _to_metadata(creds: Credentials) -> Dict[str, Any]:
    return {
        "access_key": creds.access_key_id,
        "secret_key": creds.secret_access_key,
        "token": creds.session_token or None,
        "expiry_time": format_timestamp(creds.expires),
    }


def create_refreshable_credentials(
    provider: CredentialsProvider,
) -> botocore.credentials.Credentials:
    """Provider를 botocore 자격증명 객체로 변환

    만료형이면 RefreshableCredentials (갱신 시 provider.retrieve() 재호출),
    고정형이면 일반 Credentials를 반환합니다.
    """
    if provider is None:
        raise NilInputError("provider")

    creds = provider.retrieve()
    if not creds.can_expire or creds.expires is None:
        return botocore.credentials.Credentials(
            creds.access_key_id,
            creds.secret_access_key,
            creds.session_token or None,
            method=CREDENTIALS_METHOD,
        )

    def refresh() -> Dict[str, Any]:
        refreshed = provider.retrieve()
        logger.debug("botocore 자격증명 갱신 (만료: %s)", refreshed.expires)
        return _to_metadata(refreshed)

    return botocore.credentials.RefreshableCredentials.create_from_metadata(
        metadata=_to_metadata(creds),
        refresh_using=refresh,
        method=CREDENTIALS_METHOD,
    )


class FileCacheCredentialProvider(botocore.credentials.CredentialProvider):
    """botocore 자격증명 체인에 넣을 수 있는 어댑터"""

    METHOD = CREDENTIALS_METHOD
    CANONICAL_NAME = "CredsCache"

    def __init__(self, provider: CredentialsProvider):
        super().__init__()
        if provider is None:
            raise NilInputError("provider")
        self._provider = provider

    def load(self) -> botocore.credentials.Credentials:
        return create_refreshable_credentials(self._provider)


def create_session(
    provider: CredentialsProvider,
    region_name: Optional[str] = None,
    botocore_session: Optional[botocore.session.Session] = None,
) -> boto3.Session:
    """provider를 자격증명 체인 맨 앞에 둔 boto3 Session 생성

    Args:
        provider: 자격증명 Provider (보통 FileCacheProvider)
        region_name: 리전
        botocore_session: 기반 botocore Session (없으면 새로 생성)
    """
    botocore_session = botocore_session or botocore.session.get_session()
    resolver = botocore_session.get_component("credential_provider")
    resolver.providers.insert(0, FileCacheCredentialProvider(provider))

    return boto3.Session(botocore_session=botocore_session, region_name=region_name)


def new_cached_assume_role_session(
    role_arn: str,
    *,
    role_session_name: str = "",
    external_id: Optional[str] = None,
    serial_number: Optional[str] = None,
    duration: Optional[timedelta] = None,
    token_provider: Optional[TokenProvider] = None,
    options: Optional[FileCacheOptions] = None,
    source_session: Optional[boto3.Session] = None,
    region_name: Optional[str] = None,
) -> boto3.Session:
    """파일 캐시를 거치는 AssumeRole boto3 Session 생성

    source_session의 자격증명으로 AssumeRole을 호출하고, 결과를
    options.cache_dir에 캐시합니다.
    """
    upstream = AssumeRoleProvider(
        role_arn,
        session=source_session,
        role_session_name=role_session_name,
        external_id=external_id,
        serial_number=serial_number,
        duration=duration,
        token_provider=token_provider,
    )
    provider = FileCacheProvider(upstream, upstream.cache_key_generator(), options)
    logger.debug("캐시 경로: %s", provider.cache_path)

    return create_session(provider, region_name=region_name)
