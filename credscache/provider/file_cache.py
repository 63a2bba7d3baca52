"""
credscache/provider/file_cache.py - 파일 캐시 Provider (상위 Provider 데코레이터)

상위 Provider(예: AssumeRoleProvider)를 감싸서, 이전에 발급받은 임시 자격증명을
파일에 저장해 두고 만료 직전까지 재사용합니다. MFA 입력이 필요한 AssumeRole을
매번 다시 호출하지 않기 위한 용도입니다.

조회 순서:
    1. {cache_dir}/{cache_key}.json 이 있으면 로드
       - 로드 실패 → FileCacheProviderError (깨진 캐시를 건너뛰지 않음)
       - expires > now + expiry_window → 캐시 자격증명 반환 (상위 Provider 호출 없음)
    2. 없거나 만료 임박이면 상위 Provider.retrieve() 호출
       - 실패 → FileCacheProviderError (원인 예외 보존)
    3. 만료형 자격증명이면 캐시 파일에 저장, 고정 자격증명은 저장하지 않음

메모리에 자격증명을 보관하지 않으며 호출마다 파일을 다시 읽습니다.
동시 호출 간 잠금은 없습니다 (마지막 writer 우선).
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Optional, Union

from ..cache.file_cache import cache_file_path, load_credentials, store_credentials, validate_cache_key
from ..cachekey.assume_role import AssumeRoleCacheKeyGenerator
from ..config import FileCacheOptions
from ..exceptions import CacheFileError, FileCacheProviderError, NilInputError
from .base import FILE_CACHE_PROVIDER_NAME, Credentials, CredentialsProvider, Expirer

logger = logging.getLogger(__name__)

CacheKeyLike = Union[str, AssumeRoleCacheKeyGenerator]


class FileCacheProvider(CredentialsProvider):
    """파일 캐시 기반 자격증명 Provider

    Args:
        provider: 실제 자격증명을 발급하는 상위 Provider
        cache_key: 캐시 키 문자열 또는 AssumeRoleCacheKeyGenerator
        options: 캐시 디렉토리 / 만료 여유 시간 (기본 FileCacheOptions())

    Raises:
        NilInputError: provider 또는 cache_key가 없는 경우
        InvalidCacheKeyError: cache_key가 소문자 hex 40자가 아닌 경우

    Example:
        upstream = AssumeRoleProvider(role_arn, serial_number=mfa_serial)
        provider = FileCacheProvider(
            upstream,
            upstream.cache_key_generator(),
            FileCacheOptions.aws_cli(),
        )
        creds = provider.retrieve()
    """

    def __init__(
        self,
        provider: CredentialsProvider,
        cache_key: CacheKeyLike,
        options: Optional[FileCacheOptions] = None,
    ):
        if provider is None:
            raise NilInputError("provider")
        if isinstance(cache_key, AssumeRoleCacheKeyGenerator):
            cache_key = cache_key.cache_key()
        if not cache_key:
            raise NilInputError("cache_key")
        validate_cache_key(cache_key)

        self._provider = provider
        self._cache_key = cache_key
        self._options = options or FileCacheOptions()

    def name(self) -> str:
        return FILE_CACHE_PROVIDER_NAME

    @property
    def provider(self) -> CredentialsProvider:
        """감싸고 있는 상위 Provider"""
        return self._provider

    @property
    def cache_key(self) -> str:
        return self._cache_key

    @property
    def options(self) -> FileCacheOptions:
        return self._options

    @property
    def cache_path(self) -> str:
        """캐시 파일 전체 경로"""
        return cache_file_path(self._options.cache_dir, self._cache_key)

    def retrieve(self) -> Credentials:
        """캐시 또는 상위 Provider에서 자격증명 조회

        호출 단위의 취소/데드라인 인자는 없습니다. 상위 호출의 시간 제한은
        STS 클라이언트의 botocore Config 타임아웃(connect_timeout, read_timeout,
        재시도 횟수)으로만 걸립니다 (default_client_config 참고).

        Returns:
            source가 "FileCacheProvider"로 설정된 자격증명

        Raises:
            FileCacheProviderError: 캐시 로드/저장 실패 또는 상위 Provider 실패
        """
        path = self.cache_path

        if os.path.exists(path):
            try:
                cached = load_credentials(path, source=FILE_CACHE_PROVIDER_NAME)
            except CacheFileError as e:
                logger.warning("캐시 파일을 읽을 수 없습니다: %s (%s)", path, e.message)
                raise FileCacheProviderError("load", "캐시 파일 로드 실패", cause=e) from e

            if not cached.expired(self._options.expiry_window):
                logger.debug("캐시 히트: %s (만료: %s)", self._cache_key, cached.expires)
                return cached

            logger.debug("캐시 만료 임박: %s (만료: %s)", self._cache_key, cached.expires)
        else:
            logger.debug("캐시 미스: %s", self._cache_key)

        try:
            creds = self._provider.retrieve()
        except Exception as e:
            raise FileCacheProviderError(
                "retrieve", "상위 Provider 자격증명 조회 실패", cause=e
            ) from e

        creds = creds.with_source(FILE_CACHE_PROVIDER_NAME)

        if not creds.can_expire:
            logger.debug("고정 자격증명은 캐시하지 않음: %s", self._provider.name())
            return creds

        if creds.expires is None and isinstance(self._provider, Expirer):
            expires = self._provider.expires_at()
            if expires is not None:
                creds = replace(creds, expires=expires)

        if creds.expires is None:
            logger.warning(
                "만료 시각을 알 수 없어 캐시하지 않음: %s", self._provider.name()
            )
            return creds

        try:
            store_credentials(path, creds)
        except CacheFileError as e:
            raise FileCacheProviderError("store", "캐시 파일 저장 실패", cause=e) from e

        logger.debug("캐시 갱신: %s (만료: %s)", self._cache_key, creds.expires)
        return creds
