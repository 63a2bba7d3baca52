"""
credscache/provider/static.py - 정적 자격증명 Provider

액세스 키를 그대로 반환합니다. 만료되지 않으므로 FileCacheProvider가
캐시 파일로 저장하지 않습니다.
"""

from __future__ import annotations

from ..exceptions import NilInputError
from .base import Credentials, CredentialsProvider


class StaticCredentialsProvider(CredentialsProvider):
    """고정 액세스 키 Provider

    Raises:
        NilInputError: access_key_id 또는 secret_access_key가 비어 있는 경우
    """

    def __init__(self, access_key_id: str, secret_access_key: str, session_token: str = ""):
        if not access_key_id:
            raise NilInputError("access_key_id")
        if not secret_access_key:
            raise NilInputError("secret_access_key")

        self._credentials = Credentials.fixed(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            source=self.name(),
        )

    def retrieve(self) -> Credentials:
        return self._credentials
