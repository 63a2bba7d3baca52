"""
credscache/cachekey/assume_role.py - AssumeRole 요청 파라미터 기반 캐시 키 생성

AWS CLI(botocore)의 AssumeRole 자격증명 캐시와 동일한 키를 생성합니다.
같은 파라미터로 요청하면 다른 프로세스/언어 구현에서도 같은 캐시 파일
(~/.aws/cli/cache/{key}.json)을 보게 됩니다.

정규화 규칙:
    1. "RoleArn": "<값>" 항목은 항상 포함
    2. 다음 항목은 값이 있을 때만 포함
       - RoleSessionName (빈 문자열이면 제외)
       - ExternalId (None이면 제외)
       - SerialNumber (None이면 제외)
       - DurationSeconds (0 또는 None이면 제외, 정수 초, 따옴표 없음)
    3. 렌더링된 항목 문자열 전체를 사전순 정렬
    4. ", " 로 연결하여 { } 로 감쌈
    5. SHA-1 hex digest (소문자)
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional

from ..exceptions import CacheKeyError


@dataclass(frozen=True)
class AssumeRoleCacheKeyGenerator:
    """AssumeRole 요청 파라미터 (캐시 키 입력)

    Attributes:
        role_arn: 대상 역할 ARN (필수)
        role_session_name: 세션 이름 ("" 이면 없음)
        external_id: External ID (None이면 없음)
        serial_number: MFA 디바이스 시리얼 (None이면 없음)
        duration: 세션 유지 시간 (None 또는 0이면 없음)
    """

    role_arn: str
    role_session_name: str = ""
    external_id: Optional[str] = None
    serial_number: Optional[str] = None
    duration: Optional[timedelta] = None

    def _fragments(self) -> List[str]:
        opts = [f'"RoleArn": "{self.role_arn}"']

        if self.role_session_name:
            opts.append(f'"RoleSessionName": "{self.role_session_name}"')

        if self.external_id is not None:
            opts.append(f'"ExternalId": "{self.external_id}"')

        if self.serial_number is not None:
            opts.append(f'"SerialNumber": "{self.serial_number}"')

        if self.duration_seconds:
            opts.append(f'"DurationSeconds": {self.duration_seconds}')

        # 키 이름이 아니라 렌더링된 문자열 전체 기준 정렬
        return sorted(opts)

    @property
    def duration_seconds(self) -> int:
        """duration을 정수 초로 (소수점 이하 버림)"""
        if self.duration is None:
            return 0
        return int(self.duration.total_seconds())

    def __str__(self) -> str:
        return "{" + ", ".join(self._fragments()) + "}"

    def cache_key(self) -> str:
        """정규화 문자열의 SHA-1 hex digest

        Returns:
            40자리 소문자 hex 문자열

        Raises:
            CacheKeyError: 해시 계산 실패 시
        """
        try:
            digest = hashlib.sha1(str(self).encode("utf-8"))
        except (ValueError, UnicodeError) as e:
            raise CacheKeyError("캐시 키 해시 계산 실패", cause=e) from e

        return digest.hexdigest().lower()

    # -------------------------------------------------------------------------
    # boto3 assume_role 파라미터 변환
    # -------------------------------------------------------------------------

    @classmethod
    def from_assume_role_params(cls, **params: Any) -> "AssumeRoleCacheKeyGenerator":
        """boto3 sts.assume_role() 키워드 인자로부터 생성

        캐시 키와 무관한 인자(TokenCode, Policy 등)는 무시합니다.

        Example:
            AssumeRoleCacheKeyGenerator.from_assume_role_params(
                RoleArn="arn:aws:iam::123456789012:role/Admin",
                RoleSessionName="me",
                DurationSeconds=3600,
            )
        """
        duration_seconds = params.get("DurationSeconds")
        return cls(
            role_arn=params["RoleArn"],
            role_session_name=params.get("RoleSessionName") or "",
            external_id=params.get("ExternalId"),
            serial_number=params.get("SerialNumber"),
            duration=timedelta(seconds=duration_seconds) if duration_seconds else None,
        )

    def to_assume_role_params(self) -> Dict[str, Any]:
        """boto3 sts.assume_role() 키워드 인자로 변환

        RoleSessionName은 API 필수값이므로 비어 있으면 포함하지 않고
        호출 측에서 채우도록 둡니다.
        """
        params: Dict[str, Any] = {"RoleArn": self.role_arn}
        if self.role_session_name:
            params["RoleSessionName"] = self.role_session_name
        if self.external_id is not None:
            params["ExternalId"] = self.external_id
        if self.serial_number is not None:
            params["SerialNumber"] = self.serial_number
        if self.duration_seconds:
            params["DurationSeconds"] = self.duration_seconds
        return params


def assume_role_cache_key(
    role_arn: str,
    role_session_name: str = "",
    external_id: Optional[str] = None,
    serial_number: Optional[str] = None,
    duration: Optional[timedelta] = None,
) -> str:
    """AssumeRole 파라미터에서 바로 캐시 키를 계산"""
    return AssumeRoleCacheKeyGenerator(
        role_arn=role_arn,
        role_session_name=role_session_name,
        external_id=external_id,
        serial_number=serial_number,
        duration=duration,
    ).cache_key()
