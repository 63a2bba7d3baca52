"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트용 Provider를 제공합니다.

Usage:
    def test_something(cache_dir, make_provider, make_credentials):
        provider = make_provider(make_credentials())
        ...
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from credscache.provider.base import Credentials, CredentialsProvider, Expirer

ROLE_ARN = "arn:aws:iam::123456789012:role/test-role"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """테스트 환경 설정

    실제 사용자 설정 파일과 프로파일을 읽지 않도록 격리합니다.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials"))
    for name in (
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_REGION",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "CREDSCACHE_NO_CACHE",
    ):
        monkeypatch.delenv(name, raising=False)

    yield


@pytest.fixture
def cache_dir(tmp_path):
    """아직 존재하지 않는 캐시 디렉토리 경로"""
    return tmp_path / "cache"


# =============================================================================
# 자격증명 헬퍼
# =============================================================================


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def expiring_credentials(
    expires_in: timedelta = timedelta(hours=1),
    access_key_id: str = "ASIAUPSTREAM",
    source: str = "UpstreamProvider",
) -> Credentials:
    """expires_in 후에 만료되는 임시 자격증명"""
    return Credentials.expiring(
        access_key_id=access_key_id,
        secret_access_key="upstream-secret",
        session_token="upstream-token",
        expires=utcnow() + expires_in,
        source=source,
    )


def static_credentials() -> Credentials:
    return Credentials.fixed("AKIASTATIC", "static-secret", source="StaticCredentialsProvider")


class FakeProvider(CredentialsProvider):
    """호출 횟수를 기록하는 테스트용 Provider

    results의 항목을 순서대로 반환하며, 예외 항목이면 raise 합니다.
    마지막 항목은 이후 호출에서 계속 반복됩니다.
    """

    def __init__(self, *results):
        self.results: List = list(results)
        self.calls = 0

    def retrieve(self) -> Credentials:
        index = min(self.calls, len(self.results) - 1)
        self.calls += 1
        result = self.results[index]
        if isinstance(result, BaseException):
            raise result
        return result

    def name(self) -> str:
        return "UpstreamProvider"


class FakeExpirerProvider(FakeProvider, Expirer):
    """만료 시각을 Credentials 대신 Expirer로만 보고하는 Provider"""

    def __init__(self, *results, expires: Optional[datetime] = None):
        super().__init__(*results)
        self.expires = expires

    def expires_at(self) -> Optional[datetime]:
        return self.expires


@pytest.fixture
def role_arn():
    return ROLE_ARN


@pytest.fixture
def make_credentials():
    """만료형 자격증명 팩토리 (expiring_credentials)"""
    return expiring_credentials


@pytest.fixture
def static_creds():
    return static_credentials()


@pytest.fixture
def make_provider():
    """FakeProvider 팩토리"""
    return FakeProvider


@pytest.fixture
def make_expirer_provider():
    """FakeExpirerProvider 팩토리"""
    return FakeExpirerProvider


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def moto_sts(aws_credentials):
    """moto를 사용한 STS 모킹"""
    import boto3
    from moto import mock_aws

    with mock_aws():
        yield boto3.client("sts", region_name="us-east-1")
