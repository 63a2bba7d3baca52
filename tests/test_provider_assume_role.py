# tests/test_provider_assume_role.py
"""
credscache/provider/assume_role.py, static.py 단위 테스트

AssumeRoleProvider / StaticCredentialsProvider 테스트.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from credscache.cachekey import assume_role_cache_key
from credscache.config import FileCacheOptions
from credscache.exceptions import CacheKeyError, NilInputError
from credscache.provider import AssumeRoleProvider, FileCacheProvider, StaticCredentialsProvider
from credscache.provider.assume_role import default_client_config, stdin_token_provider

EXPIRES = datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def mock_sts_client():
    """STS 클라이언트 모킹"""
    client = MagicMock()
    client.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIAASSUMED",
            "SecretAccessKey": "assumed-secret",
            "SessionToken": "assumed-token",
            "Expiration": EXPIRES,
        },
        "AssumedRoleUser": {
            "AssumedRoleId": "AROAEXAMPLE:session",
            "Arn": "arn:aws:sts::123456789012:assumed-role/test-role/session",
        },
    }
    return client


# =============================================================================
# AssumeRoleProvider 생성
# =============================================================================


class TestAssumeRoleProviderInit:
    """AssumeRoleProvider 생성 테스트"""

    def test_missing_role_arn(self):
        with pytest.raises(NilInputError) as exc_info:
            AssumeRoleProvider("")

        assert exc_info.value.argument == "role_arn"

    def test_mfa_requires_token_provider(self, role_arn):
        """serial_number 지정 시 token_provider 필수"""
        with pytest.raises(NilInputError) as exc_info:
            AssumeRoleProvider(role_arn, serial_number="arn:aws:iam::123456789012:mfa/me")

        assert exc_info.value.argument == "token_provider"

    def test_cache_key_generator(self, role_arn):
        """Provider 파라미터로 같은 캐시 키 생성"""
        provider = AssumeRoleProvider(
            role_arn,
            role_session_name="me",
            external_id="ext",
            duration=timedelta(hours=1),
        )

        expected = assume_role_cache_key(
            role_arn, role_session_name="me", external_id="ext", duration=timedelta(hours=1)
        )
        assert provider.cache_key_generator().cache_key() == expected

    def test_policy_refuses_cache_key(self, role_arn):
        """세션 정책은 키에 없으므로 정책이 있는 요청은 캐시 키를 만들지 않음"""
        provider = AssumeRoleProvider(role_arn, policy='{"Statement": []}')

        with pytest.raises(CacheKeyError):
            provider.cache_key_generator()

    def test_policy_request_never_shares_cache(self, role_arn, mock_sts_client, cache_dir):
        """정책이 다른 요청이 캐시된 넓은 권한 자격증명을 받지 않음"""
        broad = AssumeRoleProvider(role_arn, client=mock_sts_client)
        FileCacheProvider(broad, broad.cache_key_generator(), FileCacheOptions(cache_dir=cache_dir)).retrieve()
        assert (cache_dir / f"{assume_role_cache_key(role_arn)}.json").exists()

        narrow = AssumeRoleProvider(role_arn, client=mock_sts_client, policy='{"Statement": []}')
        with pytest.raises(CacheKeyError):
            FileCacheProvider(narrow, narrow.cache_key_generator(), FileCacheOptions(cache_dir=cache_dir))

        mock_sts_client.assume_role.return_value["Credentials"]["AccessKeyId"] = "ASIANARROW"
        creds = narrow.retrieve()

        assert creds.access_key_id == "ASIANARROW"
        assert mock_sts_client.assume_role.call_args.kwargs["Policy"] == '{"Statement": []}'

    def test_name(self, role_arn):
        assert AssumeRoleProvider(role_arn).name() == "AssumeRoleProvider"


# =============================================================================
# AssumeRoleProvider.retrieve
# =============================================================================


class TestAssumeRoleProviderRetrieve:
    """AssumeRoleProvider.retrieve 테스트"""

    def test_retrieve(self, role_arn, mock_sts_client):
        provider = AssumeRoleProvider(role_arn, client=mock_sts_client)

        creds = provider.retrieve()

        assert creds.access_key_id == "ASIAASSUMED"
        assert creds.secret_access_key == "assumed-secret"
        assert creds.session_token == "assumed-token"
        assert creds.can_expire is True
        assert creds.expires == EXPIRES
        assert creds.source == "AssumeRoleProvider"
        assert provider.expires_at() == EXPIRES

    def test_generated_session_name(self, role_arn, mock_sts_client):
        """세션 이름이 없으면 자동 생성"""
        AssumeRoleProvider(role_arn, client=mock_sts_client).retrieve()

        params = mock_sts_client.assume_role.call_args.kwargs
        assert params["RoleArn"] == role_arn
        assert params["RoleSessionName"].startswith("credscache-")
        assert "TokenCode" not in params

    def test_all_parameters(self, role_arn, mock_sts_client):
        """모든 옵션과 MFA 토큰 전달"""
        token_provider = MagicMock(return_value="123456")
        provider = AssumeRoleProvider(
            role_arn,
            client=mock_sts_client,
            role_session_name="me",
            external_id="ext",
            serial_number="arn:aws:iam::123456789012:mfa/me",
            duration=timedelta(minutes=15),
            token_provider=token_provider,
            policy="{}",
        )

        provider.retrieve()

        mock_sts_client.assume_role.assert_called_once_with(
            RoleArn=role_arn,
            RoleSessionName="me",
            ExternalId="ext",
            SerialNumber="arn:aws:iam::123456789012:mfa/me",
            DurationSeconds=900,
            Policy="{}",
            TokenCode="123456",
        )
        token_provider.assert_called_once_with()

    def test_string_expiration(self, role_arn, mock_sts_client):
        """문자열 Expiration도 파싱"""
        mock_sts_client.assume_role.return_value["Credentials"]["Expiration"] = "2030-01-02T03:04:05Z"

        creds = AssumeRoleProvider(role_arn, client=mock_sts_client).retrieve()

        assert creds.expires == EXPIRES

    def test_client_error_propagates(self, role_arn, mock_sts_client):
        """STS 오류는 그대로 전파"""
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "AssumeRole")
        mock_sts_client.assume_role.side_effect = error

        with pytest.raises(ClientError) as exc_info:
            AssumeRoleProvider(role_arn, client=mock_sts_client).retrieve()

        assert exc_info.value is error

    def test_expires_at_before_retrieve(self, role_arn, mock_sts_client):
        provider = AssumeRoleProvider(role_arn, client=mock_sts_client)

        assert provider.expires_at() is None
        assert provider.is_expired() is True

    def test_client_from_session(self, role_arn, mock_sts_client):
        """client가 없으면 session으로 STS 클라이언트 생성"""
        session = MagicMock()
        session.region_name = "ap-northeast-2"
        session.client.return_value = mock_sts_client

        AssumeRoleProvider(role_arn, session=session).retrieve()
        AssumeRoleProvider(role_arn, session=session).retrieve()

        assert session.client.call_count == 2
        args, kwargs = session.client.call_args
        assert args == ("sts",)
        assert kwargs["region_name"] == "ap-northeast-2"
        assert kwargs["config"].connect_timeout == 30


class TestAssumeRoleProviderMoto:
    """moto STS 통합 테스트"""

    def test_retrieve_with_moto(self, moto_sts, role_arn):
        import boto3

        provider = AssumeRoleProvider(
            role_arn,
            session=boto3.Session(region_name="us-east-1"),
            duration=timedelta(hours=1),
        )

        creds = provider.retrieve()

        assert creds.has_keys()
        assert creds.session_token
        assert creds.can_expire is True
        assert creds.expires > datetime.now(timezone.utc)
        assert provider.expires_at() == creds.expires


# =============================================================================
# 헬퍼
# =============================================================================


class TestHelpers:
    """stdin_token_provider / default_client_config 테스트"""

    def test_stdin_token_provider(self):
        with patch("credscache.provider.assume_role.click.prompt", return_value=" 123456 ") as prompt:
            assert stdin_token_provider() == "123456"

        assert prompt.call_args.kwargs["err"] is True

    def test_default_client_config(self):
        config = default_client_config()

        assert config.connect_timeout == 30
        assert config.read_timeout == 30
        assert config.retries == {"max_attempts": 3, "mode": "standard"}


# =============================================================================
# StaticCredentialsProvider
# =============================================================================


class TestStaticCredentialsProvider:
    """StaticCredentialsProvider 테스트"""

    def test_retrieve(self):
        creds = StaticCredentialsProvider("AKIASTATIC", "secret").retrieve()

        assert creds.access_key_id == "AKIASTATIC"
        assert creds.secret_access_key == "secret"
        assert creds.session_token == ""
        assert creds.can_expire is False
        assert creds.expires is None
        assert creds.source == "StaticCredentialsProvider"
        assert creds.expired() is False

    @pytest.mark.parametrize(
        "access_key_id,secret_access_key,argument",
        [("", "secret", "access_key_id"), ("AKIASTATIC", "", "secret_access_key")],
    )
    def test_missing_keys(self, access_key_id, secret_access_key, argument):
        with pytest.raises(NilInputError) as exc_info:
            StaticCredentialsProvider(access_key_id, secret_access_key)

        assert exc_info.value.argument == argument
