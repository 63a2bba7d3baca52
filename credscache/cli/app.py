"""
credscache/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    credscache --version                    # 버전 표시
    credscache key --role-arn ARN ...       # 캐시 키 계산
    credscache show KEY                     # 캐시 파일 상태 확인 (시크릿은 출력하지 않음)
    credscache whoami --role-arn ARN ...    # 캐시를 거쳐 AssumeRole 후 호출자 확인

Usage:
    $ credscache key --role-arn arn:aws:iam::123456789012:role/Admin --duration-seconds 3600
    $ credscache whoami --role-arn arn:aws:iam::123456789012:role/Admin \\
          --serial-number arn:aws:iam::123456789012:mfa/me

    # 모듈로 실행
    $ python -m credscache.cli.app
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..cache.file_cache import FileCache, cache_file_path, format_timestamp, validate_cache_key
from ..cachekey.assume_role import AssumeRoleCacheKeyGenerator
from ..config import (
    FileCacheOptions,
    LogConfig,
    get_aws_cli_cache_dir,
    get_default_profile,
    get_default_region,
    get_env_bool,
    get_version,
)
from ..exceptions import CredsCacheError, InvalidCacheKeyError, find_cause, is_not_found
from .console import configure_logging, print_error, print_success, print_table, print_warning

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _role_options(func):
    """AssumeRole 파라미터 공통 옵션"""
    options = [
        click.option("--role-arn", required=True, help="대상 역할 ARN"),
        click.option("--role-session-name", default="", help="세션 이름"),
        click.option("--external-id", default=None, help="External ID"),
        click.option("--serial-number", default=None, help="MFA 디바이스 시리얼"),
        click.option(
            "--duration-seconds",
            type=click.IntRange(min=0),
            default=0,
            help="세션 유지 시간(초), 0이면 미지정",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _cache_key_argument(ctx, param, value: str) -> str:
    """KEY 인자 검증 (경로 구분자 등으로 캐시 디렉토리 밖을 가리키지 않도록)"""
    try:
        return validate_cache_key(value)
    except InvalidCacheKeyError as e:
        raise click.BadParameter(e.message) from e


def _build_generator(
    role_arn: str,
    role_session_name: str,
    external_id: str | None,
    serial_number: str | None,
    duration_seconds: int,
) -> AssumeRoleCacheKeyGenerator:
    return AssumeRoleCacheKeyGenerator(
        role_arn=role_arn,
        role_session_name=role_session_name,
        external_id=external_id,
        serial_number=serial_number,
        duration=timedelta(seconds=duration_seconds) if duration_seconds else None,
    )


@click.group()
@click.version_option(version=get_version(), prog_name="credscache")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="로그 레벨 (기본: LOG_LEVEL 환경변수 또는 INFO)",
)
def cli(log_level: str | None) -> None:
    """AWS AssumeRole 자격증명 파일 캐시 (AWS CLI 호환)"""
    config = LogConfig.from_env()
    if log_level:
        config = LogConfig(level=log_level.upper(), format=config.format, date_format=config.date_format)
    configure_logging(config)


# =============================================================================
# key
# =============================================================================


@cli.command()
@_role_options
@click.option("--json", "as_json", is_flag=True, help="정규화 문자열과 함께 JSON으로 출력")
def key(
    role_arn: str,
    role_session_name: str,
    external_id: str | None,
    serial_number: str | None,
    duration_seconds: int,
    as_json: bool,
) -> None:
    """AssumeRole 파라미터로 캐시 키 계산"""
    generator = _build_generator(role_arn, role_session_name, external_id, serial_number, duration_seconds)

    try:
        cache_key = generator.cache_key()
    except CredsCacheError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    if as_json:
        click.echo(json.dumps({"CacheKey": cache_key, "Canonical": str(generator)}, indent=2))
    else:
        click.echo(cache_key)


# =============================================================================
# show
# =============================================================================


@cli.command()
@click.argument("cache_key", callback=_cache_key_argument)
@click.option("--cache-dir", default=None, help="캐시 디렉토리 (기본: ~/.aws/cli/cache)")
@click.option(
    "--expiry-window",
    type=click.IntRange(min=0),
    default=int(FileCacheOptions().expiry_window.total_seconds()),
    show_default=True,
    help="만료 여유 시간(초)",
)
def show(cache_key: str, cache_dir: str | None, expiry_window: int) -> None:
    """캐시 파일의 만료 상태 확인"""
    path = cache_file_path(cache_dir or get_aws_cli_cache_dir(), cache_key)

    try:
        cache = FileCache.load(path)
    except CredsCacheError as e:
        if is_not_found(e):
            print_warning(f"캐시 파일이 없습니다: {path}")
        else:
            print_error(str(e))
        raise SystemExit(1) from e

    creds = cache.to_credentials()
    now = datetime.now(timezone.utc)
    if creds.expired(now=now):
        status = "expired"
    elif creds.expired(timedelta(seconds=expiry_window), now=now):
        status = "expiring"
    else:
        status = "valid"

    print_table(
        f"캐시 {cache_key}",
        [
            ("Path", path),
            ("AccessKeyId", creds.access_key_id),
            ("Expiration", format_timestamp(creds.expires)),
            ("Status", status),
        ],
    )


# =============================================================================
# whoami
# =============================================================================


@cli.command()
@_role_options
@click.option("--cache-dir", default=None, help="캐시 디렉토리 (기본: ~/.aws/cli/cache)")
@click.option("--no-cache", is_flag=True, help="파일 캐시를 사용하지 않음 (CREDSCACHE_NO_CACHE)")
@click.option("-p", "--profile", default=None, help="AssumeRole 호출에 사용할 프로파일")
@click.option("-r", "--region", default=None, help="리전")
def whoami(
    role_arn: str,
    role_session_name: str,
    external_id: str | None,
    serial_number: str | None,
    duration_seconds: int,
    cache_dir: str | None,
    no_cache: bool,
    profile: str | None,
    region: str | None,
) -> None:
    """AssumeRole 자격증명으로 STS GetCallerIdentity 호출"""
    import boto3

    from ..provider.assume_role import AssumeRoleProvider, stdin_token_provider
    from ..provider.file_cache import FileCacheProvider
    from ..session import create_session

    try:
        source_session = boto3.Session(profile_name=profile or get_default_profile(), region_name=region)
    except BotoCoreError as e:
        print_error(f"프로파일 오류: {e}")
        raise SystemExit(1) from e

    upstream = AssumeRoleProvider(
        role_arn,
        session=source_session,
        role_session_name=role_session_name,
        external_id=external_id,
        serial_number=serial_number,
        duration=timedelta(seconds=duration_seconds) if duration_seconds else None,
        token_provider=stdin_token_provider if serial_number else None,
    )

    provider = upstream
    if not (no_cache or get_env_bool("CREDSCACHE_NO_CACHE")):
        options = FileCacheOptions(cache_dir=cache_dir or get_aws_cli_cache_dir())
        provider = FileCacheProvider(upstream, upstream.cache_key_generator(), options)
        logger.debug("캐시 경로: %s", provider.cache_path)

    try:
        region_name = region or source_session.region_name or get_default_region()
        session = create_session(provider, region_name=region_name)
        identity = session.client("sts").get_caller_identity()
    except CredsCacheError as e:
        client_error = find_cause(e, ClientError)
        if client_error is not None:
            print_error(f"AWS 오류: {client_error.response['Error']['Code']}")
        else:
            print_error(str(e))
        raise SystemExit(1) from e
    except (ClientError, BotoCoreError) as e:
        print_error(f"AWS 오류: {e}")
        raise SystemExit(1) from e

    identity.pop("ResponseMetadata", None)
    click.echo(json.dumps(identity, indent=2))
    print_success(f"{provider.name()} 자격증명 사용")


if __name__ == "__main__":
    cli()
