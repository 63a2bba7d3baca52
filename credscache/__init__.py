"""
credscache - AWS AssumeRole 자격증명 파일 캐시

MFA 입력이 필요할 수 있는 AssumeRole 호출을 매번 반복하지 않도록,
발급받은 임시 자격증명을 요청 파라미터 기반 키로 로컬 파일에 저장하고
만료 직전까지 재사용합니다. 캐시 형식과 키는 AWS CLI와 호환됩니다.

구성:
    credscache/
    ├── cachekey/       # 요청 파라미터 → SHA-1 캐시 키
    ├── cache/          # 캐시 파일 저장/로드 (AWS CLI 호환 JSON)
    ├── provider/       # Credentials, FileCacheProvider, AssumeRole/Static Provider
    ├── session.py      # boto3/botocore 연동
    ├── cli/            # credscache 명령어 (click + rich)
    ├── config.py       # 기본 설정, FileCacheOptions
    └── exceptions.py   # 예외 계층

사용 예시:
    from credscache import (
        AssumeRoleProvider, FileCacheProvider, FileCacheOptions,
    )

    upstream = AssumeRoleProvider("arn:aws:iam::123456789012:role/Admin")
    provider = FileCacheProvider(
        upstream, upstream.cache_key_generator(), FileCacheOptions.aws_cli()
    )
    creds = provider.retrieve()

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    boto3는 실제로 필요한 시점에만 로드됩니다.
"""

__version__ = "0.1.0"

__all__ = [
    # Cache key
    "AssumeRoleCacheKeyGenerator",
    "assume_role_cache_key",
    # Cache file
    "FileCache",
    "CachedCredentials",
    "load_credentials",
    "store_credentials",
    # Providers
    "Credentials",
    "CredentialsProvider",
    "Expirer",
    "FileCacheProvider",
    "AssumeRoleProvider",
    "StaticCredentialsProvider",
    "stdin_token_provider",
    "FILE_CACHE_PROVIDER_NAME",
    # Config
    "FileCacheOptions",
    "settings",
    # Session
    "create_session",
    "create_refreshable_credentials",
    "new_cached_assume_role_session",
    # Errors
    "CredsCacheError",
    "NilInputError",
    "InvalidCacheKeyError",
    "CacheFileError",
    "CacheNotFoundError",
    "CacheDecodeError",
    "CacheWriteError",
    "FileCacheProviderError",
    "find_cause",
]

_IMPORT_MAPPING = {
    # Cache key
    "AssumeRoleCacheKeyGenerator": (".cachekey", "AssumeRoleCacheKeyGenerator"),
    "assume_role_cache_key": (".cachekey", "assume_role_cache_key"),
    # Cache file
    "FileCache": (".cache", "FileCache"),
    "CachedCredentials": (".cache", "CachedCredentials"),
    "load_credentials": (".cache", "load_credentials"),
    "store_credentials": (".cache", "store_credentials"),
    # Providers
    "Credentials": (".provider", "Credentials"),
    "CredentialsProvider": (".provider", "CredentialsProvider"),
    "Expirer": (".provider", "Expirer"),
    "FileCacheProvider": (".provider", "FileCacheProvider"),
    "AssumeRoleProvider": (".provider", "AssumeRoleProvider"),
    "StaticCredentialsProvider": (".provider", "StaticCredentialsProvider"),
    "stdin_token_provider": (".provider", "stdin_token_provider"),
    "FILE_CACHE_PROVIDER_NAME": (".provider", "FILE_CACHE_PROVIDER_NAME"),
    # Config
    "FileCacheOptions": (".config", "FileCacheOptions"),
    "settings": (".config", "settings"),
    # Session
    "create_session": (".session", "create_session"),
    "create_refreshable_credentials": (".session", "create_refreshable_credentials"),
    "new_cached_assume_role_session": (".session", "new_cached_assume_role_session"),
    # Errors
    "CredsCacheError": (".exceptions", "CredsCacheError"),
    "NilInputError": (".exceptions", "NilInputError"),
    "InvalidCacheKeyError": (".exceptions", "InvalidCacheKeyError"),
    "CacheFileError": (".exceptions", "CacheFileError"),
    "CacheNotFoundError": (".exceptions", "CacheNotFoundError"),
    "CacheDecodeError": (".exceptions", "CacheDecodeError"),
    "CacheWriteError": (".exceptions", "CacheWriteError"),
    "FileCacheProviderError": (".exceptions", "FileCacheProviderError"),
    "find_cause": (".exceptions", "find_cause"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
